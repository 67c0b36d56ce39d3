from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from errors import UploadRejected
from modules.documents.models.envelope import TransferEnvelope, parse_timestamp
from modules.documents.models.schemas import SignPdfResponse
from modules.documents.services.document_service import DocumentService
from modules.documents.services.recovery import RecoveryController
from modules.documents.services.staging import StagingArea

router = APIRouter(
    prefix="/api",
    tags=["signing"]
)


def get_recovery_controller() -> RecoveryController:
    return RecoveryController(
        min_signature_chars=settings.min_signature_chars,
        min_signature_bytes=settings.min_signature_bytes,
    )


def get_staging_area() -> StagingArea:
    return StagingArea(settings.staging_dir)


@router.post("/sign-pdf", response_model=SignPdfResponse, response_model_exclude_none=True)
async def sign_pdf(
    request: Request,
    pdf: Optional[UploadFile] = File(None),
    signature: Optional[str] = Form(None),
    signature_timestamp: Optional[str] = Form(None, alias="signatureTimestamp"),
    db: Session = Depends(get_db),
    recovery: RecoveryController = Depends(get_recovery_controller),
    staging: StagingArea = Depends(get_staging_area),
):
    """
    Firma la primera página del PDF con la imagen de firma o, si no hay una
    utilizable, con un bloque de texto. Nunca falla por la firma en sí.
    """
    if pdf is None:
        raise UploadRejected("MISSING_FILE", "No PDF file provided")

    contents = await pdf.read()
    filename = pdf.filename or "document.pdf"

    # El archivo subido se elimina al salir del bloque, pase lo que pase
    with staging.stage(contents, filename, pdf.content_type or "") as document:
        await run_in_threadpool(
            DocumentService.validate_upload, contents, filename, pdf.content_type, settings.max_upload_bytes
        )
        envelope = TransferEnvelope(
            pdf_bytes=contents,
            signature_image=signature,
            captured_at=parse_timestamp(signature_timestamp),
        )
        signed = await recovery.sign_async(document, envelope, timeout=settings.signing_timeout_seconds)

    record = await run_in_threadpool(DocumentService.store_signed, db, signed, settings.signed_dir)

    return SignPdfResponse(
        id=record.id,
        signed_url=str(request.url_for("download_signed_document", document_id=record.id)),
        signed_at=signed.signed_at,
        original_name=signed.original_name,
        mode=signed.mode,
        warning=signed.warning,
    )
