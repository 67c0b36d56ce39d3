from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from database import get_db
from modules.documents.models.schemas import SignedDocumentResponse
from modules.documents.services.document_service import DocumentService, IntegrityError

router = APIRouter(
    tags=["documents"]
)


@router.get("/api/signed/{document_id}", response_model=SignedDocumentResponse)
def get_signed_document(document_id: str, db: Session = Depends(get_db)):
    record = DocumentService.get_record(db, document_id)
    if not record:
        raise HTTPException(404, "Document not found")
    return record


@router.get("/signed/{document_id}", name="download_signed_document")
def download_and_validate(document_id: str, db: Session = Depends(get_db)):
    """
    Devuelve el PDF firmado si el hash coincide con el registrado.
    """
    record = DocumentService.get_record(db, document_id)
    if not record:
        raise HTTPException(404, "Document not found")

    try:
        data = DocumentService.read_verified(record)
    except FileNotFoundError:
        raise HTTPException(404, "Signed file is no longer available")
    except IntegrityError:
        raise HTTPException(409, "Integrity compromised: hash does not match")

    filename = DocumentService.safe_filename(record.original_name)
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="signed_{filename}"'}
    )
