import hashlib
import logging
import os
import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from errors import HardFailure, UploadRejected
from modules.documents.models.document import SignedDocumentRecord
from modules.documents.models.signed_document import SignedDocument
from modules.documents.services.composer import load_pdf

logger = logging.getLogger(__name__)

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MAX_NAME_CHARS = 100


def _naive_utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


class IntegrityError(Exception):
    """Stored file no longer matches the hash recorded when it was signed"""
    pass


class DocumentService:

    @staticmethod
    def validate_upload(file_contents: Optional[bytes], filename: Optional[str],
                        content_type: Optional[str], max_file_size: int = 10 * 1024 * 1024):
        """Valida el archivo subido antes de cualquier intento de firma"""

        if file_contents is None or not filename:
            raise UploadRejected("MISSING_FILE", "No PDF file provided")

        # Validar MIME type
        if content_type != "application/pdf":
            raise UploadRejected("INVALID_FILE_TYPE", "Only PDF files are allowed")

        # Validar tamaño
        if len(file_contents) > max_file_size:
            raise UploadRejected(
                "FILE_TOO_LARGE",
                f"File too large. Maximum size is {max_file_size // (1024 * 1024)}MB."
            )

        # Validar integridad del PDF (InvalidDocument si no se puede leer)
        load_pdf(file_contents)

    @staticmethod
    def safe_filename(original_name: str) -> str:
        base = os.path.basename(original_name.replace("\\", "/"))
        cleaned = UNSAFE_CHARS.sub("_", base).strip("._")
        if cleaned.lower().endswith(".pdf"):
            cleaned = cleaned[:-4]
        # A lo sumo MAX_NAME_CHARS caracteres antes de la extensión
        cleaned = cleaned[:MAX_NAME_CHARS].rstrip("._")
        if not cleaned:
            cleaned = "document"
        return cleaned + ".pdf"

    @staticmethod
    def store_signed(session: Session, signed: SignedDocument, signed_dir: str) -> SignedDocumentRecord:
        """
        Persists the signed bytes and their metadata.

        Storage is the last step that can fail a request outright, so any
        error here is a HardFailure.
        """
        file_name = f"{signed.id}_{DocumentService.safe_filename(signed.original_name)}"
        file_path = os.path.join(signed_dir, file_name)
        try:
            os.makedirs(signed_dir, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(signed.content)
        except OSError as e:
            raise HardFailure(f"Could not store signed document: {e}")

        record = SignedDocumentRecord(
            id=signed.id,
            original_name=signed.original_name,
            file_path=file_path,
            file_size=len(signed.content),
            mode=signed.mode,
            warning=signed.warning,
            signed_at=_naive_utc(signed.signed_at),
            captured_at=_naive_utc(signed.captured_at) if signed.captured_at else None,
            sha256_hash=hashlib.sha256(signed.content).hexdigest(),
        )
        try:
            session.add(record)
            session.commit()
        except Exception as e:
            session.rollback()
            if os.path.exists(file_path):
                os.remove(file_path)
            raise HardFailure(f"Could not record signed document: {e}")

        logger.info(f"Signed document {record.id} stored at {file_path} ({record.mode.value})")
        return record

    @staticmethod
    def get_record(session: Session, document_id: str) -> Optional[SignedDocumentRecord]:
        return session.get(SignedDocumentRecord, document_id)

    @staticmethod
    def read_verified(record: SignedDocumentRecord) -> bytes:
        """Devuelve el PDF si el hash coincide con el registrado al firmar."""
        with open(record.file_path, "rb") as f:
            data = f.read()
        if hashlib.sha256(data).hexdigest() != record.sha256_hash:
            raise IntegrityError(f"Hash mismatch for {record.id}")
        return data
