import asyncio
import logging
from typing import Optional

from errors import HardFailure
from modules.documents.models.document import SigningMode
from modules.documents.models.envelope import TransferEnvelope
from modules.documents.models.signed_document import SignedDocument
from modules.documents.models.uploaded_document import UploadedDocument
from modules.documents.services.composer import DocumentComposer

logger = logging.getLogger(__name__)

COPY_THROUGH_WARNING = "Document processed without visual signature due to encoding issues"


class RecoveryController:
    """
    Runs the composer and degrades instead of failing.

    The chain is image, then text (inside the composer), then a verbatim copy
    of the uploaded bytes tagged with a warning. Only a failure to read the
    original bytes back for that copy raises HardFailure.
    """

    def __init__(self, composer: Optional[DocumentComposer] = None,
                 min_signature_chars: int = 100, min_signature_bytes: int = 67):
        self.composer = composer or DocumentComposer()
        self.min_signature_chars = min_signature_chars
        self.min_signature_bytes = min_signature_bytes

    def sign(self, document: UploadedDocument, envelope: TransferEnvelope) -> SignedDocument:
        payload = envelope.signature_image
        logger.info(
            "Signature data received: %s, length: %d, data URL: %s",
            "yes" if payload else "no",
            len(payload) if payload else 0,
            bool(payload) and payload.startswith("data:image/"),
        )
        try:
            image = envelope.validated_image(self.min_signature_chars, self.min_signature_bytes)
            return self.composer.sign(document, image, captured_at=envelope.captured_at, data=envelope.pdf_bytes)
        except Exception as e:
            logger.exception(f"Error signing {document.original_name}: {e}")
            return self.copy_through(document, envelope)

    def copy_through(self, document: UploadedDocument, envelope: TransferEnvelope,
                     warning: str = COPY_THROUGH_WARNING) -> SignedDocument:
        logger.info("Attempting fallback: copying original file as signed version")
        try:
            content = document.read_bytes()
        except OSError as e:
            raise HardFailure(f"Could not read uploaded file for fallback: {e}")
        return SignedDocument(
            content=content,
            original_name=document.original_name,
            mode=SigningMode.COPY_THROUGH,
            warning=warning,
            captured_at=envelope.captured_at,
        )

    async def sign_async(self, document: UploadedDocument, envelope: TransferEnvelope,
                         timeout: Optional[float] = None) -> SignedDocument:
        """
        Offload ``sign`` to the default executor; a timeout degrades to the copy-through.

        A timed-out worker is abandoned, not interrupted: it keeps its executor
        thread until the composer returns, and its result is discarded.
        """
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, self.sign, document, envelope), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"Signing {document.original_name} timed out after {timeout}s")
            return self.copy_through(document, envelope)
