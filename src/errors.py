from typing import Optional


class SigningError(Exception):
    """Base exception for the signing pipeline"""
    def __init__(self, code: str, message: str, status_code: int = 400, suggestion: Optional[str] = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.suggestion = suggestion
        super().__init__(self.message)


class UploadRejected(SigningError):
    """The upload was refused before any composition was attempted."""
    def __init__(self, code: str, message: str):
        super().__init__(code, message, 400)


class InvalidDocument(SigningError):
    def __init__(self, reason: str = None):
        message = "Invalid or corrupted PDF file"
        if reason:
            message += f": {reason}"
        super().__init__("INVALID_DOCUMENT", message, 400)


class EmptyDocument(SigningError):
    def __init__(self):
        super().__init__("EMPTY_DOCUMENT", "PDF document has no pages", 400)


class InvalidSignature(SigningError):
    def __init__(self, reason: str):
        super().__init__("INVALID_SIGNATURE", f"Invalid signature data: {reason}", 400)


class EmbedFailure(SigningError):
    def __init__(self, reason: str = None):
        message = "Failed to embed signature image"
        if reason:
            message += f": {reason}"
        super().__init__("EMBED_FAILURE", message, 500)


class SerializationFailure(SigningError):
    def __init__(self, reason: str = None):
        message = "Failed to save signed PDF"
        if reason:
            message += f": {reason}"
        super().__init__("SERIALIZATION_FAILURE", message, 500)


class HardFailure(SigningError):
    """Even the copy-through fallback could not produce a document."""
    def __init__(self, details: str):
        super().__init__(
            "Failed to sign PDF",
            details,
            500,
            suggestion="Try uploading a different PDF file or check if the file is corrupted"
        )


class EmptyCapture(SigningError):
    def __init__(self):
        super().__init__("EMPTY_CAPTURE", "Please draw your signature first", 400)
