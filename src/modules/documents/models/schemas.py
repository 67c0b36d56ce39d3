from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.documents.models.document import SigningMode


class SignPdfResponse(BaseModel):
    id: str
    signed_url: str = Field(..., serialization_alias="signedUrl")
    signed_at: datetime = Field(..., serialization_alias="signedAt")
    original_name: str = Field(..., serialization_alias="originalName")
    mode: SigningMode
    warning: Optional[str] = None


class SignedDocumentResponse(BaseModel):
    id: str
    original_name: str = Field(..., serialization_alias="originalName")
    file_size: int = Field(..., serialization_alias="fileSize")
    mode: SigningMode
    warning: Optional[str] = None
    signed_at: datetime = Field(..., serialization_alias="signedAt")
    captured_at: Optional[datetime] = Field(None, serialization_alias="capturedAt")
    sha256_hash: str = Field(..., serialization_alias="sha256Hash")

    model_config = ConfigDict(from_attributes=True)
