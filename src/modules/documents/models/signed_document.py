import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from modules.documents.models.document import SigningMode
from modules.documents.models.placement import PlacementSpec


def _new_id(mode: SigningMode) -> str:
    prefix = "fallback" if mode == SigningMode.COPY_THROUGH else "signed"
    return f"{prefix}_{uuid.uuid4().hex}"


@dataclass
class SignedDocument:
    """
    Output of one signing request.

    The caller owns ``content``; nothing in the signing pipeline keeps a
    reference to it after returning.
    """
    content: bytes
    original_name: str
    mode: SigningMode
    warning: Optional[str] = None
    captured_at: Optional[datetime] = None
    signed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    placement: Optional[PlacementSpec] = None
    id: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = _new_id(self.mode)
