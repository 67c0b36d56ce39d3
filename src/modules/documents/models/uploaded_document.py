from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadedDocument:
    """A staged upload. Owned by the request that staged it; see StagingArea."""
    path: Path
    original_name: str
    content_type: str
    size: int

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()
