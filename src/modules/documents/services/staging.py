import logging
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from modules.documents.models.uploaded_document import UploadedDocument

logger = logging.getLogger(__name__)


class StagingArea:
    """
    Holds uploaded bytes on disk for the lifetime of one request.

    ``stage`` is a context manager: the staged file is removed when the block
    exits, whether it returns, raises or is cancelled.
    """

    def __init__(self, root: str):
        self.root = Path(root)

    @contextmanager
    def stage(self, contents: bytes, filename: str, content_type: str) -> Iterator[UploadedDocument]:
        self.root.mkdir(parents=True, exist_ok=True)
        fd, raw_path = tempfile.mkstemp(prefix="upload_", suffix=".pdf", dir=self.root)
        path = Path(raw_path)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(contents)
            logger.info("Staged %s (%d bytes) at %s", filename, len(contents), path.name)
            yield UploadedDocument(
                path=path,
                original_name=filename,
                content_type=content_type,
                size=len(contents),
            )
        finally:
            self.release(path)

    @staticmethod
    def release(path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Error deleting staged upload {path}: {e}")

    def purge_stale(self, max_age_seconds: float) -> int:
        """Remove staged files older than ``max_age_seconds`` left behind by a crashed worker."""
        if not self.root.exists():
            return 0
        cutoff = time.time() - max_age_seconds
        removed = 0
        for path in self.root.glob("upload_*.pdf"):
            try:
                if path.stat().st_mtime <= cutoff:
                    path.unlink()
                    removed += 1
            except OSError as e:
                logger.error(f"Error deleting {path}: {e}")
        return removed
