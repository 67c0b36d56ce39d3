import logging
import os
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from modules.documents.models.document import SignedDocumentRecord

logger = logging.getLogger(__name__)


def delete_expired_signed_documents(session: Session, retention_days: int,
                                    now: Optional[datetime] = None) -> int:
    cutoff_date = (now or datetime.utcnow()) - timedelta(days=retention_days)

    documents = session.query(SignedDocumentRecord).filter(
        SignedDocumentRecord.signed_at <= cutoff_date
    ).all()

    deleted = 0
    for doc in documents:
        try:
            if os.path.exists(doc.file_path):
                os.remove(doc.file_path)
            session.delete(doc)
            deleted += 1
        except OSError as e:
            logger.error(f"Error deleting {doc.file_path}: {e}")

    session.commit()
    if deleted:
        logger.info(f"Deleted {deleted} signed documents older than {retention_days} days")
    return deleted
