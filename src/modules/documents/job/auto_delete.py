import logging

from apscheduler.schedulers.background import BackgroundScheduler

from config import settings
from database import SessionLocal
from modules.documents.services.cleanup import delete_expired_signed_documents
from modules.documents.services.staging import StagingArea

logger = logging.getLogger(__name__)


def run_cleanup():
    with SessionLocal() as session:
        delete_expired_signed_documents(session, settings.signed_retention_days)
    removed = StagingArea(settings.staging_dir).purge_stale(settings.staging_max_age_minutes * 60)
    if removed:
        logger.info(f"Purged {removed} stale staged uploads")


def start_deletion_job() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    def job():
        try:
            run_cleanup()
        except Exception as e:
            logger.error(f"Cleanup job failed: {e}", exc_info=True)

    scheduler.add_job(job, 'interval', hours=settings.cleanup_interval_hours)
    scheduler.start()
    return scheduler
