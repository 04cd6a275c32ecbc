"""
Background scheduler for periodic tasks.

This module manages background jobs that run on a schedule:
- Cleanup orphaned uploads: runs every CLEANUP_INTERVAL_HOURS (6 by default)
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError
from wall.core.config import settings
from wall.core.database import SessionLocal
from wall.services.upload_reference_service import upload_reference_service
from wall.storage.local_storage import storage
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def cleanup_orphaned_uploads_job():
    """
    Delete uploaded images that no post or profile references anymore.
    """
    db = SessionLocal()
    try:
        deleted = upload_reference_service.delete_orphaned_files(db, storage)
        if deleted:
            logger.info(f"Cleanup job completed: Deleted {len(deleted)} orphaned uploads")
        else:
            logger.info("Cleanup job completed: No orphaned uploads found")
    except SQLAlchemyError as e:
        logger.error(f"Error in cleanup_orphaned_uploads_job: {str(e)}")
    finally:
        db.close()


def start_scheduler():
    """
    Start the background scheduler.

    Called from the FastAPI lifespan on startup.
    """
    if not scheduler.running:
        scheduler.add_job(
            cleanup_orphaned_uploads_job,
            trigger=IntervalTrigger(hours=settings.CLEANUP_INTERVAL_HOURS),
            id="cleanup_orphaned_uploads",
            name="Cleanup orphaned uploads",
            replace_existing=True
        )

        scheduler.start()
        logger.info(
            f"Background scheduler started. Cleanup job scheduled every {settings.CLEANUP_INTERVAL_HOURS} hours.")


def stop_scheduler():
    """
    Stop the background scheduler.

    Called from the FastAPI lifespan on shutdown.
    """
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped.")
