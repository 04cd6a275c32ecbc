import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from wall.core.config import settings
from wall.repositories.post_repository import PostRepository
from wall.repositories.profile_repository import ProfileRepository
from wall.storage.local_storage import LocalStorage

logger = logging.getLogger(__name__)


class UploadReferenceService:
    """Tracks which uploaded files are still referenced by posts or avatars"""

    @staticmethod
    def get_referenced_filenames(db: Session) -> set[str]:
        return PostRepository(db).image_filenames() | ProfileRepository(db).avatar_filenames()

    @staticmethod
    def get_orphaned_files(
        db: Session,
        storage: LocalStorage,
        min_age: Optional[timedelta] = None,
    ) -> List[str]:
        """
        Files on disk that no post or profile points at.

        Post updates replace image lists and avatar uploads replace avatars,
        and neither removes the old file, so these accumulate over time.
        Images are written before their post is committed, so files modified
        within min_age (ORPHAN_GRACE_MINUTES by default) are never reported.
        """
        if min_age is None:
            min_age = timedelta(minutes=settings.ORPHAN_GRACE_MINUTES)
        cutoff = datetime.now(timezone.utc) - min_age
        referenced = UploadReferenceService.get_referenced_filenames(db)

        orphaned = []
        for name in storage.list_files():
            if name in referenced:
                continue
            try:
                if storage.modified_at(name) > cutoff:
                    continue
            except FileNotFoundError:
                # Removed between listing and stat
                continue
            orphaned.append(name)
        return sorted(orphaned)

    @staticmethod
    def delete_orphaned_files(
        db: Session,
        storage: LocalStorage,
        min_age: Optional[timedelta] = None,
    ) -> List[str]:
        deleted = []
        for filename in UploadReferenceService.get_orphaned_files(db, storage, min_age):
            try:
                if storage.delete_file(filename):
                    deleted.append(filename)
            except OSError as e:
                logger.error(f"Error deleting orphaned upload {filename}: {str(e)}")
        return deleted


upload_reference_service = UploadReferenceService()
