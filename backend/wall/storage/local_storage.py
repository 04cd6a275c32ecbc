import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable
from fastapi import UploadFile
from wall.core import messages
from wall.core.config import settings
from wall.core.exceptions import BadRequestError

logger = logging.getLogger(__name__)

# Accepted image types and the extension stored files get
IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "image/bmp": ".bmp",
}


class LocalStorage:
    """Flat on-disk store for uploaded images. Callers only ever see the filename."""

    def __init__(self, upload_dir: str = settings.UPLOAD_DIR, max_file_size: int = settings.MAX_FILE_SIZE):
        self.upload_dir = Path(upload_dir)
        self.max_file_size = max_file_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save_image(self, file: UploadFile) -> str:
        """Validate and save an uploaded image, returning its generated filename"""
        content_type = (file.content_type or "").lower()
        if content_type not in IMAGE_EXTENSIONS:
            raise BadRequestError(messages.IMAGES_ONLY)

        content = await file.read()
        if len(content) > self.max_file_size:
            raise BadRequestError(messages.FILE_TOO_LARGE)

        # Extension follows the declared type, not the client's filename
        unique_filename = f"{uuid.uuid4()}{IMAGE_EXTENSIONS[content_type]}"

        with open(self.upload_dir / unique_filename, "wb") as f:
            f.write(content)

        return unique_filename

    async def save_images(self, files: Iterable[UploadFile]) -> list[str]:
        return [await self.save_image(file) for file in files]

    def get_file_path(self, filename: str) -> Path:
        return self.upload_dir / filename

    def list_files(self) -> list[str]:
        return [path.name for path in self.upload_dir.iterdir() if path.is_file()]

    def delete_file(self, filename: str) -> bool:
        file_path = self.get_file_path(filename)
        if file_path.exists():
            file_path.unlink()
            logger.debug(f"Deleted upload {filename}")
            return True
        return False

    def file_exists(self, filename: str) -> bool:
        return self.get_file_path(filename).exists()

    def modified_at(self, filename: str) -> datetime:
        mtime = self.get_file_path(filename).stat().st_mtime
        return datetime.fromtimestamp(mtime, tz=timezone.utc)


storage = LocalStorage()
