"""Local file storage for uploaded images (movie posters, service icons)."""

import logging
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from moviematic.config import get_settings
from moviematic.exceptions import FileTooLargeError, InvalidUploadError, StorageError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class ImageStorage:
    """Stores uploaded images under a directory and hands back public paths.

    Files are validated (content type and size) before anything touches the
    disk, written under a temporary name, then renamed into place.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    def _public_path(self, subdir: str, filename: str) -> str:
        if subdir:
            return f"{self.url_prefix}/{subdir.strip('/')}/{filename}"
        return f"{self.url_prefix}/{filename}"

    def _local_path(self, public_path: str) -> Path | None:
        """Map a stored public path back to a file under the storage root."""
        prefix = self.url_prefix + "/"
        if not public_path.startswith(prefix):
            return None
        relative = public_path[len(prefix) :]
        candidate = (self.root / relative).resolve()
        if not candidate.is_relative_to(self.root.resolve()):
            return None
        return candidate

    @staticmethod
    async def _read_limited(upload: UploadFile, max_bytes: int) -> bytes:
        """Read the upload, failing as soon as it exceeds ``max_bytes``."""
        chunks: list[bytes] = []
        size = 0
        while chunk := await upload.read(CHUNK_SIZE):
            size += len(chunk)
            if size > max_bytes:
                raise FileTooLargeError(max_bytes)
            chunks.append(chunk)
        return b"".join(chunks)

    async def save_image(
        self,
        upload: UploadFile,
        *,
        subdir: str = "",
        prefix: str = "image",
        max_bytes: int,
    ) -> str:
        """Validate and store an uploaded image.

        Returns:
            The public path to store on the owning entity, e.g.
            "/uploads/icons/icon-<hex>.png"

        Raises:
            InvalidUploadError: If the file is not an image
            FileTooLargeError: If the file exceeds ``max_bytes``
            StorageError: If the file cannot be written
        """
        content_type = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise InvalidUploadError()

        data = await self._read_limited(upload, max_bytes)
        if not data:
            raise InvalidUploadError("Uploaded file is empty")

        suffix = Path(upload.filename or "").suffix.lower()
        filename = f"{prefix}-{uuid.uuid4().hex}{suffix}"
        directory = self.root / subdir
        final_path = directory / filename
        temp_path = directory / f".{filename}.part"

        try:
            directory.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.rename(temp_path, final_path)
        except OSError as e:
            logger.error("Failed to store upload %s: %s", final_path, e)
            if temp_path.exists():
                await aiofiles.os.remove(temp_path)
            raise StorageError() from e

        public_path = self._public_path(subdir, filename)
        logger.info("Stored upload %s (%d bytes)", public_path, len(data))
        return public_path

    async def delete(self, public_path: str | None) -> bool:
        """Best-effort removal of a previously stored file.

        Failures are logged and reported through the return value only.
        """
        if not public_path:
            return False

        local_path = self._local_path(public_path)
        if local_path is None:
            logger.warning("Refusing to delete file outside upload dir: %s", public_path)
            return False

        try:
            await aiofiles.os.remove(local_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("Could not delete old upload %s: %s", public_path, e)
            return False
        return True


def get_image_storage() -> ImageStorage:
    """Dependency that provides the configured image storage."""
    settings = get_settings()
    return ImageStorage(settings.upload_dir, settings.upload_url_prefix)
