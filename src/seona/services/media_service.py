"""Media store — uploaded thumbnails on local disk.

Learn: Files go under settings.media_dir with a random name (the
uploader's filename is kept only as metadata), and are served by the
/media static mount. Disk writes run in a worker thread so a slow
filesystem doesn't block the event loop.

store() only flushes the attachment row, and removes the file again if
that flush fails. The caller decides when to commit, and calls
discard() to undo a store that shouldn't survive.
"""

import asyncio
import mimetypes
import uuid
from pathlib import Path

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from seona.db.models import Attachment
from seona.errors import BadRequest, MediaStorageError

logger = structlog.get_logger()


class MediaStore:
    def __init__(self, db: AsyncSession, media_dir: str | Path, media_url: str):
        self.db = db
        self.media_dir = Path(media_dir)
        self.media_url = media_url.rstrip("/")

    async def store(
        self,
        filename: str | None,
        content_type: str | None,
        data: bytes,
    ) -> Attachment:
        """Write an uploaded image and register it as an attachment."""
        if not content_type or not content_type.startswith("image/"):
            raise BadRequest("Unsupported attachment type", code="upload-media")
        if not data:
            raise BadRequest("Empty attachment", code="upload-media")

        ext = Path(filename or "").suffix.lower() or (
            mimetypes.guess_extension(content_type) or ""
        )
        stored_name = f"{uuid.uuid4().hex}{ext}"
        path = self.media_dir / stored_name

        try:
            await asyncio.to_thread(self._write, path, data)
        except OSError as e:
            logger.error("media.write_failed", path=str(path), error=str(e))
            raise MediaStorageError() from e

        attachment = Attachment(
            filename=stored_name,
            original_name=filename or "",
            mime_type=content_type,
            size=len(data),
            path=str(path),
            url=f"{self.media_url}/{stored_name}",
        )
        self.db.add(attachment)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("media.register_failed", path=str(path), error=str(e))
            await self.remove_file(path)
            raise MediaStorageError() from e

        logger.info("media.stored", attachment_id=attachment.id, size=len(data))
        return attachment

    async def discard(self, attachment: Attachment) -> None:
        """Delete the attachment row. Call remove_file() after commit."""
        await self.db.delete(attachment)
        await self.db.flush()

    async def remove_file(self, path: str | Path) -> None:
        """Delete a stored file. A missing file is fine."""
        await asyncio.to_thread(Path(path).unlink, missing_ok=True)
        logger.info("media.removed", path=str(path))

    def _write(self, path: Path, data: bytes) -> None:
        self.media_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
