"""
TutorMatch Backend: File Storage Service
==========================================

What:  Validates uploaded images and gives each upload its own scoped
       temporary file.
How:   Validates extension and size, writes the bytes under a UUID filename in
       a date-organized tmp directory, and deletes the file when the scope ends.
Who:   Called by TutorPostService while building a post thumbnail.

Temporary File Layout:
    storage/
    └── tmp/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-5678-....png
                    └── e5f6g7h8-9012-....jpg

    Every upload gets a fresh UUID path, so concurrent submissions never share
    (or overwrite) a file. `scoped_temp_file` removes the file on every exit
    path, including exceptions raised inside the `async with` block.
"""

import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Optional, Tuple

import aiofiles

from tutormatch.config import settings
from tutormatch.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)

# What: Set of allowed file extensions for quick lookup
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg"}

TEMP_DIR_NAME = "tmp"


class FileService:
    """
    Manages upload validation and the temporary-file lifecycle.

    Lifecycle of an uploaded image:
        1. validate_upload(): extension check, then size check
        2. scoped_temp_file(): bytes written to tmp/YYYY/MM/DD/<uuid><ext>
        3. Caller decodes/resizes the image from that path
        4. Scope exits: cleanup_file() removes the file, success or failure
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                         If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        Validate file extension (first line of defense).

        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="postImage",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, actual_size: int) -> None:
        """
        Validate the uploaded byte count against the configured maximum.
        Empty uploads are rejected too.

        Raises:
            ValidationError with human-readable size limit message
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="The uploaded image is empty. Please choose an image file.",
                field="postImage",
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="postImage",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_upload(
        self,
        filename: str,
        content: bytes,
    ) -> str:
        """
        Cheap checks that run before any file is written.

        Returns: Normalized extension for the temporary file name.
        """
        ext = self.validate_extension(filename)
        self.validate_size(len(content))
        return ext

    def _generate_temp_path(self, extension: str) -> Tuple[Path, str]:
        """
        Generate a unique, date-organized temporary path.

        Returns: Tuple of (absolute_path, relative_path_from_storage_root).
        The filename contains no user input.
        """
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{TEMP_DIR_NAME}/{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write file content to a fresh temporary path.

        Returns: Tuple of (absolute_path, relative_path).

        Raises:
            FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_temp_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.debug("Temporary file stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            # Remove any partial write before surfacing the error
            await self.cleanup_file(str(absolute_path))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            ) from e

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a file from storage.

        Missing files are ignored; other failures are logged, not raised,
        so cleanup never masks the error that triggered it.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.debug("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    @asynccontextmanager
    async def scoped_temp_file(self, content: bytes, extension: str) -> AsyncIterator[str]:
        """
        Write `content` to a unique temporary file for the duration of a block.

        Usage:
            async with file_service.scoped_temp_file(content, ".png") as path:
                thumbnail = await image_service.make_thumbnail(path)
            # file is gone here, whether or not the block raised
        """
        absolute_path, _ = await self.store_file(content, extension)
        try:
            yield absolute_path
        finally:
            await self.cleanup_file(absolute_path)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
