"""
TutorMatch Backend: Image Service
===================================

What:  Turns an uploaded image into a tutor-post thumbnail.
How:   Pillow decodes the file, checks it really is PNG or JPEG, resizes it to
       `settings.thumbnail_width` keeping the aspect ratio, and re-encodes PNG.
       Decoding and resampling are CPU-bound, so they run in a worker thread
       (asyncio.to_thread) instead of on the event loop.
"""

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

from tutormatch.config import settings
from tutormatch.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Formats reported by Pillow after decoding the header bytes
ALLOWED_FORMATS = {"PNG", "JPEG"}

# Modes PNG can store directly; anything else (CMYK, YCbCr, I;16 ...) goes to RGB
PNG_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


@dataclass(frozen=True)
class Thumbnail:
    data: bytes
    width: int
    height: int


def scaled_height(width: int, height: int, target_width: int) -> int:
    """Height that keeps the original aspect ratio at `target_width` (at least 1px)."""
    return max(1, round(height * target_width / width))


class ImageService:
    def __init__(self, target_width: Optional[int] = None):
        self.target_width = target_width or settings.thumbnail_width

    def _resize(self, image_path: str) -> Thumbnail:
        try:
            with Image.open(image_path) as img:
                if img.format not in ALLOWED_FORMATS:
                    raise ValidationError(
                        message=(
                            f"Image content type '{img.format}' is not supported. "
                            "The file must be a valid PNG or JPEG image."
                        ),
                        field="postImage",
                        context={"detected_format": img.format},
                    )
                img.load()

                # Images are scaled up or down to the same width
                new_size = (
                    self.target_width,
                    scaled_height(img.width, img.height, self.target_width),
                )
                resized = img.resize(new_size, Image.Resampling.LANCZOS)
                if resized.mode not in PNG_MODES:
                    resized = resized.convert("RGB")

                buffer = io.BytesIO()
                resized.save(buffer, format="PNG", optimize=True)
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise ValidationError(
                message="The uploaded file is not a readable image.",
                field="postImage",
                context={"error": type(e).__name__},
            ) from e
        except OSError as e:
            # Truncated or corrupt image data
            raise ValidationError(
                message="The uploaded image appears to be damaged. Please try another file.",
                field="postImage",
                context={"error": str(e)},
            ) from e

        logger.info(
            "Thumbnail created: %dx%d (%d bytes)",
            new_size[0],
            new_size[1],
            buffer.tell(),
        )
        return Thumbnail(data=buffer.getvalue(), width=new_size[0], height=new_size[1])

    async def make_thumbnail(self, image_path: str) -> Thumbnail:
        """
        Resize the image at `image_path` to the thumbnail width.

        Raises:
            ValidationError: the file is not a decodable PNG/JPEG image
        """
        return await asyncio.to_thread(self._resize, image_path)


image_service = ImageService()
