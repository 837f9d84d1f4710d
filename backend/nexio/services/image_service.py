"""
Nexio Backend — Post Image Validation
======================================

What:  Validates the image data URLs attached to a new post.
How:   Count check, then per image: type check, prefix check, encoded length,
       base64 decode, decoded size, content sniffing.
Who:   Called by PostService.create_post before anything is written.

Checks, cheapest first:
    1. Count:          at most settings.max_images_per_post per request
    2. Type:           every entry must be a string
    3. Prefix:         data:image/jpeg | jpg | png | gif
    4. Encoded length: rejects oversized payloads before decoding them
    5. Payload:        non-empty, valid base64 after the comma
    6. Decoded size:   at most settings.max_image_bytes
    7. Content:        libmagic reads the decoded header bytes; the detected
                       type must be allowed and must match the declared prefix

A data URL labelled image/png whose bytes are text (or a JPEG) fails step 7.
Images are stored as data URLs in post_images.image_url; nothing touches
the file system.
"""

import base64
import binascii
import logging
from typing import Any, List, Optional

import magic

from nexio.config import settings
from nexio.exceptions import ValidationError

logger = logging.getLogger(__name__)

# ── Allowed Image Types ───────────────────────────────────────────────────
ALLOWED_DATA_URL_PREFIXES = (
    "data:image/jpeg",
    "data:image/jpg",
    "data:image/png",
    "data:image/gif",
)

# Declared media type → type libmagic reports for the same bytes
DECLARED_MIME_TYPES = {
    "image/jpeg": "image/jpeg",
    "image/jpg": "image/jpeg",
    "image/png": "image/png",
    "image/gif": "image/gif",
}

ALLOWED_MIME_TYPES = frozenset(DECLARED_MIME_TYPES.values())


class ImageService:
    """Validation for inline (data URL) post images."""

    def validate_count(self, images: List[Any]) -> None:
        if len(images) > settings.max_images_per_post:
            raise ValidationError(
                message=f"Maximum {settings.max_images_per_post} images allowed per post",
                field="images",
                context={"max_images": settings.max_images_per_post, "received": len(images)},
            )

    def validate_prefix(self, image: Any, index: int) -> str:
        """
        Returns:  The data URL unchanged.
        Raises:   ValidationError for non-strings and unsupported types.
        """
        if not isinstance(image, str):
            raise ValidationError(
                message="Invalid image format",
                field="images",
                context={"index": index},
            )
        if not image.startswith(ALLOWED_DATA_URL_PREFIXES):
            raise ValidationError(
                message="Invalid image format. Only jpg, png, gif allowed",
                field="images",
                context={"index": index},
            )
        return image

    def validate_size(self, image: str, index: int) -> bytes:
        """
        Validate an image's size before and after decoding.

        The encoded length is checked first so an oversized string is rejected
        without decoding it. Base64 inflates by 4/3, so 7 MiB encoded is a
        little over 5 MiB decoded; the decoded check is the binding one.

        Returns:
            The decoded image bytes
        """
        max_mb = settings.max_image_bytes / (1024 * 1024)

        if len(image) > settings.max_encoded_image_length:
            raise ValidationError(
                message=f"Image too large. Maximum {max_mb:.0f}MB per image",
                field="images",
                context={"index": index, "encoded_length": len(image)},
            )

        header, sep, payload = image.partition(",")
        if not sep or ";base64" not in header:
            raise ValidationError(
                message="Invalid image format",
                field="images",
                context={"index": index},
            )
        try:
            decoded = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError(
                message="Invalid image format",
                field="images",
                context={"index": index},
            )

        if not decoded:
            raise ValidationError(
                message="Invalid image format. Image data is empty",
                field="images",
                context={"index": index},
            )

        if len(decoded) > settings.max_image_bytes:
            raise ValidationError(
                message=f"Image too large. Maximum {max_mb:.0f}MB per image",
                field="images",
                context={"index": index, "decoded_size": len(decoded)},
            )
        return decoded

    def validate_content(self, image: str, content: bytes, index: int) -> str:
        """
        Check the decoded bytes are really the declared image type.

        What:    libmagic matches the leading bytes against known signatures
                 (JPEG starts with FF D8 FF, PNG with 89 50 4E 47, GIF with
                 "GIF8").
        Returns: The detected MIME type
        Raises:  ValidationError when the content is not an allowed image or
                 disagrees with the data URL's declared type
        """
        media_type = image[len("data:"):].partition(";")[0]
        declared = DECLARED_MIME_TYPES.get(media_type)
        if declared is None:
            raise ValidationError(
                message="Invalid image format. Only jpg, png, gif allowed",
                field="images",
                context={"index": index},
            )

        try:
            detected = magic.from_buffer(content, mime=True)
        except magic.MagicException as e:
            logger.error("Image type detection failed: %s", str(e))
            raise ValidationError(
                message="Could not verify image type",
                field="images",
                context={"index": index},
            )

        if detected not in ALLOWED_MIME_TYPES or detected != declared:
            logger.warning(
                "Image %d declared as %s but content is %s", index, declared, detected
            )
            raise ValidationError(
                message="Invalid image format. Image content does not match its type",
                field="images",
                context={"index": index, "declared": declared, "detected": detected},
            )
        return detected

    def validate_images(self, images: Optional[List[Any]]) -> List[str]:
        """
        Validate every image attached to a post.

        Args:
            images: Raw `images` value from the request body (may be None)

        Returns:
            The validated data URLs in request order ([] when none were sent)

        Raises:
            ValidationError on the first image that fails a check
        """
        if not images:
            return []
        self.validate_count(images)

        validated = []
        for index, image in enumerate(images):
            data_url = self.validate_prefix(image, index)
            content = self.validate_size(data_url, index)
            self.validate_content(data_url, content, index)
            validated.append(data_url)

        logger.debug("Validated %d post image(s)", len(validated))
        return validated


# Singleton instance
image_service = ImageService()
