"""
Image uploads for post covers and galleries.

Files are stored once under their SHA256 content hash, so uploading the same
image twice returns the same reference.
"""
import hashlib
import logging
import os

from django.core.files.storage import default_storage
from PIL import Image, UnidentifiedImageError

from .conf import blog_settings
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def _validate(uploaded):
    extension = os.path.splitext(uploaded.name or "")[1].lower()
    allowed = blog_settings.ALLOWED_IMAGE_EXTENSIONS
    if extension not in allowed:
        raise ValidationError(f"Only {', '.join(allowed)} images are allowed")

    if uploaded.content_type not in blog_settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only image files are allowed")

    max_size = blog_settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if uploaded.size > max_size:
        raise ValidationError(
            f"File too large (max {blog_settings.MAX_UPLOAD_SIZE_MB} MB)"
        )

    try:
        with Image.open(uploaded) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Uploaded file is not a valid image")
    finally:
        uploaded.seek(0)

    return extension


def store_image(uploaded):
    """
    Validate and store an uploaded image.

    Args:
        uploaded: Django UploadedFile

    Returns:
        Storage path of the saved file
    """
    if uploaded is None:
        raise ValidationError("No image file provided")

    extension = _validate(uploaded)

    hasher = hashlib.sha256()
    for chunk in uploaded.chunks():
        hasher.update(chunk)
    path = f"{blog_settings.UPLOAD_PATH}{hasher.hexdigest()}{extension}"

    if default_storage.exists(path):
        return path

    uploaded.seek(0)
    saved = default_storage.save(path, uploaded)
    logger.info("Stored image %s (%d bytes)", saved, uploaded.size)
    return saved
