"""
File upload utilities for listing images.
Validates uploads and stores them under timestamp-derived names.
"""

import io
import time
from pathlib import Path
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile
import logging

from dealer_listings.utils.exceptions import ValidationError, FileUploadError

logger = logging.getLogger(__name__)


class FileValidator:
    """Utility class for file validation operations."""

    # Supported image formats and their MIME types
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp']
    }

    # Pillow format names per MIME type
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp'
    }

    MAX_FILE_SIZE = 10 * 1024 * 1024

    @classmethod
    def validate_file_extension(cls, filename: str) -> str:
        """
        Validate file extension.

        Args:
            filename: Name of the file

        Returns:
            Lowercase file extension

        Raises:
            ValidationError: If extension is not supported
        """
        if not filename:
            raise ValidationError("Filename is required")

        extension = Path(filename).suffix.lower()

        if not extension:
            raise ValidationError("File must have an extension")

        supported_extensions = [ext for exts in cls.SUPPORTED_FORMATS.values() for ext in exts]
        if extension not in supported_extensions:
            raise ValidationError(
                f"File extension '{extension}' not supported. "
                f"Supported extensions: {', '.join(supported_extensions)}"
            )

        return extension

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        """
        Validate MIME type.

        Raises:
            ValidationError: If MIME type is not supported
        """
        if not mime_type:
            raise ValidationError("MIME type is required")

        if mime_type not in cls.SUPPORTED_FORMATS:
            raise ValidationError(
                f"MIME type '{mime_type}' not supported. "
                f"Supported types: {', '.join(cls.SUPPORTED_FORMATS)}"
            )

        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            ValidationError: If the file is empty or exceeds the limit
        """
        if file_size <= 0:
            raise ValidationError("File size must be greater than 0")

        max_allowed = max_size or cls.MAX_FILE_SIZE
        if file_size > max_allowed:
            max_mb = max_allowed / (1024 * 1024)
            actual_mb = file_size / (1024 * 1024)
            raise ValidationError(
                f"File size ({actual_mb:.1f}MB) exceeds maximum allowed size ({max_mb:.1f}MB)"
            )

        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, mime_type: str) -> None:
        """
        Check that the bytes decode as an image of the declared type.
        The image is only verified, never re-encoded.

        Raises:
            ValidationError: If the content is not a valid image of that type
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                pil_format = (img.format or "").lower()
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError(f"Invalid image file: {str(e)}")

        if pil_format != cls.PIL_FORMATS[mime_type]:
            raise ValidationError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

    @classmethod
    async def validate_upload_file(cls, file: UploadFile, max_size: Optional[int] = None) -> Tuple[bytes, str]:
        """
        Comprehensive validation of uploaded file.

        Args:
            file: FastAPI UploadFile object
            max_size: Maximum allowed size in bytes

        Returns:
            Tuple of (content, extension)

        Raises:
            ValidationError: If any validation fails
        """
        extension = cls.validate_file_extension(file.filename or "")
        mime_type = cls.validate_mime_type(file.content_type or "")

        if extension not in cls.SUPPORTED_FORMATS[mime_type]:
            raise ValidationError(
                f"File extension '{extension}' doesn't match MIME type '{mime_type}'"
            )

        await file.seek(0)
        content = await file.read()

        cls.validate_file_size(len(content), max_size)
        cls.validate_image_content(content, mime_type)

        return content, extension


class FileStorage:
    """
    Stores uploads in a flat directory.

    Files are named after the current time in milliseconds plus the original
    extension; the stored reference is "<url prefix>/<file name>", which is
    also the path the file is served under.
    """

    def __init__(self, base_dir: str, url_prefix: str = "/uploads", max_file_size: Optional[int] = None):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.strip("/")
        self.max_file_size = max_file_size
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def get_relative_path(self, filename: str) -> str:
        """Reference stored in the database for a file in base_dir."""
        return f"{self.url_prefix}/{filename}"

    def resolve(self, relative_path: str) -> Path:
        """
        Map a stored reference back to a path inside base_dir.

        Raises:
            ValueError: If the reference does not point inside base_dir
        """
        filename = Path(relative_path).name
        if filename in ("", ".", "..") or filename != relative_path.rsplit("/", 1)[-1]:
            raise ValueError(f"Invalid upload reference: {relative_path}")
        return self.base_dir / filename

    async def save_upload(self, file: UploadFile) -> str:
        """
        Validate and store an uploaded image.

        Args:
            file: UploadFile object

        Returns:
            Relative path to store on the property, e.g. "uploads/1700000000123.jpg"

        Raises:
            ValidationError: If the upload is not an acceptable image
            FileUploadError: If writing the file fails
        """
        content, extension = await FileValidator.validate_upload_file(file, self.max_file_size)

        stamp = int(time.time() * 1000)
        while True:
            file_path = self.base_dir / f"{stamp}{extension}"
            try:
                async with aiofiles.open(file_path, 'xb') as f:
                    await f.write(content)
                break
            except FileExistsError:
                stamp += 1
            except OSError as e:
                self.delete_file(file_path)
                raise FileUploadError(str(e))

        relative_path = self.get_relative_path(file_path.name)
        logger.info(f"Stored upload {relative_path} ({len(content)} bytes)")
        return relative_path

    def delete_file(self, file_path: Path) -> bool:
        """
        Delete a file from disk.

        Returns:
            True if file was deleted, False otherwise
        """
        try:
            if file_path.exists():
                file_path.unlink()
                return True
            return False
        except OSError as e:
            logger.warning(f"Could not delete {file_path}: {e}")
            return False

    def delete_upload(self, relative_path: str) -> bool:
        """Delete a stored upload by the reference saved on the property."""
        try:
            return self.delete_file(self.resolve(relative_path))
        except ValueError as e:
            logger.warning(str(e))
            return False
