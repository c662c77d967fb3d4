"""
Tests for upload validation and storage.
"""

import io
import re
import pytest
from pathlib import Path
from fastapi import UploadFile
from starlette.datastructures import Headers

from dealer_listings.utils.exceptions import ValidationError
from dealer_listings.utils.file_utils import FileStorage, FileValidator
from tests.conftest import make_image_bytes


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


class TestFileValidator:
    """Test upload validation rules."""

    @pytest.mark.parametrize("filename,expected", [
        ("house.jpg", ".jpg"),
        ("HOUSE.JPEG", ".jpeg"),
        ("house.png", ".png"),
        ("house.webp", ".webp"),
    ])
    def test_supported_extensions(self, filename, expected):
        assert FileValidator.validate_file_extension(filename) == expected

    @pytest.mark.parametrize("filename", ["", "house", "house.gif", "house.exe"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError):
            FileValidator.validate_file_extension(filename)

    def test_rejected_mime_type(self):
        with pytest.raises(ValidationError):
            FileValidator.validate_mime_type("application/pdf")

    def test_file_size_limits(self):
        assert FileValidator.validate_file_size(1024, max_size=2048) == 1024

        with pytest.raises(ValidationError):
            FileValidator.validate_file_size(0)

        with pytest.raises(ValidationError):
            FileValidator.validate_file_size(4096, max_size=2048)

    def test_content_must_be_image(self):
        with pytest.raises(ValidationError):
            FileValidator.validate_image_content(b"definitely not an image", "image/png")

    def test_content_must_match_mime_type(self):
        """A JPEG body declared as PNG is rejected."""
        with pytest.raises(ValidationError):
            FileValidator.validate_image_content(make_image_bytes("JPEG"), "image/png")

    @pytest.mark.asyncio
    async def test_extension_and_mime_must_agree(self, png_bytes: bytes):
        upload = make_upload(png_bytes, "house.jpg", "image/png")

        with pytest.raises(ValidationError):
            await FileValidator.validate_upload_file(upload)

    @pytest.mark.asyncio
    async def test_valid_upload(self, png_bytes: bytes):
        upload = make_upload(png_bytes, "house.png", "image/png")

        content, extension = await FileValidator.validate_upload_file(upload)

        assert content == png_bytes
        assert extension == ".png"


class TestFileStorage:
    """Test storing and removing uploads."""

    @pytest.mark.asyncio
    async def test_save_upload(self, file_storage: FileStorage, png_bytes: bytes):
        """Uploads are written under a millisecond timestamp name."""
        relative_path = await file_storage.save_upload(make_upload(png_bytes, "house.png", "image/png"))

        assert re.fullmatch(r"uploads/\d{13,}\.png", relative_path)
        stored = file_storage.resolve(relative_path)
        assert stored.parent == Path(file_storage.base_dir)
        assert stored.read_bytes() == png_bytes

    @pytest.mark.asyncio
    async def test_names_do_not_collide(self, file_storage: FileStorage, jpeg_bytes: bytes):
        """Uploads in the same millisecond still get distinct files."""
        paths = [
            await file_storage.save_upload(make_upload(jpeg_bytes, "house.jpg", "image/jpeg"))
            for _ in range(5)
        ]

        assert len(set(paths)) == 5
        assert all(file_storage.resolve(p).exists() for p in paths)

    @pytest.mark.asyncio
    async def test_rejected_upload_writes_nothing(self, file_storage: FileStorage):
        with pytest.raises(ValidationError):
            await file_storage.save_upload(make_upload(b"junk", "house.png", "image/png"))

        assert list(Path(file_storage.base_dir).iterdir()) == []

    @pytest.mark.asyncio
    async def test_size_limit_from_storage(self, tmp_path, png_bytes: bytes):
        storage = FileStorage(str(tmp_path / "small"), max_file_size=10)

        with pytest.raises(ValidationError):
            await storage.save_upload(make_upload(png_bytes, "house.png", "image/png"))

    @pytest.mark.asyncio
    async def test_delete_upload(self, file_storage: FileStorage, png_bytes: bytes):
        relative_path = await file_storage.save_upload(make_upload(png_bytes, "house.png", "image/png"))

        assert file_storage.delete_upload(relative_path) is True
        assert not file_storage.resolve(relative_path).exists()
        assert file_storage.delete_upload(relative_path) is False

    def test_resolve_stays_in_upload_dir(self, file_storage: FileStorage):
        assert file_storage.resolve("uploads/123.png") == Path(file_storage.base_dir) / "123.png"

        with pytest.raises(ValueError):
            file_storage.resolve("uploads/../")
