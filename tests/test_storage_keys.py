import uuid
import pytest
from datetime import datetime, UTC

from property_manager.config import settings
from property_manager.core.exceptions import ValidationException
from property_manager.core.log_sanitizer import mask_storage_key, sanitize
from property_manager.core.storage_keys import (
    UploadCategory,
    build_storage_keys,
    parse_storage_key,
    thumbnail_key_for,
    validate_upload,
)


class TestBuildStorageKeys:
    """Tests for storage key generation"""

    def test_layout(self):
        """Key is {account}/{category}/{year}/{uuid}{ext}"""
        account_id = uuid.uuid4()
        key, thumb = build_storage_keys(account_id, UploadCategory.PROPERTIES, ".jpg")

        account, category, year, file_name = key.split("/")
        assert account == str(account_id)
        assert category == "properties"
        assert year == str(datetime.now(UTC).year)
        assert file_name.endswith(".jpg")
        uuid.UUID(file_name[: -len(".jpg")])

    def test_thumbnail_key_sits_beside_key(self):
        """Thumbnail key shares the directory and file id of the main key"""
        key, thumb = build_storage_keys(uuid.uuid4(), UploadCategory.RECEIPTS, ".pdf")
        assert thumb == key[: -len(".pdf")] + "_thumb.jpg"
        assert thumbnail_key_for(key) == thumb

    def test_keys_are_unique(self):
        account_id = uuid.uuid4()
        first, _ = build_storage_keys(account_id, UploadCategory.PROPERTIES, ".png")
        second, _ = build_storage_keys(account_id, UploadCategory.PROPERTIES, ".png")
        assert first != second


class TestParseStorageKey:
    """Tests for storage key parsing"""

    def test_parse_valid_key(self):
        account_id = uuid.uuid4()
        parsed = parse_storage_key(f"{account_id}/properties/2026/abc.jpg")
        assert parsed.account_id == account_id
        assert parsed.category == "properties"
        assert parsed.prefix == f"{account_id}/properties/2026/"

    @pytest.mark.parametrize(
        "key",
        [
            "",
            "not-a-uuid/properties/2026/abc.jpg",
            "only/three/segments",
            f"{uuid.uuid4()}/properties/2026/extra/abc.jpg",
            f"{uuid.uuid4()}/properties//abc.jpg",
            f"{uuid.uuid4()}/../2026/abc.jpg",
        ],
    )
    def test_malformed_keys_rejected(self, key):
        with pytest.raises(ValidationException, match="Invalid storage key format"):
            parse_storage_key(key)


class TestValidateUpload:
    """Tests for upload request validation"""

    def test_returns_extension(self):
        assert validate_upload(UploadCategory.PROPERTIES, "image/jpeg", 1024, "a.jpg") == ".jpg"
        assert validate_upload(UploadCategory.RECEIPTS, "application/pdf", 1024, "r.pdf") == ".pdf"

    def test_content_type_case_insensitive(self):
        assert validate_upload(UploadCategory.PROPERTIES, "IMAGE/PNG", 1024, "a.png") == ".png"

    def test_pdf_not_allowed_for_photos(self):
        with pytest.raises(ValidationException, match="not allowed"):
            validate_upload(UploadCategory.PROPERTIES, "application/pdf", 1024, "a.pdf")

    def test_size_limit(self):
        validate_upload(UploadCategory.RECEIPTS, "image/jpeg", settings.MAX_UPLOAD_SIZE_BYTES, "a.jpg")
        with pytest.raises(ValidationException, match="exceeds maximum"):
            validate_upload(
                UploadCategory.RECEIPTS, "image/jpeg", settings.MAX_UPLOAD_SIZE_BYTES + 1, "a.jpg"
            )

    def test_empty_file_rejected(self):
        with pytest.raises(ValidationException, match="greater than zero"):
            validate_upload(UploadCategory.RECEIPTS, "image/jpeg", 0, "a.jpg")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationException, match="file name"):
            validate_upload(UploadCategory.PROPERTIES, "image/jpeg", 10, "   ")


class TestLogSanitizer:
    """Tests for log value masking"""

    def test_mask_storage_key_hides_account(self):
        key = "a1b2c3d4-e5f6-7890-abcd-ef1234567890/properties/2026/f00.jpg"
        assert mask_storage_key(key) == "a1b2c3d4-****/properties/2026/f00.jpg"

    def test_sanitize_strips_newlines(self):
        assert sanitize("evil\r\nINFO fake line") == "evilINFO fake line"
        assert sanitize(None) == ""
