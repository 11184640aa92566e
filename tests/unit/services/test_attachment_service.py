"""Unit tests for attachment encoding."""
import base64
import pytest
from unittest.mock import MagicMock
from src.models.attachment import Attachment
from src.services.attachment_service import (
    attachment_from_upload,
    encode_attachment,
    encoded_size,
    format_size,
    guess_mime_type,
    is_attachment_value,
    is_encoded,
    is_within_size_limit,
    materialize_attachments,
)
from src.utils.exceptions import AttachmentTooLargeError


@pytest.fixture
def front():
    """Small PNG-typed attachment."""
    return Attachment("front.png", "image/png", b"\x89PNG front")


@pytest.fixture
def record(front):
    """Record with one raw and one already-encoded attachment."""
    return {
        "teamName": "Hackers",
        "teamMembers": [
            {"name": "Amy", "idCardFront": front, "idCardBack": "data:image/png;base64,YmFjaw=="},
        ],
    }


class TestGuessMimeType:
    """Test MIME type lookup."""

    def test_known_extension(self):
        """Common image types map directly."""
        assert guess_mime_type("ID.JPG") == "image/jpeg"

    def test_unknown_extension(self):
        """Unknown extensions fall back to octet-stream."""
        assert guess_mime_type("scan.zzz") == "application/octet-stream"


class TestEncodeAttachment:
    """Test encoding a single attachment."""

    def test_data_uri(self, front):
        """Output is a base64 data URI with the MIME type."""
        encoded = encode_attachment(front)
        assert encoded.startswith("data:image/png;base64,")
        assert base64.b64decode(encoded.split(",", 1)[1]) == front.data

    def test_over_cap_raises(self, front):
        """Attachments above the cap are refused."""
        with pytest.raises(AttachmentTooLargeError):
            encode_attachment(front, max_bytes=3)

    def test_is_encoded(self, front):
        """Encoded text is detected, plain text isn't."""
        assert is_encoded(encode_attachment(front)) is True
        assert is_encoded("front.png") is False
        assert is_encoded(None) is False


class TestAttachmentChecks:
    """Test validation helpers."""

    def test_attachment_values(self, front):
        """Raw attachments and data URIs are accepted."""
        assert is_attachment_value(front) is True
        assert is_attachment_value("data:image/png;base64,YQ==") is True
        assert is_attachment_value("https://example.com/a.png") is False

    def test_encoded_size(self):
        """Payload size is the decoded length."""
        assert encoded_size("data:image/png;base64,YWJj") == 3
        assert encoded_size("data:image/png;base64,!!!") == -1

    def test_size_limit(self, front):
        """Raw and encoded values are measured."""
        assert is_within_size_limit(front, front.size) is True
        assert is_within_size_limit(front, front.size - 1) is False
        assert is_within_size_limit("data:image/png;base64,YWJj", 2) is False

    @pytest.mark.parametrize("num_bytes,expected", [
        (5 * 1024 * 1024, "5 MB"),
        (1536, "1.5 KB"),
        (100, "100 B"),
    ])
    def test_format_size(self, num_bytes, expected):
        """Sizes are shown in the largest fitting unit."""
        assert format_size(num_bytes) == expected


class TestMaterializeAttachments:
    """Test the pre-submit encoding pass."""

    def test_raw_attachment_encoded(self, record, front):
        """Raw attachments become data URIs."""
        payload = materialize_attachments(record)
        assert payload["teamMembers"][0]["idCardFront"] == encode_attachment(front)

    def test_encoded_text_untouched(self, record):
        """Already-encoded values pass through byte-for-byte."""
        payload = materialize_attachments(record)
        assert payload["teamMembers"][0]["idCardBack"] == "data:image/png;base64,YmFjaw=="

    def test_source_record_not_modified(self, record, front):
        """The in-progress record keeps the raw attachment."""
        materialize_attachments(record)
        assert record["teamMembers"][0]["idCardFront"] is front

    def test_idempotent(self, record):
        """Running the pass on its own output changes nothing."""
        once = materialize_attachments(record)
        assert materialize_attachments(once) == once

    def test_record_without_attachments(self):
        """Records without ID card fields are copied unchanged."""
        values = {"teamMembers": [{"name": "Amy"}], "exhibitors": []}
        assert materialize_attachments(values) == values


class TestAttachmentFromUpload:
    """Test wrapping Streamlit uploads."""

    def test_none(self):
        """No upload yields None."""
        assert attachment_from_upload(None) is None

    def test_uploaded_file(self):
        """Name, type and bytes are taken from the upload."""
        uploaded = MagicMock()
        uploaded.name = "back.jpg"
        uploaded.type = "image/jpeg"
        uploaded.getvalue.return_value = b"jpeg-bytes"

        attachment = attachment_from_upload(uploaded)

        assert attachment.filename == "back.jpg"
        assert attachment.mime_type == "image/jpeg"
        assert attachment.data == b"jpeg-bytes"

    def test_missing_type_guessed_from_name(self):
        """Extension lookup fills a missing MIME type."""
        uploaded = MagicMock()
        uploaded.name = "back.pdf"
        uploaded.type = ""
        uploaded.getvalue.return_value = b"%PDF"
        assert attachment_from_upload(uploaded).mime_type == "application/pdf"
