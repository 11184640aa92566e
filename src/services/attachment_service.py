"""Attachment encoding: raw uploads to data URIs before submission."""
import base64
import binascii
import copy
import logging
import mimetypes
import re
from pathlib import Path
from typing import Any, Dict, Optional

from src.models.attachment import Attachment
from src.models.team_member import ATTACHMENT_FIELDS
from src.utils.exceptions import AttachmentTooLargeError

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:[\w.+-]+/[\w.+-]+;base64,", re.ASCII)

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
}


def guess_mime_type(filename: str) -> str:
    """
    Determine MIME type from a file extension.

    Args:
        filename: Uploaded file name

    Returns:
        MIME type, "application/octet-stream" if unknown
    """
    ext = Path(filename).suffix.lower()
    if ext in MIME_TYPES:
        return MIME_TYPES[ext]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def is_encoded(value: Any) -> bool:
    """Check whether a value is already a base64 data URI."""
    return isinstance(value, str) and DATA_URI_PATTERN.match(value) is not None


def is_attachment_value(value: Any) -> bool:
    """Raw attachment or already-encoded text; anything else is malformed."""
    return isinstance(value, Attachment) or is_encoded(value)


def encoded_size(value: str) -> int:
    """
    Size in bytes of the payload carried by a data URI.

    Returns -1 if the base64 part is corrupt.
    """
    payload = value.split(",", 1)[1] if "," in value else ""
    try:
        return len(base64.b64decode(payload, validate=True))
    except (binascii.Error, ValueError):
        return -1


def is_within_size_limit(value: Any, max_bytes: int) -> bool:
    """Check an attachment value against the size cap."""
    if isinstance(value, Attachment):
        return value.size <= max_bytes
    if is_encoded(value):
        return 0 <= encoded_size(value) <= max_bytes
    return True


def format_size(num_bytes: int) -> str:
    """
    Human-readable size used in messages.

    - 5242880 → "5 MB"
    - 1536 → "1.5 KB"
    """
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= factor:
            value = num_bytes / factor
            return f"{value:g} {unit}" if value != int(value) else f"{int(value)} {unit}"
    return f"{num_bytes} B"


def encode_attachment(attachment: Attachment, max_bytes: Optional[int] = None) -> str:
    """
    Encode an attachment as a data URI.

    Args:
        attachment: Raw attachment
        max_bytes: Optional size cap

    Returns:
        "data:<mime>;base64,<payload>"

    Raises:
        AttachmentTooLargeError: If the attachment exceeds max_bytes
    """
    if max_bytes is not None and attachment.size > max_bytes:
        raise AttachmentTooLargeError(
            f"{attachment.filename} is {attachment.size} bytes, limit is {max_bytes}"
        )
    b64_data = base64.b64encode(attachment.data).decode("utf-8")
    return f"data:{attachment.mime_type};base64,{b64_data}"


def materialize_attachments(values: Dict[str, Any], max_bytes: Optional[int] = None) -> Dict[str, Any]:
    """
    Build the outbound copy of a record with attachments in transport form.

    Args:
        values: Wire-shaped record; not modified
        max_bytes: Optional per-attachment cap

    Returns:
        Deep copy where every raw Attachment under teamMembers[*].idCardFront /
        idCardBack is replaced by its data URI. Strings that are already
        encoded are left byte-for-byte unchanged.
    """
    payload = copy.deepcopy(values)
    for index, member in enumerate(payload.get("teamMembers") or []):
        if not isinstance(member, dict):
            continue
        for field_name in ATTACHMENT_FIELDS:
            value = member.get(field_name)
            if isinstance(value, Attachment):
                member[field_name] = encode_attachment(value, max_bytes)
                logger.debug(f"Encoded teamMembers.{index}.{field_name} ({value.size} bytes)")
    return payload


def attachment_from_upload(uploaded) -> Optional[Attachment]:
    """
    Wrap a Streamlit UploadedFile.

    Args:
        uploaded: Object with .name, .type and .getvalue(), or None

    Returns:
        Attachment, or None if nothing was uploaded
    """
    if uploaded is None:
        return None
    mime_type = getattr(uploaded, "type", None) or guess_mime_type(uploaded.name)
    return Attachment(filename=uploaded.name, mime_type=mime_type, data=uploaded.getvalue())
