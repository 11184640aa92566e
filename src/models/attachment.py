"""Attachment data model."""
from dataclasses import dataclass


@dataclass
class Attachment:
    """Raw uploaded file that still needs encoding before submission."""

    filename: str
    mime_type: str
    data: bytes

    def __post_init__(self):
        """Validate attachment data after initialization."""
        if not self.filename or not self.filename.strip():
            raise ValueError("Attachment filename cannot be empty")

        if not self.mime_type:
            self.mime_type = "application/octet-stream"

    @property
    def size(self) -> int:
        """Size in bytes."""
        return len(self.data)
