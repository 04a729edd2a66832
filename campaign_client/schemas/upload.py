"""Upload schemas for the spreadsheet import endpoint."""

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

# Platform MIME tables do not always know the Office extensions
_SPREADSHEET_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
}


class Campaign(str, Enum):
    """Mail-sending configurations an import can target."""

    GOLY = "GOLY"
    MPLY = "MPLY"


class EmailType(str, Enum):
    """Template classification of the imported rows."""

    REGULAR = "Regular"
    FOLLOW_UP_1 = "Follow up 1"


@dataclass(frozen=True)
class SpreadsheetFile:
    """A file selected for upload.

    Attributes:
        name: File name sent in the multipart body
        size: Size in bytes
        content_type: MIME type as reported by the picker or guessed from the name
        content: File bytes
    """

    name: str
    size: int
    content_type: str
    content: bytes

    @classmethod
    def from_bytes(
        cls, name: str, content: bytes, content_type: str | None = None
    ) -> "SpreadsheetFile":
        """Wrap in-memory bytes, guessing the MIME type from the name if absent."""
        if content_type is None:
            content_type = (
                _SPREADSHEET_TYPES.get(Path(name).suffix.lower())
                or mimetypes.guess_type(name)[0]
                or "application/octet-stream"
            )
        return cls(name=name, size=len(content), content_type=content_type, content=content)

    @classmethod
    def from_path(cls, path: Path | str) -> "SpreadsheetFile":
        """Read a file from disk."""
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes())


class UploadSummary(BaseModel):
    """Counters reported by the server after an import."""

    total_rows_in_file: int
    inserted: int
    updated: int
    skipped: int
    duplicates_no_change: int
    unsubscribed_overrides: int
    email_type: str

    def describe(self, message: str = "") -> str:
        """One-line summary suitable for a success notification."""
        parts = [
            message,
            f"Email Type: {self.email_type}",
            f"Total Records: {self.total_rows_in_file}",
            f"Inserted: {self.inserted}",
            f"Updated: {self.updated}",
            f"Skipped: {self.skipped}",
            f"Duplicates (No Change): {self.duplicates_no_change}",
            f"Unsubscribed Overrides: {self.unsubscribed_overrides}",
        ]
        return " | ".join(part for part in parts if part)


class UploadEnvelope(BaseModel):
    """Full upload response body."""

    status: int
    message: str = ""
    data: UploadSummary | None = None
