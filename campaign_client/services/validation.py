"""Client-side validation for spreadsheet uploads.

All checks are pure: no I/O and no state. `validate_submission` checks every
field so that a form can mark all invalid inputs at once.
"""

from dataclasses import dataclass
from enum import Enum

from result import Err, Ok, Result

from campaign_client.schemas.upload import Campaign, EmailType, SpreadsheetFile

ACCEPTED_MIME_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    }
)
MAX_UPLOAD_BYTES = 100 * 1024 * 1024


class FileRejection(Enum):
    """Reasons a selected file is refused."""

    UNSUPPORTED_TYPE = "unsupported type"
    TOO_LARGE = "too large"


FILE_REJECTION_MESSAGES = {
    FileRejection.UNSUPPORTED_TYPE: "Only Excel files are allowed.",
    FileRejection.TOO_LARGE: "File size must be less than 100MB.",
}


@dataclass(frozen=True)
class FieldError:
    """A validation failure attached to one form field."""

    field: str
    message: str


def validate_file(file: SpreadsheetFile) -> Result[SpreadsheetFile, FileRejection]:
    """Check MIME type (exact match) and size of a selected file.

    Args:
        file: The selected file

    Returns:
        Ok with the file, or Err with the first rejection reason
    """
    if file.content_type not in ACCEPTED_MIME_TYPES:
        return Err(FileRejection.UNSUPPORTED_TYPE)
    if file.size > MAX_UPLOAD_BYTES:
        return Err(FileRejection.TOO_LARGE)
    return Ok(file)


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def validate_submission(
    campaign: Campaign | str | None,
    email_type: EmailType | str | None,
    file: SpreadsheetFile | None,
) -> Result[tuple[Campaign, EmailType, SpreadsheetFile], list[FieldError]]:
    """Validate the three required upload inputs.

    Every input is checked; each contributes at most one FieldError.

    Args:
        campaign: Selected campaign, as enum or its value
        email_type: Selected email type, as enum or its value
        file: Selected spreadsheet

    Returns:
        Ok with the typed inputs, or Err with one error per invalid field
    """
    errors: list[FieldError] = []

    selected_campaign = _coerce(Campaign, campaign)
    if selected_campaign is None:
        errors.append(FieldError("campaign", "Please select an email campaign."))

    selected_email_type = _coerce(EmailType, email_type)
    if selected_email_type is None:
        errors.append(FieldError("email_type", "Please select an email type."))

    if file is None:
        errors.append(FieldError("file", "Please upload an Excel file."))
    else:
        file_result = validate_file(file)
        if file_result.is_err():
            errors.append(
                FieldError("file", FILE_REJECTION_MESSAGES[file_result.unwrap_err()])
            )

    if errors:
        return Err(errors)
    return Ok((selected_campaign, selected_email_type, file))
