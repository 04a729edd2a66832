"""Tests for upload input validation."""

import pytest

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS = "application/vnd.ms-excel"


def _file(name="leads.xlsx", size=1024, content_type=XLSX):
    from campaign_client.schemas.upload import SpreadsheetFile

    return SpreadsheetFile(name=name, size=size, content_type=content_type, content=b"")


class TestValidateFile:
    """Tests for validate_file."""

    @pytest.mark.parametrize("content_type", [XLSX, XLS])
    def test_accepts_excel_types(self, content_type: str):
        """Both Excel MIME types should be accepted."""
        from campaign_client.services.validation import validate_file

        result = validate_file(_file(content_type=content_type))

        assert result.is_ok()

    def test_rejects_other_types(self):
        """CSV and other types should be refused as unsupported."""
        from campaign_client.services.validation import FileRejection, validate_file

        result = validate_file(_file(name="leads.csv", content_type="text/csv"))

        assert result.is_err()
        assert result.unwrap_err() == FileRejection.UNSUPPORTED_TYPE

    def test_size_limit_is_inclusive(self):
        """A file of exactly 100 MiB is accepted; one byte more is not."""
        from campaign_client.services.validation import (
            MAX_UPLOAD_BYTES,
            FileRejection,
            validate_file,
        )

        assert validate_file(_file(size=MAX_UPLOAD_BYTES)).is_ok()
        result = validate_file(_file(size=MAX_UPLOAD_BYTES + 1))
        assert result.unwrap_err() == FileRejection.TOO_LARGE

    def test_type_is_checked_before_size(self):
        """An oversized file of the wrong type reports the type."""
        from campaign_client.services.validation import (
            MAX_UPLOAD_BYTES,
            FileRejection,
            validate_file,
        )

        result = validate_file(
            _file(size=MAX_UPLOAD_BYTES * 2, content_type="application/pdf")
        )

        assert result.unwrap_err() == FileRejection.UNSUPPORTED_TYPE


class TestValidateSubmission:
    """Tests for validate_submission."""

    def test_valid_inputs_are_typed(self):
        """Raw string selections should come back as enums."""
        from campaign_client.schemas.upload import Campaign, EmailType
        from campaign_client.services.validation import validate_submission

        selected = _file()
        result = validate_submission("MPLY", "Follow up 1", selected)

        assert result.is_ok()
        campaign, email_type, file = result.unwrap()
        assert campaign is Campaign.MPLY
        assert email_type is EmailType.FOLLOW_UP_1
        assert file is selected

    def test_all_missing_fields_are_reported(self):
        """Every missing field should produce its own error."""
        from campaign_client.services.validation import FieldError, validate_submission

        result = validate_submission(None, "", None)

        assert result.unwrap_err() == [
            FieldError("campaign", "Please select an email campaign."),
            FieldError("email_type", "Please select an email type."),
            FieldError("file", "Please upload an Excel file."),
        ]

    def test_unknown_campaign_is_rejected(self):
        """Only the known campaigns are selectable."""
        from campaign_client.services.validation import validate_submission

        result = validate_submission("OTHER", "Regular", _file())

        errors = result.unwrap_err()
        assert [error.field for error in errors] == ["campaign"]

    def test_file_rejection_messages(self):
        """File rejections should use the form's messages."""
        from campaign_client.services.validation import (
            MAX_UPLOAD_BYTES,
            validate_submission,
        )

        wrong_type = validate_submission("GOLY", "Regular", _file(content_type="text/csv"))
        too_large = validate_submission(
            "GOLY", "Regular", _file(size=MAX_UPLOAD_BYTES + 1)
        )

        assert wrong_type.unwrap_err()[0].message == "Only Excel files are allowed."
        assert too_large.unwrap_err()[0].message == "File size must be less than 100MB."


class TestSpreadsheetFile:
    """Tests for building SpreadsheetFile values."""

    def test_from_bytes_guesses_excel_type(self):
        """The MIME type should be derived from the extension."""
        from campaign_client.schemas.upload import SpreadsheetFile

        xlsx = SpreadsheetFile.from_bytes("Leads.XLSX", b"abc")
        xls = SpreadsheetFile.from_bytes("old.xls", b"abcd")

        assert xlsx.content_type == XLSX
        assert xlsx.size == 3
        assert xls.content_type == XLS

    def test_from_path_reads_file(self, tmp_path):
        """from_path should read name, bytes and size from disk."""
        from campaign_client.schemas.upload import SpreadsheetFile

        path = tmp_path / "import.xlsx"
        path.write_bytes(b"x" * 10)

        file = SpreadsheetFile.from_path(path)

        assert file.name == "import.xlsx"
        assert file.size == 10
        assert file.content == b"x" * 10
