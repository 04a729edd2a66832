"""Upload Session for one spreadsheet import.

Drives a single submission through Idle -> Validating -> Uploading ->
Succeeded/Failed:
- Validates the campaign, email type and file before any network call
- Issues exactly one multipart upload per submit, bounded by a fixed deadline
- Forwards monotonic progress ticks (always ending at 100 on success)
- Maps every failure to an UploadFailure; nothing is retried automatically
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from result import Err, Ok, Result

from campaign_client.config import get_settings
from campaign_client.schemas.upload import (
    Campaign,
    EmailType,
    SpreadsheetFile,
    UploadSummary,
)
from campaign_client.services.api_client import (
    CampaignApiClient,
    DecodeError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)
from campaign_client.services.notifications import LogNotifier, Notifier
from campaign_client.services.validation import FieldError, validate_submission
from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)

TIMEOUT_MESSAGE = "Upload timeout. Please try again."
CANCELLED_MESSAGE = "Upload cancelled."
IN_PROGRESS_MESSAGE = "An upload is already in progress."


class UploadPhase(Enum):
    """Lifecycle of an upload session."""

    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadErrorKind(Enum):
    """Error types for upload submissions."""

    VALIDATION = "validation"
    NETWORK = "network"
    SERVER = "server"
    DECODE = "decode"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"


@dataclass
class UploadFailure:
    """Why a submission failed."""

    kind: UploadErrorKind
    message: str
    status_code: int | None = None
    field_errors: list[FieldError] = field(default_factory=list)


class _MonotonicProgress:
    """Forwards only strictly increasing percentages in 0..100."""

    def __init__(self, sink: Callable[[int], None]) -> None:
        self._sink = sink
        self.last: int | None = None

    def __call__(self, percent: int) -> None:
        percent = max(0, min(100, percent))
        if self.last is not None and percent <= self.last:
            return
        self.last = percent
        self._sink(percent)


class UploadSession:
    """State machine for one spreadsheet upload form."""

    def __init__(
        self,
        client: CampaignApiClient | None = None,
        notifier: Notifier | None = None,
        upload_timeout: float | None = None,
    ) -> None:
        self.client = client or CampaignApiClient()
        self.notifier = notifier or LogNotifier()
        self.upload_timeout = (
            upload_timeout
            if upload_timeout is not None
            else get_settings().upload_timeout_seconds
        )

        self.phase = UploadPhase.IDLE
        self.file: SpreadsheetFile | None = None
        self.campaign: Campaign | str | None = None
        self.email_type: EmailType | str | None = None
        self.progress_percent: int | None = None
        self.summary: UploadSummary | None = None
        self.message: str | None = None
        self.failure: UploadFailure | None = None

        self._task: asyncio.Task | None = None
        self._cancel_requested = False

    @property
    def busy(self) -> bool:
        return self.phase in (UploadPhase.VALIDATING, UploadPhase.UPLOADING)

    @property
    def error(self) -> str | None:
        """Inline error message for the form, if the last submission failed."""
        return self.failure.message if self.failure else None

    async def submit(
        self,
        file: SpreadsheetFile | None,
        campaign: Campaign | str | None,
        email_type: EmailType | str | None,
        on_progress: Callable[[int], None] | None = None,
    ) -> Result[UploadSummary, UploadFailure]:
        """Validate and upload a spreadsheet.

        Args:
            file: Selected spreadsheet
            campaign: Selected campaign
            email_type: Selected email type
            on_progress: Receives each new progress percentage

        Returns:
            Result containing the server's import summary or the failure
        """
        if self.busy:
            logger.warning("Submit ignored: an upload is already in progress")
            return Err(UploadFailure(UploadErrorKind.IN_PROGRESS, IN_PROGRESS_MESSAGE))

        self.file = file
        self.campaign = campaign
        self.email_type = email_type
        self.summary = None
        self.message = None
        self.failure = None
        self.progress_percent = None
        self._cancel_requested = False

        # 1. Validate
        self.phase = UploadPhase.VALIDATING
        validation = validate_submission(campaign, email_type, file)
        if validation.is_err():
            errors = validation.unwrap_err()
            return self._fail(
                UploadFailure(
                    UploadErrorKind.VALIDATION,
                    errors[0].message,
                    field_errors=errors,
                )
            )
        selected_campaign, selected_email_type, selected_file = validation.unwrap()

        # 2. Upload
        self.phase = UploadPhase.UPLOADING
        self.progress_percent = 0

        def record_progress(percent: int) -> None:
            self.progress_percent = percent
            if on_progress is not None:
                on_progress(percent)

        progress = _MonotonicProgress(record_progress)
        progress(0)

        self._task = asyncio.ensure_future(
            asyncio.wait_for(
                self.client.upload_file(
                    selected_file,
                    selected_campaign,
                    selected_email_type,
                    on_progress=progress,
                ),
                timeout=self.upload_timeout,
            )
        )

        try:
            envelope = await self._task
        except asyncio.CancelledError:
            failed = self._fail(UploadFailure(UploadErrorKind.CANCELLED, CANCELLED_MESSAGE))
            if not self._cancel_requested:
                # The caller itself was cancelled; the session stays reusable
                raise
            return failed
        except (asyncio.TimeoutError, RequestTimeoutError):
            return self._fail(UploadFailure(UploadErrorKind.TIMEOUT, TIMEOUT_MESSAGE))
        except NetworkError as e:
            return self._fail(UploadFailure(UploadErrorKind.NETWORK, e.message))
        except ServerError as e:
            return self._fail(
                UploadFailure(UploadErrorKind.SERVER, e.message, status_code=e.status_code)
            )
        except DecodeError as e:
            return self._fail(
                UploadFailure(UploadErrorKind.DECODE, e.message, status_code=e.status_code)
            )
        finally:
            self._task = None

        # 3. Success
        progress(100)
        self.phase = UploadPhase.SUCCEEDED
        self.summary = envelope.data
        self.message = envelope.message
        logger.info(f"Upload of {selected_file.name} succeeded: {self.summary}")
        self.notifier.success(self.summary.describe(envelope.message))
        return Ok(self.summary)

    def cancel(self) -> bool:
        """Abort the in-flight upload.

        Returns:
            True if an upload was cancelled, False if nothing was in flight
        """
        if self._task is None or self._task.done() or self._cancel_requested:
            return False
        self._cancel_requested = True
        self._task.cancel()
        return True

    def reset(self) -> None:
        """Return to Idle after a terminal outcome has been acknowledged.

        After success every field is cleared. After failure the file, campaign
        and email type are kept so the operator can submit again.
        """
        if self.busy:
            raise RuntimeError("Cannot reset while an upload is in progress")

        if self.phase == UploadPhase.SUCCEEDED:
            self.file = None
            self.campaign = None
            self.email_type = None

        self.phase = UploadPhase.IDLE
        self.progress_percent = None
        self.summary = None
        self.message = None
        self.failure = None

    def _fail(self, failure: UploadFailure) -> Err[UploadFailure]:
        self.phase = UploadPhase.FAILED
        self.failure = failure
        self.progress_percent = None
        logger.warning(f"Upload failed ({failure.kind.value}): {failure.message}")
        self.notifier.error(failure.message)
        return Err(failure)
