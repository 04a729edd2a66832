"""Unsubscribe Service for the confirmation page.

Checks the link parameters, calls the tracking endpoint and reports the
outcome to the operator through the notifier.
"""

from result import Err, Ok, Result

from campaign_client.schemas.unsubscribe import UnsubscribeResult
from campaign_client.services.api_client import ApiError, CampaignApiClient, ServerError
from campaign_client.services.notifications import LogNotifier, Notifier
from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)

MISSING_PARAMETERS_MESSAGE = "Missing required parameters"
SUCCESS_MESSAGE = (
    "Successfully unsubscribed! You will no longer receive emails from this sender."
)
CANCELLED_MESSAGE = "No changes made. You can close this tab now."


class UnsubscribeService:
    """Service for confirming unsubscribe links."""

    def __init__(
        self,
        client: CampaignApiClient | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.client = client or CampaignApiClient()
        self.notifier = notifier or LogNotifier()

    async def confirm(
        self, k: str | None, to: str | None, from_: str | None
    ) -> Result[UnsubscribeResult, str]:
        """Unsubscribe the receiver of a link.

        Args:
            k: Send key from the link
            to: Receiver email address
            from_: Sender email address

        Returns:
            Result containing the subscription state or an error message
        """
        if not k or not to or not from_:
            self.notifier.error(MISSING_PARAMETERS_MESSAGE)
            return Err(MISSING_PARAMETERS_MESSAGE)

        try:
            result = await self.client.unsubscribe(k, to, from_)
        except ServerError as e:
            message = e.message or f"{e.status_code} {e.status_text}"
            logger.warning(f"Unsubscribe rejected for {to}: {message}")
            self.notifier.error(message)
            return Err(message)
        except ApiError as e:
            logger.error(f"Unsubscribe failed for {to}: {e.message}")
            self.notifier.error(e.message)
            return Err(e.message)

        self.notifier.success(SUCCESS_MESSAGE)
        return Ok(result)

    def cancel(self) -> None:
        """Operator declined; nothing is sent."""
        self.notifier.info(CANCELLED_MESSAGE)
