"""Client entry point: wires settings, HTTP client and notifier together."""

from campaign_client.config import get_settings
from campaign_client.services.api_client import CampaignApiClient
from campaign_client.services.dashboard import ReportDashboard
from campaign_client.services.notifications import LogNotifier, Notifier
from campaign_client.services.unsubscribe_service import UnsubscribeService
from campaign_client.services.upload_session import UploadSession
from campaign_client.utils.logging import configure_logging


class CampaignConsole:
    """The three operator screens sharing one client and notifier."""

    def __init__(
        self,
        client: CampaignApiClient | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        settings = get_settings()
        self.client = client or CampaignApiClient(base_url=settings.api_base_url)
        self.notifier = notifier or LogNotifier()

    def dashboard(self) -> ReportDashboard:
        return ReportDashboard(client=self.client, notifier=self.notifier)

    def upload_session(self) -> UploadSession:
        return UploadSession(client=self.client, notifier=self.notifier)

    def unsubscribe(self) -> UnsubscribeService:
        return UnsubscribeService(client=self.client, notifier=self.notifier)


def create_console(notifier: Notifier | None = None) -> CampaignConsole:
    """Configure logging and build the console."""
    configure_logging()
    return CampaignConsole(notifier=notifier)
