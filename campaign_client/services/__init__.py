"""Services package for the import/report client."""

from campaign_client.services.api_client import (
    ApiError,
    CampaignApiClient,
    DecodeError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)
from campaign_client.services.dashboard import ReportDashboard
from campaign_client.services.fetch_coordinator import FetchCoordinator, TabState
from campaign_client.services.notifications import (
    LogNotifier,
    Notifier,
    RecordingNotifier,
)
from campaign_client.services.pagination import (
    ELLIPSIS,
    PaginationPolicy,
    build_pagination,
    navigation,
    page_window,
)
from campaign_client.services.response_filter import (
    RespondsFilterMode,
    filter_responses,
)
from campaign_client.services.unsubscribe_service import UnsubscribeService
from campaign_client.services.upload_session import (
    UploadErrorKind,
    UploadFailure,
    UploadPhase,
    UploadSession,
)
from campaign_client.services.validation import (
    FieldError,
    FileRejection,
    validate_file,
    validate_submission,
)

__all__ = [
    "ApiError",
    "CampaignApiClient",
    "DecodeError",
    "ELLIPSIS",
    "FetchCoordinator",
    "FieldError",
    "FileRejection",
    "LogNotifier",
    "NetworkError",
    "Notifier",
    "PaginationPolicy",
    "RecordingNotifier",
    "ReportDashboard",
    "RequestTimeoutError",
    "RespondsFilterMode",
    "ServerError",
    "TabState",
    "UnsubscribeService",
    "UploadErrorKind",
    "UploadFailure",
    "UploadPhase",
    "UploadSession",
    "build_pagination",
    "filter_responses",
    "navigation",
    "page_window",
    "validate_file",
    "validate_submission",
]
