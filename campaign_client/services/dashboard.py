"""Report Dashboard state.

Holds the operator's filter choices for the Sent and Responds tabs, turns
every change into a ReportQuery for the active tab, and derives what a view
renders (rows, pagination bar, stats) from the coordinator's published state.

The campaign filter is shared by both tabs; date range, page and page size are
tab-local. Whether the response category is filtered client- or server-side
is decided per deployment by `responds_filter_mode`.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import date

from campaign_client.config import Settings, get_settings
from campaign_client.schemas.report import (
    MonthlyStats,
    NumericPageSize,
    PageSize,
    ReportKind,
    ReportQuery,
    ReportRecord,
    ResponseRecord,
    SentRecord,
    parse_page_size,
)
from campaign_client.services.api_client import ApiError, CampaignApiClient
from campaign_client.services.fetch_coordinator import FetchCoordinator
from campaign_client.services.notifications import LogNotifier, Notifier
from campaign_client.services.pagination import (
    PaginationPolicy,
    PaginationView,
    build_pagination,
)
from campaign_client.services.response_filter import (
    ALL_CATEGORIES,
    RespondsFilterMode,
    filter_responses,
)
from campaign_client.utils.formatting import TimestampStyle, format_timestamp
from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)

OPTIONS_FAILED_MESSAGE = "Failed to load response options"
MISSING_VALUE = "N/A"


@dataclass(frozen=True)
class TabFilters:
    """Tab-local filter and pagination choices."""

    date_from: date
    date_to: date
    page: int = 1
    page_size: PageSize = NumericPageSize(50)


class ReportDashboard:
    """Filter state and derived views for the two report tabs."""

    def __init__(
        self,
        client: CampaignApiClient | None = None,
        notifier: Notifier | None = None,
        coordinator: FetchCoordinator | None = None,
        settings: Settings | None = None,
        today: date | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.client = client or CampaignApiClient()
        self.notifier = notifier or LogNotifier()
        self.coordinator = coordinator or FetchCoordinator(self.client, self.notifier)

        self.pagination_policy = PaginationPolicy(settings.pagination_policy)
        self.filter_mode = RespondsFilterMode(settings.responds_filter_mode)
        self.timestamp_style = TimestampStyle(settings.timestamp_style)
        self.zone_label = settings.display_timezone

        start = today or date.today()
        page_size = NumericPageSize(settings.default_page_size)
        self.campaign: str = settings.default_campaign
        self.filters: dict[ReportKind, TabFilters] = {
            kind: TabFilters(date_from=start, date_to=start, page_size=page_size)
            for kind in ReportKind
        }
        self.active_tab = ReportKind.SENT
        self.responds_category: str = ALL_CATEGORIES
        self.responds_options: list[str] = []

    # Commands

    def open(self) -> asyncio.Task | None:
        """Load the active tab with the initial filters."""
        return self._sync()

    def close(self) -> None:
        """Tear down: late responses are ignored from now on."""
        self.coordinator.detach()

    def switch_tab(self, tab: ReportKind) -> asyncio.Task | None:
        self.active_tab = tab
        self._update(tab, page=1)
        return self._sync()

    def set_campaign(self, campaign: str) -> asyncio.Task | None:
        self.campaign = campaign
        return self._sync()

    def set_date_range(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
        tab: ReportKind | None = None,
    ) -> asyncio.Task | None:
        """Change one or both ends of a tab's date range."""
        tab = tab or self.active_tab
        current = self.filters[tab]
        self._update(
            tab,
            date_from=date_from or current.date_from,
            date_to=date_to or current.date_to,
        )
        return self._sync()

    def set_page(self, page: int, tab: ReportKind | None = None) -> asyncio.Task | None:
        tab = tab or self.active_tab
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        if isinstance(self.filters[tab].page_size, NumericPageSize):
            self._update(tab, page=page)
        return self._sync()

    def next_page(self, tab: ReportKind | None = None) -> asyncio.Task | None:
        """Go forward one page; a no-op at the last page or with "All"."""
        tab = tab or self.active_tab
        nav = self.pagination(tab).navigation
        if nav.next_page is None:
            return None
        return self.set_page(nav.next_page, tab)

    def previous_page(self, tab: ReportKind | None = None) -> asyncio.Task | None:
        """Go back one page; a no-op at page 1 or with "All"."""
        tab = tab or self.active_tab
        nav = self.pagination(tab).navigation
        if nav.previous_page is None:
            return None
        return self.set_page(nav.previous_page, tab)

    def set_page_size(
        self, page_size: int | str | PageSize, tab: ReportKind | None = None
    ) -> asyncio.Task | None:
        tab = tab or self.active_tab
        self._update(tab, page_size=parse_page_size(page_size), page=1)
        return self._sync()

    def set_responds_category(self, category: str | None) -> asyncio.Task | None:
        """Select a response category ("All" clears the filter).

        In client mode this only changes what `records` returns. In server
        mode the category is part of the Responds query and the page resets.
        """
        self.responds_category = category or ALL_CATEGORIES
        if self.filter_mode == RespondsFilterMode.CLIENT:
            return None
        self._update(ReportKind.RESPONDS, page=1)
        return self._sync()

    def refresh(self) -> asyncio.Task | None:
        """Explicit retry of the active tab's current query."""
        return self.coordinator.refresh(self.active_tab)

    async def load_responds_options(self) -> list[str]:
        """Fetch the selectable response categories.

        Failures are reported to the notifier and leave the options empty.
        """
        try:
            self.responds_options = await self.client.get_responds_options()
        except ApiError as e:
            logger.error(f"Failed to fetch response options: {e.message}")
            self.notifier.error(OPTIONS_FAILED_MESSAGE)
            self.responds_options = []
        return self.responds_options

    # Queries

    def query(self, tab: ReportKind | None = None) -> ReportQuery:
        """The ReportQuery the current filters describe for a tab."""
        tab = tab or self.active_tab
        filters = self.filters[tab]
        category = None
        if tab == ReportKind.RESPONDS and self.filter_mode == RespondsFilterMode.SERVER:
            category = self.responds_category
        return ReportQuery(
            report_kind=tab,
            campaign=self.campaign,
            date_from=filters.date_from,
            date_to=filters.date_to,
            page=filters.page,
            page_size=filters.page_size,
            responds_category=category,
        )

    @property
    def stats(self) -> MonthlyStats | None:
        return self.coordinator.stats

    def loading(self, tab: ReportKind | None = None) -> bool:
        return self.coordinator.state(tab or self.active_tab).loading

    def error(self, tab: ReportKind | None = None) -> str | None:
        return self.coordinator.state(tab or self.active_tab).error

    def total_records(self, tab: ReportKind | None = None) -> int:
        result = self.coordinator.state(tab or self.active_tab).result
        return result.pagination.total_records if result else 0

    def total_pages(self, tab: ReportKind | None = None) -> int:
        result = self.coordinator.state(tab or self.active_tab).result
        return result.pagination.total_pages if result else 1

    def records(self, tab: ReportKind | None = None) -> list[ReportRecord]:
        """Published records, with the client-side category filter applied."""
        tab = tab or self.active_tab
        result = self.coordinator.state(tab).result
        if result is None:
            return []
        if tab == ReportKind.RESPONDS and self.filter_mode == RespondsFilterMode.CLIENT:
            return filter_responses(result.records, self.responds_category)
        return list(result.records)

    def rows(self, tab: ReportKind | None = None) -> list[list[str]]:
        """Table cells for the published records."""
        rows = []
        for record in self.records(tab):
            if isinstance(record, ResponseRecord):
                rows.append(
                    [
                        record.sender_email,
                        record.receiver_email,
                        record.response_label,
                        record.subject or MISSING_VALUE,
                        record.body or MISSING_VALUE,
                        self._timestamp(record.updated_at),
                    ]
                )
            elif isinstance(record, SentRecord):
                rows.append(
                    [
                        record.sender_email,
                        record.receiver_email,
                        self._timestamp(record.sent_at),
                    ]
                )
        return rows

    def pagination(self, tab: ReportKind | None = None) -> PaginationView:
        tab = tab or self.active_tab
        filters = self.filters[tab]
        return build_pagination(
            filters.page,
            self.total_pages(tab),
            filters.page_size,
            self.pagination_policy,
        )

    # Internals

    def _update(self, tab: ReportKind, **changes) -> None:
        self.filters[tab] = replace(self.filters[tab], **changes)

    def _sync(self) -> asyncio.Task | None:
        return self.coordinator.on_query_change(self.active_tab, self.query())

    def _timestamp(self, value: str) -> str:
        return format_timestamp(value, self.timestamp_style, self.zone_label)
