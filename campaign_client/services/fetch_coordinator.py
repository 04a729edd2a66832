"""Fetch Coordinator for report tabs.

Turns a stream of ReportQuery changes into report requests:
- An identical query for a tab is a no-op
- Every accepted query gets the next sequence number and becomes the tab's
  only current request; older requests keep running but their results are
  dropped when they arrive
- Success publishes records, pagination and stats; failure keeps whatever was
  published before and surfaces a notification
"""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from campaign_client.schemas.report import (
    MonthlyStats,
    ReportKind,
    ReportQuery,
    ReportResult,
)
from campaign_client.services.api_client import ApiError, CampaignApiClient
from campaign_client.services.notifications import LogNotifier, Notifier
from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)

LOAD_FAILED_MESSAGE = (
    "Unable to load email data. Please check your connection and try again."
)
NO_RECORDS_MESSAGE = "No records found for the selected filters"


class ReportFetcher(Protocol):
    async def get_report(self, query: ReportQuery) -> ReportResult: ...


@dataclass
class TabState:
    """Published state of one report tab."""

    last_query: ReportQuery | None = None
    result: ReportResult | None = None
    loading: bool = False
    in_flight_id: int | None = None
    error: str | None = None


Listener = Callable[[ReportKind, TabState], None]


class FetchCoordinator:
    """Keeps at most one current report request per tab."""

    def __init__(
        self,
        client: ReportFetcher | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.client = client or CampaignApiClient()
        self.notifier = notifier or LogNotifier()
        self.tabs: dict[ReportKind, TabState] = {kind: TabState() for kind in ReportKind}
        self.stats: MonthlyStats | None = None
        self._sequence = itertools.count(1)
        self._latest_id: int | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every state change of a tab.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def state(self, tab: ReportKind) -> TabState:
        return self.tabs[tab]

    def on_query_change(self, tab: ReportKind, query: ReportQuery) -> asyncio.Task | None:
        """Accept a new query for a tab.

        Must be called from a running event loop.

        Args:
            tab: The report tab the query belongs to
            query: The full filter and pagination state

        Returns:
            The task fetching the report, or None if the query is unchanged
        """
        if query == self.tabs[tab].last_query:
            logger.debug(f"Query for {tab.value} unchanged, no request issued")
            return None
        return self._issue(tab, query)

    def refresh(self, tab: ReportKind) -> asyncio.Task | None:
        """Re-issue the tab's last accepted query (explicit user retry)."""
        query = self.tabs[tab].last_query
        if query is None:
            return None
        return self._issue(tab, query)

    def detach(self) -> None:
        """Invalidate every in-flight request.

        Called when the owning view goes away; responses that arrive later
        fail the sequence check and change nothing.
        """
        for state in self.tabs.values():
            state.in_flight_id = None
        self._latest_id = None
        self._listeners.clear()

    def pending(self) -> list[asyncio.Task]:
        return [task for task in self._tasks if not task.done()]

    async def wait_idle(self) -> None:
        """Wait until every request started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _issue(self, tab: ReportKind, query: ReportQuery) -> asyncio.Task:
        if query.date_from > query.date_to:
            logger.warning(
                f"{tab.value} query has date_from {query.date_from} after "
                f"date_to {query.date_to}; forwarding to server unchanged"
            )

        request_id = next(self._sequence)
        self._latest_id = request_id
        state = self.tabs[tab]
        state.last_query = query
        state.in_flight_id = request_id
        state.loading = True
        self.notifier.dismiss()

        logger.debug(f"Request {request_id} for {tab.value}: {query.to_payload()}")
        task = asyncio.get_running_loop().create_task(
            self._fetch(tab, query, request_id)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._emit(tab)
        return task

    def _is_current(self, tab: ReportKind, request_id: int) -> bool:
        return self.tabs[tab].in_flight_id == request_id

    async def _fetch(self, tab: ReportKind, query: ReportQuery, request_id: int) -> None:
        try:
            result = await self.client.get_report(query)
        except ApiError as e:
            self._fail(tab, request_id, e.message)
            return
        except Exception as e:
            logger.exception(f"Unexpected error fetching {tab.value} report: {e}")
            self._fail(tab, request_id, str(e))
            return

        if not self._is_current(tab, request_id):
            logger.debug(f"Dropping stale response {request_id} for {tab.value}")
            return

        state = self.tabs[tab]
        state.result = result
        state.loading = False
        state.in_flight_id = None
        state.error = None

        count = len(result.records)
        logger.info(
            f"Loaded {count} {tab.value} records "
            f"(total {result.pagination.total_records})"
        )
        # Stats and toasts belong to the most recent query of any tab
        if request_id != self._latest_id:
            logger.debug(f"Response {request_id} superseded on another tab; stats kept")
            self._emit(tab)
            return

        self.stats = result.stats
        if count > 0:
            self.notifier.success(f"Successfully loaded {count} records")
        else:
            self.notifier.info(NO_RECORDS_MESSAGE)
        self._emit(tab)

    def _fail(self, tab: ReportKind, request_id: int, message: str) -> None:
        if not self._is_current(tab, request_id):
            logger.debug(f"Dropping stale failure {request_id} for {tab.value}")
            return

        state = self.tabs[tab]
        state.loading = False
        state.in_flight_id = None
        state.error = message
        logger.error(f"Failed to load {tab.value} report: {message}")
        if request_id == self._latest_id:
            self.notifier.error(LOAD_FAILED_MESSAGE)
        self._emit(tab)

    def _emit(self, tab: ReportKind) -> None:
        for listener in list(self._listeners):
            try:
                listener(tab, self.tabs[tab])
            except Exception as e:
                logger.exception(f"Listener failed for {tab.value}: {e}")
