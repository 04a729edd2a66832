"""Tests for the report dashboard state."""

from datetime import date

import pytest

TODAY = date(2026, 2, 16)
LABELS = ["Positive Responds", "Not Interested", "Positive Responds"]


class StubReportClient:
    """Answers report requests immediately from canned data."""

    def __init__(self, total_pages: int = 3, options_error: Exception | None = None):
        self.total_pages = total_pages
        self.options_error = options_error
        self.queries: list = []

    async def get_report(self, query):
        from campaign_client.schemas.report import (
            MonthlySummary,
            PaginationInfo,
            ReportKind,
            ReportResult,
            ResponseRecord,
            SentRecord,
        )

        self.queries.append(query)
        if query.report_kind == ReportKind.SENT:
            records = [
                SentRecord(
                    sender_email="sales@example.com",
                    receiver_email="lead@example.com",
                    sent_at="Mon, 16 Feb 2026 15:35:52 GMT",
                )
            ]
        else:
            records = [
                ResponseRecord(
                    sender_email="sales@example.com",
                    receiver_email=f"lead{i}@example.com",
                    response_label=label,
                    subject=None if i == 0 else "Re: intro",
                    body=None,
                    updated_at="Mon, 16 Feb 2026 09:05:00 GMT",
                )
                for i, label in enumerate(LABELS)
            ]
        return ReportResult(
            report_kind=query.report_kind,
            records=records,
            pagination=PaginationInfo(
                page=query.page,
                per_page=query.per_page,
                total_pages=1 if query.per_page == 100000 else self.total_pages,
                total_records=len(records),
            ),
            stats=MonthlySummary.empty(),
            echoed_filters={},
        )

    async def get_responds_options(self) -> list[str]:
        if self.options_error is not None:
            raise self.options_error
        return ["Positive Responds", "Not Interested"]


def _dashboard(client=None, **settings_overrides):
    from campaign_client.config import Settings
    from campaign_client.services.dashboard import ReportDashboard
    from campaign_client.services.notifications import RecordingNotifier

    client = client or StubReportClient()
    notifier = RecordingNotifier()
    dashboard = ReportDashboard(
        client=client,
        notifier=notifier,
        settings=Settings(**settings_overrides),
        today=TODAY,
    )
    return dashboard, client, notifier


class TestQueries:
    """Tests for turning filter changes into report queries."""

    @pytest.mark.asyncio
    async def test_open_loads_sent_tab_for_today(self):
        """Opening the dashboard fetches today's Sent report."""
        from campaign_client.schemas.report import NumericPageSize, ReportKind

        dashboard, client, _ = _dashboard()

        await dashboard.open()

        query = client.queries[0]
        assert query.report_kind == ReportKind.SENT
        assert query.campaign == "MPLY"
        assert query.date_from == TODAY and query.date_to == TODAY
        assert query.page == 1
        assert query.page_size == NumericPageSize(50)
        assert dashboard.total_records() == 1

    @pytest.mark.asyncio
    async def test_switching_tabs_resets_page(self):
        """Changing tab always lands on page 1 of the new tab."""
        from campaign_client.schemas.report import ReportKind

        dashboard, client, _ = _dashboard()
        await dashboard.open()
        await dashboard.set_page(3)

        await dashboard.switch_tab(ReportKind.RESPONDS)
        await dashboard.switch_tab(ReportKind.SENT)

        assert client.queries[-2].report_kind == ReportKind.RESPONDS
        assert client.queries[-2].page == 1
        assert client.queries[-1].page == 1

    @pytest.mark.asyncio
    async def test_campaign_is_shared_by_tabs(self):
        """The campaign filter applies to both tabs."""
        from campaign_client.schemas.report import ReportKind

        dashboard, _, _ = _dashboard()
        await dashboard.set_campaign("GOLY")

        assert dashboard.query(ReportKind.SENT).campaign == "GOLY"
        assert dashboard.query(ReportKind.RESPONDS).campaign == "GOLY"

    @pytest.mark.asyncio
    async def test_date_range_is_tab_local(self):
        """Dates changed on one tab do not move the other."""
        from campaign_client.schemas.report import ReportKind

        dashboard, _, _ = _dashboard()
        await dashboard.set_date_range(date_from=date(2026, 2, 1))

        assert dashboard.query(ReportKind.SENT).date_from == date(2026, 2, 1)
        assert dashboard.query(ReportKind.SENT).date_to == TODAY
        assert dashboard.query(ReportKind.RESPONDS).date_from == TODAY

    @pytest.mark.asyncio
    async def test_unchanged_filters_send_nothing(self):
        """Re-selecting the current campaign issues no request."""
        dashboard, client, _ = _dashboard()
        await dashboard.open()

        assert dashboard.set_campaign("MPLY") is None
        assert len(client.queries) == 1

    def test_page_must_be_positive(self):
        """Page numbers below 1 are rejected."""
        dashboard, _, _ = _dashboard()

        with pytest.raises(ValueError):
            dashboard.set_page(0)


class TestPagination:
    """Tests for page size and navigation."""

    @pytest.mark.asyncio
    async def test_all_page_size(self):
        """"All" requests page 1 with per_page 100000 and disables navigation."""
        dashboard, client, _ = _dashboard()
        await dashboard.open()
        await dashboard.set_page(2)

        await dashboard.set_page_size("All")

        query = client.queries[-1]
        assert query.page == 1
        assert query.per_page == 100000
        view = dashboard.pagination()
        assert view.items == ["All"]
        assert not view.navigation.has_previous
        assert not view.navigation.has_next
        assert dashboard.next_page() is None
        assert dashboard.previous_page() is None

    @pytest.mark.asyncio
    async def test_page_size_change_resets_page(self):
        """A new page size starts again from page 1."""
        dashboard, client, _ = _dashboard()
        await dashboard.open()
        await dashboard.set_page(3)

        await dashboard.set_page_size(20)

        assert client.queries[-1].page == 1
        assert client.queries[-1].per_page == 20

    @pytest.mark.asyncio
    async def test_next_and_previous(self):
        """Navigation moves one page and stops at the ends."""
        dashboard, client, _ = _dashboard(client=StubReportClient(total_pages=2))
        await dashboard.open()

        assert dashboard.previous_page() is None
        await dashboard.next_page()
        assert client.queries[-1].page == 2
        assert dashboard.next_page() is None
        await dashboard.previous_page()
        assert client.queries[-1].page == 1

    @pytest.mark.asyncio
    async def test_truncated_policy(self):
        """The configured policy shapes the page links."""
        from campaign_client.services.pagination import ELLIPSIS

        dashboard, _, _ = _dashboard(
            client=StubReportClient(total_pages=20), pagination_policy="truncated"
        )
        await dashboard.open()

        assert dashboard.pagination().items == [1, 2, 3, 4, 5, 6, ELLIPSIS, 19, 20]


class TestRespondsFilter:
    """Tests for response category filtering modes."""

    @pytest.mark.asyncio
    async def test_client_mode_filters_without_request(self):
        """In client mode the category narrows fetched records only."""
        from campaign_client.schemas.report import ReportKind

        dashboard, client, _ = _dashboard()
        await dashboard.switch_tab(ReportKind.RESPONDS)
        sent_requests = len(client.queries)

        assert dashboard.set_responds_category("Positive Responds") is None

        assert len(client.queries) == sent_requests
        assert [r.receiver_email for r in dashboard.records()] == [
            "lead0@example.com",
            "lead2@example.com",
        ]
        assert dashboard.query().responds_category is None

    @pytest.mark.asyncio
    async def test_server_mode_sends_category(self):
        """In server mode the category is part of the Responds query."""
        from campaign_client.schemas.report import ReportKind

        dashboard, client, _ = _dashboard(responds_filter_mode="server")
        await dashboard.switch_tab(ReportKind.RESPONDS)
        await dashboard.set_page(2)

        await dashboard.set_responds_category("Not Interested")

        query = client.queries[-1]
        assert query.responds_category == "Not Interested"
        assert query.page == 1
        assert query.to_payload()["responds_filter"] == "Not Interested"
        assert len(dashboard.records()) == 3

    @pytest.mark.asyncio
    async def test_server_mode_all_clears_filter(self):
        """Selecting "All" removes the category from the query."""
        from campaign_client.schemas.report import ReportKind

        dashboard, client, _ = _dashboard(responds_filter_mode="server")
        await dashboard.switch_tab(ReportKind.RESPONDS)
        await dashboard.set_responds_category("Not Interested")

        await dashboard.set_responds_category("All")

        assert client.queries[-1].responds_category is None

    @pytest.mark.asyncio
    async def test_load_options(self):
        """Options are loaded in server order."""
        dashboard, _, _ = _dashboard()

        options = await dashboard.load_responds_options()

        assert options == ["Positive Responds", "Not Interested"]

    @pytest.mark.asyncio
    async def test_load_options_failure(self):
        """A failed options call notifies and leaves the list empty."""
        from campaign_client.services.api_client import NetworkError
        from campaign_client.services.dashboard import OPTIONS_FAILED_MESSAGE

        client = StubReportClient(options_error=NetworkError("offline"))
        dashboard, _, notifier = _dashboard(client=client)

        options = await dashboard.load_responds_options()

        assert options == []
        assert notifier.of_level("error") == [OPTIONS_FAILED_MESSAGE]


class TestRows:
    """Tests for table rows."""

    @pytest.mark.asyncio
    async def test_sent_rows(self):
        """Sent rows show sender, receiver and the formatted send time."""
        dashboard, _, _ = _dashboard()
        await dashboard.open()

        assert dashboard.rows() == [
            ["sales@example.com", "lead@example.com", "Mon, 16 Feb 2026 3:35 PM IST"]
        ]

    @pytest.mark.asyncio
    async def test_response_rows_fill_missing_values(self):
        """Missing subject or body are shown as N/A."""
        from campaign_client.schemas.report import ReportKind

        dashboard, _, _ = _dashboard(timestamp_style="month_first")
        await dashboard.switch_tab(ReportKind.RESPONDS)

        first = dashboard.rows()[0]
        assert first == [
            "sales@example.com",
            "lead0@example.com",
            "Positive Responds",
            "N/A",
            "N/A",
            "Feb 16, 2026 @ 9:05 AM IST",
        ]


class TestClose:
    """Tests for tearing the dashboard down."""

    @pytest.mark.asyncio
    async def test_close_drops_late_results(self):
        """Results arriving after close are not published."""
        from campaign_client.schemas.report import ReportKind

        dashboard, _, _ = _dashboard()
        task = dashboard.open()

        dashboard.close()
        await task

        assert dashboard.coordinator.state(ReportKind.SENT).result is None
        assert dashboard.rows() == []
