"""Report schemas: the query value object and report endpoint payloads."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Page size sent on the wire when the operator picks "All"
ALL_PAGE_SIZE = 100000
ALL_LABEL = "All"


class ReportKind(str, Enum):
    """Report tabs, named as the report endpoint expects them."""

    SENT = "sent"
    RESPONDS = "responds"


@dataclass(frozen=True)
class NumericPageSize:
    """A concrete number of records per page."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"Page size must be positive, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AllPages:
    """Every record on a single page."""

    def __str__(self) -> str:
        return ALL_LABEL


PageSize = NumericPageSize | AllPages

PAGE_SIZE_CHOICES: tuple[PageSize, ...] = (
    NumericPageSize(10),
    NumericPageSize(20),
    NumericPageSize(50),
    NumericPageSize(100),
    NumericPageSize(500),
    AllPages(),
)


def parse_page_size(value: int | str | PageSize) -> PageSize:
    """Build a PageSize from a UI selection such as 50, "50" or "All"."""
    if isinstance(value, (NumericPageSize, AllPages)):
        return value
    if isinstance(value, str):
        if value == ALL_LABEL:
            return AllPages()
        value = int(value)
    return NumericPageSize(value)


def wire_per_page(page_size: PageSize) -> int:
    """Translate a PageSize into the `per_page` value of a report request."""
    if isinstance(page_size, AllPages):
        return ALL_PAGE_SIZE
    return page_size.value


@dataclass(frozen=True)
class ReportQuery:
    """One report request: filters plus pagination.

    Instances compare by value; the fetch coordinator relies on that to skip
    duplicate requests. `date_from <= date_to` is deliberately not checked here.
    """

    report_kind: ReportKind
    campaign: str
    date_from: date
    date_to: date
    page: int = 1
    page_size: PageSize = NumericPageSize(50)
    responds_category: str | None = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"Page must be >= 1, got {self.page}")
        # "All" has exactly one logical page
        if isinstance(self.page_size, AllPages) and self.page != 1:
            object.__setattr__(self, "page", 1)
        if self.responds_category == ALL_LABEL:
            object.__setattr__(self, "responds_category", None)

    @property
    def per_page(self) -> int:
        return wire_per_page(self.page_size)

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for POST /import/report."""
        payload: dict[str, Any] = {
            "type": self.report_kind.value,
            "email_type": self.campaign,
            "date_from": self.date_from.isoformat(),
            "date_to": self.date_to.isoformat(),
            "page": self.page,
            "per_page": self.per_page,
        }
        if self.responds_category is not None:
            payload["responds_filter"] = self.responds_category
        return payload


class SentRecord(BaseModel):
    """One sent email event."""

    model_config = ConfigDict(populate_by_name=True)

    sender_email: str
    receiver_email: str
    sent_at: str
    email_type: str | None = None


class ResponseRecord(BaseModel):
    """One response event; `response_label` is the category shown to operators."""

    model_config = ConfigDict(populate_by_name=True)

    sender_email: str
    receiver_email: str
    response_label: str = Field(alias="responds")
    subject: str | None = None
    body: str | None = None
    updated_at: str
    email_type: str | None = None


ReportRecord = SentRecord | ResponseRecord


class PaginationInfo(BaseModel):
    """Server-authoritative pagination metadata."""

    page: int
    per_page: int
    total_pages: int
    total_records: int


class MonthlySummary(BaseModel):
    """Monthly counters for the queried campaign and date window."""

    model_config = ConfigDict(populate_by_name=True)

    sent: int = Field(alias="monthly_sent")
    unsubscribed: int = Field(alias="monthly_unsubscribed")
    positive_responses: int = Field(alias="monthly_positive_responds")
    not_responded: int = Field(alias="monthly_not_responds")

    @classmethod
    def empty(cls) -> "MonthlySummary":
        return cls(sent=0, unsubscribed=0, positive_responses=0, not_responded=0)


class StatsEmailType(str, Enum):
    """Keys of the per-email-type stats mapping."""

    REGULAR = "regular"
    FOLLOW_UP_1 = "follow_up_1"


MonthlyStats = MonthlySummary | dict[StatsEmailType, MonthlySummary]


class ReportData(BaseModel):
    """The `data` object of a report response."""

    type: ReportKind
    records: list[dict[str, Any]]
    pagination: PaginationInfo
    filters_applied: dict[str, Any] = Field(default_factory=dict)
    monthly_stats: MonthlyStats


class ReportEnvelope(BaseModel):
    """Full report response body."""

    status: int
    message: str = ""
    data: ReportData | None = None


class RespondsOption(BaseModel):
    """One selectable response category."""

    label: str


class RespondsOptionsData(BaseModel):
    options: list[RespondsOption] = Field(default_factory=list)


class RespondsOptionsEnvelope(BaseModel):
    status: int
    message: str = ""
    data: RespondsOptionsData | None = None


@dataclass
class ReportResult:
    """Decoded report response, in server order."""

    report_kind: ReportKind
    records: list[ReportRecord]
    pagination: PaginationInfo
    stats: MonthlyStats
    echoed_filters: dict[str, Any]

    @classmethod
    def from_envelope(
        cls, envelope: ReportEnvelope, report_kind: ReportKind
    ) -> "ReportResult":
        """Build a result, decoding records as the variant of `report_kind`.

        Raises:
            pydantic.ValidationError: If a record does not match its variant
        """
        record_model = SentRecord if report_kind == ReportKind.SENT else ResponseRecord
        records = [record_model.model_validate(raw) for raw in envelope.data.records]
        return cls(
            report_kind=report_kind,
            records=records,
            pagination=envelope.data.pagination,
            stats=envelope.data.monthly_stats,
            echoed_filters=envelope.data.filters_applied,
        )
