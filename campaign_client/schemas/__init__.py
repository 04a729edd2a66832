"""Schema module for request/response models."""

from campaign_client.schemas.report import (
    ALL_PAGE_SIZE,
    AllPages,
    MonthlyStats,
    MonthlySummary,
    NumericPageSize,
    PageSize,
    PaginationInfo,
    ReportKind,
    ReportQuery,
    ReportResult,
    ResponseRecord,
    SentRecord,
    parse_page_size,
    wire_per_page,
)
from campaign_client.schemas.unsubscribe import UnsubscribeResult
from campaign_client.schemas.upload import (
    Campaign,
    EmailType,
    SpreadsheetFile,
    UploadSummary,
)

__all__ = [
    "ALL_PAGE_SIZE",
    "AllPages",
    "Campaign",
    "EmailType",
    "MonthlyStats",
    "MonthlySummary",
    "NumericPageSize",
    "PageSize",
    "PaginationInfo",
    "ReportKind",
    "ReportQuery",
    "ReportResult",
    "ResponseRecord",
    "SentRecord",
    "SpreadsheetFile",
    "UnsubscribeResult",
    "UploadSummary",
    "parse_page_size",
    "wire_per_page",
]
