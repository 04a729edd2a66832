"""Client-side filtering of fetched response records by category label."""

from collections.abc import Iterable
from enum import Enum

from campaign_client.schemas.report import ALL_LABEL, ResponseRecord

ALL_CATEGORIES = ALL_LABEL


class RespondsFilterMode(str, Enum):
    """Where the response category filter is applied for a deployment.

    CLIENT filters records already fetched and never triggers a request.
    SERVER sends the category with the report query.
    """

    CLIENT = "client"
    SERVER = "server"


def matches(record: ResponseRecord, category: str | None) -> bool:
    """Exact label match; None or "All" matches everything."""
    if category is None or category == ALL_CATEGORIES:
        return True
    return record.response_label == category


def filter_responses(
    records: Iterable[ResponseRecord], category: str | None
) -> list[ResponseRecord]:
    """Keep the records of one category, preserving their relative order."""
    return [record for record in records if matches(record, category)]
