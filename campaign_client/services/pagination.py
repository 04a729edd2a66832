"""Pagination window and navigation state for report tables."""

from dataclasses import dataclass
from enum import Enum

from campaign_client.schemas.report import ALL_LABEL, AllPages, PageSize

TRUNCATED_HEAD = 6
TRUNCATED_TAIL = 2


class PaginationPolicy(str, Enum):
    """How many page links to show."""

    FULL = "full"
    TRUNCATED = "truncated"


class _Ellipsis:
    def __repr__(self) -> str:
        return "ELLIPSIS"


ELLIPSIS = _Ellipsis()
ALL_PAGES_LABEL = ALL_LABEL

PageItem = int | _Ellipsis | str


@dataclass(frozen=True)
class NavigationState:
    """Previous/next affordances; a disabled direction has no target page."""

    has_previous: bool
    has_next: bool
    previous_page: int | None
    next_page: int | None


@dataclass(frozen=True)
class PaginationView:
    items: list[PageItem]
    navigation: NavigationState
    current_page: int


def page_window(
    current_page: int,
    total_pages: int,
    policy: PaginationPolicy = PaginationPolicy.FULL,
) -> list[int | _Ellipsis]:
    """List the page links to render.

    FULL lists every page. TRUNCATED lists the first six pages and the last
    two, with an ellipsis only when pages are skipped between them. A current
    page hidden in the gap is still reached through previous/next.

    Args:
        current_page: The selected page (does not change the window)
        total_pages: Server-reported page count
        policy: Window policy

    Returns:
        Page numbers and ELLIPSIS markers in display order
    """
    if total_pages <= 0:
        return []
    if policy == PaginationPolicy.FULL or total_pages <= TRUNCATED_HEAD:
        return list(range(1, total_pages + 1))

    head: list[int | _Ellipsis] = list(range(1, TRUNCATED_HEAD + 1))
    tail_start = max(TRUNCATED_HEAD + 1, total_pages - TRUNCATED_TAIL + 1)
    tail = list(range(tail_start, total_pages + 1))
    if tail_start > TRUNCATED_HEAD + 1:
        head.append(ELLIPSIS)
    return head + tail


def navigation(
    current_page: int, total_pages: int, page_size: PageSize
) -> NavigationState:
    """Work out whether previous/next are enabled and where they lead.

    Both are disabled when the page size is "All", since that has exactly one
    logical page.
    """
    if isinstance(page_size, AllPages):
        return NavigationState(False, False, None, None)

    has_previous = current_page > 1
    has_next = current_page < total_pages
    return NavigationState(
        has_previous=has_previous,
        has_next=has_next,
        previous_page=current_page - 1 if has_previous else None,
        next_page=current_page + 1 if has_next else None,
    )


def build_pagination(
    current_page: int,
    total_pages: int,
    page_size: PageSize,
    policy: PaginationPolicy = PaginationPolicy.FULL,
) -> PaginationView:
    """Everything a pagination bar needs for one tab."""
    if isinstance(page_size, AllPages):
        items: list[PageItem] = [ALL_PAGES_LABEL]
    else:
        items = list(page_window(current_page, total_pages, policy))
    return PaginationView(
        items=items,
        navigation=navigation(current_page, total_pages, page_size),
        current_page=current_page,
    )
