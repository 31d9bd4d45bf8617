"""Pagination math for local lists and GitHub search results."""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

GITHUB_SEARCH_LIMIT = 1000


@dataclass
class PaginationInfo:
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool
    start_index: int
    end_index: int
    total_items: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SearchPaginationInfo(PaginationInfo):
    effective_total: int = 0
    is_limited: bool = False


def calculate_pagination(total_items: int, current_page: int, per_page: int) -> PaginationInfo:
    """Pagination for ``total_items`` items; pages are 1-indexed."""
    total_pages = math.ceil(total_items / per_page) if per_page > 0 else 0
    start_index = (current_page - 1) * per_page
    return PaginationInfo(
        total_pages=total_pages,
        current_page=current_page,
        has_next_page=current_page < total_pages,
        has_previous_page=current_page > 1,
        start_index=start_index,
        end_index=min(start_index + per_page, total_items),
        total_items=total_items,
    )


def calculate_github_search_pagination(
    total_count: int, current_page: int, per_page: int
) -> SearchPaginationInfo:
    """Pagination over GitHub search, which never returns more than 1000 results."""
    effective_total = min(total_count, GITHUB_SEARCH_LIMIT)
    info = calculate_pagination(effective_total, current_page, per_page)
    return SearchPaginationInfo(
        **asdict(info),
        effective_total=effective_total,
        is_limited=total_count > GITHUB_SEARCH_LIMIT,
    )


def format_pagination_text(pagination: PaginationInfo, current_item_count: int) -> str:
    if pagination.total_items == 0:
        return "No results"

    start = pagination.start_index + 1
    end = pagination.start_index + current_item_count
    return f"Showing {start}-{end} of {pagination.total_items} results"


def format_github_search_text(
    pagination: SearchPaginationInfo, current_item_count: int, total_count: int
) -> str:
    if pagination.total_items == 0:
        return "No results found"

    if pagination.is_limited:
        return (
            f"Showing top {pagination.effective_total} results "
            f"of {total_count:,} matches"
        )

    start = pagination.start_index + 1
    end = pagination.start_index + current_item_count
    return f"Showing {start}-{end} of {pagination.total_items} results"
