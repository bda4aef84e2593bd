from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Literal, Optional

import pandas as pd

from campaign_core.data import CAMPAIGN_COLUMNS

PAGE_SIZE = 8
DEFAULT_SORT_KEY = "campaign"

Direction = Literal["asc", "desc"]


@dataclass(frozen=True)
class FunnelRates:
    mql: float = 0.60
    sql: float = 0.35
    opportunity: float = 0.20
    closed: float = 0.08


@dataclass(frozen=True)
class DateRangeFilter:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.start is not None or self.end is not None


@dataclass(frozen=True)
class SortSpec:
    key: str = DEFAULT_SORT_KEY
    direction: Direction = "asc"


@dataclass(frozen=True)
class DashboardFilters:
    date_range: DateRangeFilter = field(default_factory=DateRangeFilter)
    search: str = ""
    sort: SortSpec = field(default_factory=SortSpec)
    page: int = 1


def _as_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        ts = pd.to_datetime(str(value).strip(), errors="coerce")
    except (TypeError, ValueError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def _as_page(value: object) -> int:
    try:
        page = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, page)


def normalize_sort(raw: object) -> SortSpec:
    if isinstance(raw, SortSpec):
        return raw
    raw = raw if isinstance(raw, dict) else {}
    key = str(raw.get("key") or DEFAULT_SORT_KEY)
    if key not in CAMPAIGN_COLUMNS:
        key = DEFAULT_SORT_KEY
    direction = str(raw.get("direction") or raw.get("dir") or "asc").lower()
    if direction not in ("asc", "desc"):
        direction = "asc"
    return SortSpec(key=key, direction=direction)  # type: ignore[arg-type]


def normalize_filters(raw: dict) -> DashboardFilters:
    date_range = DateRangeFilter(
        start=_as_date(raw.get("start_date")),
        end=_as_date(raw.get("end_date")),
    )
    search = str(raw.get("search") or "").strip()
    return DashboardFilters(
        date_range=date_range,
        search=search,
        sort=normalize_sort(raw.get("sort")),
        page=_as_page(raw.get("page", 1)),
    )


def toggle_sort(current: SortSpec, key: str) -> SortSpec:
    if current.key == key:
        return SortSpec(key=key, direction="desc" if current.direction == "asc" else "asc")
    return SortSpec(key=key, direction="asc")


def with_search(filters: DashboardFilters, term: str) -> DashboardFilters:
    return replace(filters, search=term, page=1)


def with_sort(filters: DashboardFilters, key: str) -> DashboardFilters:
    # Sorting keeps the current page.
    return replace(filters, sort=toggle_sort(filters.sort, key))


def with_date_range(filters: DashboardFilters, start: object = None, end: object = None) -> DashboardFilters:
    return replace(filters, date_range=DateRangeFilter(start=_as_date(start), end=_as_date(end)))


def has_next_page(page: int, total: int, page_size: int = PAGE_SIZE) -> bool:
    return page * page_size < total


def next_page(filters: DashboardFilters, total: int) -> DashboardFilters:
    if not has_next_page(filters.page, total):
        return filters
    return replace(filters, page=filters.page + 1)


def previous_page(filters: DashboardFilters) -> DashboardFilters:
    return replace(filters, page=max(1, filters.page - 1))
