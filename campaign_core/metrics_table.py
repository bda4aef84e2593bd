"""Campaign table projection: search, sort and page-window slicing."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from functools import cmp_to_key
from typing import Any, Dict, List

import pandas as pd

from campaign_core.data import frame_records
from campaign_core.filters import PAGE_SIZE, DashboardFilters, SortSpec, has_next_page

TABLE_COLUMNS = [
    ("campaign", "Campaign Name"),
    ("type", "Type"),
    ("status", "Status"),
    ("leads", "Leads"),
    ("conversions", "Conversions"),
    ("cost", "Cost"),
    ("revenue", "Revenue"),
    ("roi", "ROI%"),
]


@dataclass(frozen=True)
class TableView:
    rows: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int = PAGE_SIZE

    @property
    def has_previous(self) -> bool:
        return self.page != 1

    @property
    def has_next(self) -> bool:
        return has_next_page(self.page, self.total, self.page_size)

    @property
    def first_row(self) -> int:
        return (self.page - 1) * self.page_size + 1

    @property
    def last_row(self) -> int:
        return min(self.total, self.page * self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload.update(
            has_previous=self.has_previous,
            has_next=self.has_next,
            first_row=self.first_row,
            last_row=self.last_row,
        )
        return payload


def filter_campaigns(records: List[Dict[str, Any]], search: str) -> List[Dict[str, Any]]:
    q = (search or "").strip().lower()
    if not q:
        return list(records)
    return [r for r in records if q in str(r.get("campaign")).lower()]


def _greater(a: Any, b: Any) -> bool:
    try:
        return bool(a > b)
    except TypeError:
        return False


def _same(a: Any, b: Any) -> bool:
    if type(a) is not type(b) and not (isinstance(a, (int, float)) and isinstance(b, (int, float))):
        return False
    return a == b


def sort_campaigns(records: List[Dict[str, Any]], sort: SortSpec) -> List[Dict[str, Any]]:
    """Sort by one column's raw values.

    Equal values compare as 0; otherwise the comparison is ``1 if a > b else -1``
    flipped for ``desc``. Values that cannot be ordered against each other
    (``None`` next to a number, text next to a number) are never "greater".
    """
    sign = 1 if sort.direction == "asc" else -1

    def compare(left: Dict[str, Any], right: Dict[str, Any]) -> int:
        va, vb = left.get(sort.key), right.get(sort.key)
        if _same(va, vb):
            return 0
        return sign * (1 if _greater(va, vb) else -1)

    return sorted(records, key=cmp_to_key(compare))


def page_slice(records: List[Dict[str, Any]], page: int, page_size: int = PAGE_SIZE) -> List[Dict[str, Any]]:
    start = (page - 1) * page_size
    return records[start:start + page_size]


def project_table(campaigns: pd.DataFrame, filters: DashboardFilters) -> TableView:
    rows = filter_campaigns(frame_records(campaigns), filters.search)
    rows = sort_campaigns(rows, filters.sort)
    return TableView(rows=page_slice(rows, filters.page), total=len(rows), page=filters.page)
