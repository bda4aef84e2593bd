from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from campaign_core.data import to_native, to_number
from campaign_core.filters import DateRangeFilter


def filter_series(series: pd.DataFrame, date_range: DateRangeFilter) -> pd.DataFrame:
    """Keep points inside the inclusive range; an unset bound does not restrict.

    Points whose date cannot be parsed are never excluded by a bound.
    """
    if series.empty or not date_range.is_active:
        return series
    dates = pd.to_datetime(series["date"].astype(str), errors="coerce", format="mixed")
    keep = pd.Series(True, index=series.index)
    if date_range.start is not None:
        keep &= ~(dates < pd.Timestamp(date_range.start))
    if date_range.end is not None:
        keep &= ~(dates > pd.Timestamp(date_range.end))
    return series[keep]


def leads_over_time(series: pd.DataFrame, date_range: DateRangeFilter) -> List[Dict[str, Any]]:
    filtered = filter_series(series, date_range)
    if filtered.empty:
        return []
    return [
        {"date": to_native(d), "leads": to_number(v)}
        for d, v in zip(filtered["date"].tolist(), filtered["leads"].tolist())
    ]