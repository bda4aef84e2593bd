from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from campaign_core.data import DEFAULT_TYPE, frame_records, is_truthy, to_native, to_number


def roi_series(campaigns: pd.DataFrame) -> List[Dict[str, Any]]:
    return [{"name": r.get("campaign"), "value": to_number(r.get("roi"))} for r in frame_records(campaigns)]


def revenue_by_type(campaigns: pd.DataFrame) -> List[Dict[str, Any]]:
    """Revenue summed per campaign type, in first-seen type order."""
    totals: Dict[Any, int | float] = {}
    for record in frame_records(campaigns):
        key = to_native(record.get("type")) if is_truthy(record.get("type")) else DEFAULT_TYPE
        totals[key] = totals.get(key, 0) + to_number(record.get("revenue"))
    return [{"name": name, "value": value} for name, value in totals.items()]
