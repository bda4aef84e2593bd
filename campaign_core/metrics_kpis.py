from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from campaign_core.data import compute_roi, to_number


def _column_total(df: pd.DataFrame, col: str) -> int | float:
    if df.empty or col not in df.columns:
        return 0
    return sum(to_number(v) for v in df[col].tolist())


def compute_kpis(campaigns: pd.DataFrame) -> Dict[str, Any]:
    """Headline tiles for the campaign dataset.

    ``blended_roi`` is the ROI of the totals, not the mean of per-campaign ROI:
    two campaigns at cost 100 -> revenue 200 and cost 300 -> revenue 300 blend
    to 25%, while their ROI values average to 50%.
    """
    revenue = _column_total(campaigns, "revenue")
    cost = _column_total(campaigns, "cost")
    return {
        "total_campaigns": int(len(campaigns)),
        "revenue": revenue,
        "leads": _column_total(campaigns, "leads"),
        "cost": cost,
        "blended_roi": compute_roi(revenue, cost),
    }
