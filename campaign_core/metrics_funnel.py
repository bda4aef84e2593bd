from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from campaign_core.data import frame_records, is_truthy, round_nearest, to_number
from campaign_core.filters import FunnelRates

FUNNEL_STAGES = ["Leads", "MQLs", "SQLs", "Opportunities", "Closed Won"]


def _explicit_or(value: Any, fallback: int | float) -> int | float:
    n = to_number(value)
    return n if is_truthy(n) else fallback


def estimate_stages(record: Dict[str, Any], rates: FunnelRates) -> Dict[str, int | float]:
    """One record's funnel; explicit stage columns win over the lead-rate estimates.

    Each estimate is rounded per record, so funnel totals drift slightly from
    ``rate * total leads``.
    """
    leads = to_number(record.get("leads"))
    closed = _explicit_or(record.get("closed"), 0) or _explicit_or(
        record.get("conversions"), round_nearest(leads * rates.closed)
    )
    return {
        "Leads": leads,
        "MQLs": _explicit_or(record.get("mqls"), round_nearest(leads * rates.mql)),
        "SQLs": _explicit_or(record.get("sqls"), round_nearest(leads * rates.sql)),
        "Opportunities": _explicit_or(record.get("opportunities"), round_nearest(leads * rates.opportunity)),
        "Closed Won": closed,
    }


def funnel_totals(campaigns: pd.DataFrame, rates: Optional[FunnelRates] = None) -> List[Dict[str, Any]]:
    rates = rates or FunnelRates()
    totals: Dict[str, int | float] = {stage: 0 for stage in FUNNEL_STAGES}
    for record in frame_records(campaigns):
        for stage, value in estimate_stages(record, rates).items():
            totals[stage] += value
    return [{"name": stage, "value": totals[stage]} for stage in FUNNEL_STAGES]
