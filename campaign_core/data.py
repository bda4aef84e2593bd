from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd


DEFAULT_TYPE = "Other"
DEFAULT_STATUS = "ACTIVE"

CAMPAIGN_COLUMNS = ["campaign", "type", "status", "leads", "conversions", "cost", "revenue", "roi"]
FUNNEL_STAGE_COLUMNS = ["mqls", "sqls", "opportunities", "closed"]
SERIES_COLUMNS = ["date", "leads"]

SAMPLE_SERIES: List[Dict[str, Any]] = [
    {"date": "2025-01-01", "leads": 120},
    {"date": "2025-02-01", "leads": 180},
    {"date": "2025-03-01", "leads": 240},
    {"date": "2025-04-01", "leads": 310},
    {"date": "2025-05-01", "leads": 360},
    {"date": "2025-06-01", "leads": 400},
    {"date": "2025-07-01", "leads": 430},
    {"date": "2025-08-01", "leads": 420},
]

SAMPLE_CAMPAIGNS: List[Dict[str, Any]] = [
    {"campaign": "Q4 Webinar Series", "type": "Webinar", "status": "ACTIVE", "leads": 320, "conversions": 18, "cost": 3000, "revenue": 125000},
    {"campaign": "Email Campaign - Product Launch", "type": "Email", "status": "COMPLETED", "leads": 580, "conversions": 43, "cost": 7000, "revenue": 310000},
    {"campaign": "Trade Show - TechConf 2025", "type": "Event", "status": "COMPLETED", "leads": 94, "conversions": 9, "cost": 30000, "revenue": 94000},
    {"campaign": "Social Media - Brand Awareness", "type": "Social Media", "status": "ACTIVE", "leads": 450, "conversions": 11, "cost": 67000, "revenue": 67000},
    {"campaign": "PPC - Lead Generation", "type": "Paid Search", "status": "ACTIVE", "leads": 380, "conversions": 29, "cost": 18000, "revenue": 185000},
    {"campaign": "Content Marketing - Blog Series", "type": "Content", "status": "ACTIVE", "leads": 275, "conversions": 16, "cost": 10000, "revenue": 89000},
    {"campaign": "Partner Channel - Referrals", "type": "Partner", "status": "ACTIVE", "leads": 125, "conversions": 22, "cost": 4000, "revenue": 185000},
    {"campaign": "Retargeting Campaign", "type": "Display Ads", "status": "PAUSED", "leads": 196, "conversions": 7, "cost": 7000, "revenue": 42000},
]


# ---------------- Value helpers ----------------
def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_truthy(value: object) -> bool:
    """Loose truthiness for uploaded cells.

    None, blank strings, zero, False and NaN are all falsy.
    """
    if is_missing(value):
        return False
    if isinstance(value, str):
        return value != ""
    try:
        return bool(value)
    except (TypeError, ValueError):
        return True


def to_native(value: Any) -> Any:
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        out = float(value)
        return None if math.isnan(out) else out
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return value


def _integral(value: float) -> int | float:
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def to_number(value: object, default: int | float = 0) -> int | float:
    """Coerce a loosely-typed cell to a number; anything unusable becomes ``default``.

    Integral values come back as ``int`` so counts stay counts.
    """
    value = to_native(value)
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return default
        return _integral(value)
    s = str(value).strip()
    if not s:
        return default
    try:
        out = float(s)
    except ValueError:
        return default
    if math.isnan(out) or math.isinf(out):
        return default
    return _integral(out)


def round_nearest(value: float) -> int:
    """Round to the nearest integer; halves go toward +infinity (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def compute_roi(revenue: float, cost: float) -> int:
    if cost > 0:
        return round_nearest(((revenue - cost) / cost) * 100)
    return 0


def first_truthy(row: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    for key in keys:
        value = row.get(key)
        if is_truthy(value):
            return value
    return default


def first_present(row: Dict[str, Any], keys: List[str]) -> Optional[Any]:
    for key in keys:
        value = row.get(key)
        if not is_missing(value):
            return value
    return None


# ---------------- Frames ----------------
def campaign_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=CAMPAIGN_COLUMNS)
    df = pd.DataFrame.from_records(records)
    extra = [c for c in FUNNEL_STAGE_COLUMNS if c in df.columns]
    return df[CAMPAIGN_COLUMNS + extra]


def series_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=SERIES_COLUMNS)
    return pd.DataFrame.from_records(records)[SERIES_COLUMNS]


def frame_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame -> list of plain-Python row dicts (numpy scalars and NaN normalized)."""
    if df is None or df.empty:
        return []
    return [{k: to_native(v) for k, v in row.items()} for row in df.to_dict(orient="records")]


def sample_campaigns() -> pd.DataFrame:
    records = [dict(r, roi=compute_roi(r["revenue"], r["cost"])) for r in SAMPLE_CAMPAIGNS]
    return campaign_frame(records)


def sample_series() -> pd.DataFrame:
    return series_frame([dict(r) for r in SAMPLE_SERIES])


def format_currency_0(value: object) -> str:
    if is_missing(value):
        return "$0"
    return f"${float(value):,.0f}"
