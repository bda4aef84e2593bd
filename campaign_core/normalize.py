"""Row normalizer: classify uploaded rows and map them onto the canonical frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

import pandas as pd

from campaign_core.data import (
    DEFAULT_STATUS,
    DEFAULT_TYPE,
    FUNNEL_STAGE_COLUMNS,
    campaign_frame,
    compute_roi,
    first_present,
    first_truthy,
    is_truthy,
    series_frame,
    to_native,
    to_number,
)

logger = logging.getLogger(__name__)

SERIES_KEYS = frozenset({"date", "leads"})
CAMPAIGN_KEYS = ("campaign", "Campaign")

# canonical field -> accepted header variants, in lookup order
FIELD_ALIASES: Dict[str, List[str]] = {
    "type": ["type", "Type"],
    "status": ["status", "Status"],
    "leads": ["leads", "Leads"],
    "conversions": ["conversions", "Conversions"],
    "cost": ["cost", "Cost"],
    "revenue": ["revenue", "Revenue"],
}


class RowShape(str, Enum):
    TIME_SERIES = "time_series"
    CAMPAIGN = "campaign"
    BOTH = "both"
    NEITHER = "neither"

    @property
    def has_series(self) -> bool:
        return self in (RowShape.TIME_SERIES, RowShape.BOTH)

    @property
    def has_campaigns(self) -> bool:
        return self in (RowShape.CAMPAIGN, RowShape.BOTH)


@dataclass(frozen=True)
class NormalizedUpload:
    shape: RowShape
    campaigns: pd.DataFrame
    series: pd.DataFrame
    campaigns_updated: bool
    series_updated: bool
    row_count: int

    @property
    def message(self) -> str:
        return f"Uploaded {self.row_count} rows"


def looks_like_series(rows: Sequence[Dict[str, Any]]) -> bool:
    present = set()
    for row in rows:
        present.update(SERIES_KEYS.intersection(row.keys()))
        if present == SERIES_KEYS:
            return True
    return False


def looks_like_campaigns(rows: Sequence[Dict[str, Any]]) -> bool:
    return any(key in row for row in rows for key in CAMPAIGN_KEYS)


def classify_rows(rows: Sequence[Dict[str, Any]]) -> RowShape:
    series = looks_like_series(rows)
    campaigns = looks_like_campaigns(rows)
    if series and campaigns:
        return RowShape.BOTH
    if series:
        return RowShape.TIME_SERIES
    if campaigns:
        return RowShape.CAMPAIGN
    return RowShape.NEITHER


def normalize_series(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    points = [
        {"date": str(to_native(row["date"]))[:10], "leads": to_number(row.get("leads"))}
        for row in rows
        if is_truthy(row.get("date"))
    ]
    return series_frame(points)


def _campaign_record(row: Dict[str, Any], stage_columns: List[str]) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "campaign": to_native(first_truthy(row, list(CAMPAIGN_KEYS))),
        "type": to_native(first_truthy(row, FIELD_ALIASES["type"], DEFAULT_TYPE)),
        "status": to_native(first_truthy(row, FIELD_ALIASES["status"], DEFAULT_STATUS)),
    }
    for name in ("leads", "conversions", "cost", "revenue"):
        record[name] = to_number(first_present(row, FIELD_ALIASES[name]))
    record["roi"] = compute_roi(record["revenue"], record["cost"])
    for name in stage_columns:
        value = row.get(name)
        record[name] = to_number(value) if is_truthy(value) else None
    return record


def normalize_campaigns(rows: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    stage_columns = [c for c in FUNNEL_STAGE_COLUMNS if any(c in row for row in rows)]
    records = [
        _campaign_record(row, stage_columns)
        for row in rows
        if any(is_truthy(row.get(key)) for key in CAMPAIGN_KEYS)
    ]
    return campaign_frame(records)


def normalize_upload(
    rows: Sequence[Dict[str, Any]],
    campaigns: pd.DataFrame,
    series: pd.DataFrame,
) -> NormalizedUpload:
    """Map uploaded rows onto the canonical collections.

    Each collection is replaced wholesale when the upload yields at least one
    row for it; otherwise the current collection is kept as-is.
    """
    shape = classify_rows(rows)
    new_series, series_updated = series, False
    new_campaigns, campaigns_updated = campaigns, False

    if shape.has_series:
        mapped = normalize_series(rows)
        if not mapped.empty:
            new_series, series_updated = mapped, True

    if shape.has_campaigns:
        mapped = normalize_campaigns(rows)
        if not mapped.empty:
            new_campaigns, campaigns_updated = mapped, True

    logger.info(
        "Normalized %d uploaded rows as %s (campaigns updated=%s, series updated=%s)",
        len(rows),
        shape.value,
        campaigns_updated,
        series_updated,
    )
    return NormalizedUpload(
        shape=shape,
        campaigns=new_campaigns,
        series=new_series,
        campaigns_updated=campaigns_updated,
        series_updated=series_updated,
        row_count=len(rows),
    )
