from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict, List, Literal

import pandas as pd

from campaign_core.filters import DashboardFilters
from campaign_core.metrics_overview import compute_views
from campaign_core.store import DashboardStore

ExportFormat = Literal["csv", "xlsx"]

EXPORT_VIEWS = ("roi_bar", "funnel", "revenue_by_type", "leads_over_time", "campaigns")
EXCEL_SHEET_NAME = "Data"
MIME_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    mime: str


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


def to_excel_bytes(df: pd.DataFrame, sheet_name: str = EXCEL_SHEET_NAME) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    out.seek(0)
    return out.getvalue()


def view_frame(store: DashboardStore, filters: DashboardFilters, view: str) -> pd.DataFrame:
    """Current in-memory rows for one exportable view."""
    if view not in EXPORT_VIEWS:
        raise ValueError(f"Unknown export view: {view!r}")
    if view == "campaigns":
        return store.campaigns.copy()
    rows: List[Dict[str, Any]] = compute_views(store, filters)[view]
    columns = ["date", "leads"] if view == "leads_over_time" else ["name", "value"]
    return pd.DataFrame(rows, columns=columns)


def export_view(store: DashboardStore, filters: DashboardFilters, view: str, fmt: ExportFormat = "csv") -> ExportFile:
    df = view_frame(store, filters, view)
    if fmt == "csv":
        content = to_csv_bytes(df)
    elif fmt == "xlsx":
        content = to_excel_bytes(df)
    else:
        raise ValueError(f"Unknown export format: {fmt!r}")
    return ExportFile(filename=f"{view}.{fmt}", content=content, mime=MIME_TYPES[fmt])
