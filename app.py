import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from campaign_core.data import format_currency_0
from campaign_core.export import export_view
from campaign_core.filters import (
    DashboardFilters,
    normalize_filters,
    previous_page,
    next_page,
    with_date_range,
    with_search,
    with_sort,
)
from campaign_core.ingestion import UploadedFile, parse_uploads
from campaign_core.metrics_overview import compute_overview
from campaign_core.metrics_table import TABLE_COLUMNS, project_table
from campaign_core.store import DashboardStore

logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body


def export_buttons(view: str, filters: DashboardFilters):
    store: DashboardStore = st.session_state["store"]
    cols = st.columns(2)
    for col, fmt, label in ((cols[0], "csv", "Export CSV"), (cols[1], "xlsx", "Export")):
        exported = export_view(store, filters, view, fmt)
        col.download_button(label, data=exported.content, file_name=exported.filename, mime=exported.mime, key=f"export_{view}_{fmt}")


def _files_signature(files) -> tuple:
    return tuple((f.name, f.size) for f in files or [])


def handle_upload(files, kind: str) -> None:
    sig_key = f"_{kind}_upload_sig"
    if not files:
        st.session_state.pop(sig_key, None)
        return
    signature = _files_signature(files)
    if st.session_state.get(sig_key) == signature:
        return
    st.session_state[sig_key] = signature
    store: DashboardStore = st.session_state["store"]
    try:
        parsed = parse_uploads([UploadedFile(name=f.name, content=f.getvalue()) for f in files], kind)  # type: ignore[arg-type]
        store.apply_upload(parsed)
    except Exception as exc:
        logger.exception("upload failed")
        st.error(f"Upload failed: {exc}")


def reset_dashboard():
    st.session_state["store"].reset()
    st.session_state["filters"] = normalize_filters({})
    # Files still in an uploader stay handled; removing and re-adding one uploads it again.
    for kind in ("csv", "excel"):
        st.session_state[f"_{kind}_upload_sig"] = _files_signature(st.session_state.get(f"{kind}_files"))


def clear_dates():
    st.session_state["start_date"] = None
    st.session_state["end_date"] = None


# ---------- UI setup ----------
st.set_page_config(page_title="Campaigns Performance Overview", layout="wide")
inject_base_styles()

if "store" not in st.session_state:
    st.session_state["store"] = DashboardStore.from_sample()
if "filters" not in st.session_state:
    st.session_state["filters"] = normalize_filters({})
for _key in ("start_date", "end_date"):
    st.session_state.setdefault(_key, None)

store: DashboardStore = st.session_state["store"]

head_cols = st.columns([6, 2, 2, 1])
head_cols[0].title("Campaigns Performance Overview 2025")
start_date = head_cols[1].date_input("Start date", key="start_date")
end_date = head_cols[2].date_input("End date", key="end_date")
if start_date or end_date:
    head_cols[3].button("Clear", on_click=clear_dates)
st.session_state["filters"] = with_date_range(st.session_state["filters"], start_date, end_date)

# ----- Uploads -----
upload_cols = st.columns([3, 3, 1])
csv_files = upload_cols[0].file_uploader("Upload CSV (multi)", type=["csv"], accept_multiple_files=True, key="csv_files")
excel_files = upload_cols[1].file_uploader("Upload Excel (multi)", type=["xlsx", "xls"], accept_multiple_files=True, key="excel_files")
handle_upload(csv_files, "csv")
handle_upload(excel_files, "excel")
upload_cols[2].button("Reset", on_click=reset_dashboard)

if store.message:
    st.success(store.message)
if store.failed_files:
    st.warning(f"Could not read: {', '.join(store.failed_files)}")

filters: DashboardFilters = st.session_state["filters"]
overview = compute_overview(store, filters)
kpis = overview["kpis"]

# ----- KPI tiles -----
kpi_cols = st.columns(4)
kpi_cols[0].metric("Total Campaigns Active", kpis["total_campaigns"])
kpi_cols[1].metric("Total Campaign Revenue", format_currency_0(kpis["revenue"]))
kpi_cols[2].metric("Average ROI", f"{kpis['blended_roi']}%", help="ROI of total revenue over total cost.")
kpi_cols[3].metric("Total Leads Generated", f"{kpis['leads']:,}")

# ----- Charts -----
CHART_TITLES = [
    ("roi_bar", "Campaign ROI Comparison"),
    ("funnel", "Campaign Performance Funnel"),
    ("revenue_by_type", "Revenue by Campaign Type"),
    ("leads_over_time", "Leads Generated Over Time"),
]
for row_start in (0, 2):
    chart_cols = st.columns(2)
    for col, (view, title) in zip(chart_cols, CHART_TITLES[row_start:row_start + 2]):
        with col:
            with card(title):
                export_buttons(view, filters)
                st.vega_lite_chart(overview["charts"][view], use_container_width=True)

# ----- Upload preview -----
if store.preview:
    with card("Uploaded Data Preview (first 10 rows)"):
        st.dataframe(pd.DataFrame(store.preview), hide_index=True, use_container_width=True)


# ----- Campaign table -----
def sort_label(key: str, label: str, active: Optional[str], direction: str) -> str:
    if key != active:
        return label
    return f"{label} {'▲' if direction == 'asc' else '▼'}"


with card("Campaign Performance Summary"):
    top = st.columns([4, 2])
    search = top[0].text_input("Search campaigns...", value=filters.search)
    if search != filters.search:
        st.session_state["filters"] = filters = with_search(filters, search)
    with top[1]:
        export_buttons("campaigns", filters)

    header_cols = st.columns(len(TABLE_COLUMNS))
    for col, (key, label) in zip(header_cols, TABLE_COLUMNS):
        if col.button(sort_label(key, label, filters.sort.key, filters.sort.direction), key=f"sort_{key}"):
            st.session_state["filters"] = with_sort(filters, key)
            st.rerun()

    table = project_table(store.campaigns, filters).to_dict()
    display = pd.DataFrame(table["rows"], columns=[k for k, _ in TABLE_COLUMNS])
    for c in ("cost", "revenue"):
        display[c] = display[c].apply(format_currency_0)
    display["roi"] = display["roi"].apply(lambda v: f"{v}%")
    display.columns = [label for _, label in TABLE_COLUMNS]
    st.dataframe(display, hide_index=True, use_container_width=True)

    footer = st.columns([4, 1, 1])
    footer[0].caption(f"Showing {table['first_row']}–{table['last_row']} of {table['total']}")
    if footer[1].button("Previous", disabled=not table["has_previous"]):
        st.session_state["filters"] = previous_page(filters)
        st.rerun()
    if footer[2].button("Next", disabled=not table["has_next"]):
        st.session_state["filters"] = next_page(filters, table["total"])
        st.rerun()
