from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from campaign_core.charts import funnel_chart, leads_line_chart, revenue_pie_chart, roi_bar_chart, to_vega_spec
from campaign_core.filters import DashboardFilters
from campaign_core.metrics_funnel import funnel_totals
from campaign_core.metrics_kpis import compute_kpis
from campaign_core.metrics_leads import leads_over_time
from campaign_core.metrics_revenue import revenue_by_type, roi_series
from campaign_core.metrics_table import project_table
from campaign_core.store import DashboardStore


def compute_views(store: DashboardStore, filters: DashboardFilters) -> Dict[str, Any]:
    """All derived chart series, recomputed from the store on every call."""
    return {
        "roi_bar": roi_series(store.campaigns),
        "funnel": funnel_totals(store.campaigns),
        "revenue_by_type": revenue_by_type(store.campaigns),
        "leads_over_time": leads_over_time(store.series, filters.date_range),
    }


def compute_overview(store: DashboardStore, filters: DashboardFilters) -> Dict[str, Any]:
    views = compute_views(store, filters)
    charts = {
        "roi_bar": to_vega_spec(roi_bar_chart(views["roi_bar"])),
        "funnel": to_vega_spec(funnel_chart(views["funnel"])),
        "revenue_by_type": to_vega_spec(revenue_pie_chart(views["revenue_by_type"])),
        "leads_over_time": to_vega_spec(leads_line_chart(views["leads_over_time"])),
    }
    return {
        "filters": asdict(filters),
        "kpis": compute_kpis(store.campaigns),
        "views": views,
        "charts": charts,
        "table": project_table(store.campaigns, filters).to_dict(),
        "preview": list(store.preview),
        "message": store.message,
    }
