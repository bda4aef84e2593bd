from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def roi_bar_chart(points: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_bar(color="#2563eb")
        .encode(
            x=alt.X("name:N", sort=None, title=None, axis=alt.Axis(labels=False, ticks=False)),
            y=alt.Y("value:Q", title="ROI %"),
            tooltip=[alt.Tooltip("name:N", title="Campaign"), alt.Tooltip("value:Q", title="ROI %")],
        )
    )


def funnel_chart(stages: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(stages, columns=["name", "value"])
    order = df["name"].tolist()
    bars = (
        alt.Chart(df)
        .mark_bar(color="#16a34a")
        .encode(
            y=alt.Y("name:N", sort=order, title=None),
            x=alt.X("value:Q", title=None, axis=alt.Axis(format="~s")),
            tooltip=["name:N", alt.Tooltip("value:Q", format=",")],
        )
    )
    labels = bars.mark_text(align="left", dx=4, color="#111827").encode(text=alt.Text("value:Q", format=","))
    return alt.layer(bars, labels)


def revenue_pie_chart(groups: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(groups, columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_arc(outerRadius=110)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", title="Type", sort=None),
            tooltip=[alt.Tooltip("name:N", title="Type"), alt.Tooltip("value:Q", title="Revenue", format="$,.0f")],
        )
    )


def leads_line_chart(points: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["date", "leads"])
    return (
        alt.Chart(df)
        .mark_line(point=True, strokeWidth=2)
        .encode(
            x=alt.X("date:O", title="Date"),
            y=alt.Y("leads:Q", title="Leads"),
            tooltip=["date:O", alt.Tooltip("leads:Q", format=",")],
        )
    )
