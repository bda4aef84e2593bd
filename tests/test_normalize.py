import pandas as pd

from campaign_core.data import frame_records, sample_campaigns, sample_series
from campaign_core.normalize import (
    RowShape,
    classify_rows,
    normalize_campaigns,
    normalize_series,
    normalize_upload,
)


def test_classification_checks_keys_across_all_rows():
    assert classify_rows([{"date": "2025-01-01", "x": 1}, {"leads": 2}]) is RowShape.TIME_SERIES
    assert classify_rows([{"Campaign": "A"}]) is RowShape.CAMPAIGN
    assert classify_rows([{"campaign": "A", "date": "2025-01-01", "leads": 3}]) is RowShape.BOTH
    assert classify_rows([{"date": "2025-01-01"}]) is RowShape.NEITHER
    assert classify_rows([]) is RowShape.NEITHER


def test_series_rows_are_truncated_to_day_and_coerced():
    df = normalize_series(
        [
            {"date": "2025-03-15T10:00:00", "leads": "abc"},
            {"date": None, "leads": 5},
            {"date": "2025-03-16", "leads": 7},
            {"date": pd.Timestamp("2025-03-17"), "leads": 8.0},
        ]
    )
    assert frame_records(df) == [
        {"date": "2025-03-15", "leads": 0},
        {"date": "2025-03-16", "leads": 7},
        {"date": "2025-03-17", "leads": 8},
    ]


def test_campaign_rows_use_aliases_and_defaults():
    df = normalize_campaigns(
        [
            {"Campaign": "Spring Promo", "Type": "Email", "Status": "PAUSED", "Leads": 40, "Cost": 100, "Revenue": 250},
            {"campaign": "Bare"},
            {"campaign": "", "leads": 99},
            {"campaign": "Bad numbers", "leads": "n/a", "cost": "", "revenue": None},
        ]
    )
    records = frame_records(df)
    assert [r["campaign"] for r in records] == ["Spring Promo", "Bare", "Bad numbers"]
    promo, bare, bad = records
    assert promo["type"] == "Email" and promo["status"] == "PAUSED"
    assert promo["leads"] == 40 and promo["roi"] == 150
    assert bare["type"] == "Other" and bare["status"] == "ACTIVE"
    assert bare["leads"] == 0 and bare["roi"] == 0
    assert bad["leads"] == 0 and bad["cost"] == 0 and bad["revenue"] == 0


def test_explicit_funnel_columns_are_carried():
    df = normalize_campaigns([{"campaign": "A", "leads": 10, "mqls": 9}, {"campaign": "B", "leads": 5}])
    records = frame_records(df)
    assert records[0]["mqls"] == 9
    assert records[1]["mqls"] is None
    assert "sqls" not in df.columns


def test_campaign_upload_leaves_series_untouched():
    campaigns, series = sample_campaigns(), sample_series()
    result = normalize_upload([{"campaign": "Only", "cost": 10, "revenue": 20}], campaigns, series)
    assert result.shape is RowShape.CAMPAIGN
    assert result.campaigns_updated and not result.series_updated
    assert result.series is series
    assert [r["campaign"] for r in frame_records(result.campaigns)] == ["Only"]


def test_series_upload_leaves_campaigns_untouched():
    campaigns, series = sample_campaigns(), sample_series()
    rows = [{"date": "2026-01-01", "leads": 1}, {"date": "2026-02-01", "leads": 2}]
    result = normalize_upload(rows, campaigns, series)
    assert result.shape is RowShape.TIME_SERIES
    assert result.campaigns is campaigns
    assert len(result.series) == 2


def test_empty_mapping_retains_prior_data():
    campaigns, series = sample_campaigns(), sample_series()
    rows = [{"date": "", "leads": 3, "campaign": None}, {"date": None, "Campaign": ""}]
    result = normalize_upload(rows, campaigns, series)
    assert result.shape is RowShape.BOTH
    assert not result.campaigns_updated and not result.series_updated
    assert result.campaigns is campaigns and result.series is series


def test_message_counts_all_ingested_rows():
    rows = [{"foo": 1}, {"foo": 2}, {"campaign": "A"}]
    result = normalize_upload(rows, sample_campaigns(), sample_series())
    assert result.message == "Uploaded 3 rows"
