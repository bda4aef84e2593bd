from __future__ import annotations

from typing import Any, Callable, Dict, List

import pandas as pd
import pytest

from campaign_core.data import campaign_frame, compute_roi
from campaign_core.store import DashboardStore


def _campaign(**overrides: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "campaign": "Campaign",
        "type": "Email",
        "status": "ACTIVE",
        "leads": 0,
        "conversions": 0,
        "cost": 0,
        "revenue": 0,
    }
    record.update(overrides)
    record["roi"] = compute_roi(record["revenue"], record["cost"])
    return record


@pytest.fixture
def make_campaigns() -> Callable[..., pd.DataFrame]:
    def _make(*records: Dict[str, Any]) -> pd.DataFrame:
        rows: List[Dict[str, Any]] = [_campaign(**r) for r in records]
        return campaign_frame(rows)

    return _make


@pytest.fixture
def store() -> DashboardStore:
    return DashboardStore.from_sample()
