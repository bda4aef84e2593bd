from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from campaign_core.data import sample_campaigns, sample_series
from campaign_core.ingestion import ParsedUpload
from campaign_core.normalize import NormalizedUpload, normalize_upload

logger = logging.getLogger(__name__)

RESET_MESSAGE = "Reset to sample data"


@dataclass
class DashboardStore:
    """The one mutable dataset behind the dashboard.

    Only ``apply_upload`` and ``reset`` replace the collections; every view
    reads them and recomputes from scratch.
    """

    campaigns: pd.DataFrame
    series: pd.DataFrame
    preview: List[Dict[str, Any]] = field(default_factory=list)
    message: str = ""
    failed_files: List[str] = field(default_factory=list)

    @classmethod
    def from_sample(cls) -> "DashboardStore":
        return cls(campaigns=sample_campaigns(), series=sample_series())

    def reset(self) -> None:
        self.campaigns = sample_campaigns()
        self.series = sample_series()
        self.preview = []
        self.failed_files = []
        self.message = RESET_MESSAGE
        logger.info("Dashboard data reset to sample")

    def apply_upload(self, upload: ParsedUpload) -> NormalizedUpload:
        result = normalize_upload(upload.rows, self.campaigns, self.series)
        self.campaigns = result.campaigns
        self.series = result.series
        self.preview = list(upload.preview)
        self.failed_files = upload.failed
        self.message = result.message
        return result
