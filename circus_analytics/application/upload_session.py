"""Caller-owned upload buffers with the readiness gate for the pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

from circus_analytics.application.dashboard_service import DashboardSummary, run_dashboard_pipeline
from circus_analytics.config import PipelineConfig

logger = logging.getLogger(__name__)


@dataclass
class UploadSession:
    """Holds the most recent decoded upload per source.

    Each ``set_*`` call replaces its buffer wholesale; nothing is merged.
    """

    config: PipelineConfig
    target_rows: List[Mapping[str, Any]] | None = None
    reference_rows: List[Mapping[str, Any]] | None = None

    def set_target(self, rows: Sequence[Mapping[str, Any]]) -> None:
        self.target_rows = list(rows)

    def set_reference(self, rows: Sequence[Mapping[str, Any]]) -> None:
        self.reference_rows = list(rows)

    def is_ready(self) -> bool:
        if self.target_rows is None:
            return False
        if self.config.requires_reference and self.reference_rows is None:
            return False
        return True

    def missing_inputs(self) -> List[str]:
        missing: List[str] = []
        if self.target_rows is None:
            missing.append("target")
        if self.config.requires_reference and self.reference_rows is None:
            missing.append("reference")
        return missing

    def run_if_ready(self) -> DashboardSummary | None:
        if not self.is_ready():
            logger.debug("Dashboard %s waiting for inputs: %s", self.config.variant, self.missing_inputs())
            return None
        return run_dashboard_pipeline(self.target_rows, self.reference_rows, self.config)
