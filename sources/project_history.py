"""
MapSwipe project history: daily contribution time series of one project.

Source: https://apps.mapswipe.org/api/history/history_<project_id>.csv
The CSV rows are passed through to the page as-is (one dict per row).
"""

from __future__ import annotations

import csv
import io
import logging

from pagegen.models import HistoryRecord
from pagegen.source_base import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, DataSource, SourceError

log = logging.getLogger(__name__)

DEFAULT_URL_TEMPLATE = "https://apps.mapswipe.org/api/history/history_{project_id}.csv"


class ProjectHistorySource(DataSource):
    """History of a single project; fetch() returns zero or one record."""

    def __init__(self, url_template: str, project_id: str,
                 timeout: float = DEFAULT_TIMEOUT,
                 user_agent: str = DEFAULT_USER_AGENT) -> None:
        super().__init__(url_template.replace("{project_id}", project_id),
                         timeout=timeout, user_agent=user_agent)
        self.project_id = project_id

    @property
    def name(self) -> str:
        return "project_history"

    @property
    def description(self) -> str:
        return f"MapSwipe contribution history for project {self.project_id}"

    def fetch(self) -> list[HistoryRecord]:
        resp = self.get(accept="text/csv")
        try:
            rows = list(csv.DictReader(io.StringIO(resp.text)))
        except csv.Error as exc:
            raise SourceError(f"{self.name}: {self.url} is not valid CSV: {exc}") from exc

        log.debug("History %s: %d rows", self.project_id, len(rows))
        return [HistoryRecord(project_id=self.project_id, payload=rows)]
