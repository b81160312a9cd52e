"""
MapSwipe project catalogue: one centroid feature per project.

Source: https://apps.mapswipe.org/api/projects/projects_centroid.geojson
Each feature's properties carry the project id, name, status, progress,
area in km², number of contributors and the raw markdown description.
This is the identifier catalogue every page build depends on, so any
failure here is fatal to the build.
"""

from __future__ import annotations

import logging

from pagegen.models import ProjectSummary
from pagegen.source_base import DataSource

log = logging.getLogger(__name__)

DEFAULT_URL = "https://apps.mapswipe.org/api/projects/projects_centroid.geojson"


class ProjectCentroidsSource(DataSource):
    skipped: int = 0

    @property
    def name(self) -> str:
        return "project_centroids"

    @property
    def description(self) -> str:
        return "MapSwipe project centroids and summary metadata"

    def fetch(self) -> list[ProjectSummary]:
        log.info("Centroids: fetching %s …", self.url)
        features = self.get_feature_collection()

        projects: list[ProjectSummary] = []
        self.skipped = 0
        for feature in features:
            try:
                projects.append(ProjectSummary.from_feature(feature))
            except ValueError:
                self.skipped += 1

        if self.skipped:
            log.warning("Centroids: skipped %d features without a usable project_id", self.skipped)
        log.info("Centroids: %d projects (from %d features)", len(projects), len(features))
        return projects
