"""
MapSwipe project geometries, the drawn area of interest of each project.

Source: https://apps.mapswipe.org/api/projects/projects_geom.geojson
Features carry the project id in their properties and the (multi)polygon
as geometry.  Projects without a drawn boundary simply have no feature.
"""

from __future__ import annotations

import logging

from pagegen.models import GeometryRecord
from pagegen.source_base import DataSource

log = logging.getLogger(__name__)

DEFAULT_URL = "https://apps.mapswipe.org/api/projects/projects_geom.geojson"


class ProjectGeometriesSource(DataSource):
    @property
    def name(self) -> str:
        return "project_geometries"

    @property
    def description(self) -> str:
        return "MapSwipe project area-of-interest geometries"

    def fetch(self) -> list[GeometryRecord]:
        log.info("Geometries: fetching %s …", self.url)
        features = self.get_feature_collection()

        records: list[GeometryRecord] = []
        for feature in features:
            props = feature.get("properties") or {}
            if not isinstance(props, dict):
                continue
            project_id = props.get("project_id")
            geometry = feature.get("geometry")
            # null geometry is legal GeoJSON; treat it as no boundary
            if project_id is None or not isinstance(geometry, dict):
                continue
            records.append(GeometryRecord(project_id=str(project_id), geometry=geometry))

        log.info("Geometries: %d records (from %d features)", len(records), len(features))
        return records
