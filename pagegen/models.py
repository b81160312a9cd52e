"""Records flowing through the project page build."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

log = logging.getLogger(__name__)

KNOWN_STATUSES = frozenset({
    "active", "inactive", "finished", "archived", "draft", "tutorial",
})


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ProjectSummary:
    """One project from the centroid catalogue."""

    project_id: str
    name: str
    status: str
    progress: float | None = None
    area_sqkm: float | None = None
    number_of_users: int | None = None
    project_details: str = ""

    @classmethod
    def from_feature(cls, feature: dict[str, Any]) -> ProjectSummary:
        props = feature.get("properties") or {}
        if not isinstance(props, dict):
            raise ValueError("feature properties is not an object")
        project_id = props.get("project_id")
        if project_id is None or str(project_id).strip() == "":
            raise ValueError("feature has no project_id")

        status = str(props.get("status") or "")
        if status and status not in KNOWN_STATUSES:
            log.debug("Project %s has unrecognised status %r", project_id, status)

        return cls(
            project_id=str(project_id),
            name=str(props.get("name") or ""),
            status=status,
            progress=_optional_float(props.get("progress")),
            area_sqkm=_optional_float(props.get("area_sqkm")),
            number_of_users=_optional_int(props.get("number_of_users")),
            project_details=str(props.get("project_details") or ""),
        )


@dataclass(frozen=True)
class GeometryRecord:
    project_id: str
    geometry: dict[str, Any]


@dataclass(frozen=True)
class HistoryRecord:
    project_id: str
    payload: Any


@dataclass(frozen=True)
class DownloadDescriptor:
    """A downloadable result artifact, parameterised by project id."""

    name: str
    file_type: str  # display hint only, not the real content type
    url_template: str

    def url_for(self, project_id: str) -> str:
        return self.url_template.replace("{project_id}", project_id)


@dataclass(frozen=True)
class AssetProbeResult:
    name: str
    file_type: str
    url: str
    ok: bool
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.file_type,
            "url": self.url,
            "ok": self.ok,
            "size": self.size,
        }


@dataclass(frozen=True)
class PagePath:
    """One entry of the build matrix."""

    project_id: str
    locale: str


@dataclass(frozen=True)
class PageData:
    """Everything one project page renders, in page-props shape."""

    name: str
    description: str
    status: str
    total_progress: int | None
    total_area: int
    total_contributors: int | None
    project_geojson: dict[str, Any] | None = None
    history: Any = None
    urls: tuple[AssetProbeResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "totalProgress": self.total_progress,
            "totalArea": self.total_area,
            "totalContributors": self.total_contributors,
            "projectGeoJSON": self.project_geojson,
            "history": self.history,
            "urls": [u.to_dict() for u in self.urls],
        }
