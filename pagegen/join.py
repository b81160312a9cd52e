"""Join the per-project records of independently shaped datasets."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from pagegen.models import GeometryRecord, HistoryRecord, ProjectSummary

T = TypeVar("T", ProjectSummary, GeometryRecord, HistoryRecord)


class ProjectNotFound(LookupError):
    """The project id has no record in the project catalogue."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Could not get project {project_id}")
        self.project_id = project_id


@dataclass(frozen=True)
class JoinedProject:
    project: ProjectSummary
    geometry: dict[str, Any] | None
    history: Any


def find_first(records: Iterable[T], project_id: str) -> T | None:
    """Linear scan; the first record with a matching project_id wins."""
    return next((r for r in records if r.project_id == project_id), None)


def join_project(project_id: str,
                 projects: Iterable[ProjectSummary],
                 geometries: Iterable[GeometryRecord] = (),
                 histories: Iterable[HistoryRecord] = ()) -> JoinedProject:
    """Resolve the summary (required), geometry and history of one project.

    Raises ProjectNotFound if the catalogue has no matching summary.
    Missing geometry or history is not an error.
    """
    project = find_first(projects, project_id)
    if project is None:
        raise ProjectNotFound(project_id)

    geometry = find_first(geometries, project_id)
    history = find_first(histories, project_id)
    return JoinedProject(
        project=project,
        geometry=geometry.geometry if geometry else None,
        history=history.payload if history else None,
    )
