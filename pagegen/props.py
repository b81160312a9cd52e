"""Combine joined records, rendered description and download probes into PageData."""

from __future__ import annotations

import math
from collections.abc import Iterable

from pagegen.join import JoinedProject
from pagegen.models import AssetProbeResult, PageData


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity (12.5 -> 13, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def normalize_progress(progress: float | None) -> int | None:
    """Fraction 0..1 to an integer percentage; absent stays absent."""
    if progress is None:
        return None
    return round_half_up(progress * 100)


def normalize_area(area_sqkm: float | None) -> int:
    return round_half_up(area_sqkm if area_sqkm is not None else 0)


def assemble_page_data(joined: JoinedProject, description: str,
                       urls: Iterable[AssetProbeResult]) -> PageData:
    project = joined.project
    return PageData(
        name=project.name,
        description=description,
        status=project.status,
        total_progress=normalize_progress(project.progress),
        total_area=normalize_area(project.area_sqkm),
        total_contributors=project.number_of_users,
        project_geojson=joined.geometry,
        history=joined.history,
        urls=tuple(urls),
    )
