"""
Availability of the downloadable result files of a project.

Every project page lists the same 10 exports from the results host.  Each
one is probed with a HEAD request; a probe that fails for any reason is
reported as unavailable with size 0 and never affects the other probes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

import requests

from pagegen.models import AssetProbeResult, DownloadDescriptor
from pagegen.source_base import DEFAULT_USER_AGENT

log = logging.getLogger(__name__)

API_BASE = "https://apps.mapswipe.org/api"
PROBE_TIMEOUT = 10

# Upstream tags most of the CSV exports as "geojson"; kept as-is since the
# tag is only a display hint.
DOWNLOAD_CATALOGUE: tuple[DownloadDescriptor, ...] = (
    DownloadDescriptor(
        "aggregated_results", "csv",
        f"{API_BASE}/agg_results/agg_results_{{project_id}}.csv.gz",
    ),
    DownloadDescriptor(
        "aggregated_results_with_geometry", "geojson",
        f"{API_BASE}/agg_results/agg_results_{{project_id}}_geom.geojson.gz",
    ),
    DownloadDescriptor(
        "hot_tasking_manager_geometries", "geojson",
        f"{API_BASE}/hot_tm/hot_tm_{{project_id}}.geojson",
    ),
    DownloadDescriptor(
        "moderate_to_high_agreement_yes_maybe_geometries", "geojson",
        f"{API_BASE}/yes_maybe/yes_maybe_{{project_id}}.geojson",
    ),
    DownloadDescriptor(
        "groups", "geojson",
        f"{API_BASE}/groups/groups_{{project_id}}.csv.gz",
    ),
    DownloadDescriptor(
        "history", "geojson",
        f"{API_BASE}/history/history_{{project_id}}.csv",
    ),
    DownloadDescriptor(
        "results", "geojson",
        f"{API_BASE}/results/results_{{project_id}}.csv.gz",
    ),
    DownloadDescriptor(
        "tasks", "geojson",
        f"{API_BASE}/tasks/tasks_{{project_id}}.csv.gz",
    ),
    DownloadDescriptor(
        "users", "geojson",
        f"{API_BASE}/users/users_{{project_id}}.csv.gz",
    ),
    DownloadDescriptor(
        "area_of_interest", "geojson",
        f"{API_BASE}/project_geometries/project_geom_{{project_id}}.geojson",
    ),
)


def _content_length(headers) -> int:
    raw = headers.get("Content-Length")
    if raw is None:
        return 0
    try:
        return max(int(raw), 0)
    except (TypeError, ValueError):
        return 0


def probe_asset(descriptor: DownloadDescriptor, project_id: str,
                timeout: float = PROBE_TIMEOUT,
                user_agent: str = DEFAULT_USER_AGENT) -> AssetProbeResult:
    """HEAD one download URL.  Never raises for network or HTTP failures."""
    url = descriptor.url_for(project_id)
    ok = False
    size = 0
    try:
        resp = requests.head(url, headers={"User-Agent": user_agent},
                             timeout=timeout, allow_redirects=True)
        if resp.ok:
            ok = True
            size = _content_length(resp.headers)
        else:
            log.debug("Download %s for %s: HTTP %d", descriptor.name, project_id, resp.status_code)
    except requests.RequestException as exc:
        log.debug("Download %s for %s: %s", descriptor.name, project_id, exc)

    return AssetProbeResult(
        name=descriptor.name,
        file_type=descriptor.file_type,
        url=url,
        ok=ok,
        size=size,
    )


def probe_downloads(project_id: str,
                    catalogue: Sequence[DownloadDescriptor] = DOWNLOAD_CATALOGUE,
                    timeout: float = PROBE_TIMEOUT,
                    user_agent: str = DEFAULT_USER_AGENT) -> list[AssetProbeResult]:
    """Probe every catalogue entry concurrently; results keep catalogue order."""
    if not catalogue:
        return []

    with ThreadPoolExecutor(max_workers=len(catalogue)) as pool:
        futures = [
            pool.submit(probe_asset, d, project_id, timeout, user_agent)
            for d in catalogue
        ]
        results = [f.result() for f in futures]

    available = sum(1 for r in results if r.ok)
    log.info("Downloads %s: %d/%d available", project_id, available, len(results))
    return results
