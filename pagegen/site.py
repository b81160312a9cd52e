"""
Build every (project, locale) page of the site.

A SiteBuilder lives for one build run.  The project catalogue and the
geometry collection are fetched at most once per run and then only read;
everything a page needs beyond that is fetched per project.
"""

from __future__ import annotations

import hashlib
import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from pagegen.config import ROOT, SiteConfig
from pagegen.content import render_description
from pagegen.downloads import DOWNLOAD_CATALOGUE, probe_downloads
from pagegen.i18n import load_translations
from pagegen.join import ProjectNotFound, join_project
from pagegen.models import GeometryRecord, HistoryRecord, PageData, PagePath, ProjectSummary
from pagegen.paths import enumerate_paths
from pagegen.props import assemble_page_data
from pagegen.render import Page, make_environment, write_page
from pagegen.source_base import SourceError
from sources.project_centroids import ProjectCentroidsSource
from sources.project_geometries import ProjectGeometriesSource
from sources.project_history import ProjectHistorySource

log = logging.getLogger(__name__)


def git_sha() -> str:
    """Return short git SHA of HEAD, or a content-hash fallback."""
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=ROOT, stderr=subprocess.DEVNULL,
        ).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    # No git repo: hash the build's own sources like git would
    h = hashlib.sha1()
    for subdir in ("pagegen", "sources", "locales"):
        base = ROOT / subdir
        if not base.is_dir():
            continue
        for p in sorted(base.rglob("*")):
            if not p.is_file() or p.suffix not in (".py", ".html", ".yaml"):
                continue
            data = p.read_bytes()
            # Mimic git blob header: "blob <size>\0<content>"
            blob = f"blob {len(data)}\0".encode() + data
            h.update(hashlib.sha1(blob).digest())
    return h.hexdigest()[:8]


@dataclass
class BuildReport:
    sha: str
    built: list[PagePath] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sha": self.sha,
            "pages": len(self.built),
            "projects": len({p.project_id for p in self.built}),
            "failed": self.failed,
        }


class SiteBuilder:
    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self._projects: list[ProjectSummary] | None = None
        self._geometries: list[GeometryRecord] | None = None
        self._page_data: dict[str, PageData] = {}

    def projects(self) -> list[ProjectSummary]:
        """The project catalogue.  SourceError here is fatal to the build."""
        if self._projects is None:
            source = ProjectCentroidsSource(
                self.config.centroids_url,
                timeout=self.config.timeout,
                user_agent=self.config.user_agent,
            )
            self._projects = source.fetch()
        return self._projects

    def geometries(self) -> list[GeometryRecord]:
        if self._geometries is None:
            source = ProjectGeometriesSource(
                self.config.geometries_url,
                timeout=self.config.timeout,
                user_agent=self.config.user_agent,
            )
            try:
                self._geometries = source.fetch()
            except SourceError as exc:
                log.warning("Geometries unavailable, pages will have no map: %s", exc)
                self._geometries = []
        return self._geometries

    def history(self, project_id: str) -> list[HistoryRecord]:
        source = ProjectHistorySource(
            self.config.history_url_template,
            project_id,
            timeout=self.config.timeout,
            user_agent=self.config.user_agent,
        )
        try:
            return source.fetch()
        except SourceError as exc:
            log.warning("History unavailable for %s: %s", project_id, exc)
            return []

    def get_static_paths(self) -> list[PagePath]:
        return enumerate_paths(self.projects(), self.config.locales)

    def project_data(self, project_id: str) -> PageData:
        """Join, render and probe one project.  Raises ProjectNotFound."""
        cached = self._page_data.get(project_id)
        if cached is not None:
            return cached

        projects = self.projects()
        # fail before any per-project fetches
        if not any(p.project_id == project_id for p in projects):
            raise ProjectNotFound(project_id)

        joined = join_project(
            project_id,
            projects,
            self.geometries(),
            self.history(project_id),
        )
        description = render_description(joined.project.project_details)
        urls = probe_downloads(
            project_id,
            DOWNLOAD_CATALOGUE,
            timeout=self.config.probe_timeout,
            user_agent=self.config.user_agent,
        )
        data = assemble_page_data(joined, description, urls)
        self._page_data[project_id] = data
        return data

    def build_page(self, project_id: str, locale: str) -> Page:
        if locale not in self.config.locales:
            raise ValueError(f"Unsupported locale {locale!r}")
        translations = load_translations(
            self.config.locales_dir,
            locale,
            self.config.namespaces,
            fallback_locale=self.config.default_locale,
        )
        return Page(
            project_id=project_id,
            locale=locale,
            data=self.project_data(project_id),
            translations=translations,
        )

    def build_site(self, dist_dir: Path, project_ids: set[str] | None = None,
                   keep_going: bool = False) -> BuildReport:
        """Build and write every page.

        A page that cannot be built, or a requested project id missing from
        the catalogue, aborts the run unless *keep_going* is set, in which
        case it is logged, left out and recorded in the report.
        """
        report = BuildReport(sha=git_sha())
        log.info("=" * 60)
        log.info("Building site: %s [%s]", self.config.title, report.sha)
        log.info("=" * 60)

        paths = self.get_static_paths()
        if project_ids:
            missing = sorted(project_ids - {p.project_id for p in paths})
            if missing and not keep_going:
                raise ProjectNotFound(missing[0])
            for project_id in missing:
                log.warning("Project %s is not in the catalogue, skipping", project_id)
                report.failed[project_id] = str(ProjectNotFound(project_id))
            paths = [p for p in paths if p.project_id in project_ids]
        log.info("Build matrix: %d pages (%d locales)", len(paths), len(self.config.locales))

        env = make_environment()
        dist_dir.mkdir(parents=True, exist_ok=True)
        for path in paths:
            key = f"{path.locale}/{path.project_id}"
            if path.project_id in report.failed:
                continue
            try:
                page = self.build_page(path.project_id, path.locale)
                write_page(env, page, dist_dir, site_title=self.config.title)
            except (ProjectNotFound, OSError, ValueError) as exc:
                if not keep_going:
                    raise
                log.exception("Failed to build page %s", key)
                report.failed[path.project_id] = str(exc)
                continue
            report.built.append(path)

        manifest = dist_dir / "manifest.json"
        manifest.write_text(json.dumps(report.to_dict(), indent=2))
        log.info("Build complete → %s/ (%d pages, %d failed projects, sha=%s)",
                 dist_dir, len(report.built), len(report.failed), report.sha)
        return report
