"""Site configuration loaded from site.yaml."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pagegen.downloads import PROBE_TIMEOUT
from pagegen.source_base import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from sources.project_centroids import DEFAULT_URL as CENTROIDS_URL
from sources.project_geometries import DEFAULT_URL as GEOMETRIES_URL
from sources.project_history import DEFAULT_URL_TEMPLATE as HISTORY_URL_TEMPLATE

ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = ROOT / "site.yaml"


@dataclass(frozen=True)
class SiteConfig:
    title: str
    locales: tuple[str, ...]
    default_locale: str
    namespaces: tuple[str, ...] = ("project", "common")
    locales_dir: Path = ROOT / "locales"
    centroids_url: str = CENTROIDS_URL
    geometries_url: str = GEOMETRIES_URL
    history_url_template: str = HISTORY_URL_TEMPLATE
    timeout: float = DEFAULT_TIMEOUT
    probe_timeout: float = PROBE_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.locales:
            raise ValueError("site config must list at least one locale")
        if self.default_locale not in self.locales:
            raise ValueError(
                f"default locale {self.default_locale!r} is not one of {list(self.locales)}"
            )
        if "{project_id}" not in self.history_url_template:
            raise ValueError("history URL template must contain {project_id}")

    def with_locales(self, locales: list[str]) -> SiteConfig:
        """Copy restricted to *locales*, keeping the default if it survives."""
        default = self.default_locale if self.default_locale in locales else locales[0]
        return SiteConfig(**{**self.__dict__, "locales": tuple(locales), "default_locale": default})


def site_config_from_dict(data: dict[str, Any], base_dir: Path = ROOT) -> SiteConfig:
    site = data.get("site") or {}
    sources = data.get("sources") or {}
    http = data.get("http") or {}

    locales = tuple(str(lng) for lng in site.get("locales") or ())
    kwargs: dict[str, Any] = {
        "title": str(site.get("title", "")),
        "locales": locales,
        "default_locale": str(site.get("default_locale") or (locales[0] if locales else "")),
    }
    if site.get("namespaces"):
        kwargs["namespaces"] = tuple(str(ns) for ns in site["namespaces"])
    if site.get("locales_dir"):
        kwargs["locales_dir"] = (base_dir / site["locales_dir"]).resolve()
    if sources.get("project_centroids"):
        kwargs["centroids_url"] = sources["project_centroids"]
    if sources.get("project_geometries"):
        kwargs["geometries_url"] = sources["project_geometries"]
    if sources.get("project_history"):
        kwargs["history_url_template"] = sources["project_history"]
    if http.get("timeout") is not None:
        kwargs["timeout"] = float(http["timeout"])
    if http.get("probe_timeout") is not None:
        kwargs["probe_timeout"] = float(http["probe_timeout"])
    if http.get("user_agent"):
        kwargs["user_agent"] = str(http["user_agent"])
    return SiteConfig(**kwargs)


def load_site_config(path: Path | str = DEFAULT_CONFIG) -> SiteConfig:
    """Load and validate site.yaml."""
    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Site config not found: {config_file}")
    data = yaml.safe_load(config_file.read_text()) or {}
    return site_config_from_dict(data, base_dir=config_file.resolve().parent)
