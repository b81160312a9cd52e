"""Write one page (HTML shell + page-data JSON) per build-matrix entry."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from pagegen.i18n import translate
from pagegen.models import PageData

log = logging.getLogger(__name__)

TEMPLATES = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class Page:
    project_id: str
    locale: str
    data: PageData
    translations: dict[str, dict[str, str]]

    def props(self) -> dict:
        return {**self.data.to_dict(), "locale": self.locale, "_translations": self.translations}


def _human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def make_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    env.filters["filesize"] = _human_size
    return env


def page_json(page: Page) -> str:
    return json.dumps(page.props(), indent=2, ensure_ascii=False)


def render_page(env: Environment, page: Page, site_title: str = "") -> str:
    template = env.get_template("project.html")

    def t(key: str, **values) -> str:
        return translate(page.translations, key, namespace="project", **values)

    return template.render(page=page, data=page.data, site_title=site_title, t=t)


def write_page(env: Environment, page: Page, dist_dir: Path, site_title: str = "") -> Path:
    """Write dist/<locale>/projects/<id>/{index.html,page-data.json}; returns the page dir."""
    page_dir = dist_dir / page.locale / "projects" / page.project_id
    page_dir.mkdir(parents=True, exist_ok=True)
    (page_dir / "index.html").write_text(render_page(env, page, site_title), encoding="utf-8")
    (page_dir / "page-data.json").write_text(page_json(page), encoding="utf-8")
    log.debug("Wrote %s", page_dir)
    return page_dir
