"""Build matrix: every catalogued project in every supported locale."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pagegen.models import PagePath, ProjectSummary


def enumerate_paths(projects: Iterable[ProjectSummary],
                    locales: Sequence[str]) -> list[PagePath]:
    """Return one PagePath per (project, locale) pair.

    A project id listed twice in the catalogue still yields one page per
    locale.
    """
    seen: set[str] = set()
    paths: list[PagePath] = []
    for project in projects:
        if project.project_id in seen:
            continue
        seen.add(project.project_id)
        paths.extend(PagePath(project_id=project.project_id, locale=lng) for lng in dict.fromkeys(locales))
    return paths
