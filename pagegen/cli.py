"""Command line entry point for the static project page build."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pagegen.config import DEFAULT_CONFIG, ROOT, load_site_config
from pagegen.join import ProjectNotFound
from pagegen.site import SiteBuilder
from pagegen.source_base import SourceError

log = logging.getLogger("build")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="MapSwipe: build static project pages")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="Path to site.yaml")
    parser.add_argument("--dist", type=Path, default=ROOT / "dist", help="Output directory")
    parser.add_argument("--projects", type=str, default=None, help="Comma-separated project id filter")
    parser.add_argument("--locales", type=str, default=None, help="Comma-separated locale override")
    parser.add_argument("--keep-going", action="store_true",
                        help="Skip pages that fail instead of aborting the build")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_site_config(args.config)
        if args.locales:
            locales = [lng for lng in args.locales.split(",") if lng]
            unknown = set(locales) - set(config.locales)
            if not locales or unknown:
                parser.error(f"Unknown locale(s) {sorted(unknown)}. Available: {', '.join(config.locales)}")
            config = config.with_locales(locales)
    except (FileNotFoundError, ValueError) as exc:
        log.error("Invalid site config: %s", exc)
        return 2

    selected = {p for p in args.projects.split(",") if p} if args.projects else None

    builder = SiteBuilder(config)
    try:
        report = builder.build_site(args.dist, project_ids=selected, keep_going=args.keep_going)
    except SourceError as exc:
        log.error("Project catalogue unavailable, aborting build: %s", exc)
        return 1
    except ProjectNotFound as exc:
        log.error("%s", exc)
        return 1

    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
