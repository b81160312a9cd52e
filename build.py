#!/usr/bin/env python3
"""
build.py — MapSwipe static project page generator.

Builds one page per (project, locale) from the MapSwipe API: project
catalogue, geometries, history and the availability of each project's
downloadable results.

Usage:
    python build.py                          # build every project in every locale
    python build.py --projects a1b2,c3d4     # only these projects
    python build.py --locales en,de          # only these locales
    python build.py --keep-going             # skip failing pages
    python build.py --verbose                # debug logging
"""

import sys

from pagegen.cli import main

if __name__ == "__main__":
    sys.exit(main())
