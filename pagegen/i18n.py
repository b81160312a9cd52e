"""
Translation bundles attached to each page.

Bundles live in locales/<locale>/<namespace>.yaml as flat key -> text
mappings with i18next-style {{placeholders}}.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

log = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _read_namespace(path: Path) -> dict[str, str] | None:
    if not path.exists():
        return None
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Translation file {path} must be a mapping")
    return {str(k): str(v) for k, v in data.items()}


def load_translations(locales_dir: Path, locale: str, namespaces: Sequence[str],
                      fallback_locale: str | None = None) -> dict[str, dict[str, str]]:
    bundle: dict[str, dict[str, str]] = {}
    for ns in namespaces:
        strings = _read_namespace(locales_dir / locale / f"{ns}.yaml")
        if strings is None and fallback_locale and fallback_locale != locale:
            log.warning("No %s/%s translations, falling back to %s", locale, ns, fallback_locale)
            strings = _read_namespace(locales_dir / fallback_locale / f"{ns}.yaml")
        if strings is None:
            log.warning("No translations for namespace %s", ns)
        bundle[ns] = strings or {}
    return bundle


def translate(bundle: dict[str, dict[str, str]], key: str, namespace: str = "common",
              **values: Any) -> str:
    """Look up *key* and fill its {{placeholders}}; unknown keys render as the key."""
    text = bundle.get(namespace, {}).get(key, key)

    def _sub(m: re.Match) -> str:
        value = values.get(m.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER_RE.sub(_sub, text)
