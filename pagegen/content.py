"""
Project description rendering: markdown with a YAML frontmatter header.

The header is stripped and discarded; only the body is rendered.  Raw HTML
embedded in the markdown is escaped rather than passed through, and link or
image URLs whose scheme is not http, https or mailto are removed, so the
output is safe to inline into the page.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit

import markdown
import yaml
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE

log = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
ESCAPED_NEWLINE_RE = re.compile(r"\\n")

SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})
URL_ATTRIBUTES = ("href", "src")
# backslash escapes are stashed as STX <codepoint> ETX until serialisation
_STASHED_ESCAPE_RE = re.compile("\x02([0-9]+)\x03")
# browsers ignore these inside a URL, e.g. "java\tscript:"
_URL_IGNORED_RE = re.compile(r"[\x00-\x20\x7f]+")


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    body = text[match.end():]
    try:
        metadata = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError as exc:
        log.debug("Unparsable frontmatter, stripping it anyway: %s", exc)
        return {}, body
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, body


def normalize_newlines(body: str) -> str:
    """Turn literal backslash-n sequences into real line breaks."""
    return ESCAPED_NEWLINE_RE.sub("\n", body)


def is_safe_url(url: str) -> bool:
    """True for relative URLs and http, https or mailto ones.

    The URL is decoded the way a browser would see it after serialisation
    (stashed escapes and character references resolved) before the scheme
    is checked.
    """
    decoded = url.replace(AMP_SUBSTITUTE, "&")
    decoded = _STASHED_ESCAPE_RE.sub(lambda m: chr(int(m.group(1))), decoded)
    decoded = _URL_IGNORED_RE.sub("", html.unescape(decoded))
    try:
        scheme = urlsplit(decoded).scheme
    except ValueError:
        return False
    return not scheme or scheme.lower() in SAFE_URL_SCHEMES


class UnsafeUrlStripper(Treeprocessor):
    """Drop href/src attributes that would run script or load odd schemes."""

    def run(self, root):
        for elem in root.iter():
            for attr in URL_ATTRIBUTES:
                value = elem.get(attr)
                if value is not None and not is_safe_url(value):
                    log.debug("Dropping unsafe %s on <%s>", attr, elem.tag)
                    del elem.attrib[attr]
        return None


def _markdown() -> markdown.Markdown:
    md = markdown.Markdown(output_format="html")
    # without these, raw HTML is treated as text and escaped
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    # after "inline" (20), which creates the links and images
    md.treeprocessors.register(UnsafeUrlStripper(md), "unsafe_urls", 5)
    return md


def render_markdown(body: str) -> str:
    try:
        return _markdown().convert(body)
    except RecursionError:
        log.warning("Markdown nested too deeply (%d chars), rendering as plain text", len(body))
        return f"<p>{html.escape(body)}</p>"


def render_description(text: str,
                       renderer: Callable[[str], str] = render_markdown) -> str:
    """Render a raw project description to HTML, frontmatter removed."""
    _, body = split_frontmatter(text or "")
    return renderer(normalize_newlines(body))
