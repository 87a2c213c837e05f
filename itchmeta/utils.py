"""Shared utility functions."""

from __future__ import annotations

import html
import re
from urllib.parse import urljoin

ITCHIO_DOMAIN = "itch.io"
ITCHIO_BASE_URL = f"https://{ITCHIO_DOMAIN}"

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_P_CLOSE_RE = re.compile(r"</p\s*>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(r"</(?:div|li)\s*>", re.IGNORECASE)
_LI_OPEN_RE = re.compile(r"<li(?:\s[^>]*)?>", re.IGNORECASE)
_H_OPEN_RE = re.compile(r"<h[1-6](?:\s[^>]*)?>", re.IGNORECASE)
_H_CLOSE_RE = re.compile(r"</h[1-6]\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_HSPACE_RE = re.compile(r"[ \t\xa0]+")
_LINE_EDGE_RE = re.compile(r" ?\n ?")
_MANY_NEWLINES_RE = re.compile(r"\n{3,}")


def html_to_text(fragment: str | None) -> str:
    """Convert a rich-text HTML fragment into plain text.

    Line breaks and paragraph ends become newlines, list items get a bullet,
    headings are set off by a blank line. Everything else is stripped and
    entities are decoded. Never raises; empty input gives ``""``.
    """
    if not fragment:
        return ""

    text = _BR_RE.sub("\n", fragment)
    text = _P_CLOSE_RE.sub("\n\n", text)
    text = _BLOCK_CLOSE_RE.sub("\n", text)
    text = _LI_OPEN_RE.sub("• ", text)
    text = _H_OPEN_RE.sub("\n\n", text)
    text = _H_CLOSE_RE.sub("\n", text)

    text = _TAG_RE.sub("", text)
    text = html.unescape(text)

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HSPACE_RE.sub(" ", text)
    text = _LINE_EDGE_RE.sub("\n", text)
    text = _MANY_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def absolute_url(url: str | None, base: str = ITCHIO_BASE_URL) -> str | None:
    """Make *url* absolute.

    Protocol-relative ``//host/path`` becomes ``https://host/path``; relative
    paths are joined onto *base*. Absolute URLs pass through unchanged.
    """
    if not url:
        return None
    url = url.strip()
    if not url:
        return None
    if url.startswith("//"):
        return "https:" + url
    if url.startswith(("http://", "https://")):
        return url
    if url.startswith(("data:", "javascript:", "mailto:", "#")):
        return None
    return urljoin(base, url)


def collapse_whitespace(text: str | None) -> str:
    """Squeeze runs of whitespace to single spaces and trim."""
    if not text:
        return ""
    return " ".join(text.split())
