"""URL resolver — find an itch.io page URL in data the caller already has."""

from __future__ import annotations

from typing import Iterable

from itchmeta.models.metadata import Link
from itchmeta.utils import ITCHIO_BASE_URL, ITCHIO_DOMAIN

SOURCE_NAMES = ("itch", "itch.io")


def normalize_itchio_url(url: str) -> str:
    """Make an itch.io path absolute; absolute http(s) URLs pass unchanged."""
    url = url.strip()
    if url.startswith(("http://", "https://")):
        return url
    if url.startswith("//"):
        return "https:" + url
    # Scheme-less host form, e.g. "dev.itch.io/game"
    host = url.split("/", 1)[0].lower()
    if host == ITCHIO_DOMAIN or host.endswith("." + ITCHIO_DOMAIN):
        return "https://" + url
    if url.startswith("/"):
        return ITCHIO_BASE_URL + url
    return f"{ITCHIO_BASE_URL}/{url}"


def resolve_itchio_url(
    links: Iterable[Link] | None = None,
    game_id: str | None = None,
    source: str | None = None,
) -> str | None:
    """Canonical itch.io page URL for a catalog entry, or ``None``.

    Checked in order, first hit wins: an existing link on itch.io, a game id
    containing the domain, and a game id from a library whose source is
    itch.io.
    """
    for link in links or ():
        if link.url and ITCHIO_DOMAIN in link.url:
            return normalize_itchio_url(link.url)

    game_id = (game_id or "").strip()
    if ITCHIO_DOMAIN in game_id:
        return normalize_itchio_url(game_id)

    if (source or "").strip().lower() in SOURCE_NAMES and game_id:
        return normalize_itchio_url(game_id)

    return None
