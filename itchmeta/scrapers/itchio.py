"""itch.io scraper — search results listing and game page extraction."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus

from itchmeta.config import clamp_search_results
from itchmeta.logger import component_logger
from itchmeta.models.metadata import Link, MetadataRecord, SearchCandidate
from itchmeta.scrapers import parsers
from itchmeta.scrapers.base import MarketplaceScraper
from itchmeta.scrapers.cascade import css_text, first_match, node_attr
from itchmeta.scrapers.document import Document, Node
from itchmeta.scrapers.http import PageFetcher
from itchmeta.utils import ITCHIO_BASE_URL, absolute_url, collapse_whitespace

SEARCH_URL_TEMPLATE = ITCHIO_BASE_URL + "/search?q={query}"

# Result cells: primary title link, then alternates
_CELL_TITLE_LINK_SELECTORS = (
    'a[class*="title"], a[class*="game_link"]',
    'div[class="game_title"] a',
    'a[class="game_link"]',
)


def _cell_title_link(cell: Node) -> tuple[str, str] | None:
    for selector in _CELL_TITLE_LINK_SELECTORS:
        link = cell.select_one(selector)
        if link is None:
            continue
        title, url = collapse_whitespace(link.text), absolute_url(link.attr("href"))
        if title and url:
            return title, url

    # Loose structure: a game_title block with or without an inner link
    block = cell.select_one('div[class*="game_title"]')
    if block is not None:
        link = block.select_one("a")
        title = collapse_whitespace(link.text if link is not None else block.text)
        url = absolute_url(link.attr("href")) if link is not None else None
        if title and url:
            return title, url
    return None


_CELL_AUTHOR_STRATEGIES = (
    css_text('div[class*="game_author"] a'),
    css_text('a[class*="user_link"]'),
)


def _cell_thumbnail(cell: Node) -> str | None:
    for selector in ('div[class*="game_thumb"] img', 'img[class*="lazy_loaded"]', "img"):
        img = cell.select_one(selector)
        if img is not None:
            return absolute_url(node_attr(img, "data-lazy_src", "src"))
    return None


class ItchioScraper(MarketplaceScraper):
    """Search client and page extractor for itch.io.

    All network access goes through the injected *fetcher*, which returns
    ``None`` on failure.
    """

    def __init__(self, fetcher: PageFetcher, log: Any = None) -> None:
        self._fetch = fetcher
        self._log = log or component_logger("itchio")

    @property
    def name(self) -> str:
        return "itchio"

    @property
    def display_name(self) -> str:
        return "itch.io"

    # ── Search ──

    def search_games(self, query: str, max_results: int = 20) -> list[SearchCandidate]:
        """Search itch.io; results keep page order and are capped at *max_results*."""
        query = (query or "").strip()
        if not query:
            return []
        limit = clamp_search_results(max_results)

        html = self._fetch(SEARCH_URL_TEMPLATE.format(query=quote_plus(query)))
        if not html:
            return []

        cells = Document.parse(html).select("div.game_cell")
        if not cells:
            self._log.debug(f"No result cells for '{query}'")
            return []

        results: list[SearchCandidate] = []
        for cell in cells:
            if len(results) >= limit:
                break
            try:
                candidate = self._parse_search_cell(cell)
            except Exception as e:
                self._log.warning(f"Failed to parse search result: {e}")
                continue
            if candidate is not None:
                results.append(candidate)

        self._log.info(f"Search '{query}': {len(results)} result(s) from {len(cells)} cell(s)")
        return results

    def _parse_search_cell(self, cell: Node) -> SearchCandidate | None:
        found = _cell_title_link(cell)
        if found is None:
            self._log.debug("Dropping search cell without title link")
            return None
        title, url = found

        author = first_match(_CELL_AUTHOR_STRATEGIES, cell)
        text_node = cell.select_one('div[class*="game_text"]')
        description = collapse_whitespace(text_node.text) if text_node is not None else None

        if author:
            description = f"by {author}" + (f" - {description}" if description else "")

        return SearchCandidate(
            title=title,
            url=url,
            description=description or None,
            thumbnail_url=_cell_thumbnail(cell),
            author=author or None,
        )

    # ── Game page ──

    def get_game_metadata(self, game_url: str) -> MetadataRecord:
        """Fetch and extract one game page; an unreachable page gives an empty record."""
        html = self._fetch(game_url)
        if not html:
            return MetadataRecord.empty(game_url)
        return self.extract(Document.parse(html), game_url)

    def extract(self, doc: Node, game_url: str) -> MetadataRecord:
        """Run every field parser against *doc* and assemble the record."""
        links = [Link(self.display_name, game_url)]
        developers: list[str] = []

        author = self._run("author", parsers.parse_author, doc, game_url)
        if author:
            name, profile_url = author
            developers.append(name)
            if profile_url and profile_url != game_url:
                links.append(Link("Developer Page", profile_url))

        cover = self._run("cover", parsers.parse_cover_image, doc, game_url)
        tags = self._run("tags", parsers.parse_tags, doc) or []

        known = {link.url for link in links}
        for link in self._run("links", parsers.parse_additional_links, doc) or []:
            if link.url not in known:
                known.add(link.url)
                links.append(link)

        record = MetadataRecord(
            source_url=game_url,
            name=self._run("title", parsers.parse_title, doc),
            description=self._run("description", parsers.parse_description, doc),
            developers=developers,
            publishers=list(developers),
            genres=self._run("genres", parsers.parse_genres, doc, tags) or [],
            tags=tags,
            release_date=self._run("release date", parsers.parse_release_date, doc),
            cover_image_url=cover,
            screenshots=self._run("screenshots", parsers.parse_screenshots, doc, game_url, cover) or [],
            links=links,
            community_score=self._run("community score", parsers.parse_community_score, doc),
        )
        self._log.info(
            f"Extracted '{record.name}' from {game_url}: "
            f"{', '.join(record.available_fields()) or 'no fields'}"
        )
        return record

    def _run(self, field_name: str, parser: Any, *args: Any) -> Any:
        """Run one field parser; a crash only empties that field."""
        try:
            return parser(*args)
        except Exception as e:
            self._log.warning(f"Parsing {field_name} failed: {e}")
            return None
