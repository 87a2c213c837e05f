"""Field parsers for itch.io game pages.

Each parser recovers one attribute from a parsed page through an ordered
cascade of selectors. A miss is normal and yields ``None`` or an empty list;
parsers never raise on unexpected markup.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from urllib.parse import urlparse

from dateutil import parser as date_parser

from itchmeta.models.metadata import Link
from itchmeta.scrapers.cascade import css_attr, css_node, css_nodes, css_text, css_url, first_match, node_attr
from itchmeta.scrapers.document import Node
from itchmeta.utils import ITCHIO_BASE_URL, ITCHIO_DOMAIN, absolute_url, collapse_whitespace, html_to_text

# ── Title ──

_TITLE_SELECTORS = (
    'h1[class="game_title"]',
    'h1[class*="game_title"]',
    'div[class="game_title"] h1',
)
_SITE_SUFFIX_RE = re.compile(r"\s+-\s+itch\.io\s*$", re.IGNORECASE)


def clean_page_title(raw: str) -> str:
    """Strip the ``" by <author>"`` segment and the site suffix off a ``<title>``."""
    title = collapse_whitespace(raw)
    title = _SITE_SUFFIX_RE.sub("", title)
    if " by " in title:
        title = title.split(" by ", 1)[0]
    return title.strip()


def parse_title(doc: Node) -> str | None:
    title = first_match([css_text(s) for s in _TITLE_SELECTORS], doc)
    if title:
        return title
    node = doc.select_one("title")
    if node is None:
        return None
    return clean_page_title(node.text) or None


# ── Author ──

_AUTHOR_SELECTORS = (
    'div[class="game_author"] a',
    'a[class*="user_link"]',
    '[class*="game_info_panel_widget"] a[href*=".itch.io"]',
)


def _node_with_text(selector: str):
    def strategy(root: Node) -> Node | None:
        node = root.select_one(selector)
        return node if node is not None and node.text else None

    return strategy


def parse_author(doc: Node, page_url: str = "") -> tuple[str, str | None] | None:
    """Return ``(author name, profile URL)`` or ``None``."""
    node = first_match([_node_with_text(s) for s in _AUTHOR_SELECTORS], doc)
    if node is None:
        return None
    name = collapse_whitespace(node.text)
    profile = absolute_url(node.attr("href"), page_url or f"https://{ITCHIO_DOMAIN}")
    return name, profile


# ── Description ──

_DESCRIPTION_SELECTORS = (
    'div[class*="formatted_description"]',
    'div[class="game_description"]',
    'div[class*="page_widget"] div[class*="inner_column"]',
)


def _rich_text(selector: str):
    def strategy(root: Node) -> str | None:
        node = root.select_one(selector)
        return html_to_text(node.inner_html) if node is not None else None

    return strategy


def parse_description(doc: Node) -> str | None:
    description = first_match([_rich_text(s) for s in _DESCRIPTION_SELECTORS], doc)
    if description:
        return description
    short = first_match(
        [
            css_attr('meta[name="description"]', "content"),
            css_attr('meta[property="og:description"]', "content"),
        ],
        doc,
    )
    return collapse_whitespace(short) or None


# ── Cover image ──

_COVER_SELECTORS = (
    "div.game_cover img",
    'div[class*="header"] img[class*="game_cover"]',
    'img[class*="screenshot_image"]',
)


def parse_cover_image(doc: Node, page_url: str = "") -> str | None:
    base = page_url or ITCHIO_BASE_URL
    strategies = [css_url(selector, "src", "data-lazy_src", base=base) for selector in _COVER_SELECTORS]
    strategies.append(css_url('meta[property="og:image"]', "content", base=base))
    return first_match(strategies, doc)


# ── Screenshots ──

_IMAGE_EXT_RE = re.compile(r"\.(?:png|jpe?g|gif|webp)(?:[?#]|$)", re.IGNORECASE)
_THUMBNAIL_RE = re.compile(r"/(?:50x50|100x100)")
_SCREENSHOT_LINK_STRATEGIES = (
    css_nodes('div[class*="screenshot_container"] a'),
    css_nodes('div[class*="screenshot_list"] a'),
    css_nodes('a[class*="screenshot_link"]'),
)


def parse_screenshots(doc: Node, page_url: str = "", cover_url: str | None = None) -> list[str]:
    """Collect full-size screenshot URLs, deduplicated, in page order.

    Falls back to ``[cover_url]`` when the page has no screenshots at all.
    """
    screenshots: list[str] = []

    for anchor in first_match(_SCREENSHOT_LINK_STRATEGIES, doc) or []:
        url = absolute_url(anchor.attr("href"), page_url)
        if url and _IMAGE_EXT_RE.search(url) and url not in screenshots:
            screenshots.append(url)

    for img in doc.select('div[class*="screenshot"] img'):
        url = absolute_url(node_attr(img, "src", "data-lazy_src"), page_url)
        if not url or url in screenshots or _THUMBNAIL_RE.search(url):
            continue
        screenshots.append(url)

    if not screenshots and cover_url:
        screenshots.append(cover_url)
    return screenshots


# ── Tags / genres ──

GENRE_KEYWORDS = (
    "action", "adventure", "rpg", "puzzle", "platformer", "shooter",
    "strategy", "simulation", "horror", "visual novel", "racing", "sports",
    "fighting", "survival", "roguelike", "metroidvania", "sandbox", "open world",
)

_TAG_STRATEGIES = (
    css_nodes('[class*="game_info_panel_widget"] a[href*="/tag/"]'),
    css_nodes('a[href*="/games/tag-"]'),
    css_nodes('div[class*="game_tags"] a'),
)


def _link_texts(nodes: list[Node]) -> list[str]:
    texts = (collapse_whitespace(n.text) for n in nodes)
    return [t for t in texts if t]


def parse_tags(doc: Node) -> list[str]:
    return _link_texts(first_match(_TAG_STRATEGIES, doc) or [])


def _labeled_row(doc: Node, label: str) -> Node | None:
    """First ``<tr>`` having a cell whose own text contains *label*."""
    return doc.find(
        lambda row: any(label in cell.own_text for cell in row.children("td")),
        kind="tr",
    )


def infer_genres(tags: list[str]) -> list[str]:
    """Tags that look like genres, by keyword. A heuristic, not a taxonomy."""
    return [tag for tag in tags if any(k in tag.lower() for k in GENRE_KEYWORDS)]


def parse_genres(doc: Node, tags: list[str]) -> list[str]:
    """Explicit ``Genre`` field if present, otherwise genres inferred from *tags*."""
    row = _labeled_row(doc, "Genre") or doc.find(
        lambda div: "Genre:" in div.own_text, kind="div"
    )
    genres = _link_texts(row.select("a")) if row is not None else []
    if not genres and tags:
        genres = infer_genres(tags)
    return genres


# ── Release date ──

DATE_LABELS = ("Release date", "Published", "Updated")
DATE_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
)
_TIME_SUFFIX_RE = re.compile(r"@.*$", re.DOTALL)


def parse_date(text: str | None) -> date | None:
    """Parse a calendar date; ``"Jul 4, 2023 @ 10:00"`` gives 2023-07-04.

    Known formats are tried in order, then a general parse. Unparseable
    text gives ``None``.
    """
    if not text:
        return None
    text = collapse_whitespace(_TIME_SUFFIX_RE.sub("", text))
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        return None


def _row_value(row: Node) -> str | None:
    cells = row.children("td")
    if not cells:
        return None
    return (cells[1] if len(cells) > 1 else cells[-1]).text


def parse_release_date(doc: Node) -> date | None:
    released = None
    for label in DATE_LABELS:
        row = _labeled_row(doc, label)
        if row is not None:
            released = parse_date(_row_value(row))
            break
    if released is None:
        released = parse_date(css_attr("abbr[title]", "title")(doc))
    return released


# ── Community score ──

_RATING_SELECTORS = (
    'div[class*="aggregate_rating"]',
    'span[class*="rating_value"]',
    'div[itemprop="aggregateRating"] span[itemprop="ratingValue"]',
)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_RATED_RE = re.compile(r"Rated\s+(\d+(?:\.\d+)?)\s+out\s+of\s+5", re.IGNORECASE)


def score_from_rating(value: float) -> int | None:
    """Normalise a rating to 0-100.

    Values up to 5 are stars, values in (5, 100] are already percentages,
    anything else is discarded.
    """
    if value < 0:
        return None
    if value <= 5:
        return round(value * 20)
    if value <= 100:
        return round(value)
    return None


def score_from_text(text: str | None) -> int | None:
    match = _NUMBER_RE.search(text or "")
    return score_from_rating(float(match.group())) if match else None


def parse_community_score(doc: Node) -> int | None:
    node = first_match([css_node(s) for s in _RATING_SELECTORS], doc)
    if node is not None:
        score = score_from_text(node.text)
        if score is not None:
            return score

    for titled in doc.select('[title*="Rated"]'):
        match = _RATED_RE.search(titled.attr("title") or "")
        if match:
            stars = float(match.group(1))
            return round(stars * 20) if stars <= 5 else None
    return None


# ── Additional links ──

_KNOWN_SITES = (
    (("twitter.com", "x.com"), "Twitter"),
    (("discord",), "Discord"),
    (("github.com",), "GitHub"),
    (("youtube.com", "youtu.be"), "YouTube"),
    (("steam",), "Steam"),
)


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def _host_matches(host: str, token: str) -> bool:
    if "." not in token:
        return token in host
    return host == token or host.endswith("." + token)


def is_marketplace_url(url: str) -> bool:
    return _host_matches(_host(url), ITCHIO_DOMAIN)


def classify_link(url: str, text: str = "") -> str:
    """Display name for an outbound link, by known domain, else its text."""
    host = _host(url)
    for tokens, name in _KNOWN_SITES:
        if any(_host_matches(host, token) for token in tokens):
            return name
    return collapse_whitespace(text) or "Website"


def _outbound(selector: str):
    def strategy(root: Node) -> list[Node]:
        return [
            a for a in root.select(selector)
            if (a.attr("href") or "").startswith("http") and not is_marketplace_url(a.attr("href"))
        ]

    return strategy


_LINK_STRATEGIES = (
    _outbound('[class*="game_info_panel_widget"] a[href]'),
    _outbound('div[class*="links"] a[href]'),
)


def parse_additional_links(doc: Node) -> list[Link]:
    """Outbound (non-itch.io) links, named by site, first occurrence of each URL."""
    links: list[Link] = []
    seen: set[str] = set()
    for anchor in first_match(_LINK_STRATEGIES, doc) or []:
        url = anchor.attr("href").strip()
        if url in seen:
            continue
        seen.add(url)
        links.append(Link(classify_link(url, anchor.text), url))
    return links
