"""Tests for the individual itch.io field parsers."""

from __future__ import annotations

from datetime import date

import pytest

from itchmeta.models.metadata import Link
from itchmeta.scrapers import parsers
from itchmeta.scrapers.document import Document


def page(body: str, head: str = "") -> Document:
    return Document.parse(f"<html><head>{head}</head><body>{body}</body></html>")


class TestDocument:
    def test_class_attribute_joined(self) -> None:
        node = page('<div class="game_cell has_cover">x</div>').select_one("div")
        assert node.attr("class") == "game_cell has_cover"
        assert node.kind == "div"

    def test_own_text(self) -> None:
        node = page("<table><tr><td>Genre <a>Action</a></td></tr></table>").select_one("td")
        assert node.own_text == "Genre"
        assert node.text == "Genre Action"


class TestTitle:
    def test_heading(self) -> None:
        assert parsers.parse_title(page('<h1 class="game_title">Cave Runner</h1>')) == "Cave Runner"

    def test_page_title_stripped(self) -> None:
        doc = page("", head="<title>Cave Runner by Pixel Hut - itch.io</title>")
        assert parsers.parse_title(doc) == "Cave Runner"

    def test_page_title_site_suffix_only(self) -> None:
        assert parsers.parse_title(page("", head="<title>Solo - itch.io</title>")) == "Solo"

    def test_missing(self) -> None:
        assert parsers.parse_title(page("<p>nothing</p>")) is None


class TestAuthor:
    def test_author_block(self) -> None:
        doc = page('<div class="game_author"><a href="https://dev.itch.io">Dev Studio</a></div>')
        assert parsers.parse_author(doc) == ("Dev Studio", "https://dev.itch.io")

    def test_user_link_without_href(self) -> None:
        assert parsers.parse_author(page('<a class="user_link">Solo Dev</a>')) == ("Solo Dev", None)

    def test_missing(self) -> None:
        assert parsers.parse_author(page("<div>no author</div>")) is None


class TestDescription:
    def test_formatted_block(self) -> None:
        doc = page('<div class="formatted_description"><p>Hello</p><p>World</p></div>')
        assert parsers.parse_description(doc) == "Hello\n\nWorld"

    def test_meta_fallback_when_block_empty(self) -> None:
        doc = page(
            '<div class="formatted_description"><img src="x.png"></div>',
            head='<meta name="description" content="Short one.">',
        )
        assert parsers.parse_description(doc) == "Short one."

    def test_missing(self) -> None:
        assert parsers.parse_description(page("")) is None


class TestCoverImage:
    def test_cover_container(self) -> None:
        doc = page('<div class="game_cover"><img src="//img.itch.zone/c.png"></div>')
        assert parsers.parse_cover_image(doc) == "https://img.itch.zone/c.png"

    def test_lazy_src(self) -> None:
        doc = page('<img class="screenshot_image" data-lazy_src="https://img.itch.zone/s.png">')
        assert parsers.parse_cover_image(doc) == "https://img.itch.zone/s.png"

    def test_social_preview_fallback(self) -> None:
        doc = page("", head='<meta property="og:image" content="//img.itch.zone/og.png">')
        assert parsers.parse_cover_image(doc) == "https://img.itch.zone/og.png"

    def test_placeholder_src_falls_back_to_social_preview(self) -> None:
        doc = page(
            '<div class="game_cover"><img src="data:image/gif;base64,AAAA"></div>',
            head='<meta property="og:image" content="https://img.itch.zone/og.png">',
        )
        assert parsers.parse_cover_image(doc) == "https://img.itch.zone/og.png"

    def test_placeholder_src_uses_lazy_src(self) -> None:
        doc = page('<div class="game_cover"><img src="data:image/gif;base64,AAAA" data-lazy_src="//img.itch.zone/c.png"></div>')
        assert parsers.parse_cover_image(doc) == "https://img.itch.zone/c.png"


class TestScreenshots:
    def test_links_and_images(self) -> None:
        doc = page(
            '<div class="screenshot_list">'
            '<a href="//img.itch.zone/a.png"><img src="//img.itch.zone/50x50/a.png"></a>'
            '<a href="https://img.itch.zone/b.JPG">b</a>'
            '<a href="https://dev.itch.io/page">not an image</a>'
            "</div>"
            '<div class="screenshots"><img src="//img.itch.zone/a.png"><img src="//img.itch.zone/c.webp"></div>'
        )
        assert parsers.parse_screenshots(doc) == [
            "https://img.itch.zone/a.png",
            "https://img.itch.zone/b.JPG",
            "https://img.itch.zone/c.webp",
        ]

    def test_cropped_thumbnail_variants_skipped(self) -> None:
        doc = page(
            '<div class="screenshots"><img src="//img.itch.zone/100x100c/a.png"><img src="//img.itch.zone/50x50%2Cb.png">'
            '<img src="//img.itch.zone/original/c.png"></div>'
        )
        assert parsers.parse_screenshots(doc) == ["https://img.itch.zone/original/c.png"]

    def test_cover_fallback(self) -> None:
        cover = "https://img.itch.zone/cover.png"
        assert parsers.parse_screenshots(page("<p>no shots</p>"), cover_url=cover) == [cover]

    def test_nothing(self) -> None:
        assert parsers.parse_screenshots(page("")) == []


class TestTagsAndGenres:
    def test_tags(self) -> None:
        doc = page(
            '<div class="game_tags"><a href="/t/1">Pixel Art</a><a href="/t/2"> </a><a href="/t/3">Roguelike</a></div>'
        )
        assert parsers.parse_tags(doc) == ["Pixel Art", "Roguelike"]

    def test_genres_inferred_from_tags(self) -> None:
        tags = ["Pixel Art", "Roguelike", "Difficult"]
        assert parsers.parse_genres(page(""), tags) == ["Roguelike"]

    def test_inference_is_substring_match(self) -> None:
        assert parsers.infer_genres(["Action-Adventure", "Cozy", "Open World"]) == ["Action-Adventure", "Open World"]

    def test_explicit_genre_row(self) -> None:
        doc = page('<table><tr><td>Genre</td><td><a href="#">Puzzle</a>, <a href="#">Casual</a></td></tr></table>')
        assert parsers.parse_genres(doc, ["Roguelike"]) == ["Puzzle", "Casual"]

    def test_explicit_genre_div(self) -> None:
        doc = page('<div>Genre: <a href="#">Horror</a></div>')
        assert parsers.parse_genres(doc, []) == ["Horror"]


class TestDates:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Jul 4, 2023 @ 10:00", date(2023, 7, 4)),
            ("July 4, 2023", date(2023, 7, 4)),
            ("4 Jul 2023", date(2023, 7, 4)),
            ("04 July 2023 @ 10:00 UTC", date(2023, 7, 4)),
            ("2023-07-04", date(2023, 7, 4)),
            ("07/04/2023", date(2023, 7, 4)),
            ("13/07/2023", date(2023, 7, 13)),
        ],
    )
    def test_formats(self, text: str, expected: date) -> None:
        assert parsers.parse_date(text) == expected

    @pytest.mark.parametrize("text", ["not a date", "", None, "@ 10:00"])
    def test_unparseable(self, text) -> None:
        assert parsers.parse_date(text) is None

    def test_labeled_row_priority(self) -> None:
        doc = page(
            "<table>"
            "<tr><td>Updated</td><td>Aug 2, 2023</td></tr>"
            "<tr><td>Published</td><td>Jul 4, 2023 @ 10:00</td></tr>"
            "</table>"
        )
        assert parsers.parse_release_date(doc) == date(2023, 7, 4)

    def test_abbr_fallback(self) -> None:
        doc = page('<span>Posted <abbr title="04 July 2023 @ 10:00 UTC">a while ago</abbr></span>')
        assert parsers.parse_release_date(doc) == date(2023, 7, 4)

    def test_unparseable_row(self) -> None:
        doc = page("<table><tr><td>Release date</td><td>not a date</td></tr></table>")
        assert parsers.parse_release_date(doc) is None


class TestCommunityScore:
    @pytest.mark.parametrize(("text", "expected"), [("4.5", 90), ("82", 82), ("150", None), ("0", 0), ("5", 100)])
    def test_rating_text(self, text: str, expected: int | None) -> None:
        doc = page(f'<span class="rating_value">{text}</span>')
        assert parsers.parse_community_score(doc) == expected

    def test_rated_title_fallback(self) -> None:
        doc = page('<div class="star_wrap" title="Rated 3.5 out of 5 stars"></div>')
        assert parsers.parse_community_score(doc) == 70

    def test_fallback_after_out_of_range(self) -> None:
        doc = page(
            '<div class="aggregate_rating">(150 ratings)</div>'
            '<div title="Rated 4.0 out of 5 stars"></div>'
        )
        assert parsers.parse_community_score(doc) == 80

    def test_missing(self) -> None:
        assert parsers.parse_community_score(page("<p>no rating</p>")) is None


class TestLinks:
    @pytest.mark.parametrize(
        ("url", "text", "expected"),
        [
            ("https://twitter.com/dev", "", "Twitter"),
            ("https://x.com/dev", "", "Twitter"),
            ("https://discord.gg/abc", "Chat", "Discord"),
            ("https://github.com/dev/game", "", "GitHub"),
            ("https://www.youtube.com/watch?v=1", "", "YouTube"),
            ("https://store.steampowered.com/app/1", "", "Steam"),
            ("https://www.dropbox.com/s/file", "Download", "Download"),
            ("https://example.com", "", "Website"),
        ],
    )
    def test_classify(self, url: str, text: str, expected: str) -> None:
        assert parsers.classify_link(url, text) == expected

    def test_outbound_only_and_deduplicated(self) -> None:
        doc = page(
            '<div class="links">'
            '<a href="https://itch.io/games">itch</a>'
            '<a href="https://github.com/dev/game">Source</a>'
            '<a href="/relative">rel</a>'
            '<a href="https://github.com/dev/game">Source again</a>'
            '<a href="https://dev.example.com">Home</a>'
            "</div>"
        )
        assert parsers.parse_additional_links(doc) == [
            Link("GitHub", "https://github.com/dev/game"),
            Link("Home", "https://dev.example.com"),
        ]
