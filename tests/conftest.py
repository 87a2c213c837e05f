"""Shared fakes and HTML fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from itchmeta.config import Config, reset_config
from itchmeta.models.metadata import SearchCandidate


class FakeFetcher:
    """In-memory page fetcher that records every requested URL."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[str] = []

    def __call__(self, url: str) -> str | None:
        self.calls.append(url)
        return self.pages.get(url)


class FakeChooser:
    """Scripted chooser: optionally re-queries, then picks an index or cancels."""

    def __init__(self, pick: int | None = 0, requery_text: str | None = None, image_pick: int | None = 0) -> None:
        self.pick = pick
        self.requery_text = requery_text
        self.image_pick = image_pick
        self.seen_candidates: list[list[SearchCandidate]] = []
        self.seed_queries: list[str] = []
        self.image_requests: list[list[str]] = []

    def choose_candidate(self, candidates, seed_query, requery):
        self.seed_queries.append(seed_query)
        self.seen_candidates.append(list(candidates))
        if self.requery_text is not None:
            candidates = requery(self.requery_text)
            self.seen_candidates.append(list(candidates))
        if self.pick is None or self.pick >= len(candidates):
            return None
        return candidates[self.pick]

    def choose_image(self, image_urls, title):
        self.image_requests.append(list(image_urls))
        if self.image_pick is None:
            return None
        return image_urls[self.image_pick]


def game_cell(i: int, with_title: bool = True, with_author: bool = True) -> str:
    title = f'<a class="title game_link" href="https://dev{i}.itch.io/game-{i}">Game {i}</a>' if with_title else ""
    author = f'<div class="game_author"><a href="https://dev{i}.itch.io">Dev {i}</a></div>' if with_author else ""
    return f"""
    <div class="game_cell has_cover lazy_images" data-game_id="{i}">
      <a class="thumb_link game_link" href="https://dev{i}.itch.io/game-{i}">
        <div class="game_thumb"><img class="lazy_loaded" data-lazy_src="https://img.itch.zone/thumb{i}.png"></div>
      </a>
      <div class="game_cell_data">
        <div class="game_title">{title}</div>
        <div class="game_text">Short text {i}</div>
        {author}
      </div>
    </div>"""


def search_page(cells: list[str]) -> str:
    return f"""<html><head><title>Search - itch.io</title></head><body>
    <div class="game_grid_widget browse_game_grid">{''.join(cells)}</div>
    </body></html>"""


GAME_URL = "https://pixelhut.itch.io/cave-runner"

GAME_PAGE = """<html>
<head>
  <title>Cave Runner by Pixel Hut - itch.io</title>
  <meta name="description" content="Run through caves.">
  <meta property="og:image" content="//img.itch.zone/og/cover.png">
</head>
<body>
  <div class="game_cover"><img src="//img.itch.zone/cover.png"></div>
  <h1 class="game_title">Cave Runner</h1>
  <div class="formatted_description user_formatted">
    <h2>About</h2><p>Dig &amp; run.</p><ul><li>Fast</li><li>Fun</li></ul>
  </div>
  <div class="screenshot_list">
    <a href="//img.itch.zone/shot1.png"><img src="//img.itch.zone/100x100/shot1.png"></a>
    <a href="https://img.itch.zone/shot2.jpg"><img src="//img.itch.zone/100x100/shot2.jpg"></a>
    <a href="https://img.itch.zone/shot1.png">again</a>
  </div>
  <div class="game_info_panel_widget">
    <table>
      <tr><td>Updated</td><td><abbr title="02 August 2023 @ 12:00 UTC">Aug 2, 2023</abbr></td></tr>
      <tr><td>Published</td><td><abbr title="04 July 2023 @ 10:00 UTC">Jul 4, 2023 @ 10:00</abbr></td></tr>
      <tr><td>Rating</td><td><div class="aggregate_rating"><span>4.5</span></div></td></tr>
      <tr><td>Author</td><td><a href="https://pixelhut.itch.io">Pixel Hut</a></td></tr>
      <tr><td>Genre</td><td><a href="https://itch.io/games/genre-platformer">Platformer</a>, <a href="https://itch.io/games/genre-action">Action</a></td></tr>
      <tr><td>Tags</td><td><a href="https://itch.io/games/tag-pixel-art">Pixel Art</a> <a href="https://itch.io/games/tag-roguelike">Roguelike</a></td></tr>
      <tr><td>Links</td><td>
        <a href="https://twitter.com/pixelhut">Twitter</a>
        <a href="https://pixelhut.example.com">Homepage</a>
        <a href="https://twitter.com/pixelhut">again</a>
        <a href="https://discord.gg/abc">Community</a>
      </td></tr>
    </table>
  </div>
</body>
</html>"""


@pytest.fixture(autouse=True)
def _clean_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_dir=tmp_path)
