"""Metadata provider — resolves one request to an itch.io page and exposes its fields."""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from itchmeta.core.url_resolver import resolve_itchio_url
from itchmeta.logger import component_logger
from itchmeta.models.metadata import Link, MetadataField, MetadataRecord, SearchCandidate

if TYPE_CHECKING:
    from itchmeta.config import Config
    from itchmeta.core.chooser import CandidateChooser
    from itchmeta.models.request import MetadataRequestOptions
    from itchmeta.scrapers.base import MarketplaceScraper


class ResolutionState(StrEnum):
    NOT_FETCHED = "not_fetched"
    RESOLVING = "resolving"
    DIRECT_EXTRACT = "direct_extract"
    SEARCHING = "searching"
    DISAMBIGUATING = "disambiguating"
    EXTRACTING = "extracting"
    RESOLVED = "resolved"


class ItchioMetadataProvider:
    """On-demand metadata for a single request.

    The first field read resolves the request (direct URL, or search and
    disambiguation) and caches the extracted record. Later reads are served
    from that record without fetching again. Any failure resolves to an
    empty record.
    """

    def __init__(
        self,
        options: MetadataRequestOptions,
        config: Config,
        scraper: MarketplaceScraper,
        chooser: CandidateChooser | None = None,
        log: Any = None,
    ) -> None:
        self._options = options
        self._config = config
        self._scraper = scraper
        self._chooser = chooser
        self._log = log or component_logger("provider")
        self._state = ResolutionState.NOT_FETCHED
        self._record: MetadataRecord | None = None

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def is_interactive(self) -> bool:
        return not self._options.is_background_download and self._chooser is not None

    @property
    def record(self) -> MetadataRecord:
        self._ensure_data_fetched()
        return self._record or MetadataRecord.empty()

    def reset(self) -> None:
        """Drop the cached record so the next read resolves again."""
        self._state = ResolutionState.NOT_FETCHED
        self._record = None

    # ── Resolution ──

    def _ensure_data_fetched(self) -> None:
        if self._state is ResolutionState.RESOLVED:
            return
        record = None
        try:
            record = self._resolve()
        except Exception as e:
            self._log.error(f"Failed to fetch itch.io metadata: {e}")
        self._record = record or MetadataRecord.empty()
        self._state = ResolutionState.RESOLVED

    def _resolve(self) -> MetadataRecord | None:
        self._state = ResolutionState.RESOLVING
        game = self._options.game_data

        url = resolve_itchio_url(game.links, game.game_id, game.source)
        if url:
            self._state = ResolutionState.DIRECT_EXTRACT
            self._log.info(f"Using known itch.io page {url}")
            return self._extract(url)

        name = (game.name or "").strip()
        if not name:
            self._log.debug("No itch.io link and no name, nothing to look up")
            return None

        self._state = ResolutionState.SEARCHING
        candidates = self._search(name)
        if not candidates:
            self._log.info(f"No itch.io results for '{name}'")
            return None

        chosen = self._select(candidates, name)
        if chosen is None:
            self._log.info(f"No itch.io game selected for '{name}'")
            return None
        return self._extract(chosen.url)

    def _search(self, query: str) -> list[SearchCandidate]:
        return self._scraper.search_games(query, self._config.max_search_results)

    def _select(self, candidates: list[SearchCandidate], query: str) -> SearchCandidate | None:
        """Pick one candidate: the only one, the top one, or the human's choice."""
        if len(candidates) == 1:
            return candidates[0]

        if self._options.is_background_download:
            if self._config.prefer_first_search_result:
                self._log.debug(f"Taking first of {len(candidates)} results (preferred)")
            else:
                self._log.debug(f"Taking first of {len(candidates)} results (background request)")
            return candidates[0]

        if self._chooser is None:
            self._log.warning("No chooser available for interactive request, taking first result")
            return candidates[0]

        self._state = ResolutionState.DISAMBIGUATING
        return self._chooser.choose_candidate(candidates, query, self._search)

    def _extract(self, url: str) -> MetadataRecord:
        self._state = ResolutionState.EXTRACTING
        return self._scraper.get_game_metadata(url)

    # ── Field accessors ──

    @property
    def available_fields(self) -> list[MetadataField]:
        return self.record.available_fields()

    def get_name(self) -> str | None:
        return self.record.name or None

    def get_description(self) -> str | None:
        """Harvested description, unless the caller's own one should be kept."""
        description = self.record.description
        if not description:
            return None
        if self._config.prefer_itchio_description or not self._options.game_data.description:
            return description
        return None

    def get_developers(self) -> list[str] | None:
        return list(self.record.developers) or None

    def get_publishers(self) -> list[str] | None:
        return list(self.record.publishers) or None

    def get_genres(self) -> list[str] | None:
        return list(self.record.genres) or None

    def get_tags(self) -> list[str] | None:
        return list(self.record.tags) or None

    def get_release_date(self) -> date | None:
        return self.record.release_date

    def get_cover_image(self) -> str | None:
        return self.record.cover_image_url or None

    def get_screenshots(self) -> list[str] | None:
        if not self._config.download_screenshots:
            return None
        return list(self.record.screenshots) or None

    def get_background_image(self) -> str | None:
        """First screenshot, or the user's pick among them when interactive."""
        screenshots = self.get_screenshots()
        if not screenshots:
            return None
        if not self.is_interactive:
            return screenshots[0]
        return self._chooser.choose_image(screenshots, "Select background image")

    def get_links(self) -> list[Link] | None:
        return list(self.record.links) or None

    def get_community_score(self) -> int | None:
        return self.record.community_score
