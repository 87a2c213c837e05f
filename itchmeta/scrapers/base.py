"""Abstract base class for marketplace metadata scrapers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from itchmeta.models.metadata import MetadataRecord, SearchCandidate


class MarketplaceScraper(ABC):
    """Abstract interface for a marketplace whose game pages are scraped."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this marketplace (e.g. 'itchio')."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name (e.g. 'itch.io')."""
        ...

    @abstractmethod
    def search_games(self, query: str, max_results: int = 20) -> list[SearchCandidate]:
        """Search the marketplace and return candidates in result order."""
        ...

    @abstractmethod
    def get_game_metadata(self, game_url: str) -> MetadataRecord:
        """Fetch one game page and extract its metadata record."""
        ...
