"""itch.io metadata plugin — wires config, scraper and chooser into per-request providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from itchmeta.core.provider import ItchioMetadataProvider
from itchmeta.logger import component_logger
from itchmeta.models.metadata import MetadataField
from itchmeta.scrapers.http import HttpPageFetcher
from itchmeta.scrapers.itchio import ItchioScraper

if TYPE_CHECKING:
    from itchmeta.config import Config
    from itchmeta.core.chooser import CandidateChooser
    from itchmeta.models.request import MetadataRequestOptions
    from itchmeta.scrapers.base import MarketplaceScraper


class ItchioMetadataPlugin:
    """Entry point for hosts: one plugin, one provider per metadata request."""

    name = "itch.io Metadata"
    supported_fields: tuple[MetadataField, ...] = tuple(MetadataField)

    def __init__(
        self,
        config: Config,
        scraper: MarketplaceScraper | None = None,
        chooser: CandidateChooser | None = None,
    ) -> None:
        self._config = config
        self._scraper = scraper or ItchioScraper(HttpPageFetcher.from_config(config))
        self._chooser = chooser
        for problem in config.validate():
            component_logger("plugin").warning(f"Config: {problem}")

    @property
    def settings(self) -> Config:
        return self._config

    @property
    def scraper(self) -> MarketplaceScraper:
        return self._scraper

    def get_metadata_provider(self, options: MetadataRequestOptions) -> ItchioMetadataProvider:
        """Create a fresh provider; requests never share fetched state."""
        return ItchioMetadataProvider(
            options,
            self._config,
            self._scraper,
            chooser=self._chooser,
        )
