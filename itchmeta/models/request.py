"""Request models — what the caller already knows about a game."""

from __future__ import annotations

from dataclasses import dataclass, field

from itchmeta.models.metadata import Link


@dataclass
class GameData:
    """Identifying data of the catalog entry being enriched."""

    name: str = ""
    game_id: str = ""
    description: str = ""
    source: str = ""  # library/source name, e.g. "itch.io"
    links: list[Link] = field(default_factory=list)


@dataclass
class MetadataRequestOptions:
    """One metadata request.

    ``is_background_download`` marks automated runs where no human can be
    asked to pick between search results.
    """

    game_data: GameData = field(default_factory=GameData)
    is_background_download: bool = False
