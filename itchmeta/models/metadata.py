"""Metadata models — search candidates, extracted records and field names."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum


class MetadataField(StrEnum):
    """Metadata fields the itch.io provider can populate."""

    NAME = "name"
    DESCRIPTION = "description"
    DEVELOPERS = "developers"
    PUBLISHERS = "publishers"
    GENRES = "genres"
    TAGS = "tags"
    RELEASE_DATE = "release_date"
    COVER_IMAGE = "cover_image"
    BACKGROUND_IMAGE = "background_image"
    LINKS = "links"
    COMMUNITY_SCORE = "community_score"


@dataclass(frozen=True)
class Link:
    """A named outbound link."""

    name: str
    url: str


@dataclass
class SearchCandidate:
    """One entry of an itch.io search results page."""

    title: str
    url: str
    description: str | None = None
    thumbnail_url: str | None = None
    author: str | None = None


@dataclass(frozen=True)
class MetadataRecord:
    """Metadata extracted from a single itch.io game page.

    Assembled once by the page extractor and never mutated afterwards.
    List fields are always lists, never ``None``.
    """

    source_url: str = ""
    name: str | None = None
    description: str | None = None
    developers: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    release_date: date | None = None
    cover_image_url: str | None = None
    screenshots: list[str] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    community_score: int | None = None

    @classmethod
    def empty(cls, source_url: str = "") -> MetadataRecord:
        return cls(source_url=source_url)

    @property
    def is_empty(self) -> bool:
        return not self.available_fields()

    def available_fields(self) -> list[MetadataField]:
        """Fields whose value is non-empty on this record, in declaration order."""
        present = {
            MetadataField.NAME: bool(self.name),
            MetadataField.DESCRIPTION: bool(self.description),
            MetadataField.DEVELOPERS: bool(self.developers),
            MetadataField.PUBLISHERS: bool(self.publishers),
            MetadataField.GENRES: bool(self.genres),
            MetadataField.TAGS: bool(self.tags),
            MetadataField.RELEASE_DATE: self.release_date is not None,
            MetadataField.COVER_IMAGE: bool(self.cover_image_url),
            MetadataField.BACKGROUND_IMAGE: bool(self.screenshots),
            MetadataField.LINKS: bool(self.links),
            MetadataField.COMMUNITY_SCORE: self.community_score is not None,
        }
        return [f for f in MetadataField if present[f]]
