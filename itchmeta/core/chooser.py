"""Chooser protocol — lets a human pick between search candidates."""

from __future__ import annotations

from typing import Callable, Protocol

from itchmeta.models.metadata import SearchCandidate

Requery = Callable[[str], list[SearchCandidate]]


class CandidateChooser(Protocol):
    """Interactive selection, used only when a request is not a background one."""

    def choose_candidate(
        self,
        candidates: list[SearchCandidate],
        seed_query: str,
        requery: Requery,
    ) -> SearchCandidate | None:
        """Show *candidates*; *requery* runs a fresh search for new query text.

        Returns the picked candidate, or ``None`` if the user cancelled.
        """
        ...

    def choose_image(self, image_urls: list[str], title: str) -> str | None:
        """Pick one image URL, or ``None`` if the user cancelled."""
        ...
