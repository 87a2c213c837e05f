"""Candidate chooser dialogs — Qt implementation of the interactive chooser."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QHBoxLayout, QListWidgetItem, QVBoxLayout, QWidget
from qfluentwidgets import (
    CaptionLabel,
    ListWidget,
    PrimaryPushButton,
    PushButton,
    SearchLineEdit,
    SubtitleLabel,
)

from itchmeta.core.chooser import Requery
from itchmeta.models.metadata import SearchCandidate


class CandidateDialog(QDialog):
    """Lists search candidates; the search box re-runs the search in place."""

    def __init__(
        self,
        candidates: list[SearchCandidate],
        seed_query: str,
        requery: Requery,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._requery = requery
        self._candidates: list[SearchCandidate] = []

        self.setWindowTitle("Select itch.io game")
        self.setMinimumSize(560, 460)
        layout = QVBoxLayout(self)

        layout.addWidget(SubtitleLabel("Select itch.io game", self))

        self._search = SearchLineEdit(self)
        self._search.setText(seed_query)
        self._search.searchSignal.connect(self._on_search)
        layout.addWidget(self._search)

        self._status = CaptionLabel("", self)
        layout.addWidget(self._status)

        self._list = ListWidget(self)
        self._list.itemSelectionChanged.connect(self._on_selection_changed)
        self._list.itemDoubleClicked.connect(lambda _item: self.accept())
        layout.addWidget(self._list, 1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        self._cancel_btn = PushButton("Cancel", self)
        self._cancel_btn.clicked.connect(self.reject)
        buttons.addWidget(self._cancel_btn)
        self._ok_btn = PrimaryPushButton("Select", self)
        self._ok_btn.setEnabled(False)
        self._ok_btn.clicked.connect(self.accept)
        buttons.addWidget(self._ok_btn)
        layout.addLayout(buttons)

        self._show_candidates(candidates)

    def _show_candidates(self, candidates: list[SearchCandidate]) -> None:
        self._candidates = list(candidates)
        self._list.clear()
        for candidate in self._candidates:
            text = candidate.title
            if candidate.description:
                text += f"\n{candidate.description}"
            item = QListWidgetItem(text)
            item.setToolTip(candidate.url)
            self._list.addItem(item)
        self._status.setText(f"{len(self._candidates)} result(s)")
        self._ok_btn.setEnabled(False)

    def _on_search(self, query: str) -> None:
        query = query.strip()
        if not query:
            return
        self._status.setText("Searching…")
        self._show_candidates(self._requery(query))

    def _on_selection_changed(self) -> None:
        self._ok_btn.setEnabled(self._list.currentRow() >= 0)

    def selected_candidate(self) -> SearchCandidate | None:
        row = self._list.currentRow()
        if 0 <= row < len(self._candidates):
            return self._candidates[row]
        return None


class ImageChoiceDialog(QDialog):
    """Pick one image URL from a list."""

    def __init__(self, image_urls: list[str], title: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._urls = list(image_urls)
        self.setWindowTitle(title)
        self.setMinimumSize(560, 360)
        layout = QVBoxLayout(self)
        layout.addWidget(SubtitleLabel(title, self))

        self._list = ListWidget(self)
        for url in self._urls:
            self._list.addItem(QListWidgetItem(url))
        if self._urls:
            self._list.setCurrentRow(0)
        self._list.itemDoubleClicked.connect(lambda _item: self.accept())
        layout.addWidget(self._list, 1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        cancel_btn = PushButton("Cancel", self)
        cancel_btn.clicked.connect(self.reject)
        buttons.addWidget(cancel_btn)
        ok_btn = PrimaryPushButton("Select", self)
        ok_btn.clicked.connect(self.accept)
        buttons.addWidget(ok_btn)
        layout.addLayout(buttons)

    def selected_url(self) -> str | None:
        row = self._list.currentRow()
        return self._urls[row] if 0 <= row < len(self._urls) else None


class QtCandidateChooser:
    """Chooser backed by modal Qt dialogs. A QApplication must already exist."""

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent

    def choose_candidate(
        self,
        candidates: list[SearchCandidate],
        seed_query: str,
        requery: Requery,
    ) -> SearchCandidate | None:
        dialog = CandidateDialog(candidates, seed_query, requery, self._parent)
        dialog.setWindowModality(Qt.WindowModality.ApplicationModal)
        if not dialog.exec():
            return None
        return dialog.selected_candidate()

    def choose_image(self, image_urls: list[str], title: str) -> str | None:
        dialog = ImageChoiceDialog(image_urls, title, self._parent)
        if not dialog.exec():
            return None
        return dialog.selected_url()
