"""
ui/tutorial_window.py
=====================
TutorialWindow — the Tutorial Guide panel.

Shows the current page (title, body, sections) in a scroll area with a fixed
Restart / Back / Next bar underneath. Owns one VideoPlayback for its whole
lifetime and a RepaintTicker that refreshes the video blocks while playing.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QPushButton, QScrollArea, QVBoxLayout, QWidget,
)

from page_store import PageCursor, PageGraph
from repaint_ticker import RepaintTicker
from tutorial_config import TUTORIAL_MAX_HOPS, TUTORIAL_PANEL_MARGIN, TUTORIAL_REPAINT_MS
from tutorial_page import TutorialPage
from ui.section_widgets import (
    ImageSectionWidget, VideoSectionWidget, add_section, open_external_url,
)
from ui.styles import BTN_NEUTRAL, BTN_PRIMARY, HELP_BOX_WARNING, TITLE_COLOR
from video_playback import QtVideoPlayback, VideoPlayback, VideoSectionController

log = logging.getLogger(__name__)


class TutorialWindow(QWidget):
    """Panel that renders one tutorial page at a time."""
    page_changed = pyqtSignal(str)   # page_id

    WARNING_TEXT = "Create TutorialPage assets via Assets > Create > Tutorial > Tutorial Page."

    _instance: Optional["TutorialWindow"] = None

    def __init__(
        self,
        graph: PageGraph,
        playback: Optional[VideoPlayback] = None,
        *,
        margin: int = TUTORIAL_PANEL_MARGIN,
        repaint_ms: int = TUTORIAL_REPAINT_MS,
        max_hops: int = TUTORIAL_MAX_HOPS,
        open_url: Callable[[str], object] = open_external_url,
        parent=None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Tutorial")
        self.resize(520, 640)

        self._margin = margin
        self._max_hops = max_hops
        self._open_url = open_url
        self._cursor = PageCursor(graph, max_hops)

        self._playback = playback if playback is not None else QtVideoPlayback()
        self._videos = VideoSectionController(self._playback, margin)
        self._ticker = RepaintTicker(self._playback.is_playing, self._refresh_videos, repaint_ms, self)

        self._media_widgets: List[QWidget] = []
        self._video_widgets: List[VideoSectionWidget] = []
        self._last_width = -1
        self._setup_ui()
        self.render_page()

    # ── Opening ──────────────────────────────────────────────────────────────

    @classmethod
    def open_window(cls, graph: PageGraph, **kwargs) -> "TutorialWindow":
        """Show the panel (reusing an open one) and jump to the first page."""
        w = cls._instance
        if w is None:
            w = cls(graph, **kwargs)
            w.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
            cls._instance = w
        else:
            w.set_graph(graph)
        w.show()
        w.raise_()
        w.activateWindow()
        w.load_first_page()
        return w

    @classmethod
    def close_open_window(cls) -> bool:
        """Close the panel opened by open_window(), if any."""
        w = cls._instance
        if w is None:
            return False
        w.close()
        return True

    def set_graph(self, graph: PageGraph):
        self._cursor = PageCursor(graph, self._max_hops)

    # ── UI ───────────────────────────────────────────────────────────────────

    def _setup_ui(self):
        layout = QVBoxLayout()
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(8)

        # Shown only when there is no first page
        self._warning = QLabel(self.WARNING_TEXT)
        self._warning.setWordWrap(True)
        self._warning.setStyleSheet(HELP_BOX_WARNING)
        layout.addWidget(self._warning)

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setFrameShape(QFrame.Shape.NoFrame)
        content = QWidget()
        self._content_layout = QVBoxLayout()
        self._content_layout.setContentsMargins(0, 0, 0, 0)
        self._content_layout.setSpacing(0)
        content.setLayout(self._content_layout)
        self._scroll.setWidget(content)
        layout.addWidget(self._scroll, stretch=1)

        # ── Navigation bar ──
        self._nav = QWidget()
        nav = QHBoxLayout()
        nav.setContentsMargins(0, 0, 0, 0)
        self._btn_restart = QPushButton("Restart")
        self._btn_restart.setStyleSheet(BTN_NEUTRAL)
        self._btn_restart.clicked.connect(self.restart)
        nav.addWidget(self._btn_restart)
        nav.addStretch()
        self._btn_back = QPushButton("← Back")
        self._btn_back.setStyleSheet(BTN_PRIMARY)
        self._btn_back.clicked.connect(self.go_back)
        nav.addWidget(self._btn_back)
        self._btn_next = QPushButton("Next →")
        self._btn_next.setStyleSheet(BTN_PRIMARY)
        self._btn_next.clicked.connect(self.go_next)
        nav.addWidget(self._btn_next)
        self._nav.setLayout(nav)
        layout.addWidget(self._nav)

        self.setLayout(layout)

    def _clear_content(self):
        while self._content_layout.count():
            item = self._content_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)
                w.deleteLater()
        self._media_widgets = []
        self._video_widgets = []

    def render_page(self):
        """Rebuild the panel for the current page."""
        self._clear_content()
        page = self._cursor.current
        if page is None:
            self._warning.show()
            self._scroll.hide()
            self._nav.hide()
            return

        self._warning.hide()
        self._scroll.show()
        self._nav.show()

        title = QLabel(page.title)
        title.setFont(QFont("Arial", 15, QFont.Weight.Bold))
        title.setStyleSheet(f"color: {TITLE_COLOR};")
        title.setWordWrap(True)
        self._content_layout.addWidget(title)
        self._content_layout.addSpacing(6)

        body = QLabel(page.body)
        body.setWordWrap(True)
        body.setFont(QFont("Arial", 11))
        body.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self._content_layout.addWidget(body)
        self._content_layout.addSpacing(6)

        panel_width = self.width()
        self._last_width = panel_width
        for section in page.sections:
            w = add_section(
                self._content_layout, section,
                controller=self._videos,
                panel_width=panel_width,
                margin=self._margin,
                open_url=self._open_url,
            )
            if isinstance(w, (ImageSectionWidget, VideoSectionWidget)):
                self._media_widgets.append(w)
            if isinstance(w, VideoSectionWidget):
                w.playback_changed.connect(self._refresh_videos)
                self._video_widgets.append(w)
        self._content_layout.addStretch()
        # a later video section may have claimed the player from an earlier one
        self._refresh_videos()

        self._btn_back.setVisible(self._cursor.can_go_back)
        self._btn_next.setVisible(self._cursor.can_go_next)
        self._scroll.verticalScrollBar().setValue(0)

    def _refresh_videos(self):
        for v in self._video_widgets:
            v.refresh()

    # ── Navigation ───────────────────────────────────────────────────────────

    @property
    def current_page(self) -> Optional[TutorialPage]:
        return self._cursor.current

    @property
    def playback(self) -> VideoPlayback:
        return self._playback

    @property
    def ticker(self) -> RepaintTicker:
        return self._ticker

    def load_first_page(self):
        page = self._cursor.load_first_page()
        if page is None:
            log.warning("No tutorial page without a previous link was found")
        self._page_changed()

    def go_back(self):
        if self._cursor.back():
            self._page_changed()

    def go_next(self):
        if self._cursor.next():
            self._page_changed()

    def restart(self):
        if self._cursor.restart() is not None:
            self._page_changed()

    def _page_changed(self):
        page = self._cursor.current
        self.render_page()
        if page is not None:
            log.info("Tutorial page: %s (%s)", page.page_id, page.title)
            self.page_changed.emit(page.page_id)

    # ── Qt events ────────────────────────────────────────────────────────────

    def resizeEvent(self, event):
        super().resizeEvent(event)
        width = self.width()
        if width != self._last_width and self._media_widgets:
            self._last_width = width
            for w in self._media_widgets:
                w.apply_panel_width(width)
            self._refresh_videos()

    def showEvent(self, event):
        super().showEvent(event)
        self._ticker.attach()

    def hideEvent(self, event):
        self._ticker.detach()
        super().hideEvent(event)

    def teardown(self):
        """Detach the ticker and free the playback resources. Safe to call twice."""
        self._ticker.detach()
        self._videos.teardown()

    def closeEvent(self, event):
        self.teardown()
        if TutorialWindow._instance is self:
            TutorialWindow._instance = None
        event.accept()
