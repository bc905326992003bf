"""
ui/section_widgets.py
=====================
One widget per page section: text, image, link, video.

add_section() dispatches on the section class and appends the widget plus its
fixed gap to the page layout. Image and video sections without a resource
add nothing.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt6.QtCore import Qt, QUrl, pyqtSignal
from PyQt6.QtGui import QDesktopServices, QFont, QPixmap
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from media_fit import fit_to_panel
from tutorial_config import TUTORIAL_PANEL_MARGIN
from tutorial_page import ImageSection, LinkSection, TextSection, VideoClip, VideoSection
from ui.styles import BTN_TRANSPORT, LINK_LABEL
from video_playback import VideoSectionController

log = logging.getLogger(__name__)

SECTION_GAP = 4
VIDEO_GAP   = 2


def open_external_url(url: str) -> bool:
    """Hand the URL to the system's default handler (browser, mail client, ...)."""
    log.info("Opening link %s", url)
    return QDesktopServices.openUrl(QUrl(url))


# ── Image ────────────────────────────────────────────────────────────────────

class ImageSectionWidget(QLabel):
    """Image scaled to the panel width, never above native size."""

    def __init__(self, pixmap: QPixmap, margin: int = TUTORIAL_PANEL_MARGIN, parent=None):
        super().__init__(parent)
        self._pixmap = pixmap
        self._margin = margin
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)

    @property
    def native_size(self) -> tuple[int, int]:
        return self._pixmap.width(), self._pixmap.height()

    @property
    def display_size(self) -> tuple[int, int]:
        return self.width(), self.height()

    def apply_panel_width(self, panel_width: int):
        w, h = fit_to_panel(self._pixmap.width(), self._pixmap.height(), panel_width, self._margin)
        self.setFixedSize(w, h)
        if w and h:
            self.setPixmap(self._pixmap.scaled(
                w, h,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            ))
        else:
            self.clear()


# ── Link ─────────────────────────────────────────────────────────────────────

class LinkLabel(QPushButton):
    """Clickable label; activation opens the URL, no validation."""

    def __init__(self, label: str, url: str,
                 open_url: Callable[[str], object] = open_external_url, parent=None):
        super().__init__(label or url, parent)
        self.url = url
        self._open_url = open_url
        self.setFlat(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setStyleSheet(LINK_LABEL)
        self.setToolTip(url)
        self.clicked.connect(self._activate)

    def _activate(self):
        self._open_url(self.url)


# ── Video ────────────────────────────────────────────────────────────────────

class VideoSectionWidget(QWidget):
    """Video box and transport buttons for one video section."""
    playback_changed = pyqtSignal()

    def __init__(self, clip: VideoClip, controller: VideoSectionController, parent=None):
        super().__init__(parent)
        self.clip = clip
        self._controller = controller
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(VIDEO_GAP)

        self._frame = QLabel()
        self._frame.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._frame.setStyleSheet("background-color: black;")
        layout.addWidget(self._frame, alignment=Qt.AlignmentFlag.AlignLeft)

        controls = QHBoxLayout()
        controls.setSpacing(6)
        self._btn_load_play = QPushButton("▶ Load & Play")
        self._btn_play_pause = QPushButton("⏸ Pause")
        self._btn_stop = QPushButton("⏹ Stop")
        for btn in (self._btn_load_play, self._btn_play_pause, self._btn_stop):
            btn.setStyleSheet(BTN_TRANSPORT)
            controls.addWidget(btn)
        controls.addStretch()
        layout.addLayout(controls)
        self.setLayout(layout)

        self._btn_load_play.clicked.connect(self._on_load_play)
        self._btn_play_pause.clicked.connect(self._on_play_pause)
        self._btn_stop.clicked.connect(self._on_stop)

    @property
    def display_size(self) -> tuple[int, int]:
        return self._frame.width(), self._frame.height()

    def apply_panel_width(self, panel_width: int):
        w, h = self._controller.present(self.clip, panel_width)
        self._frame.setFixedSize(w, h)
        self.refresh()

    def refresh(self):
        """Redraw the current frame and the transport buttons."""
        owns = self._controller.owns(self.clip)
        frame = self._controller.playback.current_frame() if owns else None
        w, h = self.display_size
        if frame is not None and not frame.isNull() and w and h:
            self._frame.setPixmap(QPixmap.fromImage(frame).scaled(
                w, h,
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.FastTransformation,
            ))
        else:
            self._frame.clear()

        self._btn_load_play.setVisible(not owns)
        self._btn_play_pause.setVisible(owns)
        if owns:
            playing = self._controller.playback.is_playing()
            self._btn_play_pause.setText("⏸ Pause" if playing else "▶ Play")

    def _on_load_play(self):
        self._controller.load_and_play(self.clip)
        self.playback_changed.emit()

    def _on_play_pause(self):
        self._controller.toggle_play()
        self.playback_changed.emit()

    def _on_stop(self):
        self._controller.stop()
        self.playback_changed.emit()


# ── Dispatch ─────────────────────────────────────────────────────────────────

def add_section(layout: QVBoxLayout, section, *, controller: VideoSectionController,
                panel_width: int, margin: int = TUTORIAL_PANEL_MARGIN,
                open_url: Callable[[str], object] = open_external_url) -> Optional[QWidget]:
    """Append the widget for one section (and its gap). Returns None when nothing is drawn."""
    if isinstance(section, TextSection):
        lbl = QLabel(section.text)
        lbl.setWordWrap(True)
        lbl.setFont(QFont("Arial", 11))
        lbl.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(lbl)
        layout.addSpacing(SECTION_GAP)
        return lbl

    if isinstance(section, ImageSection):
        if section.image is None:
            return None
        pixmap = QPixmap(str(section.image))
        if pixmap.isNull():
            log.warning("Could not decode image %s", section.image)
            return None
        img = ImageSectionWidget(pixmap, margin)
        img.apply_panel_width(panel_width)
        layout.addWidget(img)
        layout.addSpacing(SECTION_GAP)
        return img

    if isinstance(section, LinkSection):
        link = LinkLabel(section.label, section.url, open_url)
        layout.addWidget(link, alignment=Qt.AlignmentFlag.AlignLeft)
        layout.addSpacing(SECTION_GAP)
        return link

    if isinstance(section, VideoSection):
        if section.clip is None:
            return None
        video = VideoSectionWidget(section.clip, controller)
        video.apply_panel_width(panel_width)
        layout.addWidget(video)
        layout.addSpacing(VIDEO_GAP)
        return video

    log.warning("Unknown section type %s", type(section).__name__)
    return None
