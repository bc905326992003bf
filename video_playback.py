"""
video_playback.py
=================
Video playback for the Tutorial Guide panel.

  - VideoPlayback         : narrow interface (bind / play / pause / stop / surface)
  - RenderSurface         : off-screen QImage the decoded frames are drawn into
  - QtVideoPlayback       : QMediaPlayer + QVideoSink implementation
  - VideoSectionController: the video-section state machine, one per panel

There is exactly one playback resource per panel. Whichever video section is
presented last claims it; the other video sections fall back to "Load & Play".
"""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from PyQt6.QtCore import Qt, QUrl
from PyQt6.QtGui import QColor, QImage, QPainter

from media_fit import fit_inside, fit_to_panel
from tutorial_config import TUTORIAL_CLIP_HEIGHT, TUTORIAL_CLIP_WIDTH, TUTORIAL_PANEL_MARGIN
from tutorial_page import VideoClip

log = logging.getLogger(__name__)


class PlaybackState(Enum):
    NO_CLIP = auto()
    PLAYING = auto()
    PAUSED  = auto()
    STOPPED = auto()


class VideoPlayback:
    """Interface the panel talks to. Tests substitute a fake."""

    clip: Optional[VideoClip] = None

    def bind(self, clip: VideoClip) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    def is_playing(self) -> bool:
        raise NotImplementedError

    def state(self) -> PlaybackState:
        raise NotImplementedError

    def surface_size(self) -> tuple[int, int]:
        raise NotImplementedError

    def resize_surface(self, width: int, height: int) -> None:
        """Release the current surface and allocate a new one at width x height."""
        raise NotImplementedError

    def current_frame(self) -> Optional[QImage]:
        raise NotImplementedError

    def release(self) -> None:
        """Stop and free everything. Must be safe to call more than once."""
        raise NotImplementedError


# ─────────────────────────────────────────────────────────────────────────────
# Off-screen surface
# ─────────────────────────────────────────────────────────────────────────────

class RenderSurface:
    live = 0   # allocated and not yet released, across all instances

    def __init__(self, width: int, height: int):
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self.image: Optional[QImage] = QImage(self.width, self.height, QImage.Format.Format_RGB32)
        if not self.image.isNull():
            self.image.fill(QColor("black"))
        RenderSurface.live += 1

    @property
    def released(self) -> bool:
        return self.image is None

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def blit(self, frame: QImage):
        """Draw frame scaled-to-fit (letterboxed) over the whole surface."""
        if self.image is None or self.image.isNull() or frame is None or frame.isNull():
            return
        x, y, w, h = fit_inside(frame.width(), frame.height(), self.width, self.height)
        scaled = frame.scaled(w, h, Qt.AspectRatioMode.IgnoreAspectRatio,
                              Qt.TransformationMode.SmoothTransformation)
        self.image.fill(QColor("black"))
        painter = QPainter(self.image)
        painter.drawImage(x, y, scaled)
        painter.end()

    def release(self):
        if self.image is None:
            return
        self.image = None
        RenderSurface.live -= 1


# ─────────────────────────────────────────────────────────────────────────────
# QtMultimedia implementation
# ─────────────────────────────────────────────────────────────────────────────

class QtVideoPlayback(VideoPlayback):
    """QMediaPlayer decoding into a QVideoSink; frames land in a RenderSurface."""

    def __init__(self, width: int = TUTORIAL_CLIP_WIDTH, height: int = TUTORIAL_CLIP_HEIGHT):
        from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer, QVideoSink

        self._QMediaPlayer = QMediaPlayer
        self.clip = None
        self._player = QMediaPlayer()
        self._audio = QAudioOutput()
        self._player.setAudioOutput(self._audio)
        self._sink = QVideoSink()
        self._player.setVideoSink(self._sink)
        self._sink.videoFrameChanged.connect(self._on_frame)
        self._player.errorOccurred.connect(self._on_error)

        self._last_frame: Optional[QImage] = None
        self._surface: Optional[RenderSurface] = RenderSurface(width, height)

    # ── Qt callbacks ─────────────────────────────────────────────────────────

    def _on_frame(self, frame):
        if frame is None or not frame.isValid():
            return
        image = frame.toImage()
        if image.isNull():
            return
        self._last_frame = image
        if self._surface is not None:
            self._surface.blit(image)

    def _on_error(self, error, message: str = ""):
        log.error("Video playback error (%s): %s", getattr(self.clip, "path", None), message or error)

    # ── VideoPlayback ────────────────────────────────────────────────────────

    def bind(self, clip: VideoClip) -> None:
        if self._player is None:
            return
        self.clip = clip
        self._last_frame = None
        self._player.setSource(QUrl.fromLocalFile(str(clip.path)))

    def play(self) -> None:
        if self._player is not None and self.clip is not None:
            self._player.play()

    def pause(self) -> None:
        if self._player is not None:
            self._player.pause()

    def stop(self) -> None:
        if self._player is not None:
            self._player.stop()

    def is_playing(self) -> bool:
        if self._player is None:
            return False
        return self._player.playbackState() == self._QMediaPlayer.PlaybackState.PlayingState

    def state(self) -> PlaybackState:
        if self._player is None or self.clip is None:
            return PlaybackState.NO_CLIP
        st = self._player.playbackState()
        if st == self._QMediaPlayer.PlaybackState.PlayingState:
            return PlaybackState.PLAYING
        if st == self._QMediaPlayer.PlaybackState.PausedState:
            return PlaybackState.PAUSED
        return PlaybackState.STOPPED

    def surface_size(self) -> tuple[int, int]:
        if self._surface is None:
            return 0, 0
        return self._surface.size()

    def resize_surface(self, width: int, height: int) -> None:
        if self._player is None:
            return
        if self._surface is not None:
            self._surface.release()
        self._surface = RenderSurface(width, height)
        if self._last_frame is not None:
            self._surface.blit(self._last_frame)

    def current_frame(self) -> Optional[QImage]:
        if self._surface is None:
            return None
        return self._surface.image

    def release(self) -> None:
        if self._player is not None:
            self._player.stop()
            self._player.setVideoSink(None)
        if self._sink is not None:
            try:
                self._sink.videoFrameChanged.disconnect(self._on_frame)
            except TypeError:
                pass
            self._sink.deleteLater()
            self._sink = None
        if self._surface is not None:
            self._surface.release()
            self._surface = None
        if self._audio is not None:
            self._audio.deleteLater()
            self._audio = None
        if self._player is not None:
            self._player.deleteLater()
            self._player = None
        self._last_frame = None
        self.clip = None


# ─────────────────────────────────────────────────────────────────────────────
# Video section state machine
# ─────────────────────────────────────────────────────────────────────────────

class VideoSectionController:
    """Drives the shared VideoPlayback for every video section of the panel."""

    def __init__(self, playback: VideoPlayback, margin: int = TUTORIAL_PANEL_MARGIN):
        self.playback = playback
        self.margin = margin

    def display_box(self, clip: VideoClip, panel_width: int) -> tuple[int, int]:
        return fit_to_panel(clip.width, clip.height, panel_width, self.margin)

    def present(self, clip: VideoClip, panel_width: int) -> tuple[int, int]:
        """Lay out one video section: fit the box, resize the surface, claim the player."""
        w, h = self.display_box(clip, panel_width)
        if self.playback.surface_size() != (w, h):
            self.playback.resize_surface(w, h)
        if self.playback.clip != clip:
            self.load_and_play(clip)
        return w, h

    def owns(self, clip: VideoClip) -> bool:
        return self.playback.clip == clip

    def load_and_play(self, clip: VideoClip):
        log.info("Video: playing %s", clip.path.name)
        self.playback.bind(clip)
        self.playback.play()

    def toggle_play(self):
        if self.playback.is_playing():
            self.playback.pause()
        else:
            self.playback.play()

    def stop(self):
        self.playback.stop()

    @property
    def state(self) -> PlaybackState:
        return self.playback.state()

    def teardown(self):
        self.playback.release()
