from __future__ import annotations

import json
import os
from pathlib import Path

# Qt widgets without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from video_playback import PlaybackState, VideoPlayback


class FakePlayback(VideoPlayback):
    """In-memory VideoPlayback that counts surface allocations."""

    def __init__(self, width: int = 640, height: int = 360):
        self.clip = None
        self._playing = False
        self._state = PlaybackState.NO_CLIP
        self._size = (width, height)
        self.bind_calls = []
        self.surfaces_allocated = 1
        self.surfaces_released = 0
        self.released = False

    @property
    def live_surfaces(self) -> int:
        return self.surfaces_allocated - self.surfaces_released

    def bind(self, clip):
        self.clip = clip
        self.bind_calls.append(clip)
        self._state = PlaybackState.STOPPED

    def play(self):
        if self.clip is not None:
            self._state = PlaybackState.PLAYING

    def pause(self):
        if self._state == PlaybackState.PLAYING:
            self._state = PlaybackState.PAUSED

    def stop(self):
        if self.clip is not None:
            self._state = PlaybackState.STOPPED

    def is_playing(self):
        return self._state == PlaybackState.PLAYING

    def state(self):
        return self._state

    def surface_size(self):
        return self._size

    def resize_surface(self, width, height):
        self.surfaces_released += 1
        self.surfaces_allocated += 1
        self._size = (width, height)

    def current_frame(self):
        return None

    def release(self):
        if self.released:
            return
        self.stop()
        self.surfaces_released += 1
        self.released = True
        self.clip = None
        self._state = PlaybackState.NO_CLIP


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def fake_playback():
    return FakePlayback()


@pytest.fixture
def pages_dir(tmp_path) -> Path:
    d = tmp_path / "tutorials"
    d.mkdir()
    return d


@pytest.fixture
def write_page(pages_dir):
    """write_page("b", previous="a", next="c", sections=[...]) → path of the asset."""
    def _write(page_id, previous=None, next=None, title=None, body="", sections=None):
        path = pages_dir / f"{page_id}.page.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({
            "title": title if title is not None else page_id.upper(),
            "body": body,
            "sections": sections or [],
            "previous": previous,
            "next": next,
        }), encoding="utf-8")
        return path
    return _write
