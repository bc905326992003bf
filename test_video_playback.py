from __future__ import annotations

from pathlib import Path

import pytest
from PyQt6.QtGui import QColor, QImage

from tutorial_page import VideoClip
from video_playback import PlaybackState, QtVideoPlayback, RenderSurface, VideoSectionController

CLIP_A = VideoClip(Path("a.mp4"), 1280, 720)
CLIP_B = VideoClip(Path("b.mp4"), 640, 480)


def test_first_present_resizes_binds_and_plays(fake_playback):
    ctl = VideoSectionController(fake_playback, margin=40)
    w, h = ctl.present(CLIP_A, 680)
    assert (w, h) == (640, 360)
    assert fake_playback.surface_size() == (640, 360)
    assert fake_playback.bind_calls == [CLIP_A]
    assert ctl.state == PlaybackState.PLAYING
    assert ctl.owns(CLIP_A)


def test_same_clip_same_size_is_a_noop(fake_playback):
    ctl = VideoSectionController(fake_playback, margin=40)
    ctl.present(CLIP_A, 680)
    allocated = fake_playback.surfaces_allocated
    ctl.stop()
    ctl.present(CLIP_A, 680)
    assert fake_playback.bind_calls == [CLIP_A]
    assert fake_playback.surfaces_allocated == allocated
    # no autoplay once the clip is already bound
    assert ctl.state == PlaybackState.STOPPED


def test_switching_clip_rebinds_and_plays(fake_playback):
    ctl = VideoSectionController(fake_playback, margin=40)
    ctl.present(CLIP_A, 680)
    ctl.toggle_play()
    assert ctl.state == PlaybackState.PAUSED
    ctl.present(CLIP_B, 680)
    assert fake_playback.clip == CLIP_B
    assert not ctl.owns(CLIP_A)
    assert ctl.state == PlaybackState.PLAYING


def test_resize_never_leaks_surfaces(fake_playback):
    ctl = VideoSectionController(fake_playback, margin=40)
    for width in (300, 500, 700, 900, 500):
        ctl.present(CLIP_A, width)
        assert fake_playback.live_surfaces == 1
    ctl.teardown()
    assert fake_playback.live_surfaces == 0


def test_toggle_and_stop(fake_playback):
    ctl = VideoSectionController(fake_playback)
    ctl.load_and_play(CLIP_B)
    assert fake_playback.is_playing()
    ctl.toggle_play()
    assert not fake_playback.is_playing()
    ctl.toggle_play()
    assert fake_playback.is_playing()
    ctl.stop()
    assert ctl.state == PlaybackState.STOPPED


def test_teardown_twice(fake_playback):
    ctl = VideoSectionController(fake_playback)
    ctl.present(CLIP_A, 500)
    ctl.teardown()
    ctl.teardown()
    assert fake_playback.released
    assert ctl.state == PlaybackState.NO_CLIP


# ── RenderSurface ────────────────────────────────────────────────────────────

def test_surface_live_count(qapp):
    before = RenderSurface.live
    s = RenderSurface(64, 36)
    assert RenderSurface.live == before + 1
    assert s.size() == (64, 36)
    s.release()
    s.release()
    assert s.released
    assert RenderSurface.live == before


def test_surface_blit_letterboxes(qapp):
    s = RenderSurface(100, 100)
    frame = QImage(200, 100, QImage.Format.Format_RGB32)
    frame.fill(QColor("white"))
    s.blit(frame)
    assert s.image.pixelColor(50, 50) == QColor("white")
    assert s.image.pixelColor(50, 5) == QColor("black")
    s.release()


def test_zero_sized_surface_ignores_frames(qapp):
    s = RenderSurface(0, 0)
    frame = QImage(10, 10, QImage.Format.Format_RGB32)
    s.blit(frame)
    s.release()
    assert s.released


# ── QtVideoPlayback ──────────────────────────────────────────────────────────

def test_qt_playback_resize_and_release_balance_surfaces(qapp):
    pytest.importorskip("PyQt6.QtMultimedia")
    before = RenderSurface.live
    playback = QtVideoPlayback(320, 180)
    assert RenderSurface.live == before + 1
    assert playback.state() is PlaybackState.NO_CLIP

    for w, h in ((640, 360), (200, 112), (0, 0), (480, 270)):
        playback.resize_surface(w, h)
        assert playback.surface_size() == (w, h)
        assert RenderSurface.live == before + 1

    playback.release()
    playback.release()
    assert RenderSurface.live == before
    assert playback.state() is PlaybackState.NO_CLIP
    assert playback.surface_size() == (0, 0)
    assert playback.current_frame() is None
    assert not playback.is_playing()

    # a torn-down player allocates nothing
    playback.resize_surface(100, 100)
    assert RenderSurface.live == before
    assert playback.surface_size() == (0, 0)
