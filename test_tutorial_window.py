from __future__ import annotations

from PyQt6.QtGui import QColor, QImage

from page_store import PageStore
from video_playback import PlaybackState
from ui.section_widgets import ImageSectionWidget, LinkLabel, VideoSectionWidget
from ui.tutorial_window import TutorialWindow


def _window(pages_dir, playback, **kwargs):
    w = TutorialWindow(PageStore(pages_dir).load_graph(), playback, **kwargs)
    w.resize(680, 600)
    return w


def test_walkthrough(qapp, pages_dir, write_page, fake_playback):
    write_page("a", next="b")
    write_page("b", previous="a", next="c")
    write_page("c", previous="b")
    w = _window(pages_dir, fake_playback)
    seen = []
    w.page_changed.connect(seen.append)

    w.load_first_page()
    assert w.current_page.page_id == "a"
    assert w._btn_back.isHidden()
    assert not w._btn_next.isHidden()

    w._btn_next.click()
    w._btn_next.click()
    assert w.current_page.page_id == "c"
    assert not w._btn_back.isHidden()
    assert w._btn_next.isHidden()

    w._btn_restart.click()
    assert w.current_page.page_id == "a"
    assert seen == ["a", "b", "c", "a"]
    w.teardown()


def test_no_pages_shows_only_the_warning(qapp, pages_dir, fake_playback):
    w = _window(pages_dir, fake_playback)
    w.load_first_page()
    assert w.current_page is None
    assert not w._warning.isHidden()
    assert w._nav.isHidden()
    assert w._scroll.isHidden()
    assert TutorialWindow.WARNING_TEXT in w._warning.text()


def test_link_opens_url(qapp, pages_dir, write_page, fake_playback):
    write_page("a", sections=[
        {"kind": "text", "text": "Read this"},
        {"kind": "link", "text": "Docs", "url": "https://example.org/docs"},
    ])
    opened = []
    w = _window(pages_dir, fake_playback, open_url=opened.append)
    w.load_first_page()
    links = w.findChildren(LinkLabel)
    assert len(links) == 1
    links[0].click()
    assert opened == ["https://example.org/docs"]


def test_image_fits_panel(qapp, pages_dir, write_page, fake_playback):
    img = QImage(200, 100, QImage.Format.Format_RGB32)
    img.fill(QColor("red"))
    assert img.save(str(pages_dir / "pic.png"), "PNG")
    write_page("a", sections=[
        {"kind": "image", "image": "pic.png"},
        {"kind": "image", "image": "missing.png"},
    ])
    w = _window(pages_dir, fake_playback, margin=40)
    w.load_first_page()
    images = w.findChildren(ImageSectionWidget)
    assert len(images) == 1
    assert images[0].display_size == (200, 100)

    images[0].apply_panel_width(200)
    assert images[0].display_size == (160, 80)


def test_later_video_section_claims_the_player(qapp, pages_dir, write_page, fake_playback):
    (pages_dir / "one.mp4").write_bytes(b"\x00")
    (pages_dir / "two.mp4").write_bytes(b"\x00")
    write_page("a", sections=[
        {"kind": "video", "video": "one.mp4", "width": 1280, "height": 720},
        {"kind": "video"},
        {"kind": "video", "video": "two.mp4", "width": 320, "height": 240},
    ])
    w = _window(pages_dir, fake_playback)
    w.load_first_page()

    first, second = w.findChildren(VideoSectionWidget)
    assert fake_playback.clip == second.clip
    assert [c.path.name for c in fake_playback.bind_calls] == ["one.mp4", "two.mp4"]
    assert fake_playback.is_playing()
    assert second.display_size == (320, 240)

    assert not first._btn_load_play.isHidden()
    assert first._btn_play_pause.isHidden()
    assert second._btn_load_play.isHidden()
    assert second._btn_play_pause.text() == "⏸ Pause"
    assert not first._btn_stop.isHidden() and not second._btn_stop.isHidden()

    second._btn_play_pause.click()
    assert not fake_playback.is_playing()
    assert second._btn_play_pause.text() == "▶ Play"

    first._btn_load_play.click()
    assert fake_playback.clip == first.clip
    assert fake_playback.is_playing()
    assert not second._btn_load_play.isHidden()
    assert first._btn_load_play.isHidden()


def test_close_detaches_ticker_and_releases_playback(qapp, pages_dir, write_page, fake_playback):
    (pages_dir / "one.mp4").write_bytes(b"\x00")
    write_page("a", sections=[{"kind": "video", "video": "one.mp4"}])
    w = _window(pages_dir, fake_playback)
    w.show()
    w.load_first_page()
    assert w.ticker.attached
    assert fake_playback.is_playing()

    w.close()
    assert not w.ticker.attached
    assert fake_playback.released
    assert fake_playback.live_surfaces == 0
    w.teardown()
    assert fake_playback.live_surfaces == 0


def test_hide_detaches_ticker(qapp, pages_dir, write_page, fake_playback):
    write_page("a")
    w = _window(pages_dir, fake_playback)
    w.show()
    assert w.ticker.attached
    w.hide()
    assert not w.ticker.attached
    w.teardown()


def test_button_follows_player_after_clip_ends(qapp, pages_dir, write_page, fake_playback):
    (pages_dir / "one.mp4").write_bytes(b"\x00")
    write_page("a", sections=[{"kind": "video", "video": "one.mp4"}])
    w = _window(pages_dir, fake_playback)
    w.load_first_page()
    (video,) = w.findChildren(VideoSectionWidget)
    w.ticker.tick()
    assert video._btn_play_pause.text() == "⏸ Pause"

    # end of media: the player stops on its own, no button was pressed
    fake_playback._state = PlaybackState.STOPPED
    for _ in range(5):
        w.ticker.tick()
    assert not fake_playback.is_playing()
    assert video._btn_play_pause.text() == "▶ Play"
    w.teardown()


def test_close_open_window(qapp, pages_dir, write_page, fake_playback):
    write_page("a")
    graph = PageStore(pages_dir).load_graph()
    w = TutorialWindow.open_window(graph, playback=fake_playback)
    assert w.current_page.page_id == "a"
    assert TutorialWindow.open_window(graph) is w

    assert TutorialWindow.close_open_window()
    assert fake_playback.released
    assert not TutorialWindow.close_open_window()
