"""
media_fit.py
============
Display size for images and videos inside the tutorial panel.

The width is capped at (panel width - margin) and never exceeds the native
width; the height follows the native aspect ratio.
"""
from __future__ import annotations

from tutorial_config import TUTORIAL_PANEL_MARGIN


def fit_to_panel(native_w: int, native_h: int, panel_w: int,
                 margin: int = TUTORIAL_PANEL_MARGIN) -> tuple[int, int]:
    if native_w <= 0 or native_h <= 0:
        return 0, 0
    max_w = max(0, panel_w - margin)
    display_w = min(max_w, native_w)
    display_h = round(display_w * native_h / native_w)
    return int(display_w), int(display_h)


def fit_inside(src_w: int, src_h: int, box_w: int, box_h: int) -> tuple[int, int, int, int]:
    """Scale-to-fit rectangle (x, y, w, h) of a src_w x src_h picture centred in a box (letterbox)."""
    if src_w <= 0 or src_h <= 0 or box_w <= 0 or box_h <= 0:
        return 0, 0, 0, 0
    scale = min(box_w / src_w, box_h / src_h)
    w = max(1, round(src_w * scale))
    h = max(1, round(src_h * scale))
    return (box_w - w) // 2, (box_h - h) // 2, w, h
