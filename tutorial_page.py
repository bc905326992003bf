"""
tutorial_page.py
================
Page model for the Tutorial Guide.

A page is one JSON asset (``*.page.json``) with a title, a body, an ordered
list of sections and optional links to the previous / next page.
Each section kind is its own class and carries only its own payload.

Import:
    from tutorial_page import TutorialPage, TextSection, ImageSection, LinkSection, VideoSection
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from tutorial_config import TUTORIAL_CLIP_WIDTH, TUTORIAL_CLIP_HEIGHT

log = logging.getLogger(__name__)

PAGE_SUFFIX = ".page.json"


class PageAssetError(ValueError):
    """A page asset could not be parsed or written."""


# ─────────────────────────────────────────────────────────────────────────────
# Sections
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class VideoClip:
    path: Path
    width: int = TUTORIAL_CLIP_WIDTH
    height: int = TUTORIAL_CLIP_HEIGHT


@dataclass(frozen=True)
class TextSection:
    text: str = ""


@dataclass(frozen=True)
class ImageSection:
    image: Optional[Path] = None


@dataclass(frozen=True)
class LinkSection:
    label: str = ""
    url: str = ""


@dataclass(frozen=True)
class VideoSection:
    clip: Optional[VideoClip] = None


Section = Union[TextSection, ImageSection, LinkSection, VideoSection]

# Fields each kind reads from the asset; anything else in the object is ignored
_KIND_FIELDS = {
    "text":  {"text"},
    "image": {"image"},
    "link":  {"text", "url"},
    "video": {"video", "width", "height"},
}
_ALL_PAYLOAD_FIELDS = {"text", "image", "url", "video", "width", "height"}


# ─────────────────────────────────────────────────────────────────────────────
# Page
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TutorialPage:
    page_id: str
    title: str = ""
    body: str = ""
    sections: tuple = field(default_factory=tuple)
    previous_id: Optional[str] = None
    next_id: Optional[str] = None

    def with_links(self, previous_id: Optional[str], next_id: Optional[str]) -> "TutorialPage":
        return TutorialPage(
            page_id=self.page_id,
            title=self.title,
            body=self.body,
            sections=self.sections,
            previous_id=previous_id,
            next_id=next_id,
        )


# ── Parsing ──────────────────────────────────────────────────────────────────

def _resolve_resource(value, base_dir: Path, what: str) -> Optional[Path]:
    """Resource path relative to the asset; a missing file counts as absent."""
    if not value:
        return None
    p = Path(str(value))
    if not p.is_absolute():
        p = base_dir / p
    if not p.exists():
        log.warning("%s not found: %s (section will be skipped)", what, p)
        return None
    return p


def _positive_int(value, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n > 0 else default


def section_from_dict(data: dict, base_dir: Path) -> Section:
    if not isinstance(data, dict):
        raise PageAssetError(f"section must be an object, got {type(data).__name__}")
    kind = str(data.get("kind", "")).strip().lower()
    if kind not in _KIND_FIELDS:
        raise PageAssetError(f"unknown section kind: {data.get('kind')!r}")

    ignored = (_ALL_PAYLOAD_FIELDS - _KIND_FIELDS[kind]) & {k for k, v in data.items() if v}
    if ignored:
        log.debug("%s section: ignoring fields %s", kind, sorted(ignored))

    if kind == "text":
        return TextSection(text=str(data.get("text") or ""))
    if kind == "image":
        return ImageSection(image=_resolve_resource(data.get("image"), base_dir, "Image"))
    if kind == "link":
        return LinkSection(label=str(data.get("text") or ""), url=str(data.get("url") or ""))

    clip_path = _resolve_resource(data.get("video"), base_dir, "Video clip")
    if clip_path is None:
        return VideoSection(clip=None)
    return VideoSection(clip=VideoClip(
        path=clip_path,
        width=_positive_int(data.get("width"), TUTORIAL_CLIP_WIDTH),
        height=_positive_int(data.get("height"), TUTORIAL_CLIP_HEIGHT),
    ))


def _link_id(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def page_from_dict(page_id: str, data: dict, base_dir: Path) -> TutorialPage:
    if not isinstance(data, dict):
        raise PageAssetError(f"{page_id}: page asset must be a JSON object")
    raw_sections = data.get("sections") or []
    if not isinstance(raw_sections, list):
        raise PageAssetError(f"{page_id}: 'sections' must be a list")
    sections = []
    for i, raw in enumerate(raw_sections):
        try:
            sections.append(section_from_dict(raw, base_dir))
        except PageAssetError as e:
            raise PageAssetError(f"{page_id}: section {i}: {e}") from e
    return TutorialPage(
        page_id=page_id,
        title=str(data.get("title") or ""),
        body=str(data.get("body") or ""),
        sections=tuple(sections),
        previous_id=_link_id(data.get("previous")),
        next_id=_link_id(data.get("next")),
    )


def load_page(path: Path, page_id: str) -> TutorialPage:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PageAssetError(f"{path}: {e}") from e
    return page_from_dict(page_id, data, path.parent)


def page_to_dict(page: TutorialPage, base_dir: Path) -> dict:
    """Inverse of page_from_dict; resource paths are written relative to base_dir when possible."""
    def rel(p: Path) -> str:
        try:
            return p.relative_to(base_dir).as_posix()
        except ValueError:
            return str(p)

    sections = []
    for s in page.sections:
        if isinstance(s, TextSection):
            sections.append({"kind": "text", "text": s.text})
        elif isinstance(s, ImageSection):
            sections.append({"kind": "image", "image": rel(s.image) if s.image else None})
        elif isinstance(s, LinkSection):
            sections.append({"kind": "link", "text": s.label, "url": s.url})
        elif isinstance(s, VideoSection):
            if s.clip is None:
                sections.append({"kind": "video", "video": None})
            else:
                sections.append({
                    "kind": "video", "video": rel(s.clip.path),
                    "width": s.clip.width, "height": s.clip.height,
                })
    return {
        "title": page.title,
        "body": page.body,
        "sections": sections,
        "previous": page.previous_id,
        "next": page.next_id,
    }
