# tutorial_config.py
# Reads the Tutorial Guide settings from .env (python-dotenv) and the environment.
# Add/override values in .env: TUTORIAL_PAGES_DIR, TUTORIAL_PANEL_MARGIN, ...

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# ── Load .env next to the project; real environment variables win ────────────
load_dotenv(Path(__file__).parent / ".env", override=False)

log = logging.getLogger(__name__)


def _get_int(name: str, default: int) -> int:
    """Integer setting; a malformed value falls back to the default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default


# ── Public constants (imported by page_store.py, ui/tutorial_window.py, main.py) ──
TUTORIAL_PAGES_DIR: str = os.environ.get("TUTORIAL_PAGES_DIR", "tutorials")

TUTORIAL_PANEL_MARGIN: int = _get_int("TUTORIAL_PANEL_MARGIN", 40)
TUTORIAL_REPAINT_MS:   int = _get_int("TUTORIAL_REPAINT_MS", 33)    # ~30 fps
TUTORIAL_MAX_HOPS:     int = _get_int("TUTORIAL_MAX_HOPS", 1000)

# Native clip size assumed when a video section does not declare one
TUTORIAL_CLIP_WIDTH:  int = _get_int("TUTORIAL_CLIP_WIDTH", 640)
TUTORIAL_CLIP_HEIGHT: int = _get_int("TUTORIAL_CLIP_HEIGHT", 360)

TUTORIAL_LOG_FILE:  str = os.environ.get("TUTORIAL_LOG_FILE", "tutorial_guide.log")
TUTORIAL_LOG_LEVEL: str = os.environ.get("TUTORIAL_LOG_LEVEL", "INFO").upper()
