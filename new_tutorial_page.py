"""new_tutorial_page.py — creates a Tutorial Page asset (same as Assets > Create > Tutorial > Tutorial Page).

Usage:
    python new_tutorial_page.py 03_layers --title "Layers"
    python new_tutorial_page.py 02b_masks --title "Masks" --after 02_layers   # spliced into the chain

Output:
    <pages dir>/<id>.page.json
"""
from __future__ import annotations

import argparse
import logging
import sys

from page_store import PageStore
from tutorial_config import TUTORIAL_PAGES_DIR
from tutorial_page import PageAssetError


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Create a tutorial page asset")
    ap.add_argument("page_id", help="page id, relative to the pages directory (no suffix)")
    ap.add_argument("--title", default="", help="page title (defaults to the id)")
    ap.add_argument("--body", default="", help="body text")
    ap.add_argument("--after", default=None, help="insert after this page id and relink its neighbours")
    ap.add_argument("--pages", default=TUTORIAL_PAGES_DIR, help="pages directory")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    store = PageStore(args.pages)
    try:
        path = store.create_page(args.page_id, title=args.title, body=args.body, after=args.after)
    except PageAssetError as e:
        print(f"❌ {e}")
        return 1
    print(f"✅ Created: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
