# validate_pages.py
# Loads every *.page.json asset and prints the page chain plus any graph problems.
#   python validate_pages.py [pages_dir]
from __future__ import annotations

import logging
import sys

from page_store import PageStore
from tutorial_config import TUTORIAL_PAGES_DIR


def chain_from_root(graph) -> list[str]:
    out: list[str] = []
    page = graph.root()
    while page is not None and page.page_id not in out:
        out.append(page.page_id)
        page = graph.get(page.next_id)
    return out


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    pages_dir = argv[0] if argv else TUTORIAL_PAGES_DIR

    logging.basicConfig(level=logging.ERROR)
    graph = PageStore(pages_dir).load_graph()

    print(f"Pages: {len(graph)} in {pages_dir}")
    print("Roots:", graph.roots or "none")
    print("Chain:", " → ".join(chain_from_root(graph)) or "(empty)")
    issues = graph.issues
    if not issues:
        print("✅ No problems found")
        return 0
    print(f"⚠️  {len(issues)} problem(s):")
    for issue in issues:
        print("  ", issue)
    return 1


if __name__ == "__main__":
    sys.exit(main())
