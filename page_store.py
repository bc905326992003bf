"""
page_store.py
=============
Page assets on disk → PageGraph (pages keyed by id) → PageCursor (the current page).

- PageStore  : finds ``*.page.json`` under the pages directory, loads and creates them
- PageGraph  : id → page, root selection, load-time validation
- PageCursor : back / next / restart over the graph

The graph is checked once when it is built. Problems (no root, several roots,
dangling or one-sided links, cycles, unreachable pages) are reported as
GraphIssue entries and logged; they never stop the viewer.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tutorial_config import TUTORIAL_MAX_HOPS
from tutorial_page import (
    PAGE_SUFFIX, PageAssetError, TutorialPage, load_page, page_to_dict,
)

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Graph
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GraphIssue:
    kind: str          # no_root | multiple_roots | dangling_link | asymmetric_link | cycle | unreachable
    page_id: Optional[str]
    detail: str

    def __str__(self) -> str:
        where = f" [{self.page_id}]" if self.page_id else ""
        return f"{self.kind}{where}: {self.detail}"


class PageGraph:
    """Pages by id. Links to ids that are not in the graph are dropped at build time."""

    def __init__(self, pages: Iterable[TutorialPage]):
        self._issues: List[GraphIssue] = []
        raw: Dict[str, TutorialPage] = {}
        for p in pages:
            if p.page_id in raw:
                log.warning("Duplicate page id %s, keeping the first one", p.page_id)
                continue
            raw[p.page_id] = p

        self._pages: Dict[str, TutorialPage] = {}
        for pid in sorted(raw):
            page = raw[pid]
            prev_id, next_id = page.previous_id, page.next_id
            if prev_id is not None and prev_id not in raw:
                self._issues.append(GraphIssue("dangling_link", pid, f"previous → missing page {prev_id!r}"))
                prev_id = None
            if next_id is not None and next_id not in raw:
                self._issues.append(GraphIssue("dangling_link", pid, f"next → missing page {next_id!r}"))
                next_id = None
            if (prev_id, next_id) != (page.previous_id, page.next_id):
                page = page.with_links(prev_id, next_id)
            self._pages[pid] = page

        self._roots = [pid for pid, p in self._pages.items() if p.previous_id is None]
        self._validate()
        for issue in self._issues:
            log.warning("Tutorial pages: %s", issue)

    # ── Access ───────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id) -> bool:
        return page_id in self._pages

    def __iter__(self):
        return iter(self._pages.values())

    def get(self, page_id: Optional[str]) -> Optional[TutorialPage]:
        if page_id is None:
            return None
        return self._pages.get(page_id)

    def page_ids(self) -> List[str]:
        return list(self._pages)

    @property
    def roots(self) -> List[str]:
        return list(self._roots)

    @property
    def issues(self) -> List[GraphIssue]:
        return list(self._issues)

    def root(self) -> Optional[TutorialPage]:
        """First page without a previous link, by page id (lexicographic)."""
        if not self._roots:
            return None
        return self._pages[self._roots[0]]

    # ── Validation ───────────────────────────────────────────────────────────

    def _validate(self):
        if self._pages and not self._roots:
            self._issues.append(GraphIssue("no_root", None, "every page has a previous link"))
        if len(self._roots) > 1:
            self._issues.append(GraphIssue(
                "multiple_roots", None,
                f"{len(self._roots)} pages without previous: {', '.join(self._roots)}; "
                f"using {self._roots[0]!r}",
            ))

        for pid, page in self._pages.items():
            nxt = self.get(page.next_id)
            if nxt is not None and nxt.previous_id != pid:
                self._issues.append(GraphIssue(
                    "asymmetric_link", pid,
                    f"next is {nxt.page_id!r} but its previous is {nxt.previous_id!r}",
                ))
            prv = self.get(page.previous_id)
            if prv is not None and prv.next_id != pid:
                self._issues.append(GraphIssue(
                    "asymmetric_link", pid,
                    f"previous is {prv.page_id!r} but its next is {prv.next_id!r}",
                ))

        # cycles along previous links
        seen_cycles = set()
        for pid in self._pages:
            path: List[str] = []
            on_path = set()
            cur = pid
            while cur is not None and cur not in on_path:
                path.append(cur)
                on_path.add(cur)
                cur = self._pages[cur].previous_id
            if cur is not None:
                cycle = frozenset(path[path.index(cur):])
                if cycle not in seen_cycles:
                    seen_cycles.add(cycle)
                    self._issues.append(GraphIssue(
                        "cycle", cur, "previous links loop through " + " → ".join(sorted(cycle)),
                    ))

        root = self.root()
        if root is not None:
            reachable = set()
            cur = root.page_id
            while cur is not None and cur not in reachable:
                reachable.add(cur)
                cur = self._pages[cur].next_id
            for pid in self._pages:
                if pid not in reachable:
                    self._issues.append(GraphIssue(
                        "unreachable", pid, f"not reachable from root {root.page_id!r} via next links",
                    ))


# ─────────────────────────────────────────────────────────────────────────────
# Cursor
# ─────────────────────────────────────────────────────────────────────────────

class PageCursor:
    """The single current page. Only navigation changes it."""

    def __init__(self, graph: PageGraph, max_hops: int = TUTORIAL_MAX_HOPS):
        self.graph = graph
        self.max_hops = max(1, int(max_hops))
        self.current: Optional[TutorialPage] = None

    @property
    def can_go_back(self) -> bool:
        return self.current is not None and self.graph.get(self.current.previous_id) is not None

    @property
    def can_go_next(self) -> bool:
        return self.current is not None and self.graph.get(self.current.next_id) is not None

    def load_first_page(self) -> Optional[TutorialPage]:
        self.current = self.graph.root()
        return self.current

    def back(self) -> bool:
        if not self.can_go_back:
            return False
        self.current = self.graph.get(self.current.previous_id)
        return True

    def next(self) -> bool:
        if not self.can_go_next:
            return False
        self.current = self.graph.get(self.current.next_id)
        return True

    def restart(self) -> Optional[TutorialPage]:
        """Follow previous links to the first page; stops on a loop or after max_hops."""
        if self.current is None:
            return None
        page = self.current
        visited = {page.page_id}
        hops = 0
        while page.previous_id is not None:
            prev = self.graph.get(page.previous_id)
            if prev is None:
                break
            if prev.page_id in visited:
                log.warning("Restart: previous links loop at %s, stopping at %s",
                            prev.page_id, page.page_id)
                break
            hops += 1
            if hops > self.max_hops:
                log.warning("Restart: gave up after %d hops at %s", self.max_hops, page.page_id)
                break
            visited.add(prev.page_id)
            page = prev
        self.current = page
        return page


# ─────────────────────────────────────────────────────────────────────────────
# Asset store
# ─────────────────────────────────────────────────────────────────────────────

class PageStore:
    """All ``*.page.json`` assets under one directory."""

    def __init__(self, pages_dir: str | Path):
        self.pages_dir = Path(pages_dir)

    def page_id_for(self, path: Path) -> str:
        rel = path.relative_to(self.pages_dir).as_posix()
        return rel[: -len(PAGE_SUFFIX)]

    def path_for(self, page_id: str) -> Path:
        return self.pages_dir / f"{page_id}{PAGE_SUFFIX}"

    def find_assets(self) -> List[Path]:
        if not self.pages_dir.is_dir():
            log.warning("Pages directory not found: %s", self.pages_dir)
            return []
        return sorted(self.pages_dir.rglob(f"*{PAGE_SUFFIX}"))

    def load_pages(self) -> List[TutorialPage]:
        pages = []
        for path in self.find_assets():
            try:
                pages.append(load_page(path, self.page_id_for(path)))
            except PageAssetError as e:
                log.warning("Skipping page asset: %s", e)
        log.info("Loaded %d tutorial page(s) from %s", len(pages), self.pages_dir)
        return pages

    def load_graph(self) -> PageGraph:
        return PageGraph(self.load_pages())

    # ── Authoring ────────────────────────────────────────────────────────────

    def _write(self, page: TutorialPage):
        path = self.path_for(page.page_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._dump(path, page_to_dict(page, path.parent))

    @staticmethod
    def _dump(path: Path, data: dict):
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")

    def _read_raw(self, page_id: str) -> dict:
        path = self.path_for(page_id)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PageAssetError(f"{path}: {e}") from e
        if not isinstance(data, dict):
            raise PageAssetError(f"{path}: page asset must be a JSON object")
        return data

    def create_page(self, page_id: str, title: str = "", body: str = "",
                    after: Optional[str] = None) -> Path:
        """Write a new empty page asset. With ``after`` it is spliced into the chain after that page.

        Both neighbours are read and checked before anything is written, so a
        broken neighbour leaves the directory unchanged.
        """
        page_id = page_id.strip().strip("/")
        if not page_id:
            raise PageAssetError("page id must not be empty")
        path = self.path_for(page_id)
        if path.exists():
            raise PageAssetError(f"page already exists: {path}")

        new_page = TutorialPage(page_id=page_id, title=title or page_id, body=body)
        relinks = []   # (page_id, raw asset with updated links)
        if after is not None:
            if not self.path_for(after).exists():
                raise PageAssetError(f"no such page: {after}")
            after_raw = self._read_raw(after)
            old_next_id = load_page(self.path_for(after), after).next_id
            new_page = new_page.with_links(after, old_next_id)
            relinks.append((after, {**after_raw, "next": page_id}))
            if old_next_id is not None and self.path_for(old_next_id).exists():
                relinks.append((old_next_id, {**self._read_raw(old_next_id), "previous": page_id}))

        self._write(new_page)
        for pid, data in relinks:
            self._dump(self.path_for(pid), data)
        log.info("Created tutorial page %s", path)
        return path
