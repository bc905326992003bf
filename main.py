import sys
import argparse
import logging
import traceback
from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QFont
from PyQt6.QtWidgets import (
    QApplication, QInputDialog, QLabel, QMainWindow, QMessageBox,
)

from tutorial_config import TUTORIAL_LOG_FILE, TUTORIAL_LOG_LEVEL, TUTORIAL_PAGES_DIR

# ── Logging — writes to tutorial_guide.log + console ─────────────────────────
logging.basicConfig(
    level=getattr(logging, TUTORIAL_LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler(TUTORIAL_LOG_FILE, encoding="utf-8"),
        logging.StreamHandler(sys.stdout),
    ],
)
log = logging.getLogger("tutorial_guide")


# ── Global exception hook — logs any uncaught exception and shows it ─────────
def _global_excepthook(exc_type, exc_value, exc_tb):
    msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    log.critical("Uncaught exception:\n%s", msg)
    app = QApplication.instance()
    if app is not None:
        QMessageBox.critical(None, "Tutorial Guide — fatal error", msg[:3000])
    sys.__excepthook__(exc_type, exc_value, exc_tb)

sys.excepthook = _global_excepthook


from page_store import PageStore
from tutorial_page import PageAssetError
from ui.tutorial_window import TutorialWindow


# ═══════════════════════════════════════════════════════════════════════════
# HOST WINDOW
# ═══════════════════════════════════════════════════════════════════════════

class HostWindow(QMainWindow):
    """Minimal content-tool workspace hosting the Tutorial Guide menu entries."""

    def __init__(self, store: PageStore):
        super().__init__()
        self.store = store
        self.setWindowTitle("Workspace")
        self.resize(1000, 700)

        placeholder = QLabel(f"Project pages: {store.pages_dir.resolve()}")
        placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        placeholder.setStyleSheet("color: #7f8c8d;")
        self.setCentralWidget(placeholder)
        self._setup_menus()

    def _setup_menus(self):
        bar = self.menuBar()

        # Assets > Create > Tutorial > Tutorial Page
        assets = bar.addMenu("Assets")
        create = assets.addMenu("Create")
        tutorial = create.addMenu("Tutorial")
        act_new = QAction("Tutorial Page", self)
        act_new.triggered.connect(self.create_page)
        tutorial.addAction(act_new)

        # Window > Tutorial Guide
        window = bar.addMenu("Window")
        act_guide = QAction("Tutorial Guide", self)
        act_guide.triggered.connect(self.open_tutorial)
        window.addAction(act_guide)

    def open_tutorial(self):
        return TutorialWindow.open_window(self.store.load_graph())

    def create_page(self):
        page_id, ok = QInputDialog.getText(self, "New Tutorial Page", "Page id (e.g. 03_layers):")
        if not ok or not page_id.strip():
            return
        title, _ = QInputDialog.getText(self, "New Tutorial Page", "Title:")
        try:
            path = self.store.create_page(page_id, title=title)
        except PageAssetError as e:
            log.warning("Could not create page: %s", e)
            QMessageBox.warning(self, "New Tutorial Page", str(e))
            return
        self.statusBar().showMessage(f"Created {path}", 5000)

    def closeEvent(self, event):
        log.info("Closing workspace")
        TutorialWindow.close_open_window()
        event.accept()


# ═══════════════════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════════════════

def main(argv=None):
    ap = argparse.ArgumentParser(description="Tutorial Guide viewer")
    ap.add_argument("--pages", default=TUTORIAL_PAGES_DIR, help="directory with *.page.json assets")
    ap.add_argument("--open", action="store_true", help="open the Tutorial Guide at start")
    args = ap.parse_args(argv)

    store = PageStore(Path(args.pages))
    log.info("Tutorial Guide started, pages: %s", store.pages_dir)

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    app.setFont(QFont("Arial", 10))

    host = HostWindow(store)
    host.show()
    if args.open:
        host.open_tutorial()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
