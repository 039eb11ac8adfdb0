from __future__ import annotations

import logging
import sys
from importlib import import_module
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QSizePolicy,
    QStackedWidget,
    QWidget,
)

from .constants import APP_NAME, STYLE_FILE
from .database import get_connection
from .modules.base_module import BaseModule
from .utils.loggers import get_logger
from .utils.ui_helpers import wrap_center

_log = logging.getLogger(__name__)

# (nav title, controller module, controller class)
MODULES = [
    ("Overview", ".modules.overview.controller", "OverviewController"),
    ("Companies", ".modules.company.controller", "CompanyController"),
    ("Invoices", ".modules.invoice.controller", "InvoiceController"),
    ("Products", ".modules.product.controller", "ProductController"),
    ("Customers & Sales", ".modules.customer.controller", "CustomerController"),
    ("Returns", ".modules.returns.controller", "ReturnsController"),
    ("Turnover", ".modules.turnover.controller", "TurnoverController"),
]


def load_qss() -> str:
    f = Path(__file__).resolve().parent / STYLE_FILE
    if f.exists():
        return f.read_text(encoding="utf-8")
    return ""


def _lazy_get(name: str, attr: str):
    """Import a module (relative to this package) and fetch an attribute from it."""
    try:
        mod = import_module(name, package=__package__)
    except ImportError as e:
        raise ImportError(f"Failed to import module '{name}': {e}") from e
    try:
        return getattr(mod, attr)
    except AttributeError as e:
        raise ImportError(f"'{attr}' not found in module '{name}'.") from e


class MainWindow(QMainWindow):
    """
    Left navigation + stacked pages. Pages are built the first time they are
    opened; an already built page is refreshed every time it is shown again
    so figures entered elsewhere show up.
    """

    def __init__(self, conn, current_user: dict):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} – {current_user.get('full_name') or current_user['username']}")
        self.setMinimumSize(960, 600)

        self.conn = conn
        self.user = current_user
        self.signed_out = False

        central = QWidget(self)
        row = QHBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setFixedWidth(160)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)
        self.stack = QStackedWidget()
        row.addWidget(self.nav)
        row.addWidget(self.stack, 1)

        self.module_info: list[dict] = []
        self.modules: dict[int, BaseModule] = {}

        for title, path, cls in MODULES:
            self._add_module_deferred(title, path, cls, self.conn)

        self._build_menu()
        self.nav.currentRowChanged.connect(self._load_module_at_index)
        if self.nav.count():
            self.nav.setCurrentRow(0)

    # ---------- menu ----------
    def _build_menu(self):
        file_menu = self.menuBar().addMenu("&File")
        act_sign_out = QAction("Sign out", self)
        act_sign_out.triggered.connect(self.sign_out)
        act_quit = QAction("Quit", self)
        act_quit.triggered.connect(self.close)
        file_menu.addAction(act_sign_out)
        file_menu.addSeparator()
        file_menu.addAction(act_quit)

    def sign_out(self):
        _log.info("User %r signed out", self.user.get("username"))
        self.signed_out = True
        self.close()

    # ---------- deferred modules ----------
    def _add_module_deferred(self, title: str, module_path: str, class_name: str, *args, **kwargs):
        self.module_info.append(
            {
                "title": title,
                "module_path": module_path,
                "class_name": class_name,
                "args": args,
                "kwargs": kwargs,
            }
        )
        self.nav.addItem(QListWidgetItem(title))
        self.stack.addWidget(wrap_center(QLabel(f"Loading {title}...")))

    def _load_module_at_index(self, index: int):
        if index < 0 or index >= len(self.module_info):
            return
        controller = self.modules.get(index)
        if controller is None:
            self._load_module(index)
        else:
            controller.refresh()
        self.stack.setCurrentIndex(index)

    def _load_module(self, index: int):
        info = self.module_info[index]
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            Controller = _lazy_get(info["module_path"], info["class_name"])
            controller = Controller(*info["args"], **info["kwargs"])
        except Exception:
            _log.error("Failed to load %s", info["title"], exc_info=True)
            self._replace_widget(index, wrap_center(QLabel(f"{info['title']}\n\nLoading failed")))
            return
        finally:
            QApplication.restoreOverrideCursor()
        self._replace_widget(index, controller.get_widget())
        self.modules[index] = controller

    def _replace_widget(self, index: int, widget: QWidget):
        old = self.stack.widget(index)
        self.stack.removeWidget(old)
        old.deleteLater()
        self.stack.insertWidget(index, widget)


def _sign_in(conn):
    """Login dialog until it succeeds or the user cancels; None on cancel."""
    LoginController = _lazy_get(".modules.login.controller", "LoginController")
    login = LoginController(conn)
    message = None
    while True:
        user = login.prompt(message)
        if user:
            return user
        if login.last_error_code == "cancelled":
            return None
        message = login.last_error_message


def main():
    get_logger()
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    qss = load_qss()
    if qss:
        app.setStyleSheet(qss)

    conn = get_connection()
    try:
        while True:
            user = _sign_in(conn)
            if user is None:
                return 0
            win = MainWindow(conn, current_user=user)
            win.resize(1200, 760)
            win.show()
            app.exec()
            if not win.signed_out:
                return 0
    finally:
        conn.close()


if __name__ == "__main__":
    sys.exit(main())
