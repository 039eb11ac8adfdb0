import logging
import sqlite3

from PySide6.QtCore import Qt, QSortFilterProxyModel, QRegularExpression
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .view import CompanyView
from .form import CompanyForm
from .model import CompaniesTableModel
from ...database.repositories.companies_repo import CompaniesRepo
from ...database.repositories.errors import DomainError
from ...utils.ui_helpers import info, error

_log = logging.getLogger(__name__)


class CompanyController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = CompaniesRepo(conn)
        self.view = CompanyView()
        self.base_model = CompaniesTableModel([])
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base_model)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.view.table.setModel(self.proxy)
        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    def _connect_signals(self):
        self.view.btn_add.clicked.connect(self._add)
        self.view.search.textChanged.connect(self._apply_filter)

    def _reload(self):
        self.base_model.replace(self.repo.list_companies())
        self.view.table.resizeColumnsToContents()

    def _apply_filter(self, text: str):
        self.proxy.setFilterRegularExpression(
            QRegularExpression(QRegularExpression.escape(text))
        )

    def _add(self):
        dlg = CompanyForm(self.view)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            cid = self.repo.create(**data)
        except (DomainError, sqlite3.Error) as e:
            _log.error("Failed to add company %r", data.get("name"), exc_info=True)
            error(self.view, "Not saved", str(e))
            return
        info(self.view, "Saved", f"Company “{data['name']}” added (#{cid}).")
        self._reload()
