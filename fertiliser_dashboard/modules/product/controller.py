import logging
import sqlite3

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .view import ProductView
from .form import ProductForm
from .model import ProductsTableModel
from .image_store import store_image
from ...database.repositories.companies_repo import CompaniesRepo
from ...database.repositories.errors import DomainError
from ...database.repositories.invoices_repo import InvoicesRepo
from ...database.repositories.products_repo import ProductsRepo
from ...utils.ui_helpers import info, error

_log = logging.getLogger(__name__)


class ProductController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = ProductsRepo(conn)
        self.invoices = InvoicesRepo(conn)
        self.companies = CompaniesRepo(conn)
        self.view = ProductView()
        self.base_model = ProductsTableModel([])
        self.view.table.setModel(self.base_model)
        self._connect_signals()
        self._load_companies()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._load_companies()
        self._reload()

    def _connect_signals(self):
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.search.textChanged.connect(lambda _t: self._reload())
        self.view.cmb_category.currentIndexChanged.connect(lambda _i: self._reload())
        self.view.cmb_company.currentIndexChanged.connect(lambda _i: self._reload())

    def _load_companies(self):
        cmb = self.view.cmb_company
        keep = cmb.currentData()
        cmb.blockSignals(True)
        cmb.clear()
        cmb.addItem("All companies", None)
        for cid, name in self.companies.list_for_select():
            cmb.addItem(name, cid)
        idx = cmb.findData(keep) if keep is not None else 0
        cmb.setCurrentIndex(max(0, idx))
        cmb.blockSignals(False)

    def _reload(self):
        rows = self.repo.list_products(
            company_id=self.view.cmb_company.currentData(),
            category=self.view.cmb_category.currentData(),
            search=self.view.search.text(),
        )
        self.base_model.replace(rows)
        self.view.table.resizeColumnsToContents()
        self.view.lbl_count.setText(f"{len(rows)} product(s)")

    def _selected_id(self) -> int | None:
        row = self.view.table.selected_source_row()
        if row is None:
            return None
        return self.base_model.at(row).product_id

    def _invoice_choices(self) -> list[tuple[int, str]]:
        return [
            (inv.invoice_id, f"{inv.invoice_number} — {inv.company_name}")
            for inv in self.invoices.list_invoices()
        ]

    def _with_stored_image(self, data: dict) -> dict | None:
        """Copy a newly chosen image into the store and swap in its URL."""
        data = dict(data)
        source = data.pop("image_source", None)
        if source:
            try:
                data["image_url"] = store_image(source)
            except (OSError, ValueError) as e:
                _log.error("Could not store image %s", source, exc_info=True)
                error(self.view, "Image not saved", str(e))
                return None
        return data

    def _add(self):
        dlg = ProductForm(self.view, invoices=self._invoice_choices())
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        data = self._with_stored_image(data)
        if data is None:
            return
        try:
            pid, restocked = self.repo.add_or_restock(**data)
        except (DomainError, sqlite3.Error) as e:
            _log.error("Failed to add product %r", data.get("name"), exc_info=True)
            error(self.view, "Not saved", str(e))
            return
        if restocked:
            info(self.view, "Restocked",
                 f"“{data['name']}” already exists; added {data['quantity']} to product #{pid}.")
        else:
            info(self.view, "Saved", f"Product #{pid} created.")
        self._reload()

    def _edit(self):
        pid = self._selected_id()
        if not pid:
            info(self.view, "Select", "Please select a product to edit.")
            return
        current = self.repo.get(pid)
        if current is None:
            error(self.view, "Missing", f"Product #{pid} no longer exists.")
            self._reload()
            return
        dlg = ProductForm(self.view, invoices=self._invoice_choices(), initial=current)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        data = self._with_stored_image(data)
        if data is None:
            return
        try:
            self.repo.update(pid, **data)
        except (DomainError, sqlite3.Error) as e:
            _log.error("Failed to update product %s", pid, exc_info=True)
            error(self.view, "Not saved", str(e))
            return
        info(self.view, "Saved", f"Product #{pid} updated.")
        self._reload()
