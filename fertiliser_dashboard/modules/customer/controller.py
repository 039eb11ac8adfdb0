from __future__ import annotations

import logging
import sqlite3

from PySide6.QtCore import Qt, QSortFilterProxyModel, QRegularExpression
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .view import CustomerView
from .form import CustomerForm
from .model import CustomersTableModel
from ..reporting.aggregation import grand_total
from ..reporting.export_dialog import export_pdf
from ..reporting.model import Column, DATE, INT, MONEY, RowsTableModel
from ..reporting.pdf_export import customer_report_html, sale_receipt_html
from ..sales.form import SaleForm
from ...database.repositories.customers_repo import Customer, CustomersRepo
from ...database.repositories.errors import DomainError
from ...database.repositories.products_repo import ProductsRepo
from ...database.repositories.sales_repo import SalesRepo
from ...utils.helpers import fmt_money
from ...utils.ui_helpers import info, error

_log = logging.getLogger(__name__)

RECEIPT_COLUMNS = [
    Column("Receipt #", "receipt_no"),
    Column("Date", "purchase_date", DATE),
    Column("Items", "item_count", INT),
    Column("Total", "total", MONEY),
]

HISTORY_COLUMNS = [
    Column("Date", "purchase_date", DATE),
    Column("Product", "product_name"),
    Column("Qty", "quantity", INT),
    Column("Price", "unit_price", MONEY),
    Column("Discount", "discount_price", MONEY),
    Column("Total", "total_price", MONEY),
]


class CustomerController(BaseModule):
    """
    Customers & sales page.

    The customer list drives two side tables: receipts (one row per saved
    sale) and the line-level purchase history, newest first.
    """

    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = CustomersRepo(conn)
        self.sales = SalesRepo(conn)
        self.products = ProductsRepo(conn)
        self.view = CustomerView()

        self.base_model = CustomersTableModel([])
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base_model)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.view.table.setModel(self.proxy)

        self.receipts_model = RowsTableModel(RECEIPT_COLUMNS)
        self.history_model = RowsTableModel(HISTORY_COLUMNS)
        self.view.receipts.setModel(self.receipts_model)
        self.view.history.setModel(self.history_model)
        self.view.receipts.setSortingEnabled(False)
        self.view.history.setSortingEnabled(False)

        self._connect_signals()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._reload()

    # ---------------- wiring ----------------

    def _connect_signals(self):
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_sale.clicked.connect(self._record_sale)
        self.view.btn_receipt.clicked.connect(self._export_receipt)
        self.view.btn_report.clicked.connect(self._export_report)
        self.view.search.textChanged.connect(self._apply_filter)
        self.view.table.selectionModel().selectionChanged.connect(self._sync_details)

    def _apply_filter(self, text: str):
        self.proxy.setFilterRegularExpression(
            QRegularExpression(QRegularExpression.escape(text))
        )

    def _reload(self):
        keep = self._selected_id()
        self.base_model.replace(self.repo.list_customers())
        self.view.table.resizeColumnsToContents()
        if keep is not None:
            self._select_customer(keep)
        self._sync_details()

    def _select_customer(self, customer_id: int) -> None:
        for r in range(self.base_model.rowCount()):
            if self.base_model.at(r).customer_id == customer_id:
                idx = self.proxy.mapFromSource(self.base_model.index(r, 0))
                if idx.isValid():
                    self.view.table.selectRow(idx.row())
                return

    def _selected(self) -> Customer | None:
        row = self.view.table.selected_source_row()
        return self.base_model.at(row) if row is not None else None

    def _selected_id(self) -> int | None:
        c = self._selected()
        return c.customer_id if c else None

    def _sync_details(self, *_):
        c = self._selected()
        if c is None:
            self.receipts_model.set_rows([])
            self.history_model.set_rows([])
            self.view.lbl_summary.setText("Select a customer to see their purchases.")
            return
        receipts = self.sales.list_receipts(c.customer_id)
        history = self.sales.lines_for_customer(c.customer_id)
        self.receipts_model.set_rows(receipts)
        self.history_model.set_rows(history)
        self.view.receipts.resizeColumnsToContents()
        self.view.history.resizeColumnsToContents()
        self.view.lbl_summary.setText(
            f"{c.name}: {len(receipts)} receipt(s), "
            f"total purchases {fmt_money(grand_total(history, 'total_price'), symbol=True)}"
        )

    # ---------------- actions ----------------

    def _add(self):
        dlg = CustomerForm(self.view)
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            cid = self.repo.create(**data)
        except (DomainError, sqlite3.Error) as e:
            _log.error("Failed to add customer %r", data.get("name"), exc_info=True)
            error(self.view, "Not saved", str(e))
            return
        info(self.view, "Saved", f"Customer “{data['name']}” added (#{cid}).")
        self._reload()
        self._select_customer(cid)

    def _record_sale(self):
        customers = [(c.customer_id, c.name) for c in self.repo.list_customers()]
        if not customers:
            info(self.view, "No customers", "Add a customer before recording a sale.")
            return
        products = self.products.list_in_stock()
        if not products:
            info(self.view, "No stock", "There are no products in stock.")
            return
        dlg = SaleForm(
            self.view,
            customers=customers,
            products=products,
            customer_id=self._selected_id(),
            submit=lambda p: self.sales.record_sale(p["customer_id"], p["purchase_date"], p["lines"]),
        )
        if not dlg.exec():
            return
        receipt_no = dlg.saved()
        data = dlg.payload()
        info(self.view, "Saved", f"Sale recorded (receipt {receipt_no}).")
        self._reload()
        self._select_customer(data["customer_id"])

    def _selected_receipt_no(self) -> str | None:
        row = self.view.receipts.selected_source_row()
        if row is None:
            return None
        return self.receipts_model.at(row).receipt_no

    def _export_receipt(self):
        c = self._selected()
        if c is None:
            info(self.view, "Select", "Please select a customer to generate a receipt.")
            return
        receipt_no = self._selected_receipt_no()
        if receipt_no is None:
            receipts = self.sales.list_receipts(c.customer_id)
            if not receipts:
                info(self.view, "No sales", "This customer has no recorded sales.")
                return
            receipt_no = receipts[0].receipt_no
        lines = self.sales.receipt_lines(receipt_no)
        if not lines:
            error(self.view, "Missing", f"Receipt {receipt_no} has no lines.")
            return
        purchase_date = lines[0]["purchase_date"]
        export_pdf(
            self.view,
            "Export sale receipt",
            f"{c.name}_receipt_{purchase_date}.pdf",
            lambda: sale_receipt_html(c, purchase_date, lines, receipt_no),
        )

    def _export_report(self):
        c = self._selected()
        if c is None:
            info(self.view, "Select", "Please select a customer to generate a report.")
            return
        export_pdf(
            self.view,
            "Export customer purchase report",
            f"{c.name}_sales_report.pdf",
            lambda: customer_report_html(c, self.sales.lines_for_customer(c.customer_id)),
        )
