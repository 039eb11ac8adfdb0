from __future__ import annotations

import logging
import sqlite3

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .view import ReturnsView
from .form import ReturnForm
from ..reporting.aggregation import grand_total
from ..reporting.export_dialog import export_pdf
from ..reporting.model import Column, DATE, INT, MONEY, RowsTableModel
from ..reporting.pdf_export import return_receipt_html, returns_report_html
from ...database.repositories.companies_repo import CompaniesRepo
from ...database.repositories.invoices_repo import InvoicesRepo
from ...database.repositories.products_repo import ProductsRepo
from ...database.repositories.returns_repo import ReturnSlip, ReturnsRepo
from ...utils.helpers import fmt_date, fmt_money
from ...utils.ui_helpers import info, error

_log = logging.getLogger(__name__)

SLIP_COLUMNS = [
    Column("Return #", "return_no"),
    Column("Date", "return_date", DATE),
    Column("Company", "company_name"),
    Column("Invoice #", "invoice_number"),
    Column("Items", "item_count", INT),
    Column("Total", "total", MONEY),
]

LINE_COLUMNS = [
    Column("Product", "product_name"),
    Column("Unit", "quantity_unit"),
    Column("Qty", "quantity", INT),
    Column("Price", "unit_price", MONEY),
    Column("Discount", "discount_price", MONEY),
    Column("Total", "total_price", MONEY),
]


class ReturnsController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = ReturnsRepo(conn)
        self.companies = CompaniesRepo(conn)
        self.invoices = InvoicesRepo(conn)
        self.products = ProductsRepo(conn)
        self.view = ReturnsView()

        self.slips_model = RowsTableModel(SLIP_COLUMNS)
        self.lines_model = RowsTableModel(LINE_COLUMNS)
        self.view.slips.setModel(self.slips_model)
        self.view.lines.setModel(self.lines_model)

        self._connect_signals()
        self._load_companies()
        self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def refresh(self) -> None:
        self._load_companies()
        self._reload()

    def _connect_signals(self):
        self.view.btn_add.clicked.connect(self._record_return)
        self.view.btn_receipt.clicked.connect(self._export_receipt)
        self.view.btn_report.clicked.connect(self._export_report)
        self.view.cmb_company.currentIndexChanged.connect(lambda _i: self._reload())
        self.view.slips.selectionModel().selectionChanged.connect(self._sync_lines)

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
        slips = self.repo.list_slips(self.view.cmb_company.currentData())
        self.slips_model.set_rows(slips)
        self.view.slips.resizeColumnsToContents()
        self.view.lbl_summary.setText(
            f"{len(slips)} return(s), total {fmt_money(grand_total(slips, 'total'), symbol=True)}"
        )
        self._sync_lines()

    def _selected_slip(self) -> ReturnSlip | None:
        row = self.view.slips.selected_source_row()
        return self.slips_model.at(row) if row is not None else None

    def _sync_lines(self, *_):
        slip = self._selected_slip()
        self.lines_model.set_rows(self.repo.slip_lines(slip.return_no) if slip else [])
        self.view.lines.resizeColumnsToContents()

    def _invoice_choices(self, company_id: int) -> list[tuple[int, str]]:
        return [
            (inv.invoice_id, f"{inv.invoice_number} ({fmt_date(inv.date)})")
            for inv in self.invoices.list_for_company_by_date(company_id)
        ]

    def _record_return(self):
        companies = self.companies.list_for_select()
        if not companies:
            info(self.view, "No companies", "Add a company and an invoice before recording a return.")
            return
        products = self.products.list_in_stock()
        if not products:
            info(self.view, "No stock", "There are no products in stock to return.")
            return
        dlg = ReturnForm(
            self.view,
            companies=companies,
            invoices_for=self._invoice_choices,
            products=products,
            company_id=self.view.cmb_company.currentData(),
            submit=lambda p: self.repo.record_return(
                p["company_id"], p["invoice_id"], p["return_date"], p["lines"]
            ),
        )
        if not dlg.exec():
            return
        info(self.view, "Saved", f"Return recorded ({dlg.saved()}).")
        self._reload()

    def _export_receipt(self):
        slip = self._selected_slip()
        if slip is None:
            info(self.view, "Select", "Please select a return to generate a receipt.")
            return
        lines = self.repo.slip_lines(slip.return_no)
        if not lines:
            error(self.view, "Missing", f"Return {slip.return_no} has no lines.")
            return
        export_pdf(
            self.view,
            "Export return receipt",
            f"{slip.company_name}_return_{slip.return_date}.pdf",
            lambda: return_receipt_html(
                slip.company_name, slip.invoice_number, slip.return_date, lines, slip.return_no
            ),
        )

    def _export_report(self):
        company_id = self.view.cmb_company.currentData()
        if company_id is None:
            slip = self._selected_slip()
            company_id = slip.company_id if slip else None
        if company_id is None:
            info(self.view, "Select", "Please select a company to generate a report.")
            return
        company = self.companies.get(company_id)
        if company is None:
            error(self.view, "Missing", f"Company #{company_id} no longer exists.")
            return
        export_pdf(
            self.view,
            "Export company returns report",
            f"{company.name}_returns_report.pdf",
            lambda: returns_report_html(company.name, self.repo.lines_for_company(company_id)),
        )
