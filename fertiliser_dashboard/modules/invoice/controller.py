import logging
import sqlite3

from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from .view import InvoiceView
from .form import InvoiceForm
from .model import InvoicesTableModel
from ..reporting.aggregation import grand_total
from ..reporting.export_dialog import export_pdf
from ..reporting.pdf_export import invoice_html, invoice_report_html
from ...database.repositories.companies_repo import CompaniesRepo
from ...database.repositories.errors import DomainError
from ...database.repositories.invoices_repo import Invoice, InvoicesRepo
from ...utils.helpers import fmt_money
from ...utils.ui_helpers import info, error

_log = logging.getLogger(__name__)


class InvoiceController(BaseModule):
    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = InvoicesRepo(conn)
        self.companies = CompaniesRepo(conn)
        self.view = InvoiceView()
        self.base_model = InvoicesTableModel([])
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
        self.view.btn_pdf.clicked.connect(self._export_invoice)
        self.view.btn_report.clicked.connect(self._export_company_report)
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
        rows = self.repo.list_invoices(self.view.cmb_company.currentData())
        self.base_model.replace(rows)
        self.view.table.resizeColumnsToContents()
        self.view.lbl_summary.setText(
            f"{len(rows)} invoice(s), total {fmt_money(grand_total(rows, 'total_amount'), symbol=True)}"
        )

    def _selected(self) -> Invoice | None:
        row = self.view.table.selected_source_row()
        return self.base_model.at(row) if row is not None else None

    def _add(self):
        dlg = InvoiceForm(
            self.view,
            companies=self.companies.list_for_select(),
            suggest_number=self.repo.suggest_number,
            number_exists=self.repo.number_exists,
            company_id=self.view.cmb_company.currentData(),
        )
        if not dlg.exec():
            return
        data = dlg.payload()
        if not data:
            return
        try:
            iid = self.repo.create(**data)
        except (DomainError, sqlite3.Error) as e:
            _log.error("Failed to add invoice %r", data.get("invoice_number"), exc_info=True)
            error(self.view, "Not saved", str(e))
            return
        info(self.view, "Saved", f"Invoice {data['invoice_number']} added (#{iid}).")
        self._reload()

    def _export_invoice(self):
        inv = self._selected()
        if inv is None:
            info(self.view, "Select", "Please select an invoice to export.")
            return
        export_pdf(
            self.view,
            "Export invoice",
            f"invoice-{inv.invoice_number}.pdf",
            lambda: invoice_html(inv),
        )

    def _export_company_report(self):
        company_id = self.view.cmb_company.currentData()
        if company_id is None:
            inv = self._selected()
            company_id = inv.company_id if inv else None
        if company_id is None:
            info(self.view, "Select", "Choose a company in the filter or select one of its invoices.")
            return
        company = self.companies.get(company_id)
        if company is None:
            error(self.view, "Missing", f"Company #{company_id} no longer exists.")
            return
        export_pdf(
            self.view,
            "Export company invoice report",
            f"{company.name}-invoice-report.pdf",
            lambda: invoice_report_html(company.name, self.repo.list_for_company_by_date(company_id)),
        )
