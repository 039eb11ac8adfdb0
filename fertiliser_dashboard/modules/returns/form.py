from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QVBoxLayout,
)

from ...database.repositories.errors import DomainError
from ...database.repositories.returns_repo import ReturnLine
from ...utils.validators import FormResult, ValidationError
from ...widgets.line_items import LineItemsEditor

_log = logging.getLogger(__name__)


class ReturnForm(QDialog):
    """
    Return stock to a company against one of its invoices.

    Picking a company reloads the invoice list through
    `invoices_for(company_id) -> [(invoice_id, label), ...]`.
    Returned units leave the shop, so each line is limited by current stock.
    `submit` behaves as in SaleForm.
    """

    def __init__(
        self,
        parent=None,
        *,
        companies: Sequence[tuple[int, str]],
        invoices_for: Callable[[int], Sequence[tuple[int, str]]],
        products: Sequence,
        company_id: int | None = None,
        submit: Optional[Callable[[dict], object]] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Record Return")
        self.setModal(True)
        self.resize(760, 480)
        self._invoices_for = invoices_for
        self._submit = submit
        self._payload = None
        self._result = None

        self.company = QComboBox()
        self.company.addItem("Select company…", None)
        for cid, name in companies:
            self.company.addItem(name, cid)
        self.invoice = QComboBox()

        self.date = QDateEdit(QDate.currentDate())
        self.date.setCalendarPopup(True)
        self.date.setDisplayFormat("dd/MM/yyyy")

        self.items = LineItemsEditor()
        self.items.set_products(products)
        self.items.add_row()

        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Company*", self.company)
        form.addRow("Invoice*", self.invoice)
        form.addRow("Return Date*", self.date)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.items, 1)
        root.addWidget(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        self.company.currentIndexChanged.connect(self._load_invoices)
        if company_id is not None:
            idx = self.company.findData(company_id)
            if idx >= 0:
                self.company.setCurrentIndex(idx)
        self._load_invoices()

    def _load_invoices(self, *_):
        self.invoice.clear()
        self.invoice.addItem("Select invoice…", None)
        cid = self.company.currentData()
        if cid is None:
            self.invoice.setEnabled(False)
            return
        for iid, label in self._invoices_for(int(cid)):
            self.invoice.addItem(label, iid)
        self.invoice.setEnabled(True)

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        company_id = self.company.currentData()
        invoice_id = self.invoice.currentData()
        if company_id is None:
            errors.append(ValidationError("company_id", "Please select a company."))
        elif invoice_id is None:
            errors.append(ValidationError("invoice_id", "Please select an invoice."))
        lines = self.items.collect()
        errors.extend(lines.errors)
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={
                "company_id": int(company_id),
                "invoice_id": int(invoice_id),
                "return_date": self.date.date().toString("yyyy-MM-dd"),
                "lines": [ReturnLine(ln.product_id, ln.quantity, ln.discount) for ln in lines.value],
                "preview": lines.value,
            }
        )

    def show_error(self, message: str) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(bool(message))

    def get_payload(self) -> dict | None:
        res = self.parse()
        if not res.ok:
            self.show_error("\n".join(res.messages()))
            return None
        self.show_error("")
        return res.value

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        if self._submit is not None:
            try:
                self._result = self._submit(p)
            except (DomainError, sqlite3.Error) as e:
                _log.warning("Return not saved: %s", e)
                self.show_error(str(e))
                return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload

    def saved(self):
        return self._result
