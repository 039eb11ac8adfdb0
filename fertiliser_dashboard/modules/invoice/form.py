from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

from ...utils.validators import FormResult, ValidationError, require_decimal, require_text


class InvoiceForm(QDialog):
    """
    New purchase invoice.

    Args:
        companies: (company_id, name) pairs for the company picker.
        suggest_number: callable(date 'YYYY-MM-DD') -> next free invoice number.
        number_exists: callable(number) -> bool, used to refuse duplicates early.
        company_id: preselected company.
    """

    def __init__(
        self,
        parent=None,
        *,
        companies: list[tuple[int, str]],
        suggest_number: Optional[Callable[[str], str]] = None,
        number_exists: Optional[Callable[[str], bool]] = None,
        company_id: int | None = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Invoice")
        self.setModal(True)
        self._suggest = suggest_number
        self._exists = number_exists
        self._auto_number = ""

        self.company = QComboBox()
        self.company.addItem("Select company…", None)
        for cid, name in companies:
            self.company.addItem(name, cid)
        if company_id is not None:
            idx = self.company.findData(company_id)
            if idx >= 0:
                self.company.setCurrentIndex(idx)

        self.date = QDateEdit(QDate.currentDate())
        self.date.setCalendarPopup(True)
        self.date.setDisplayFormat("dd/MM/yyyy")
        self.number = QLineEdit()
        self.total = QLineEdit()
        self.total.setPlaceholderText("0.00")

        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Company*", self.company)
        form.addRow("Date*", self.date)
        form.addRow("Invoice Number*", self.number)
        form.addRow("Total Amount*", self.total)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        self.date.dateChanged.connect(self._refresh_suggestion)
        self._refresh_suggestion()
        self._payload = None

    def _date_str(self) -> str:
        return self.date.date().toString("yyyy-MM-dd")

    def _refresh_suggestion(self, *_):
        if self._suggest is None:
            return
        # only replace text the user has not typed over
        current = self.number.text().strip()
        if current and current != self._auto_number:
            return
        self._auto_number = self._suggest(self._date_str())
        self.number.setText(self._auto_number)

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        company_id = self.company.currentData()
        if company_id is None:
            errors.append(ValidationError("company_id", "Company is required."))
        number = require_text(errors, "invoice_number", "Invoice number", self.number.text())
        if number and self._exists is not None and self._exists(number):
            errors.append(ValidationError("invoice_number", f"Invoice number “{number}” is already used."))
        total = require_decimal(errors, "total_amount", "Total amount", self.total.text())
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={
                "company_id": int(company_id),
                "invoice_number": number,
                "date": self._date_str(),
                "total_amount": total,
            }
        )

    def get_payload(self) -> dict | None:
        res = self.parse()
        if not res.ok:
            self.lbl_error.setText("\n".join(res.messages()))
            self.lbl_error.setVisible(True)
            return None
        self.lbl_error.setVisible(False)
        return res.value

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
