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
from ...database.repositories.sales_repo import SaleLine
from ...utils.validators import FormResult, ValidationError
from ...widgets.line_items import LineItemsEditor

_log = logging.getLogger(__name__)


class SaleForm(QDialog):
    """
    Record one sale: a customer, a date and one or more product lines.

    Stock shown per line is what the product list reported when the dialog
    opened; the repository re-checks it atomically when saving.

    payload() -> {"customer_id", "purchase_date", "lines": [SaleLine, ...],
                  "preview": [LineInput, ...]}

    When `submit` is given it is called with the payload on Save and its
    return value kept as saved(). A DomainError or sqlite3.Error from it is
    shown in the dialog, which stays open with its values for another try.
    """

    def __init__(
        self,
        parent=None,
        *,
        customers: Sequence[tuple[int, str]],
        products: Sequence,
        customer_id: int | None = None,
        submit: Optional[Callable[[dict], object]] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Record Sale")
        self.setModal(True)
        self.resize(760, 460)
        self._payload = None
        self._submit = submit
        self._result = None

        self.customer = QComboBox()
        self.customer.addItem("Select customer…", None)
        for cid, name in customers:
            self.customer.addItem(name, cid)
        if customer_id is not None:
            idx = self.customer.findData(customer_id)
            if idx >= 0:
                self.customer.setCurrentIndex(idx)

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
        form.addRow("Customer*", self.customer)
        form.addRow("Date*", self.date)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.items, 1)
        root.addWidget(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        customer_id = self.customer.currentData()
        if customer_id is None:
            errors.append(ValidationError("customer_id", "Please select a customer."))
        lines = self.items.collect()
        errors.extend(lines.errors)
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={
                "customer_id": int(customer_id),
                "purchase_date": self.date.date().toString("yyyy-MM-dd"),
                "lines": [SaleLine(ln.product_id, ln.quantity, ln.discount) for ln in lines.value],
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
                _log.warning("Sale not saved: %s", e)
                self.show_error(str(e))
                return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload

    def saved(self):
        return self._result
