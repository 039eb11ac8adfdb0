from __future__ import annotations

import re

from PySide6.QtWidgets import (
    QDialog,
    QFormLayout,
    QDialogButtonBox,
    QLabel,
    QVBoxLayout,
    QLineEdit,
    QPlainTextEdit,
)

from ...utils.validators import FormResult, ValidationError, clean_optional, require_text

_EMAIL_RX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CustomerForm(QDialog):
    """
    New customer.

    Name is required. Email, phone and address are optional; an email that
    is filled in must look like one.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Customer")
        self.setModal(True)

        self.name = QLineEdit()
        self.email = QLineEdit()
        self.phone = QLineEdit()
        self.addr = QPlainTextEdit()
        self.addr.setPlaceholderText("Address (optional)")
        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Name*", self.name)
        form.addRow("Email", self.email)
        form.addRow("Phone", self.phone)
        form.addRow("Address", self.addr)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.lbl_error)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        self._payload = None

    # ---------------- helpers ----------------

    @staticmethod
    def _collapse_spaces(line: str) -> str:
        return re.sub(r"\s+", " ", line).strip()

    def _norm_multiline(self, text: str) -> str:
        lines = [self._collapse_spaces(l) for l in (text or "").splitlines()]
        return "\n".join(l for l in lines if l).strip()

    # ---------------- API ----------------

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        name = require_text(errors, "name", "Customer name", self.name.text())
        email = clean_optional(self.email.text())
        if email and not _EMAIL_RX.match(email):
            errors.append(ValidationError("email", "Email address is not valid."))
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={
                "name": self._collapse_spaces(name),
                "email": email,
                "phone": clean_optional(self.phone.text()),
                "address": self._norm_multiline(self.addr.toPlainText()) or None,
            }
        )

    def get_payload(self) -> dict | None:
        res = self.parse()
        if not res.ok:
            self.lbl_error.setText("\n".join(res.messages()))
            self.lbl_error.setVisible(True)
            self.name.setFocus()
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
