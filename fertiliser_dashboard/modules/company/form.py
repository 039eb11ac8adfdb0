from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

from ...utils.validators import FormResult, ValidationError, clean_optional, require_text


class CompanyForm(QDialog):
    """Add a supplying company: name is required, type is free text."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Company")
        self.setModal(True)

        self.name = QLineEdit()
        self.company_type = QLineEdit()
        self.company_type.setPlaceholderText("e.g. Manufacturer, Distributor (optional)")
        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Name*", self.name)
        form.addRow("Type", self.company_type)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        self._payload = None

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        name = require_text(errors, "name", "Company name", self.name.text())
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={"name": " ".join(name.split()), "company_type": clean_optional(self.company_type.text())}
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
