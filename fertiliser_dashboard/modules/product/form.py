from __future__ import annotations

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from ...constants import PRODUCT_CATEGORIES, QUANTITY_UNITS
from ...utils.validators import (
    FormResult,
    ValidationError,
    clean_optional,
    require_decimal,
    require_text,
)
from .image_store import local_path


class ProductForm(QDialog):
    """
    Add / edit a product.

    `invoices` is a list of (invoice_id, label) pairs. In add mode the
    quantity is the number of units received and must be at least 1; when
    editing it is the corrected stock figure and may be 0.

    The payload carries `image_source` (a local file chosen in this dialog)
    separately from `image_url` (what is already stored); the controller
    copies the file into the image store before saving.
    """

    def __init__(self, parent=None, *, invoices: list[tuple[int, str]], initial=None):
        super().__init__(parent)
        self.setWindowTitle("Edit Product" if initial else "Add Product")
        self.setModal(True)
        self._initial = initial
        self._image_source: str | None = None
        self._payload = None

        self.invoice = QComboBox()
        self.invoice.addItem("Select invoice…", None)
        for iid, label in invoices:
            self.invoice.addItem(label, iid)

        self.category = QComboBox()
        for cat in PRODUCT_CATEGORIES:
            self.category.addItem(cat)

        self.name = QLineEdit()
        self.quantity = QSpinBox()
        self.quantity.setRange(0 if initial else 1, 10_000_000)
        self.price = QLineEdit()
        self.price.setPlaceholderText("0.00")
        self.discount_price = QLineEdit()
        self.discount_price.setPlaceholderText("optional")
        self.offer_scheme = QLineEdit()
        self.offer_scheme.setPlaceholderText("e.g. Buy 10 get 1 free (optional)")

        self.unit = QComboBox()
        self.unit.addItem("—", None)
        for u in QUANTITY_UNITS:
            self.unit.addItem(u, u)

        self.has_expiry = QCheckBox("Has expiry")
        self.expiry = QDateEdit(QDate.currentDate().addYears(1))
        self.expiry.setCalendarPopup(True)
        self.expiry.setDisplayFormat("dd/MM/yyyy")
        self.expiry.setEnabled(False)
        self.has_expiry.toggled.connect(self.expiry.setEnabled)
        expiry_row = QHBoxLayout()
        expiry_row.addWidget(self.has_expiry)
        expiry_row.addWidget(self.expiry, 1)

        self.lbl_image = QLabel("No image")
        self.lbl_image.setFixedSize(96, 96)
        self.lbl_image.setAlignment(Qt.AlignCenter)
        self.lbl_image.setStyleSheet("border:1px solid #ccc;")
        self.btn_image = QPushButton("Choose Image…")
        self.btn_image.clicked.connect(self._choose_image)
        image_row = QHBoxLayout()
        image_row.addWidget(self.lbl_image)
        image_row.addWidget(self.btn_image)
        image_row.addStretch(1)

        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Invoice*", self.invoice)
        form.addRow("Category*", self.category)
        form.addRow("Name*", self.name)
        form.addRow("Quantity*", self.quantity)
        form.addRow("Price*", self.price)
        form.addRow("Discount Price", self.discount_price)
        form.addRow("Offer Scheme", self.offer_scheme)
        form.addRow("Unit", self.unit)
        form.addRow("Expiry Date", expiry_row)
        form.addRow("Image", image_row)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

        if initial is not None:
            self._load(initial)

    # ---------------- helpers ----------------

    def _load(self, p) -> None:
        idx = self.invoice.findData(p.invoice_id)
        if idx >= 0:
            self.invoice.setCurrentIndex(idx)
        idx = self.category.findText(p.category)
        if idx >= 0:
            self.category.setCurrentIndex(idx)
        self.name.setText(p.name or "")
        self.quantity.setValue(int(p.quantity or 0))
        self.price.setText(f"{p.price:.2f}")
        if p.discount_price is not None:
            self.discount_price.setText(f"{p.discount_price:.2f}")
        self.offer_scheme.setText(p.offer_scheme or "")
        idx = self.unit.findData(p.quantity_unit)
        if idx >= 0:
            self.unit.setCurrentIndex(idx)
        if p.expiry_date:
            self.has_expiry.setChecked(True)
            self.expiry.setDate(QDate.fromString(p.expiry_date, "yyyy-MM-dd"))
        self._show_image(local_path(p.image_url))

    def _show_image(self, path) -> None:
        if path is None:
            return
        pix = QPixmap(str(path))
        if pix.isNull():
            return
        self.lbl_image.setPixmap(pix.scaled(96, 96, Qt.KeepAspectRatio, Qt.SmoothTransformation))

    def _choose_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Choose product image", "", "Images (*.png *.jpg *.jpeg *.gif *.bmp *.webp)"
        )
        if path:
            self.set_image_source(path)

    def set_image_source(self, path: str) -> None:
        self._image_source = path
        self._show_image(path)

    # ---------------- API ----------------

    def parse(self) -> FormResult[dict]:
        errors: list[ValidationError] = []
        invoice_id = self.invoice.currentData()
        if invoice_id is None:
            errors.append(ValidationError("invoice_id", "Invoice is required."))
        name = require_text(errors, "name", "Product name", self.name.text())
        price = require_decimal(errors, "price", "Price", self.price.text())
        discount_price = require_decimal(
            errors, "discount_price", "Discount price", self.discount_price.text(), allow_blank=True
        )
        quantity = int(self.quantity.value())
        if self._initial is None and quantity < 1:
            errors.append(ValidationError("quantity", "Quantity must be at least 1."))
        if errors:
            return FormResult(errors=errors)
        return FormResult(
            value={
                "invoice_id": int(invoice_id),
                "name": " ".join(name.split()),
                "category": self.category.currentText(),
                "price": price,
                "quantity": quantity,
                "discount_price": discount_price,
                "offer_scheme": clean_optional(self.offer_scheme.text()),
                "quantity_unit": self.unit.currentData(),
                "expiry_date": self.expiry.date().toString("yyyy-MM-dd") if self.has_expiry.isChecked() else None,
                "image_url": self._initial.image_url if self._initial is not None else None,
                "image_source": self._image_source,
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
