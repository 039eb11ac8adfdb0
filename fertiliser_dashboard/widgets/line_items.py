from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..modules.inventory.stock import (
    LineInput,
    check_availability,
    display_stock,
    line_total,
    requested_by_product,
    validate_line,
)
from ..utils.helpers import fmt_money, to_money
from ..utils.validators import FormResult, ValidationError, try_parse_decimal


class LineItemsEditor(QWidget):
    """
    Product / quantity / discount grid with a running total.

    Used by the sale and return dialogs. Availability shown per row is the
    product's displayed stock; collect() checks each product against the
    combined quantity of every row that names it.
    """

    totalChanged = Signal(object)  # Decimal

    COLS = ["Product", "Available", "Qty", "Price", "Discount", "Total"]
    C_PRODUCT, C_AVAIL, C_QTY, C_PRICE, C_DISC, C_TOTAL = range(6)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._products: dict[int, object] = {}

        self.table = QTableWidget(0, len(self.COLS))
        self.table.setHorizontalHeaderLabels(self.COLS)
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.horizontalHeader().setSectionResizeMode(self.C_PRODUCT, QHeaderView.Stretch)

        self.btn_add_row = QPushButton("Add Item")
        self.btn_del_row = QPushButton("Remove Item")
        self.lbl_total = QLabel()
        self.lbl_total.setStyleSheet("font-weight: 600;")

        bar = QHBoxLayout()
        bar.addWidget(self.btn_add_row)
        bar.addWidget(self.btn_del_row)
        bar.addStretch(1)
        bar.addWidget(QLabel("Total:"))
        bar.addWidget(self.lbl_total)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.table, 1)
        lay.addLayout(bar)

        self.btn_add_row.clicked.connect(self.add_row)
        self.btn_del_row.clicked.connect(self._remove_current)
        self._refresh_total()

    # ---------------- setup ----------------

    def set_products(self, products: Sequence) -> None:
        """Products offered in every row (objects with product_id, name, price, quantity)."""
        self._products = {int(p.product_id): p for p in products}
        self.table.setRowCount(0)
        self._refresh_total()

    def add_row(self, product_id: int | None = None, quantity: int = 1, discount=None) -> int:
        r = self.table.rowCount()
        self.table.insertRow(r)

        cmb = QComboBox()
        cmb.addItem("Select product…", None)
        for pid, p in self._products.items():
            unit = getattr(p, "quantity_unit", None)
            cmb.addItem(f"{p.name} ({unit})" if unit else p.name, pid)
        spin = QSpinBox()
        spin.setRange(1, 1_000_000)
        spin.setValue(max(1, int(quantity)))
        disc = QLineEdit()
        disc.setPlaceholderText("0.00")
        if discount is not None:
            disc.setText(str(discount))

        self.table.setCellWidget(r, self.C_PRODUCT, cmb)
        self.table.setCellWidget(r, self.C_QTY, spin)
        self.table.setCellWidget(r, self.C_DISC, disc)
        for c in (self.C_AVAIL, self.C_PRICE, self.C_TOTAL):
            self.table.setItem(r, c, QTableWidgetItem(""))

        cmb.currentIndexChanged.connect(self._recalc)
        spin.valueChanged.connect(self._recalc)
        disc.textChanged.connect(self._recalc)

        if product_id is not None:
            idx = cmb.findData(int(product_id))
            if idx >= 0:
                cmb.setCurrentIndex(idx)
        self._recalc()
        return r

    def _remove_current(self) -> None:
        r = self.table.currentRow()
        if r >= 0:
            self.table.removeRow(r)
            self._recalc()

    # ---------------- per-row access ----------------

    def _product_at(self, r: int):
        pid = self.table.cellWidget(r, self.C_PRODUCT).currentData()
        return self._products.get(int(pid)) if pid is not None else None

    def _qty_at(self, r: int) -> int:
        return int(self.table.cellWidget(r, self.C_QTY).value())

    def _discount_text_at(self, r: int) -> str:
        return self.table.cellWidget(r, self.C_DISC).text().strip()

    def _set_text(self, r: int, c: int, text: str) -> None:
        item = self.table.item(r, c)
        if item is None:
            item = QTableWidgetItem()
            self.table.setItem(r, c, item)
        item.setText(text)

    # ---------------- totals ----------------

    def _recalc(self, *_):
        for r in range(self.table.rowCount()):
            p = self._product_at(r)
            if p is None:
                for c in (self.C_AVAIL, self.C_PRICE, self.C_TOTAL):
                    self._set_text(r, c, "")
                continue
            ok, disc = try_parse_decimal(self._discount_text_at(r))
            disc = disc if ok else Decimal("0")
            self._set_text(r, self.C_AVAIL, str(display_stock(p.quantity)))
            self._set_text(r, self.C_PRICE, fmt_money(p.price))
            self._set_text(r, self.C_TOTAL, fmt_money(line_total(p.price, self._qty_at(r), disc)))
        self._refresh_total()

    def total(self) -> Decimal:
        total = Decimal("0.00")
        for r in range(self.table.rowCount()):
            p = self._product_at(r)
            if p is None:
                continue
            ok, disc = try_parse_decimal(self._discount_text_at(r))
            total += line_total(p.price, self._qty_at(r), disc if ok else Decimal("0"))
        return total

    def _refresh_total(self) -> None:
        t = self.total()
        self.lbl_total.setText(fmt_money(t, symbol=True))
        self.totalChanged.emit(t)

    # ---------------- validation ----------------

    def collect(self) -> FormResult[list[LineInput]]:
        """Lines with a product chosen; rows left without a product are skipped."""
        errors: list[ValidationError] = []
        lines: list[LineInput] = []
        for r in range(self.table.rowCount()):
            label = f"Item {r + 1}"
            p = self._product_at(r)
            if p is None:
                continue
            disc_text = self._discount_text_at(r)
            disc = Decimal("0")
            if disc_text:
                ok, val = try_parse_decimal(disc_text)
                if not ok:
                    errors.append(ValidationError("discount", f"{label}: discount must be a number."))
                    continue
                disc = val
            line = LineInput(
                product_id=int(p.product_id),
                quantity=self._qty_at(r),
                unit_price=to_money(p.price),
                discount=disc,
                product_name=p.name,
            )
            errs = validate_line(line, label)
            if errs:
                errors.extend(errs)
                continue
            lines.append(line)

        if not errors and not lines:
            errors.append(ValidationError("lines", "Add at least one item."))

        if not errors:
            available = {pid: display_stock(p.quantity) for pid, p in self._products.items()}
            names = {pid: p.name for pid, p in self._products.items()}
            shortage = check_availability(available, requested_by_product(lines), names)
            if shortage is not None:
                errors.append(ValidationError("quantity", str(shortage)))

        return FormResult(value=lines if not errors else None, errors=errors)
