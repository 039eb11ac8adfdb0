from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ..inventory.stock import display_stock
from ...database.repositories.products_repo import Product
from ...utils.helpers import fmt_date, fmt_money


class ProductsTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Name", "Category", "Company", "Invoice #", "Price", "Discount Price",
               "Offer", "Stock", "Unit", "Expiry"]
    _RIGHT = {5, 6, 8}

    def __init__(self, rows: list[Product]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        p = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                p.product_id,
                p.name,
                p.category,
                p.company_name or "",
                p.invoice_number or "",
                fmt_money(p.price),
                fmt_money(p.discount_price) if p.discount_price is not None else "",
                p.offer_scheme or "",
                display_stock(p.quantity),
                p.quantity_unit or "",
                fmt_date(p.expiry_date),
            ][c]
        if role == Qt.TextAlignmentRole and c in self._RIGHT:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Product:
        return self._rows[row]

    def replace(self, rows: list[Product]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
