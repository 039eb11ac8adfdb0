from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.invoices_repo import Invoice
from ...utils.helpers import fmt_date, fmt_money


class InvoicesTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Invoice #", "Company", "Date", "Total Amount"]

    def __init__(self, rows: list[Invoice]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        inv = self._rows[index.row()]
        c = index.column()
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                inv.invoice_id,
                inv.invoice_number,
                inv.company_name or "",
                fmt_date(inv.date),
                fmt_money(inv.total_amount),
            ][c]
        if role == Qt.TextAlignmentRole and c == 4:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Invoice:
        return self._rows[row]

    def replace(self, rows: list[Invoice]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
