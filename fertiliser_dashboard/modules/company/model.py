from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.companies_repo import Company
from ...utils.helpers import fmt_date


class CompaniesTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Name", "Type", "Added"]

    def __init__(self, rows: list[Company]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        c = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return [
                c.company_id,
                c.name,
                c.company_type or "",
                fmt_date(c.created_at),
            ][index.column()]
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Company:
        return self._rows[row]

    def replace(self, rows: list[Company]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
