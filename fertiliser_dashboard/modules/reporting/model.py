# fertiliser_dashboard/modules/reporting/model.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from ...utils.helpers import fmt_date, fmt_money

TEXT = "text"
MONEY = "money"
DATE = "date"
INT = "int"
PERCENT = "percent"


@dataclass(frozen=True)
class Column:
    header: str
    key: str | Callable[[Any], Any]
    kind: str = TEXT


def _value(row: Any, key) -> Any:
    if callable(key):
        return key(row)
    if isinstance(row, dict):
        return row.get(key)
    if isinstance(row, (tuple, list)):
        return row[int(key)]
    return getattr(row, key, None)


def _display(value: Any, kind: str) -> str:
    if value is None:
        return ""
    if kind == MONEY:
        return fmt_money(value)
    if kind == DATE:
        return fmt_date(value)
    if kind == PERCENT:
        return f"{fmt_money(value)}%"
    return str(value)


class RowsTableModel(QAbstractTableModel):
    """
    Read-only table over dicts, tuples or dataclasses, described by Columns.

    Numbers are right-aligned. The raw value is exposed under Qt.UserRole so
    a QSortFilterProxyModel can sort money columns numerically.
    """

    def __init__(self, columns: Sequence[Column], rows: Optional[List[Any]] = None, parent=None) -> None:
        super().__init__(parent)
        self.columns = list(columns)
        self._rows: List[Any] = list(rows or [])

    def set_rows(self, rows: List[Any]) -> None:
        self.beginResetModel()
        self._rows = list(rows or [])
        self.endResetModel()

    def rows(self) -> List[Any]:
        return list(self._rows)

    def at(self, row: int) -> Any:
        return self._rows[row]

    def rowCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.columns)

    def headerData(self, section, orientation, role=Qt.DisplayRole):  # type: ignore[override]
        if role != Qt.DisplayRole:
            return None
        if orientation == Qt.Horizontal:
            return self.columns[section].header
        return str(section + 1)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        col = self.columns[index.column()]
        raw = _value(self._rows[index.row()], col.key)
        if role == Qt.DisplayRole:
            return _display(raw, col.kind)
        if role == Qt.UserRole:
            return float(raw) if col.kind in (MONEY, INT, PERCENT) and raw is not None else raw
        if role == Qt.TextAlignmentRole:
            if col.kind in (MONEY, INT, PERCENT):
                return int(Qt.AlignRight | Qt.AlignVCenter)
            return int(Qt.AlignLeft | Qt.AlignVCenter)
        return None
