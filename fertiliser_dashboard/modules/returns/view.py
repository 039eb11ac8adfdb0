from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ...widgets.table_view import TableView


class ReturnsView(QWidget):
    """
    Returns to companies:
      - Toolbar: Record Return, Return Receipt PDF, Company Returns Report PDF
      - Company filter
      - Split: return slips (top) + lines of the selected slip (bottom)
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        bar = QHBoxLayout()
        self.btn_add = QPushButton("Record Return")
        self.btn_receipt = QPushButton("Return Receipt PDF")
        self.btn_report = QPushButton("Company Returns Report PDF")
        for b in (self.btn_add, self.btn_receipt, self.btn_report):
            bar.addWidget(b)
        bar.addStretch(1)
        self.cmb_company = QComboBox()
        self.cmb_company.setMinimumWidth(200)
        bar.addWidget(QLabel("Company:"))
        bar.addWidget(self.cmb_company)
        root.addLayout(bar)

        split = QSplitter(Qt.Vertical)
        self.slips = TableView()
        self.lines = TableView()
        self.slips.setSortingEnabled(False)
        self.lines.setSortingEnabled(False)
        split.addWidget(self.slips)
        split.addWidget(self.lines)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

        self.lbl_summary = QLabel()
        root.addWidget(self.lbl_summary)
