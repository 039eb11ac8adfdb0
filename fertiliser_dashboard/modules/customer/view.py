from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QLineEdit,
    QLabel,
    QSplitter,
    QTabWidget,
)
from PySide6.QtCore import Qt

from ...widgets.table_view import TableView


class CustomerView(QWidget):
    """
    Customers & sales:
      - Toolbar: Add Customer, Record Sale, Receipt PDF, Purchase Report PDF
      - Split: customers table (left) + tabs (right) -> Receipts, Purchase History
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        bar = QHBoxLayout()
        self.btn_add = QPushButton("Add Customer")
        self.btn_sale = QPushButton("Record Sale")
        self.btn_receipt = QPushButton("Receipt PDF")
        self.btn_report = QPushButton("Purchase Report PDF")
        self.btn_receipt.setToolTip("Export the receipt selected in the Receipts tab")
        for b in (self.btn_add, self.btn_sale, self.btn_receipt, self.btn_report):
            bar.addWidget(b)
        bar.addStretch(1)

        bar.addWidget(QLabel("Search:"))
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search customers (name, id, email, phone, address)…")
        bar.addWidget(self.search, 2)
        root.addLayout(bar)

        split = QSplitter(Qt.Horizontal)
        self.table = TableView()
        split.addWidget(self.table)

        self.tabs = QTabWidget()
        self.receipts = TableView()
        self.history = TableView()
        self.tabs.addTab(self.receipts, "Receipts")
        self.tabs.addTab(self.history, "Purchase History")
        split.addWidget(self.tabs)

        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)
        root.addWidget(split, 1)

        self.lbl_summary = QLabel()
        root.addWidget(self.lbl_summary)
