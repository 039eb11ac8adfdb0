from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel, QComboBox

from ...constants import PRODUCT_CATEGORIES
from ...widgets.table_view import TableView


class ProductView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Top row: actions
        row = QHBoxLayout()
        self.btn_add = QPushButton("Add Product")
        self.btn_edit = QPushButton("Edit Product")
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_edit)
        row.addStretch(1)
        layout.addLayout(row)

        # Filters
        filters = QHBoxLayout()
        self.cmb_category = QComboBox()
        self.cmb_category.addItem("All categories", None)
        for cat in PRODUCT_CATEGORIES:
            self.cmb_category.addItem(cat, cat)
        self.cmb_company = QComboBox()
        self.cmb_company.setMinimumWidth(180)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search products (name, category, company)…")
        filters.addWidget(QLabel("Category:"))
        filters.addWidget(self.cmb_category)
        filters.addWidget(QLabel("Company:"))
        filters.addWidget(self.cmb_company)
        filters.addWidget(QLabel("Search:"))
        filters.addWidget(self.search, 2)
        layout.addLayout(filters)

        self.table = TableView()
        layout.addWidget(self.table, 1)

        self.lbl_count = QLabel()
        layout.addWidget(self.lbl_count)
