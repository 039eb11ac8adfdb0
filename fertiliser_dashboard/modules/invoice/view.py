from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QComboBox, QLabel

from ...widgets.table_view import TableView


class InvoiceView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        row = QHBoxLayout()
        self.btn_add = QPushButton("Add Invoice")
        self.btn_pdf = QPushButton("Invoice PDF")
        self.btn_report = QPushButton("Company Report PDF")
        self.btn_pdf.setToolTip("Export the selected invoice")
        self.btn_report.setToolTip("Export all invoices of the filtered (or selected) company")
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_pdf)
        row.addWidget(self.btn_report)
        row.addStretch(1)

        self.cmb_company = QComboBox()
        self.cmb_company.setMinimumWidth(200)
        row.addWidget(QLabel("Company:"))
        row.addWidget(self.cmb_company)
        layout.addLayout(row)

        self.table = TableView()
        layout.addWidget(self.table, 1)

        self.lbl_summary = QLabel()
        layout.addWidget(self.lbl_summary)
