from PySide6.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLabel, QLineEdit

from ...constants import APP_NAME


class LoginForm(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"Sign in – {APP_NAME}")
        lay = QFormLayout(self)
        self.username = QLineEdit()
        self.password = QLineEdit()
        self.password.setEchoMode(QLineEdit.Password)
        self.lbl_error = QLabel()
        self.lbl_error.setStyleSheet("color:#b10000;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(False)
        lay.addRow("Username", self.username)
        lay.addRow("Password", self.password)
        lay.addRow(self.lbl_error)
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        lay.addRow(self.buttons)

    def show_error(self, message: str) -> None:
        self.lbl_error.setText(message)
        self.lbl_error.setVisible(True)
        self.password.setFocus()

    def get_values(self) -> tuple[str, str]:
        return self.username.text().strip(), self.password.text()
