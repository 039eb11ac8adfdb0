from .controller import CustomerController
from .form import CustomerForm
from .model import CustomersTableModel
from .view import CustomerView

__all__ = [
    "CustomerController",
    "CustomerView",
    "CustomerForm",
    "CustomersTableModel",
]
