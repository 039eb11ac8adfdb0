# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from fertiliser_dashboard.database.repositories import (
        CompaniesRepo, Company,
        InvoicesRepo, Invoice,
        ProductsRepo, Product,
        CustomersRepo, Customer,
        SalesRepo, SaleLine, SaleReceipt,
        ReturnsRepo, ReturnLine, ReturnSlip,
        TurnoverRepo, LoginRepo,
        DomainError, InsufficientStockError,
    )
"""

from .errors import DomainError, InsufficientStockError

# ---------------- Suppliers ----------------
from .companies_repo import CompaniesRepo, Company
from .invoices_repo import InvoicesRepo, Invoice

# ---------------- Products -----------------
from .products_repo import ProductsRepo, Product

# ------------- Customers & sales -----------
from .customers_repo import CustomersRepo, Customer
from .sales_repo import SalesRepo, SaleLine, SaleReceipt

# ----------------- Returns -----------------
from .returns_repo import ReturnsRepo, ReturnLine, ReturnSlip

# ------------- Reports / login -------------
from .turnover_repo import TurnoverRepo
from .login_repo import LoginRepo

__all__ = [
    "DomainError",
    "InsufficientStockError",
    "CompaniesRepo",
    "Company",
    "InvoicesRepo",
    "Invoice",
    "ProductsRepo",
    "Product",
    "CustomersRepo",
    "Customer",
    "SalesRepo",
    "SaleLine",
    "SaleReceipt",
    "ReturnsRepo",
    "ReturnLine",
    "ReturnSlip",
    "TurnoverRepo",
    "LoginRepo",
]
