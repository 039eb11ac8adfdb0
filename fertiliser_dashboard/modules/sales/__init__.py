"""
Sales module package exports.

- SaleForm: multi-line sale dialog used from the Customers page.
"""

from .form import SaleForm

__all__ = ["SaleForm"]
