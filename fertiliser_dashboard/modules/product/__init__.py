"""
Product module package exports.

- ProductController: product list with filters, add (or restock) and edit.
- store_image: copies a picture into the local image store.
"""

from .controller import ProductController
from .image_store import store_image

__all__ = [
    "ProductController",
    "store_image",
]
