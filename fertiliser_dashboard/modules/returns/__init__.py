from .controller import ReturnsController
from .form import ReturnForm

__all__ = ["ReturnsController", "ReturnForm"]
