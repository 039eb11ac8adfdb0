from .controller import OverviewController

__all__ = ["OverviewController"]
