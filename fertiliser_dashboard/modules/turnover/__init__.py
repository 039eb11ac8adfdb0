from .controller import TurnoverController

__all__ = ["TurnoverController"]
