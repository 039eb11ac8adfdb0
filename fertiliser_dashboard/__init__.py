"""Desktop administration dashboard for a fertiliser distributor."""

__version__ = "1.0.0"
