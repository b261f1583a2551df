"""Order book matching and cross-trade risk control for equity orders."""

__version__ = "0.1.0"
__all__ = ["models", "risk", "matching"]