"""Version information for cgecore."""

__version__ = "0.1.0"
