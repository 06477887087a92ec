"""Interactive command-line composer driven by a usage spec."""

__version__ = "0.1.0"
