"""Textual renderer for the command navigator."""

from .app import NavigatorApp, THEMES

__all__ = ["NavigatorApp", "THEMES"]
