"""Webview minigames: a turn-based RPG and a toroidal Snake simulation."""

__version__ = "0.1.0"
