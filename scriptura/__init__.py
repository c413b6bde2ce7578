"""Scriptura: Bible lookup bot for Discord."""

__version__ = "0.3.0"
