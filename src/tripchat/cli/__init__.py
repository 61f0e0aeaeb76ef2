"""Command-line interface for tripchat."""

from .app import app, main

__all__ = ["app", "main"]
