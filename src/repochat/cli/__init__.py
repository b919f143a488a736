"""Command-line interface for repochat."""

from .app import app

__all__ = ["app"]
