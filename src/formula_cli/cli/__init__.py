"""
Command-line interface for Formula CLI.
"""

from .app import app

__all__ = ["app"]
