"""HTTP API for SheetRecon."""

from .app import create_app

__all__ = ["create_app"]
