"""Shared foundation layer for the quote board.

This package provides the data models and repository layer following the
Repository pattern with a flat structure and utility functions.
"""

from quote_board.shared import models, repositories

__all__ = ["models", "repositories"]
