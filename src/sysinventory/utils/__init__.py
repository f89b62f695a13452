"""Utility functions for sysinventory."""

from .imports import safe_import

__all__ = ["safe_import"]
