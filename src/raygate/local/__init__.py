"""
Local package for the raygate application.

This package provides the effective application configuration through the
effective_settings singleton and the management console.
"""

from .config import effective_settings

__all__ = ["effective_settings"]
