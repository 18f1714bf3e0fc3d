"""
Logging handlers for the application.
"""

from .loki import LokiHandler

__all__ = ["LokiHandler"]
