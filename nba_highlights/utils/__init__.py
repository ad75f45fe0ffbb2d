"""Utility functions and configuration management."""

from nba_highlights.utils.config import get_settings
from nba_highlights.utils.logging import get_logger

__all__ = ["get_settings", "get_logger"]
