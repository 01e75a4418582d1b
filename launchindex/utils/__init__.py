# launchindex Utilities Package
"""
Shared utility functions for the launch index.
"""

from .helpers import load_settings, search_weights

__all__ = ["load_settings", "search_weights"]
