# Amoeba Utilities Package
"""
Shared utility functions and helpers for the Amoeba launcher.
"""

from .helpers import build_user_agent, load_settings

__all__ = ["build_user_agent", "load_settings"]
