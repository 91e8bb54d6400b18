"""Core: config, constants, and application bootstrap.

Single place for settings and shared constants.
"""

from hse_approvals.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
