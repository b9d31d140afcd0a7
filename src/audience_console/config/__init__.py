# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Configuration module."""

from .settings import Settings, configure_logging, get_settings, settings

__all__ = ["Settings", "configure_logging", "get_settings", "settings"]
