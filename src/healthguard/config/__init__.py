"""Configuration package."""

from healthguard.config.settings import Settings

__all__ = ["Settings"]
