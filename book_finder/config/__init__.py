"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import FinderConfig

__all__ = ["ConfigLocator", "ConfigRepository", "FinderConfig"]
