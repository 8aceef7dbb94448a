"""Birdwatch configuration package.

This package provides centralized configuration management with:
- Typed Pydantic settings
- YAML parsing and serialization
- Defaults written on first start
"""

from .manager import ConfigManager
from .models import BirdwatchConfig

__all__ = [
    "BirdwatchConfig",
    "ConfigManager",
]
