"""Token sources for building raw-length to token-reference maps.

This package provides:
- Spacing config sources (base.py, tailwind.py)
- Token-map JSON file loading (json_tokens.py)
"""

from .base import SpacingConfigLoader, SpacingMap, SpacingSource
from .json_tokens import load_token_map_file
from .tailwind import NodeTailwindSpacingSource, StaticTailwindSpacingSource

__all__ = [
    "SpacingConfigLoader",
    "SpacingMap",
    "SpacingSource",
    "NodeTailwindSpacingSource",
    "StaticTailwindSpacingSource",
    "load_token_map_file",
]
