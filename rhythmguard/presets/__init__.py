"""Scale presets package.

- scales: core presets, community preset loading and scale selection
- community/: bundled community scale definitions (JSON)
"""

from .scales import (
    CORE_PRESET_ALIASES,
    CORE_SCALE_PRESETS,
    DEFAULT_SCALE,
    PresetRegistry,
    ScalePreset,
    ScaleSelection,
    create_modular_scale,
    get_community_scale_metadata,
    get_default_registry,
    get_scale_preset,
    list_community_scale_preset_names,
    list_scale_preset_names,
    normalize_preset_name,
    resolve_scale_selection,
)

__all__ = [
    "CORE_PRESET_ALIASES",
    "CORE_SCALE_PRESETS",
    "DEFAULT_SCALE",
    "PresetRegistry",
    "ScalePreset",
    "ScaleSelection",
    "create_modular_scale",
    "get_community_scale_metadata",
    "get_default_registry",
    "get_scale_preset",
    "list_community_scale_preset_names",
    "list_scale_preset_names",
    "normalize_preset_name",
    "resolve_scale_selection",
]
