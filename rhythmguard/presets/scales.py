"""Named scale presets and scale selection.

Core presets are defined in code; community presets are loaded from JSON
files in the ``community`` directory next to this module.
"""

import json
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..constants import DEFAULT_PRESET
from ..guard_logging import get_logger
from ..length import round_half_up
from ..scales import ScaleEntry

logger = get_logger()

COMMUNITY_DIRECTORY = Path(__file__).parent / "community"


def normalize_preset_name(name: object) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


def create_modular_scale(base: float, ratio: float, steps: int) -> tuple[float, ...]:
    """Build a modular scale starting at zero.

    Each step is ``base * ratio**i`` rounded half up to a whole pixel.

    Args:
        base: First non-zero step.
        ratio: Multiplier between consecutive steps.
        steps: Number of non-zero steps to generate.

    Returns:
        Sorted, deduplicated scale values.
    """
    values = {0.0}
    current = base
    for _ in range(steps):
        values.add(round_half_up(current))
        current *= ratio
    return tuple(sorted(values))


CORE_SCALE_PRESETS: dict[str, tuple[float, ...]] = {
    "rhythmic-4": (0, 4, 8, 12, 16, 24, 32, 40, 48, 64),
    "rhythmic-8": (0, 8, 16, 24, 32, 40, 48, 64, 80, 96),
    "product-material-8dp": (0, 4, 8, 12, 16, 24, 32, 40, 48, 56, 64, 72, 80),
    "product-atlassian-8px": (0, 2, 4, 6, 8, 12, 16, 20, 24, 32, 40, 48, 64, 80),
    "product-carbon-2x": (0, 2, 4, 8, 12, 16, 24, 32, 40, 48, 64, 80),
    "editorial-baseline-4": (0, 4, 8, 12, 16, 20, 24, 28, 32, 40, 48, 56, 64),
    "editorial-baseline-6": (0, 6, 12, 18, 24, 30, 36, 48, 60, 72),
    "compact": (0, 2, 4, 6, 8, 12, 16, 20, 24, 32),
    "fibonacci": (0, 2, 3, 5, 8, 13, 21, 34, 55, 89),
    "powers-of-two": (0, 2, 4, 8, 16, 32, 64, 128),
    "golden-ratio": create_modular_scale(4, 1.61803398875, 10),
    "modular-major-second": create_modular_scale(8, 1.125, 12),
    "modular-minor-third": create_modular_scale(4, 1.2, 12),
    "modular-major-third": create_modular_scale(4, 1.25, 12),
    "modular-augmented-fourth": create_modular_scale(4, 1.41421356237, 12),
    "modular-perfect-fourth": create_modular_scale(4, 4 / 3, 12),
    "modular-perfect-fifth": create_modular_scale(4, 1.5, 12),
}

CORE_PRESET_ALIASES: dict[str, str] = {
    "4pt": "rhythmic-4",
    "8pt": "rhythmic-8",
    "atlassian-8": "product-atlassian-8px",
    "carbon": "product-carbon-2x",
    "material": "product-material-8dp",
    "baseline-4": "editorial-baseline-4",
    "baseline-6": "editorial-baseline-6",
    "golden": "golden-ratio",
    "major-second": "modular-major-second",
    "major-third": "modular-major-third",
    "minor-third": "modular-minor-third",
    "augmented-fourth": "modular-augmented-fourth",
    "perfect-fifth": "modular-perfect-fifth",
    "perfect-fourth": "modular-perfect-fourth",
}


@dataclass
class ScalePreset:
    """A named scale with optional aliases and community metadata."""

    name: str
    steps: tuple[float, ...]
    aliases: tuple[str, ...] = ()
    community: bool = False
    base: float | None = None
    contributor: str | None = None
    contributor_url: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    file_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "steps": list(self.steps),
            "aliases": list(self.aliases),
        }
        if self.community:
            result.update(
                {
                    "base": self.base,
                    "contributor": self.contributor,
                    "contributorUrl": self.contributor_url,
                    "description": self.description,
                    "tags": self.tags,
                    "fileName": self.file_name,
                }
            )
        return result

    @classmethod
    def from_community_dict(
        cls, data: dict[str, Any], file_name: str | None = None
    ) -> "ScalePreset | None":
        """Create a community preset from parsed JSON.

        Returns None when the name is missing or the steps are invalid.
        """
        name = normalize_preset_name(data.get("name"))
        steps = normalize_community_steps(data.get("steps"))
        if not name or steps is None:
            return None

        aliases = data.get("aliases")
        tags = data.get("tags")
        base = data.get("base")
        return cls(
            name=name,
            steps=steps,
            aliases=tuple(
                normalize_preset_name(alias)
                for alias in (aliases if isinstance(aliases, list) else [])
                if normalize_preset_name(alias)
            ),
            community=True,
            base=base if _is_finite_number(base) else None,
            contributor=_optional_str(data.get("contributor")),
            contributor_url=_optional_str(data.get("contributorUrl")),
            description=_optional_str(data.get("description")),
            tags=[tag for tag in tags if isinstance(tag, str)]
            if isinstance(tags, list)
            else [],
            file_name=file_name,
        )


def _is_finite_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def normalize_community_steps(steps: object) -> tuple[float, ...] | None:
    """Validate community steps: finite, non-negative, strictly increasing from 0."""
    if not isinstance(steps, list) or not steps:
        return None

    previous: float | None = None
    for value in steps:
        if not _is_finite_number(value) or value < 0:
            return None
        if previous is not None and value <= previous:
            return None
        previous = value

    if steps[0] != 0:
        return None

    return tuple(steps)


class PresetRegistry:
    """Registry of scale presets and their aliases.

    Names and aliases share one namespace; a preset whose name collides
    with an existing name or alias is rejected, and colliding aliases
    are dropped.
    """

    def __init__(self) -> None:
        self._presets: dict[str, ScalePreset] = {}
        self._aliases: dict[str, str] = {}

    def register(self, preset: ScalePreset) -> bool:
        """Register a preset.

        Args:
            preset: Preset to add.

        Returns:
            True if the preset was added, False on a name collision.
        """
        if preset.name in self._presets or preset.name in self._aliases:
            logger.debug(f"Skipping preset {preset.name}: name already in use")
            return False

        self._presets[preset.name] = preset
        for alias in preset.aliases:
            if alias in self._presets or alias in self._aliases:
                logger.debug(f"Skipping alias {alias} for preset {preset.name}")
                continue
            self._aliases[alias] = preset.name
        return True

    def load_community_directory(self, directory: Path) -> int:
        """Load every ``*.json`` community scale in a directory.

        Files that cannot be read, are not valid JSON objects, or carry
        invalid steps are skipped.

        Args:
            directory: Directory holding community scale files.

        Returns:
            Number of presets loaded.
        """
        if not directory.is_dir():
            return 0

        loaded = 0
        for path in sorted(directory.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.debug(f"Skipping community scale {path.name}: {e}")
                continue

            if not isinstance(data, dict):
                continue

            preset = ScalePreset.from_community_dict(data, file_name=path.name)
            if preset is None:
                logger.debug(f"Skipping community scale {path.name}: invalid definition")
                continue

            if self.register(preset):
                loaded += 1

        return loaded

    def resolve_name(self, name: object) -> str | None:
        """Resolve a preset name or alias to its canonical form.

        Unknown names come back normalized; blank or non-string input gives None.
        """
        normalized = normalize_preset_name(name)
        if not normalized:
            return None
        return self._aliases.get(normalized, normalized)

    def get(self, name: object) -> ScalePreset | None:
        resolved = self.resolve_name(name)
        if resolved is None:
            return None
        return self._presets.get(resolved)

    def get_steps(self, name: object) -> tuple[float, ...] | None:
        preset = self.get(name)
        return preset.steps if preset else None

    def list_names(self) -> list[str]:
        return sorted(self._presets)

    def list_community_names(self) -> list[str]:
        return sorted(name for name, preset in self._presets.items() if preset.community)

    def get_community_metadata(self, name: object) -> ScalePreset | None:
        preset = self.get(name)
        if preset is None or not preset.community:
            return None
        return preset

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)


_default_registry: PresetRegistry | None = None


def get_default_registry() -> PresetRegistry:
    """Get the default preset registry with core and bundled community presets.

    Returns:
        PresetRegistry with every core preset, its aliases, and the
        community presets shipped with the package.
    """
    global _default_registry
    if _default_registry is None:
        registry = PresetRegistry()
        core_aliases: dict[str, list[str]] = {}
        for alias, target in CORE_PRESET_ALIASES.items():
            core_aliases.setdefault(target, []).append(alias)
        for name, steps in CORE_SCALE_PRESETS.items():
            registry.register(
                ScalePreset(name=name, steps=steps, aliases=tuple(core_aliases.get(name, [])))
            )
        registry.load_community_directory(COMMUNITY_DIRECTORY)
        _default_registry = registry
    return _default_registry


def get_scale_preset(name: object) -> tuple[float, ...] | None:
    return get_default_registry().get_steps(name)


def list_scale_preset_names() -> list[str]:
    return get_default_registry().list_names()


def list_community_scale_preset_names() -> list[str]:
    return get_default_registry().list_community_names()


def get_community_scale_metadata(name: object) -> ScalePreset | None:
    return get_default_registry().get_community_metadata(name)


DEFAULT_SCALE: tuple[float, ...] = CORE_SCALE_PRESETS[DEFAULT_PRESET]


@dataclass
class ScaleSelection:
    """Outcome of choosing between preset, scale and custom scale."""

    scale: Sequence[ScaleEntry]
    selected_preset: str | None = None
    invalid_preset: str | None = None


def resolve_scale_selection(
    preset: str | None = None,
    scale: Sequence[ScaleEntry] | None = None,
    custom_scale: Sequence[ScaleEntry] | None = None,
    default_scale: Sequence[ScaleEntry] = DEFAULT_SCALE,
    registry: PresetRegistry | None = None,
) -> ScaleSelection:
    """Resolve the active scale.

    Precedence is ``custom_scale`` > ``scale`` > ``preset`` > default. An
    explicit scale clears both preset signals; an unknown preset keeps the
    default scale and records the raw name.

    Args:
        preset: Preset name or alias, matched case-insensitively.
        scale: Explicit scale list.
        custom_scale: Explicit scale list that overrides ``scale``.
        default_scale: Scale used when nothing else applies.
        registry: Preset registry. Defaults to the global registry.

    Returns:
        ScaleSelection with the active scale and preset signals.
    """
    registry = registry or get_default_registry()
    selection = ScaleSelection(scale=default_scale)

    resolved_name = registry.resolve_name(preset)
    if resolved_name:
        steps = registry.get_steps(resolved_name)
        if steps is not None:
            selection.selected_preset = resolved_name
            selection.scale = steps
        else:
            selection.invalid_preset = str(preset)

    for explicit in (scale, custom_scale):
        if explicit is not None:
            selection.scale = explicit
            selection.selected_preset = None
            selection.invalid_preset = None

    return selection
