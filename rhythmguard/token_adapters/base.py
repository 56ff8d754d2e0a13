"""Base class for spacing configuration sources.

A spacing source reads a themeable config file (for example a Tailwind
config) and returns its merged spacing scale as a flat key/value mapping.
Sources are tried in order by ``SpacingConfigLoader``, which caches the
outcome per resolved file path.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..guard_logging import get_logger

logger = get_logger()

SpacingMap = dict[str, Any]


class SpacingSource(ABC):
    """Abstract base class for spacing configuration sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log messages."""
        ...

    @abstractmethod
    def load(self, file_path: Path) -> SpacingMap | None:
        """Load the spacing mapping from a config file.

        Implementations never raise; any read, parse or evaluation failure
        returns None so the next source can be tried.

        Args:
            file_path: Resolved path to the config file.

        Returns:
            Merged ``theme.spacing`` and ``theme.extend.spacing`` entries,
            or None if this source cannot evaluate the file.
        """
        ...


class SpacingConfigLoader:
    """Loads spacing mappings through an ordered list of sources.

    Results, including failures, are memoized per resolved path for the
    lifetime of the loader.
    """

    def __init__(self, sources: list[SpacingSource] | None = None):
        if sources is None:
            from .tailwind import NodeTailwindSpacingSource, StaticTailwindSpacingSource

            sources = [StaticTailwindSpacingSource(), NodeTailwindSpacingSource()]
        self.sources = sources
        self._cache: dict[Path, SpacingMap | None] = {}

    def load(self, file_path: Path) -> SpacingMap | None:
        """Load a spacing mapping, consulting the cache first.

        Args:
            file_path: Path to the config file.

        Returns:
            Spacing mapping from the first source that succeeds, or None.
        """
        resolved = file_path.resolve()
        if resolved in self._cache:
            return self._cache[resolved]

        spacing: SpacingMap | None = None
        for source in self.sources:
            spacing = source.load(resolved)
            if spacing is not None:
                logger.debug(f"Loaded spacing config {resolved} via {source.name}")
                break
        else:
            logger.warning(f"Could not load spacing config from {resolved}")

        self._cache[resolved] = spacing
        return spacing

    def clear_cache(self) -> None:
        self._cache.clear()
