"""Project configuration loader.

Loads rhythmguard.config.json files holding the rule settings for a project.
"""

import fnmatch
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .guard_logging import get_logger

logger = get_logger()

# Default configuration file name
CONFIG_FILENAME = "rhythmguard.config.json"

# Environment variable naming an explicit config file
CONFIG_ENV_VAR = "RHYTHMGUARD_CONFIG"


@dataclass
class RhythmguardConfig:
    """Project-level lint configuration.

    ``rules`` maps rule IDs to their settings exactly as the rule engine
    accepts them (``true``, ``false``, an options object or
    ``[true, options]``).
    """

    rules: dict[str, Any] = field(default_factory=dict)
    ignore_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"rules": self.rules}
        if self.ignore_files:
            result["ignoreFiles"] = self.ignore_files
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RhythmguardConfig":
        """Create from dictionary."""
        ignore_files = data.get("ignoreFiles", [])
        if isinstance(ignore_files, str):
            ignore_files = [ignore_files]
        return cls(
            rules=dict(data.get("rules", {})),
            ignore_files=list(ignore_files),
        )

    def is_file_ignored(self, file_path: Path, project_path: Path | None = None) -> bool:
        """Check whether a file matches one of the ``ignoreFiles`` globs.

        Args:
            file_path: File to check.
            project_path: Root that globs are relative to.

        Returns:
            True if the file should be skipped.
        """
        if not self.ignore_files:
            return False

        candidate = Path(file_path).resolve()
        if project_path is not None:
            try:
                candidate = candidate.relative_to(Path(project_path).resolve())
            except ValueError:
                pass
        text = candidate.as_posix()

        return any(fnmatch.fnmatch(text, pattern) for pattern in self.ignore_files)


class ConfigLoader:
    """Loader for rhythmguard configuration."""

    def __init__(self, project_path: Path | None = None):
        """Initialize the config loader.

        Args:
            project_path: Path to the project root. Defaults to current directory.
        """
        self.project_path = Path(project_path) if project_path else Path.cwd()

    def load(self, config_path: Path | None = None) -> RhythmguardConfig:
        """Load rhythmguard configuration.

        Precedence (highest to lowest):
        1. Explicit config_path
        2. Environment variable RHYTHMGUARD_CONFIG
        3. rhythmguard.config.json in project root
        4. Default configuration

        Args:
            config_path: Optional explicit path to config file.

        Returns:
            Loaded RhythmguardConfig instance.
        """
        if config_path and config_path.exists():
            return self._load_from_file(config_path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            env_config_path = Path(env_path)
            if env_config_path.exists():
                return self._load_from_file(env_config_path)
            logger.warning(f"{CONFIG_ENV_VAR} points to a missing file: {env_path}")

        project_config = self.project_path / CONFIG_FILENAME
        if project_config.exists():
            return self._load_from_file(project_config)

        logger.debug("No rhythmguard config found, using defaults")
        return RhythmguardConfig()

    def _load_from_file(self, config_path: Path) -> RhythmguardConfig:
        """Load configuration from a file.

        Raises:
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the top-level value is not an object.
        """
        logger.debug(f"Loading rhythmguard config from {config_path}")
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        return RhythmguardConfig.from_dict(data)

    def save(self, config: RhythmguardConfig, config_path: Path | None = None) -> Path:
        """Save configuration to a file.

        Args:
            config: Configuration to save.
            config_path: Optional path. Defaults to project root.

        Returns:
            Path where config was saved.
        """
        if config_path is None:
            config_path = self.project_path / CONFIG_FILENAME

        content = json.dumps(config.to_dict(), indent=2)
        config_path.write_text(content, encoding="utf-8")
        logger.info(f"Saved rhythmguard config to {config_path}")
        return config_path


def load_config(
    project_path: Path | None = None, config_path: Path | None = None
) -> RhythmguardConfig:
    """Convenience function to load rhythmguard configuration."""
    return ConfigLoader(project_path).load(config_path)
