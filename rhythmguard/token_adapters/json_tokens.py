"""JSON token-map file loading."""

import json
from pathlib import Path
from typing import Any

from ..guard_logging import get_logger

logger = get_logger()


def load_token_map_file(file_path: Path) -> dict[str, Any] | None:
    """Load a token-map JSON file.

    Never raises: a missing file, unreadable file, invalid JSON or a
    non-object document all return None.

    Args:
        file_path: Resolved path to the JSON file.

    Returns:
        Parsed JSON object, or None.
    """
    if not file_path.is_file():
        logger.debug(f"Token map file not found: {file_path}")
        return None

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read token map file {file_path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.debug(f"Token map file {file_path} is not a JSON object")
        return None

    return data
