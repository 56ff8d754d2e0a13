"""Tailwind CSS config spacing sources.

Two interchangeable ways to read ``theme.spacing`` and
``theme.extend.spacing`` from tailwind.config.{js,cjs,mjs,ts}:

- StaticTailwindSpacingSource parses the config text. It handles literal
  object configs in CommonJS or ESM form and gives up (returns None) on
  anything computed, such as spreads or theme callbacks.
- NodeTailwindSpacingSource imports the config in a short-lived ``node``
  subprocess and reads the serialized result.
"""

import json
import re
import shutil
import subprocess
from pathlib import Path

from ..constants import SPACING_LOADER_TIMEOUT
from ..guard_logging import get_logger
from .base import SpacingMap, SpacingSource

logger = get_logger()

_ENTRY_RE = re.compile(
    r"""^(?:'([^']*)'|"([^"]*)"|([\w$.-]+))\s*:\s*"""
    r"""(?:'([^']*)'|"([^"]*)"|`([^`$]*)`|(-?(?:\d+|\d*\.\d+)))$""",
    re.DOTALL,
)

# Sentinel for a key whose value is not an object literal
_COMPUTED = object()

NODE_SPACING_SCRIPT = """
const { pathToFileURL } = require("node:url");
(async () => {
  try {
    const loaded = await import(pathToFileURL(process.argv[1]).href);
    const config = loaded && typeof loaded.default === "object" ? loaded.default : loaded;
    const isObject = (value) => value && typeof value === "object" && !Array.isArray(value);
    if (!isObject(config) || !isObject(config.theme)) {
      process.stdout.write("{}");
      return;
    }
    const theme = config.theme;
    const spacing = isObject(theme.spacing) ? theme.spacing : {};
    const extendSpacing = isObject(theme.extend) && isObject(theme.extend.spacing)
      ? theme.extend.spacing
      : {};
    process.stdout.write(JSON.stringify({ ...spacing, ...extendSpacing }));
  } catch {
    process.exit(1);
  }
})();
"""


class StaticTailwindSpacingSource(SpacingSource):
    """Read spacing from a Tailwind config by parsing its object literal.

    Note: This source uses brace matching and regexes rather than a
    JavaScript evaluator. Configs that compute their theme return None.
    """

    @property
    def name(self) -> str:
        return "static"

    def load(self, file_path: Path) -> SpacingMap | None:
        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.debug(f"Cannot read Tailwind config {file_path}: {e}")
            return None
        return self.extract_from_content(content)

    def extract_from_content(self, content: str) -> SpacingMap | None:
        """Extract merged spacing entries from config text.

        Args:
            content: Tailwind config source.

        Returns:
            Spacing mapping (possibly empty), or None if the config cannot
            be read statically.
        """
        content = _strip_js_comments(content)
        theme = self._extract_theme_section(content)
        if theme is None:
            return None

        spacing: SpacingMap = {}

        section = self._extract_section(theme, "spacing")
        if section is _COMPUTED:
            return None
        if section is not None:
            parsed = self._parse_spacing(section)
            if parsed is None:
                return None
            spacing.update(parsed)

        extend = self._extract_section(theme, "extend")
        if extend is _COMPUTED:
            return None
        if extend is not None:
            extend_spacing = self._extract_section(extend, "spacing")
            if extend_spacing is _COMPUTED:
                return None
            if extend_spacing is not None:
                parsed = self._parse_spacing(extend_spacing)
                if parsed is None:
                    return None
                spacing.update(parsed)

        return spacing

    def _extract_theme_section(self, content: str) -> str | None:
        """Extract the theme object from the config."""
        theme_pattern = re.compile(r"\btheme\s*:\s*\{")
        match = theme_pattern.search(content)
        if not match:
            return None

        start = match.end() - 1  # Include the opening brace
        return _extract_balanced_braces(content, start)

    def _extract_section(self, content: str, section_name: str):
        """Extract a direct child object of ``content`` by key.

        Returns the object text, None when the key is absent, or _COMPUTED
        when the key holds something other than an object literal.
        """
        pattern = re.compile(rf"""(?:['"]?){re.escape(section_name)}(?:['"]?)\s*:\s*""")
        for match in pattern.finditer(content):
            if _depth_at(content, match.start()) != 1:
                continue
            if match.start() > 0 and re.match(r"[\w$]", content[match.start() - 1]):
                continue
            start = match.end()
            if start < len(content) and content[start] == "{":
                section = _extract_balanced_braces(content, start)
                return section if section is not None else _COMPUTED
            return _COMPUTED
        return None

    def _parse_spacing(self, section: str) -> SpacingMap | None:
        """Parse a spacing object literal into key/value pairs."""
        spacing: SpacingMap = {}

        for item in _split_top_level(section[1:-1]):
            item = item.strip()
            if not item:
                continue
            match = _ENTRY_RE.match(item)
            if not match:
                logger.debug(f"Computed Tailwind spacing entry: {item[:40]!r}")
                return None

            key = next(g for g in match.groups()[:3] if g is not None)
            string_value = next(
                (g for g in match.groups()[3:6] if g is not None), None
            )
            if string_value is not None:
                spacing[key] = string_value
            else:
                number = float(match.group(7))
                spacing[key] = int(number) if number.is_integer() else number

        return spacing


class NodeTailwindSpacingSource(SpacingSource):
    """Read spacing by importing the config in a ``node`` subprocess.

    The subprocess is bounded by a timeout; a timeout, non-zero exit,
    missing executable or malformed output all yield None.
    """

    def __init__(self, node_executable: str | None = None, timeout: float = SPACING_LOADER_TIMEOUT):
        self.node_executable = node_executable
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "node"

    def load(self, file_path: Path) -> SpacingMap | None:
        executable = self.node_executable or shutil.which("node")
        if not executable:
            logger.debug("node executable not found, skipping Tailwind import")
            return None

        try:
            completed = subprocess.run(
                [executable, "-e", NODE_SPACING_SCRIPT, str(file_path)],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Timed out loading Tailwind config {file_path}")
            return None
        except OSError as e:
            logger.debug(f"Failed to run node for {file_path}: {e}")
            return None

        if completed.returncode != 0:
            logger.debug(
                f"node exited with {completed.returncode} for {file_path}: "
                f"{completed.stderr.strip()[:200]}"
            )
            return None

        output = (completed.stdout or "").strip()
        if not output:
            return None

        try:
            parsed = json.loads(output)
        except json.JSONDecodeError:
            return None

        return parsed if isinstance(parsed, dict) else None


def _strip_js_comments(content: str) -> str:
    """Remove // and /* */ comments outside string literals."""
    result: list[str] = []
    i = 0
    length = len(content)
    quote: str | None = None

    while i < length:
        char = content[i]
        if quote:
            result.append(char)
            if char == "\\" and i + 1 < length:
                result.append(content[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
            continue

        if char in ("'", '"', "`"):
            quote = char
            result.append(char)
            i += 1
        elif content.startswith("//", i):
            end = content.find("\n", i)
            i = length if end == -1 else end
        elif content.startswith("/*", i):
            end = content.find("*/", i + 2)
            i = length if end == -1 else end + 2
        else:
            result.append(char)
            i += 1

    return "".join(result)


def _extract_balanced_braces(content: str, start: int) -> str | None:
    """Extract content between balanced braces starting at position."""
    if start >= len(content) or content[start] != "{":
        return None

    depth = 0
    in_string = False
    string_char = None

    for i in range(start, len(content)):
        char = content[i]

        if char in ('"', "'", "`") and (i == 0 or content[i - 1] != "\\"):
            if not in_string:
                in_string = True
                string_char = char
            elif char == string_char:
                in_string = False
                string_char = None
            continue

        if in_string:
            continue

        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start : i + 1]

    return None


def _depth_at(content: str, index: int) -> int:
    """Brace/bracket nesting depth at ``index``, ignoring string contents."""
    depth = 0
    string_char = None
    for i in range(index):
        char = content[i]
        if string_char:
            if char == string_char and content[i - 1] != "\\":
                string_char = None
            continue
        if char in ('"', "'", "`"):
            string_char = char
        elif char in "{[(":
            depth += 1
        elif char in "}])":
            depth -= 1
    return depth


def _split_top_level(body: str) -> list[str]:
    """Split object-literal body text on top-level commas."""
    items: list[str] = []
    depth = 0
    string_char = None
    current: list[str] = []

    for i, char in enumerate(body):
        if string_char:
            current.append(char)
            if char == string_char and body[i - 1] != "\\":
                string_char = None
            continue
        if char in ('"', "'", "`"):
            string_char = char
        elif char in "{[(":
            depth += 1
        elif char in "}])":
            depth -= 1
        elif char == "," and depth == 0:
            items.append("".join(current))
            current = []
            continue
        current.append(char)

    items.append("".join(current))
    return items
