"""Unit tests for spacing config sources and token-map file loading."""

import json
import subprocess
from pathlib import Path

import pytest

from rhythmguard.token_adapters import (
    NodeTailwindSpacingSource,
    SpacingConfigLoader,
    SpacingSource,
    StaticTailwindSpacingSource,
    load_token_map_file,
)


class RecordingSource(SpacingSource):
    """Spacing source returning a fixed result and counting calls."""

    def __init__(self, result):
        self.result = result
        self.calls = 0

    @property
    def name(self) -> str:
        return "recording"

    def load(self, file_path: Path):
        self.calls += 1
        return self.result


@pytest.fixture
def static_source():
    """Create a static Tailwind source."""
    return StaticTailwindSpacingSource()


class TestStaticTailwindSpacingSource:
    """Tests for parsing Tailwind configs without node."""

    def test_cjs_config(self, static_source, tailwind_cjs_config):
        """Test CommonJS configs with base and extended spacing."""
        assert static_source.load(tailwind_cjs_config) == {
            "1": "4px",
            "2": "8px",
            "3": "12px",
            "gutter": "20px",
        }

    def test_esm_config(self, static_source, tailwind_esm_config):
        """Test ES module configs."""
        assert static_source.load(tailwind_esm_config) == {"4.5": "18px", "18": "72px"}

    def test_extend_overrides_base(self, static_source):
        """Test extend.spacing wins on key collision."""
        content = "module.exports = { theme: { spacing: { 1: '4px' }, extend: { spacing: { 1: '5px' } } } }"

        assert static_source.extract_from_content(content) == {"1": "5px"}

    def test_numeric_values(self, static_source):
        """Test bare numbers are kept as numbers."""
        content = "export default { theme: { spacing: { px: 1, half: 0.5 } } }"

        assert static_source.extract_from_content(content) == {"px": 1, "half": 0.5}

    def test_theme_without_spacing(self, static_source):
        """Test a theme without spacing yields an empty mapping."""
        content = "module.exports = { theme: { colors: { red: '#f00' } } }"

        assert static_source.extract_from_content(content) == {}

    @pytest.mark.parametrize(
        "content",
        [
            "module.exports = require('./base')",
            "module.exports = { theme: { spacing: baseSpacing } }",
            "module.exports = { theme: { spacing: { ...defaults, 1: '4px' } } }",
            "module.exports = { theme: { extend: ({ theme }) => ({}) } }",
        ],
    )
    def test_computed_configs_return_none(self, static_source, content):
        """Test configs that need evaluation are declined."""
        assert static_source.extract_from_content(content) is None

    def test_unreadable_file(self, static_source, tmp_path):
        """Test missing files return None."""
        assert static_source.load(tmp_path / "missing.js") is None


class TestNodeTailwindSpacingSource:
    """Tests for the node subprocess source with subprocess.run patched."""

    def fake_run(self, monkeypatch, stdout="", returncode=0, exc=None):
        calls = []

        def run(args, **kwargs):
            calls.append((args, kwargs))
            if exc is not None:
                raise exc
            return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="boom")

        monkeypatch.setattr(subprocess, "run", run)
        return calls

    def test_parses_json_output(self, monkeypatch, tmp_path):
        """Test the serialized spacing object is returned."""
        calls = self.fake_run(monkeypatch, stdout='{"3": "12px"}\n')
        source = NodeTailwindSpacingSource(node_executable="node", timeout=2.0)

        assert source.load(tmp_path / "tailwind.config.ts") == {"3": "12px"}
        args, kwargs = calls[0]
        assert args[0] == "node"
        assert args[-1] == str(tmp_path / "tailwind.config.ts")
        assert kwargs["timeout"] == 2.0

    def test_timeout(self, monkeypatch, tmp_path):
        """Test a timed out subprocess yields None."""
        self.fake_run(monkeypatch, exc=subprocess.TimeoutExpired(cmd="node", timeout=5))
        source = NodeTailwindSpacingSource(node_executable="node")

        assert source.load(tmp_path / "tailwind.config.js") is None

    def test_missing_executable(self, monkeypatch, tmp_path):
        """Test an OSError from the launcher yields None."""
        self.fake_run(monkeypatch, exc=FileNotFoundError("node"))
        source = NodeTailwindSpacingSource(node_executable="/no/such/node")

        assert source.load(tmp_path / "tailwind.config.js") is None

    @pytest.mark.parametrize(
        "stdout,returncode",
        [("", 1), ("", 0), ("not json", 0), ("[1, 2]", 0)],
    )
    def test_bad_results(self, monkeypatch, tmp_path, stdout, returncode):
        """Test failures and malformed output yield None."""
        self.fake_run(monkeypatch, stdout=stdout, returncode=returncode)
        source = NodeTailwindSpacingSource(node_executable="node")

        assert source.load(tmp_path / "tailwind.config.js") is None

    def test_no_node_on_path(self, monkeypatch, tmp_path):
        """Test the source declines when node cannot be found."""
        monkeypatch.setattr("shutil.which", lambda name: None)

        assert NodeTailwindSpacingSource().load(tmp_path / "tailwind.config.js") is None


class TestSpacingConfigLoader:
    """Tests for source fallback and caching."""

    def test_first_successful_source_wins(self, tmp_path):
        """Test sources are tried in order."""
        failing = RecordingSource(None)
        succeeding = RecordingSource({"1": "4px"})
        unused = RecordingSource({"1": "8px"})
        loader = SpacingConfigLoader(sources=[failing, succeeding, unused])

        assert loader.load(tmp_path / "tailwind.config.js") == {"1": "4px"}
        assert unused.calls == 0

    def test_results_are_cached_per_path(self, tmp_path):
        """Test repeated loads hit the cache, including failures."""
        source = RecordingSource(None)
        loader = SpacingConfigLoader(sources=[source])
        path = tmp_path / "tailwind.config.js"

        assert loader.load(path) is None
        assert loader.load(tmp_path / "." / "tailwind.config.js") is None
        assert source.calls == 1

        loader.clear_cache()
        loader.load(path)
        assert source.calls == 2


class TestLoadTokenMapFile:
    """Tests for load_token_map_file."""

    def test_valid_object(self, tmp_path):
        """Test a JSON object is returned."""
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps({"12px": "var(--space-3)"}), encoding="utf-8")

        assert load_token_map_file(path) == {"12px": "var(--space-3)"}

    @pytest.mark.parametrize("content", ["{", "[1, 2]", '"text"'])
    def test_invalid_content(self, tmp_path, content):
        """Test invalid JSON and non-objects return None."""
        path = tmp_path / "tokens.json"
        path.write_text(content, encoding="utf-8")

        assert load_token_map_file(path) is None

    def test_missing_file(self, tmp_path):
        """Test a missing file returns None."""
        assert load_token_map_file(tmp_path / "missing.json") is None
