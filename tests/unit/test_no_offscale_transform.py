"""Tests for the rhythmguard/no-offscale-transform rule."""

import pytest

from rhythmguard.rules import NoOffscaleTransformRule

RULE = "rhythmguard/no-offscale-transform"


@pytest.fixture
def transform(lint):
    def run(code, options=None, fix=False):
        return lint(code, RULE, options, fix=fix)

    return run


def test_rule_id():
    """Test rule identifier."""
    assert NoOffscaleTransformRule().rule_id == RULE


class TestTranslateFunctions:
    """Tests for translate-family functions in transform values."""

    def test_reports_and_fixes(self, transform):
        """Test off-scale translateX offsets."""
        result = transform("a { transform: translateX(13px); }", fix=True)

        assert result.fixed_findings[0].message == (
            'Unexpected transform translation value "13px". '
            "Use scale values (nearest: 12px or 16px)."
        )
        assert result.code == "a { transform: translateX(12px); }"

    def test_other_transform_functions_ignored(self, transform):
        """Test rotate() and scale() are never checked."""
        result = transform("a { transform: rotate(13deg) scale(1.3) skewX(13px); }")

        assert result.warnings == []

    def test_every_translate3d_argument(self, transform):
        """Test each translate3d() argument is checked."""
        result = transform("a { transform: translate3d(13px, 0, 20px); }", fix=True)

        assert len(result.fixed_findings) == 2
        assert result.code == "a { transform: translate3d(12px, 0, 16px); }"

    def test_percentages_skipped(self, transform):
        """Test percentage offsets."""
        assert transform("a { transform: translate(50%, -50%); }").warnings == []

    def test_token_functions_descended(self, transform):
        """Test var() fallbacks are still checked."""
        result = transform("a { transform: translateX(var(--space-3, 13px)); }")

        assert len(result.warnings) == 1


class TestTranslateProperties:
    """Tests for the translate property and property scope."""

    def test_translate_property(self, transform):
        """Test each translate component is checked and fixed."""
        result = transform("a { translate: 13px 5px; }", fix=True)

        assert result.code == "a { translate: 12px 4px; }"

    def test_spacing_properties_ignored(self, transform):
        """Test non-translation properties."""
        assert transform("a { margin: 13px; padding: 5px; }").warnings == []


class TestOptions:
    """Tests for options shared with use-scale."""

    def test_math_functions_skipped_by_default(self, transform):
        """Test calc() operands are not checked by default."""
        result = transform("a { transform: translateX(calc(10px + 3px)); }")

        assert result.warnings == []

    def test_math_functions_enforced(self, transform):
        """Test enforceInsideMathFunctions."""
        result = transform(
            "a { transform: translateX(calc(10px + 3px)); }",
            {"enforceInsideMathFunctions": True},
        )

        assert len(result.warnings) == 2

    def test_negative_offsets_keep_sign(self, transform):
        """Test negative offsets are fixed with their sign."""
        result = transform("a { transform: translateY(-13px); }", fix=True)

        assert result.code == "a { transform: translateY(-12px); }"

    def test_negative_offsets_skipped_when_disallowed(self, transform):
        """Test allowNegative: false leaves negatives alone."""
        result = transform("a { transform: translateY(-13px); }", {"allowNegative": False})

        assert result.warnings == []

    def test_custom_scale(self, transform):
        """Test explicit scales."""
        result = transform("a { transform: translateX(10px); }", {"scale": [0, 5, 10]})

        assert result.warnings == []

    def test_rejects_value_filter_options(self, transform):
        """Test options belonging to other rules are configuration findings."""
        result = transform("a { transform: translateX(13px); }", {"properties": ["gap"]})

        assert [f.message for f in result.invalid_option_warnings] == [
            'Invalid option name "properties" for rule "rhythmguard/no-offscale-transform"'
        ]
        assert len(result.warnings) == 1
