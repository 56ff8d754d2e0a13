"""Unit tests for value-tree walking and math/token helpers."""

import re

import pytest

from rhythmguard.value_parser import parse_value
from rhythmguard.walker import (
    WalkContext,
    create_token_regex,
    is_keyword,
    is_math_function,
    is_token_function,
    should_lint_math_argument,
    walk_root_value_nodes,
    walk_transform_translate_nodes,
)


def collect_words(walk, value, skip_functions=()):
    seen = []

    def visit(node, context):
        if node.type == "function":
            return node.value.lower() in skip_functions
        seen.append((node.value, context.parent_function_name, context.parent_function_arg_index))
        return False

    walk(parse_value(value), visit)
    return seen


class TestWalkRootValueNodes:
    """Tests for walk_root_value_nodes."""

    def test_root_words_have_empty_context(self):
        """Test top-level words carry no function context."""
        assert collect_words(walk_root_value_nodes, "4px 13px") == [
            ("4px", None, None),
            ("13px", None, None),
        ]

    def test_argument_indices_are_one_based(self):
        """Test comma-separated arguments are numbered from 1."""
        words = collect_words(walk_root_value_nodes, "clamp(8px, 2vw, 24px)")

        assert words == [("8px", "clamp", 1), ("2vw", "clamp", 2), ("24px", "clamp", 3)]

    def test_nested_function_context(self):
        """Test the nearest enclosing function is reported."""
        words = collect_words(walk_root_value_nodes, "max(4px, calc(10px + 3px))")

        assert ("4px", "max", 1) in words
        assert ("10px", "calc", 1) in words
        assert ("3px", "calc", 1) in words

    def test_bare_parentheses_inherit_context(self):
        """Test a parenthesized group keeps its function's argument index."""
        words = collect_words(walk_root_value_nodes, "clamp(1px, (2px + 3px), 4px)")

        assert ("2px", "clamp", 2) in words
        assert ("3px", "clamp", 2) in words

    def test_visitor_can_skip_function(self):
        """Test returning True skips a function's arguments."""
        words = collect_words(
            walk_root_value_nodes, "var(--space-2, 13px) 5px", skip_functions=("var",)
        )

        assert words == [("5px", None, None)]


class TestWalkTransformTranslateNodes:
    """Tests for walk_transform_translate_nodes."""

    def test_only_translate_arguments(self):
        """Test other transform functions are not visited."""
        words = collect_words(
            walk_transform_translate_nodes, "translateX(13px) scale(1.05) rotate(4deg)"
        )

        assert words == [("13px", "translatex", 1)]

    def test_translate3d_arguments(self):
        """Test every translate3d argument is indexed."""
        words = collect_words(walk_transform_translate_nodes, "translate3d(1px, 2px, 3px)")

        assert [index for _, _, index in words] == [1, 2, 3]

    def test_math_inside_translate(self):
        """Test math functions nested in translate are walked."""
        words = collect_words(walk_transform_translate_nodes, "translateY(calc(10px + 3px))")

        assert ("10px", "calc", 1) in words
        assert ("3px", "calc", 1) in words


class TestShouldLintMathArgument:
    """Tests for should_lint_math_argument."""

    def test_outside_math_always_linted(self):
        """Test nodes outside math functions are always eligible."""
        assert should_lint_math_argument(WalkContext(), False)
        assert should_lint_math_argument(WalkContext("translatex", 1), False)

    def test_inside_math_requires_enforcement(self):
        """Test math arguments are skipped unless enforced."""
        context = WalkContext("calc", 1)

        assert not should_lint_math_argument(context, False)
        assert should_lint_math_argument(context, True)

    def test_include_list_wins(self):
        """Test mathFunctionArguments beats ignoreMathFunctionArguments."""
        kwargs = {
            "math_function_arguments": {"clamp": [2]},
            "ignore_math_function_arguments": {"clamp": [2]},
        }

        assert should_lint_math_argument(WalkContext("clamp", 2), True, **kwargs)
        assert not should_lint_math_argument(WalkContext("clamp", 1), True, **kwargs)

    def test_exclude_list(self):
        """Test ignored argument indices are skipped."""
        kwargs = {"ignore_math_function_arguments": {"clamp": [1, 3]}}

        assert should_lint_math_argument(WalkContext("clamp", 2), True, **kwargs)
        assert not should_lint_math_argument(WalkContext("clamp", 3), True, **kwargs)


class TestTokenFunctions:
    """Tests for token and keyword helpers."""

    def test_var_requires_matching_token(self):
        """Test var() only counts when its name matches the pattern."""
        regex = re.compile("^--space-")
        token_var = parse_value("var(--space-3, 13px)").nodes[0]
        other_var = parse_value("var(--gutter, 13px)").nodes[0]

        assert is_token_function(token_var, ["var"], regex)
        assert not is_token_function(other_var, ["var"], regex)

    def test_other_token_functions(self):
        """Test non-var token functions are always opaque."""
        theme = parse_value("theme(spacing.3)").nodes[0]

        assert is_token_function(theme, ["var", "theme"], re.compile("^--space-"))
        assert not is_token_function(theme, ["var"], re.compile("^--space-"))

    def test_math_function_names(self):
        """Test math function detection is case-insensitive."""
        assert is_math_function("CALC")
        assert not is_math_function("translateX")
        assert not is_math_function(None)

    def test_keywords(self):
        """Test keyword matching is case-insensitive."""
        assert is_keyword("AUTO", ["auto"])
        assert not is_keyword("4px", ["auto"])

    def test_invalid_token_pattern_falls_back(self):
        """Test an invalid pattern yields the default and a message."""
        regex, error = create_token_regex("[")

        assert regex.pattern == "^--space-"
        assert error == "Invalid tokenPattern regex: ["

    @pytest.mark.parametrize("pattern", ["^--space-", "^--(size|gap)-"])
    def test_valid_token_pattern(self, pattern):
        """Test valid patterns compile without a message."""
        regex, error = create_token_regex(pattern)

        assert regex.pattern == pattern
        assert error is None
