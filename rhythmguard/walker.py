"""Value-tree traversal with functional context.

Visitors receive ``(node, context)`` for every word and function node and
return True to skip a function's children.
"""

import re
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass

from .constants import DEFAULT_TOKEN_PATTERN, MATH_FUNCTIONS, TRANSLATE_FUNCTIONS
from .value_parser import ParsedValue, ValueNode, split_arguments, stringify


@dataclass(frozen=True)
class WalkContext:
    """Nearest enclosing function and the 1-based argument index within it."""

    parent_function_name: str | None = None
    parent_function_arg_index: int | None = None


Visitor = Callable[[ValueNode, WalkContext], bool | None]


def _walk_nodes(
    nodes: list[ValueNode],
    visitor: Visitor,
    parent_name: str | None,
    fixed_index: int | None = None,
) -> None:
    arg_index = 1
    for node in nodes:
        if node.type == "div" and node.value == ",":
            arg_index += 1
            continue

        if parent_name is None:
            context = WalkContext()
        else:
            context = WalkContext(parent_name, fixed_index or arg_index)

        if node.type == "function":
            if visitor(node, context):
                continue
            if node.value:
                _walk_nodes(node.nodes, visitor, node.value.lower())
            else:
                # Bare parentheses group under the enclosing function's argument
                _walk_nodes(
                    node.nodes,
                    visitor,
                    parent_name,
                    context.parent_function_arg_index,
                )
        elif node.type == "word":
            visitor(node, context)


def walk_root_value_nodes(parsed: ParsedValue, visitor: Visitor) -> None:
    """Visit every word and function node, descending into functions.

    Args:
        parsed: Parsed value to traverse.
        visitor: Called with each node and its WalkContext. Returning True
            for a function node skips its arguments.
    """
    _walk_nodes(parsed.nodes, visitor, None)


def walk_transform_translate_nodes(parsed: ParsedValue, visitor: Visitor) -> None:
    """Visit only the arguments of translate-family functions.

    Translate functions are located anywhere in the value; other transform
    functions such as ``scale()`` or ``rotate()`` are never visited.
    """

    def find(nodes: list[ValueNode]) -> None:
        for node in nodes:
            if node.type != "function":
                continue
            name = node.value.lower()
            if name in TRANSLATE_FUNCTIONS:
                _walk_nodes(node.nodes, visitor, name)
            else:
                find(node.nodes)

    find(parsed.nodes)


def is_math_function(name: str | None) -> bool:
    if not name:
        return False
    return name.lower() in MATH_FUNCTIONS


def should_lint_math_argument(
    context: WalkContext,
    enforce_inside_math_functions: bool,
    math_function_arguments: Mapping[str, Collection[int]] | None = None,
    ignore_math_function_arguments: Mapping[str, Collection[int]] | None = None,
) -> bool:
    """Decide whether a node inside a math function should be checked.

    Nodes outside math functions are always checked. Inside one, nothing is
    checked unless enforcement is on; then an explicit include list for the
    function wins over an exclude list, and with neither every argument is
    eligible.
    """
    name = context.parent_function_name
    if not is_math_function(name):
        return True
    if not enforce_inside_math_functions:
        return False

    index = context.parent_function_arg_index
    only = (math_function_arguments or {}).get(name)
    if only is not None:
        return index in only

    excluded = (ignore_math_function_arguments or {}).get(name)
    if excluded is not None:
        return index not in excluded

    return True


def is_token_function(
    node: ValueNode, token_functions: Collection[str], token_regex: re.Pattern
) -> bool:
    """Check whether a function node is an opaque token reference.

    ``var()`` only counts when its first argument matches the token pattern,
    so an arbitrary custom property with a raw fallback is still checked.
    """
    if node.type != "function":
        return False

    name = node.value.lower()
    if name not in token_functions:
        return False
    if name != "var":
        return True

    arguments = split_arguments(node.nodes)
    first_argument = stringify(arguments[0]).strip() if arguments else ""
    return bool(token_regex.search(first_argument))


def is_keyword(value: str, ignore_values: Iterable[str]) -> bool:
    return value.lower() in ignore_values


def create_token_regex(token_pattern: str) -> tuple[re.Pattern, str | None]:
    """Compile the token pattern.

    Returns:
        The compiled pattern and None, or the default pattern and an error
        message when ``token_pattern`` is not a valid regex.
    """
    try:
        return re.compile(token_pattern), None
    except re.error:
        return (
            re.compile(DEFAULT_TOKEN_PATTERN),
            f"Invalid tokenPattern regex: {token_pattern}",
        )
