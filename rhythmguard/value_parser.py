"""CSS value expression parser.

Splits a declaration value into a node tree of words, strings, dividers,
spaces, comments and functions. Every node records its ``source_index``
within the value so findings can point at exact offsets, and the tree
serializes back to the original text (including in-place edits to node
values).

The parser never raises: unbalanced parentheses produce functions marked
``unclosed`` and stray closing parentheses become words.
"""

from dataclasses import dataclass, field

_DIV_CHARS = ",/:"
_WORD_STOP = set(" \t\n\r\f'\"(),/:")


@dataclass
class ValueNode:
    """A single node of a parsed value.

    ``type`` is one of ``word``, ``string``, ``div``, ``space``, ``comment``
    or ``function``. For functions ``value`` holds the name and ``nodes``
    the arguments; ``before``/``after`` hold the whitespace inside the
    parentheses. For dividers they hold the whitespace around the divider.
    """

    type: str
    value: str
    source_index: int
    before: str = ""
    after: str = ""
    quote: str = ""
    unclosed: bool = False
    nodes: list["ValueNode"] = field(default_factory=list)

    def __str__(self) -> str:
        return stringify(self)


@dataclass
class ParsedValue:
    """Root of a parsed value."""

    nodes: list[ValueNode]
    source: str = ""

    def __str__(self) -> str:
        return stringify(self.nodes)

    def walk(self):
        """Yield every node depth-first in document order."""
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            yield node
            if node.type == "function":
                stack.extend(reversed(node.nodes))


def stringify(nodes: "ValueNode | list[ValueNode]") -> str:
    """Serialize a node or node list back to text."""
    if isinstance(nodes, ValueNode):
        node = nodes
        if node.type == "string":
            closing = "" if node.unclosed else node.quote
            return f"{node.quote}{node.value}{closing}"
        if node.type == "comment":
            closing = "" if node.unclosed else "*/"
            return f"/*{node.value}{closing}"
        if node.type == "div":
            return f"{node.before}{node.value}{node.after}"
        if node.type == "function":
            closing = "" if node.unclosed else ")"
            return f"{node.value}({node.before}{stringify(node.nodes)}{node.after}{closing}"
        return node.value

    return "".join(stringify(node) for node in nodes)


class _ValueParser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def parse(self) -> list[ValueNode]:
        return self._parse_nodes(depth=0)

    def _parse_nodes(self, depth: int) -> list[ValueNode]:
        nodes: list[ValueNode] = []
        text = self.text

        while self.pos < self.length:
            char = text[self.pos]

            if char == ")":
                if depth > 0:
                    return nodes
                nodes.append(ValueNode("word", ")", self.pos))
                self.pos += 1
            elif char.isspace():
                nodes.append(self._read_space())
            elif text.startswith("/*", self.pos):
                nodes.append(self._read_comment())
            elif char in "'\"":
                nodes.append(self._read_string(char))
            elif char in _DIV_CHARS:
                nodes.append(self._read_div(nodes))
            elif char == "(":
                nodes.append(self._read_function("", self.pos, depth))
            else:
                start = self.pos
                name = self._read_word()
                if self.pos < self.length and text[self.pos] == "(":
                    nodes.append(self._read_function(name, start, depth))
                else:
                    nodes.append(ValueNode("word", name, start))

        return nodes

    def _read_space(self) -> ValueNode:
        start = self.pos
        while self.pos < self.length and self.text[self.pos].isspace():
            self.pos += 1
        return ValueNode("space", self.text[start : self.pos], start)

    def _read_comment(self) -> ValueNode:
        start = self.pos
        end = self.text.find("*/", start + 2)
        if end == -1:
            self.pos = self.length
            return ValueNode("comment", self.text[start + 2 :], start, unclosed=True)
        self.pos = end + 2
        return ValueNode("comment", self.text[start + 2 : end], start)

    def _read_string(self, quote: str) -> ValueNode:
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < self.length:
                chars.append(self.text[self.pos : self.pos + 2])
                self.pos += 2
                continue
            if char == quote:
                self.pos += 1
                return ValueNode("string", "".join(chars), start, quote=quote)
            chars.append(char)
            self.pos += 1
        return ValueNode("string", "".join(chars), start, quote=quote, unclosed=True)

    def _read_div(self, nodes: list[ValueNode]) -> ValueNode:
        before = ""
        start = self.pos
        if nodes and nodes[-1].type == "space":
            space = nodes.pop()
            before = space.value
            start = space.source_index
        value = self.text[self.pos]
        self.pos += 1
        after = self._read_space().value if self._at_space() else ""
        return ValueNode("div", value, start, before=before, after=after)

    def _at_space(self) -> bool:
        return self.pos < self.length and self.text[self.pos].isspace()

    def _read_word(self) -> str:
        start = self.pos
        while self.pos < self.length:
            char = self.text[self.pos]
            if char == "\\" and self.pos + 1 < self.length:
                self.pos += 2
                continue
            if char in _WORD_STOP or self.text.startswith("/*", self.pos):
                break
            self.pos += 1
        return self.text[start : self.pos]

    def _read_function(self, name: str, start: int, depth: int) -> ValueNode:
        node = ValueNode("function", name, start)
        self.pos += 1  # opening parenthesis

        if name.lower() == "url" and not self._next_is_quote():
            self._read_url_body(node)
        else:
            node.nodes = self._parse_nodes(depth + 1)
            if node.nodes and node.nodes[0].type == "space":
                node.before = node.nodes.pop(0).value
            if node.nodes and node.nodes[-1].type == "space":
                node.after = node.nodes.pop().value

        if self.pos < self.length and self.text[self.pos] == ")":
            self.pos += 1
        else:
            node.unclosed = True
        return node

    def _next_is_quote(self) -> bool:
        index = self.pos
        while index < self.length and self.text[index].isspace():
            index += 1
        return index < self.length and self.text[index] in "'\""

    def _read_url_body(self, node: ValueNode) -> None:
        end = self.text.find(")", self.pos)
        if end == -1:
            end = self.length
        body = self.text[self.pos : end]
        stripped = body.strip()
        lead = len(body) - len(body.lstrip())
        node.before = body[:lead]
        node.after = body[lead + len(stripped) :]
        if stripped:
            node.nodes = [ValueNode("word", stripped, self.pos + lead)]
        self.pos = end


def parse_value(text: str) -> ParsedValue:
    """Parse a CSS value expression.

    Args:
        text: Declaration value, without the property or trailing ``;``.

    Returns:
        ParsedValue whose ``str()`` reproduces ``text``.
    """
    return ParsedValue(nodes=_ValueParser(text).parse(), source=text)


def split_arguments(nodes: list[ValueNode]) -> list[list[ValueNode]]:
    """Split function arguments on comma dividers."""
    arguments: list[list[ValueNode]] = [[]]
    for node in nodes:
        if node.type == "div" and node.value == ",":
            arguments.append([])
        else:
            arguments[-1].append(node)
    return arguments
