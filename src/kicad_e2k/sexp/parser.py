"""S-expression reader and writer for KiCad library files.

The writer renders generated symbols and footprints; the reader lets the
library merge manager locate existing records in ``.kicad_sym`` files.

- Quoted strings, unquoted atoms and nested lists are supported
- Atoms keep their original spelling so parse → render is stable
- Rendering is deterministic: the same tree always yields the same text
"""

from __future__ import annotations

import math

# Nodes always rendered as indented blocks, never on one line
_BLOCK_NODES = frozenset({"kicad_symbol_lib", "symbol", "footprint", "module"})
_INLINE_LIMIT = 80


class SExp:
    """A node in an S-expression tree.

    An SExp is either an atom (leaf with ``value``) or a list (``name`` plus
    ``children``).

    Usage::

        tree = parse('(symbol "R" (in_bom yes) (pin passive line))')
        tree.name            # "symbol"
        tree.first_value     # "R"
        tree["in_bom"].first_value  # "yes"
    """

    __slots__ = ("name", "value", "children", "_original_str")

    def __init__(
        self,
        name: str | None = None,
        value: str | None = None,
        children: list[SExp] | None = None,
        _original_str: str | None = None,
    ) -> None:
        self.name = name
        self.value = value
        self.children: list[SExp] = children if children is not None else []
        self._original_str = _original_str

    @property
    def is_atom(self) -> bool:
        return self.name is None and self.value is not None

    @property
    def is_list(self) -> bool:
        return self.name is not None

    def __getitem__(self, key: str) -> SExp:
        """Get the first child list with the given name; KeyError if missing."""
        for child in self.children:
            if child.name == key:
                return child
        raise KeyError(f"No child named {key!r}")

    def get(self, key: str, default: SExp | None = None) -> SExp | None:
        for child in self.children:
            if child.name == key:
                return child
        return default

    def find_all(self, name: str) -> list[SExp]:
        """Find all direct children with the given name."""
        return [child for child in self.children if child.name == name]

    @property
    def first_value(self) -> str | None:
        """Value of the first atom child, e.g. ``(version 20211014)`` -> '20211014'."""
        for child in self.children:
            if child.is_atom:
                return child.value
        return None

    @property
    def atom_values(self) -> list[str]:
        return [child.value for child in self.children if child.is_atom and child.value is not None]

    def to_string(self, indent: int = 0) -> str:
        """Render the tree.

        A list stays on one line when it fits and is not a block node;
        otherwise its atoms follow the name and every child list goes on
        its own line, indented two spaces deeper.
        """
        if self.is_atom:
            if self._original_str is not None:
                return self._original_str
            return _quote_if_needed(self.value or "")

        inline = self._inline()
        if self.name not in _BLOCK_NODES and len(inline) + 2 * indent <= _INLINE_LIMIT:
            return inline

        child_prefix = "  " * (indent + 1)
        head = "(" + (self.name or "")
        lines: list[str] = []
        for child in self.children:
            if child.is_atom and not lines:
                head += " " + child.to_string()
            else:
                lines.append(child_prefix + child.to_string(indent + 1))
        if not lines:
            return head + ")"
        return head + "\n" + "\n".join(lines) + "\n" + "  " * indent + ")"

    def _inline(self) -> str:
        parts = [self.name or ""]
        parts.extend(child._inline() if child.is_list else child.to_string() for child in self.children)
        return "(" + " ".join(parts) + ")"

    def __repr__(self) -> str:
        if self.is_atom:
            return f"SExp(value={self.value!r})"
        return f"SExp(name={self.name!r}, children={len(self.children)})"


# ── Builders ────────────────────────────────────────────────────────


def format_number(value: float, precision: int = 4) -> str:
    """Render a number compactly: no trailing zeros, no negative zero."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot render non-finite number {value!r}")
    rounded = round(value, precision)
    if rounded == 0:
        return "0"
    return f"{rounded:.{precision}f}".rstrip("0").rstrip(".")


def atom(value: str) -> SExp:
    """Unquoted atom such as ``yes`` or ``F.Cu``."""
    return SExp(value=value, _original_str=value)


def string(value: str) -> SExp:
    """Always-quoted string atom."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return SExp(value=value, _original_str=f'"{escaped}"')


def number(value: float) -> SExp:
    text = format_number(value)
    return SExp(value=text, _original_str=text)


def node(name: str, *items: SExp | str | float) -> SExp:
    """Build a list node; ``str`` items become atoms, numbers are formatted."""
    children: list[SExp] = []
    for item in items:
        if isinstance(item, SExp):
            children.append(item)
        elif isinstance(item, str):
            children.append(atom(item))
        else:
            children.append(number(item))
    return SExp(name=name, children=children)


def _quote_if_needed(s: str) -> str:
    if not s:
        return '""'
    if not any(ch in ' \t\n\r"()\\' for ch in s):
        return s
    escaped = s.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# ── Reader ──────────────────────────────────────────────────────────


class _Tokenizer:
    """Low-level tokenizer for S-expression strings."""

    __slots__ = ("_text", "_pos", "_length")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._length = len(text)

    def _skip_whitespace(self) -> None:
        pos = self._pos
        text = self._text
        while pos < self._length and text[pos] in " \t\n\r":
            pos += 1
        self._pos = pos

    def peek(self) -> str | None:
        self._skip_whitespace()
        if self._pos >= self._length:
            return None
        return self._text[self._pos]

    def next_token(self) -> tuple[str, str, str] | None:
        """Return (token_type, token_value, raw_text) or None at EOF.

        Token types: 'OPEN', 'CLOSE', 'STRING', 'ATOM'
        """
        self._skip_whitespace()
        if self._pos >= self._length:
            return None

        ch = self._text[self._pos]
        if ch == "(":
            self._pos += 1
            return ("OPEN", "(", "(")
        if ch == ")":
            self._pos += 1
            return ("CLOSE", ")", ")")
        if ch == '"':
            start = self._pos
            value = self._read_quoted_string()
            return ("STRING", value, self._text[start : self._pos])

        value = self._read_atom()
        return ("ATOM", value, value)

    def _read_quoted_string(self) -> str:
        self._pos += 1  # opening quote
        result: list[str] = []
        while self._pos < self._length:
            ch = self._text[self._pos]
            if ch == "\\":
                self._pos += 1
                if self._pos < self._length:
                    esc = self._text[self._pos]
                    result.append("\n" if esc == "n" else esc)
                    self._pos += 1
                continue
            if ch == '"':
                self._pos += 1
                return "".join(result)
            result.append(ch)
            self._pos += 1
        raise ValueError("Unterminated quoted string")

    def _read_atom(self) -> str:
        start = self._pos
        while self._pos < self._length:
            if self._text[self._pos] in ' \t\n\r()"':
                break
            self._pos += 1
        return self._text[start : self._pos]


def parse(text: str) -> SExp:
    """Parse an S-expression string into an SExp tree.

    Raises:
        ValueError: If the input is malformed.
    """
    return _parse_expr(_Tokenizer(text))


def parse_all(text: str) -> list[SExp]:
    """Parse text that may contain several top-level S-expressions."""
    tokenizer = _Tokenizer(text)
    results: list[SExp] = []
    while tokenizer.peek() is not None:
        results.append(_parse_expr(tokenizer))
    return results


def _parse_expr(tokenizer: _Tokenizer) -> SExp:
    token = tokenizer.next_token()
    if token is None:
        raise ValueError("Unexpected end of input")

    token_type, token_value, raw_text = token

    if token_type in ("ATOM", "STRING"):
        return SExp(value=token_value, _original_str=raw_text)

    if token_type == "CLOSE":
        raise ValueError("Unexpected ')'")

    if tokenizer.peek() == ")":
        tokenizer.next_token()
        return SExp(name="", children=[])

    first = _parse_expr(tokenizer)
    if not first.is_atom:
        raise ValueError("List must start with a name atom")

    children: list[SExp] = []
    while True:
        pk = tokenizer.peek()
        if pk is None:
            raise ValueError("Unexpected end of input: unclosed '('")
        if pk == ")":
            tokenizer.next_token()
            break
        children.append(_parse_expr(tokenizer))

    return SExp(name=first.value, children=children)
