"""S-expression reader and writer for KiCad library formats."""

from .parser import SExp, atom, format_number, node, number, parse, parse_all, string

__all__ = ["SExp", "atom", "format_number", "node", "number", "parse", "parse_all", "string"]
