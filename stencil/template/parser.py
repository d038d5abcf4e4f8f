"""
Recursive-descent template parser.

Reads characters from a Cursor and builds the node sequence of a Template.

Grammar:
template      → node*
node          → directive | non_directive
non_directive → reference | plain_text
plain_text    → (char not in {'$', '#'})+
directive     → "##" comment_to_eol
              | "#" other                          (not supported)
reference     → "$" ( "{" ref_body "}" | ref_body )
ref_body      → IDENTIFIER suffix*
suffix        → "." IDENTIFIER ( "(" arg_list ")" )?
              | "[" expression "]"
arg_list      → ( expression ( "," expression )* )?
expression    → "$" reference_required | STRING | INTEGER | "true" | "false"

IDENTIFIER    → ASCII letter followed by ASCII letters, digits, '-' or '_'
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, TextIO

from .cursor import Cursor
from .nodes import (
    ConstantNode,
    EofNode,
    ExpressionNode,
    IndexReferenceNode,
    MemberReferenceNode,
    MethodReferenceNode,
    PlainReferenceNode,
    ReferenceNode,
    TemplateNode,
    TextNode,
)

if TYPE_CHECKING:
    from .template import Template

logger = logging.getLogger(__name__)

# Integer literals are 32-bit signed.
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def _is_ascii_letter(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_ascii_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_id_char(c: str) -> bool:
    return _is_ascii_letter(c) or _is_ascii_digit(c) or c in ("-", "_")


class TemplateParser:
    """
    Parser for one template text.

    Constructed once per input and consumed by a single `parse()` call,
    which either returns a Template or raises ParseError. The stream is read
    to completion but never closed.
    """

    def __init__(self, stream: TextIO, source_name: Optional[str] = None):
        """
        Args:
            stream: Template source
            source_name: Optional name used in diagnostics
        """
        self.cursor = Cursor(stream, source_name)
        self.source_name = source_name
        self._consumed = False
        # Set when an unbraced reference ended on a '.' that starts the next text
        self._dangling_dot = False

    def parse(self) -> Template:
        """
        Parses the whole input.

        Returns:
            Immutable Template whose node sequence ends with a single EofNode

        Raises:
            ParseError: At the first syntax error; no partial result is produced
        """
        from .template import Template

        if self._consumed:
            raise RuntimeError("TemplateParser.parse() can only be called once")
        self._consumed = True

        nodes: List[TemplateNode] = []
        while True:
            node = self._parse_node()
            if node is None:
                # Comment: produces nothing
                continue
            if isinstance(node, EofNode):
                nodes.append(node)
                break
            # Adjacent text (split by a comment or a '$' that is not a reference) is merged
            if isinstance(node, TextNode) and nodes and isinstance(nodes[-1], TextNode):
                nodes[-1] = TextNode(text=nodes[-1].text + node.text, line=nodes[-1].line)
            else:
                nodes.append(node)

        logger.debug(f"Parsed template {self.source_name or '<string>'} into {len(nodes)} nodes")
        return Template(tuple(nodes), name=self.source_name)

    # Top level

    def _parse_node(self) -> Optional[TemplateNode]:
        cursor = self.cursor
        line = cursor.line

        if self._dangling_dot:
            self._dangling_dot = False
            return self._parse_plain_text(".", line)

        if cursor.at_eof:
            return EofNode(line=line)

        if cursor.current == "#":
            cursor.advance()
            if cursor.current == "#":
                self._skip_line_comment()
                return None
            raise cursor.error("Directive not supported: only ## line comments may start with #")

        return self._parse_non_directive()

    def _skip_line_comment(self) -> None:
        """Discards everything through the next newline, inclusive, or to EOF."""
        cursor = self.cursor
        while not cursor.at_eof and cursor.current != "\n":
            cursor.advance()
        cursor.advance()

    def _parse_non_directive(self) -> TemplateNode:
        cursor = self.cursor
        line = cursor.line

        if cursor.current != "$":
            first = cursor.current
            cursor.advance()
            return self._parse_plain_text(first, line)

        cursor.advance()
        if _is_ascii_letter(cursor.current):
            return self._parse_reference_body(allow_dangling_dot=True)

        if cursor.current == "{":
            cursor.advance()
            if not _is_ascii_letter(cursor.current):
                return self._parse_plain_text("${", line)
            node = self._parse_reference_body(allow_dangling_dot=False)
            cursor.expect("}")
            return node

        return self._parse_plain_text("$", line)

    def _parse_plain_text(self, prefix: str, line: int) -> TextNode:
        cursor = self.cursor
        chars = [prefix]
        while not cursor.at_eof and cursor.current not in ("$", "#"):
            chars.append(cursor.current)
            cursor.advance()
        return TextNode(text="".join(chars), line=line)

    # References

    def _parse_required_reference(self) -> ReferenceNode:
        """Reference in expression position, where '$' must start a reference."""
        cursor = self.cursor
        if cursor.current == "{":
            cursor.advance()
            node = self._parse_reference_body(allow_dangling_dot=False)
            cursor.expect("}")
            return node
        return self._parse_reference_body(allow_dangling_dot=False)

    def _parse_reference_body(self, allow_dangling_dot: bool) -> ReferenceNode:
        """
        Parses an identifier followed by any number of suffixes.

        The chain is built iteratively, so `$a.b[$c].d(1)` becomes
        Method(Index(Member(Plain(a), b), c), d, [1]).

        Args:
            allow_dangling_dot: True for unbraced template-level references, where
                a '.' not followed by a letter ends the reference and starts text
        """
        cursor = self.cursor
        line = cursor.line
        reference: ReferenceNode = PlainReferenceNode(name=self._parse_id("Reference"), line=line)

        while True:
            if cursor.current == ".":
                cursor.advance()
                if not _is_ascii_letter(cursor.current):
                    if allow_dangling_dot:
                        self._dangling_dot = True
                        return reference
                    raise cursor.error("Member should start with an ASCII letter")
                name = self._parse_id("Member")
                if cursor.current == "(":
                    reference = self._parse_method_call(reference, name, line)
                else:
                    reference = MemberReferenceNode(lhs=reference, name=name, line=line)
            elif cursor.current == "[":
                reference = self._parse_index(reference, line)
            else:
                return reference

    def _parse_method_call(self, lhs: ReferenceNode, name: str, line: int) -> MethodReferenceNode:
        cursor = self.cursor
        cursor.advance_skip_space()
        args: List[ExpressionNode] = []
        if cursor.current != ")":
            args.append(self._parse_expression())
            while cursor.current == ",":
                cursor.advance_skip_space()
                args.append(self._parse_expression())
            if cursor.current != ")":
                raise cursor.error("Expected )")
        cursor.advance()
        return MethodReferenceNode(lhs=lhs, name=name, args=tuple(args), line=line)

    def _parse_index(self, lhs: ReferenceNode, line: int) -> IndexReferenceNode:
        cursor = self.cursor
        cursor.advance()
        index = self._parse_expression()
        if cursor.current != "]":
            raise cursor.error("Expected ]")
        cursor.advance()
        return IndexReferenceNode(lhs=lhs, index=index, line=line)

    def _parse_id(self, what: str) -> str:
        cursor = self.cursor
        if not _is_ascii_letter(cursor.current):
            raise cursor.error(f"{what} should start with an ASCII letter")
        chars = []
        while _is_id_char(cursor.current):
            chars.append(cursor.current)
            cursor.advance()
        return "".join(chars)

    # Expressions

    def _parse_expression(self) -> ExpressionNode:
        """Parses a reference or a literal, skipping surrounding whitespace."""
        cursor = self.cursor
        cursor.skip_space()
        node: ExpressionNode

        if cursor.current == "$":
            cursor.advance()
            node = self._parse_required_reference()
        elif cursor.current == '"':
            node = self._parse_string_literal()
        elif cursor.current == "-":
            # No negation operator: '-' can only start a negative literal
            cursor.advance()
            node = self._parse_int_literal("-")
        elif _is_ascii_digit(cursor.current):
            node = self._parse_int_literal("")
        elif _is_ascii_letter(cursor.current):
            node = self._parse_boolean_literal()
        else:
            raise cursor.error("Expected an expression")

        cursor.skip_space()
        return node

    def _parse_string_literal(self) -> ConstantNode:
        cursor = self.cursor
        line = cursor.line
        cursor.advance()
        chars = []
        while cursor.current != '"':
            if cursor.at_eof or cursor.current == "\n":
                raise cursor.error("Unterminated string constant")
            if cursor.current in ("$", "\\"):
                raise cursor.error("Escapes or references in string constants are not currently supported")
            chars.append(cursor.current)
            cursor.advance()
        cursor.advance()
        return ConstantNode(value="".join(chars), line=line)

    def _parse_int_literal(self, prefix: str) -> ConstantNode:
        cursor = self.cursor
        line = cursor.line
        digits = []
        while _is_ascii_digit(cursor.current):
            digits.append(cursor.current)
            cursor.advance()
        text = prefix + "".join(digits)
        if not digits:
            raise cursor.error(f"Invalid integer: {text}")
        value = int(text)
        if not INT_MIN <= value <= INT_MAX:
            raise cursor.error(f"Invalid integer: {text}")
        return ConstantNode(value=value, line=line)

    def _parse_boolean_literal(self) -> ConstantNode:
        cursor = self.cursor
        line = cursor.line
        word = self._parse_id("Identifier without $")
        if word == "true":
            return ConstantNode(value=True, line=line)
        if word == "false":
            return ConstantNode(value=False, line=line)
        raise cursor.error("Identifier must be preceded by $ or be true or false")


__all__ = ["TemplateParser", "INT_MIN", "INT_MAX"]
