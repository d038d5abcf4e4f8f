"""
Character cursor over a template stream.

One-character lookahead with line counting and no pushback: `current`
always holds the next unconsumed character of interest, so the parser
never has to re-read input.
"""

from __future__ import annotations

from typing import Optional, TextIO

from ..errors import ParseError

# Sentinel for the end of input; never equal to any one-character string.
EOF = ""

SNIPPET_LIMIT = 20


class Cursor:
    """
    Scanner state: {current character, line, stream}.

    `advance()` is the only method that reads from the stream. Once the end
    of input is reached further calls are no-ops.
    """

    def __init__(self, stream: TextIO, source_name: Optional[str] = None):
        """
        Args:
            stream: Text stream to read; the cursor never closes it
            source_name: Optional template name used in error messages
        """
        self._stream = stream
        self.source_name = source_name
        self.line = 1
        self.current = EOF
        self._load()

    @property
    def at_eof(self) -> bool:
        return self.current == EOF

    def _load(self) -> None:
        self.current = self._stream.read(1)

    def advance(self) -> None:
        """Consumes the current character and loads the next one."""
        if self.current == EOF:
            return
        if self.current == "\n":
            self.line += 1
        self._load()

    def skip_space(self) -> None:
        while not self.at_eof and self.current.isspace():
            self.advance()

    def advance_skip_space(self) -> None:
        self.advance()
        self.skip_space()

    def expect(self, expected: str) -> None:
        """
        Skips whitespace, then consumes `expected`.

        Raises:
            ParseError: If the next non-space character is something else
        """
        self.skip_space()
        if self.current == expected:
            self.advance()
        else:
            raise self.error(f"Expected {expected}")

    def snippet(self, limit: int = SNIPPET_LIMIT) -> str:
        """
        Consumes up to `limit` characters for error context.

        Returns:
            The characters read, "EOF" if already at the end, with a trailing
            "..." when more input remains
        """
        if self.at_eof:
            return "EOF"
        chars = []
        while not self.at_eof and len(chars) < limit:
            chars.append(self.current)
            self.advance()
        text = "".join(chars)
        if not self.at_eof:
            text += "..."
        return text

    def error(self, message: str) -> ParseError:
        """Builds a ParseError at the current position. The cursor is spent afterwards."""
        line = self.line
        return ParseError(message, line, self.snippet(), self.source_name)


__all__ = ["Cursor", "EOF", "SNIPPET_LIMIT"]
