"""
Lexer/Tokenizer for the state DSL.

Converts raw DSL text into a stream of tokens with source location tracking.
Whitespace (including newlines) is insignificant; ``//`` comments run to the
end of the line and are kept as tokens because the parser turns them into
comment nodes.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import extract_snippet, make_parse_error


class TokenType(Enum):
    """Token types in the state DSL."""

    IDENTIFIER = "IDENTIFIER"
    COMMENT = "COMMENT"

    # Punctuation
    COMMA = ","
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    EOF = "EOF"


PUNCTUATION = {
    ",": TokenType.COMMA,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}


def is_identifier_start(ch: str) -> bool:
    """State names must begin with an uppercase letter."""
    return ch.isupper()


def is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def is_identifier(value: str) -> bool:
    """Check whether ``value`` is a complete, valid state name."""
    return (
        bool(value)
        and is_identifier_start(value[0])
        and all(is_identifier_char(ch) for ch in value[1:])
    )


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: String value of the token (comment text is trimmed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset of the token start in the source text
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for the state DSL.

    Walks the source with a character cursor and produces tokens.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while (ch := self.current_char()) is not None and ch.isspace():
            self.advance()

    def read_comment(self) -> str:
        """Read a ``//`` comment up to (not including) the line ending."""
        self.advance()
        self.advance()
        start = self.pos
        while self.current_char() not in (None, "\n"):
            self.advance()
        return self.text[start : self.pos].strip()

    def read_identifier(self) -> str:
        """Read a state name."""
        start = self.pos
        self.advance()
        while (ch := self.current_char()) is not None and is_identifier_char(ch):
            self.advance()
        return self.text[start : self.pos]

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If a character cannot start any token
        """
        while True:
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column
            token_offset = self.pos

            if ch == "/" and self.peek_char() == "/":
                value = self.read_comment()
                self.tokens.append(
                    Token(TokenType.COMMENT, value, token_line, token_col, token_offset)
                )

            elif ch in PUNCTUATION:
                self.advance()
                self.tokens.append(
                    Token(PUNCTUATION[ch], ch, token_line, token_col, token_offset)
                )

            elif is_identifier_start(ch):
                value = self.read_identifier()
                self.tokens.append(
                    Token(TokenType.IDENTIFIER, value, token_line, token_col, token_offset)
                )

            else:
                hint = ""
                if ch.isalpha() or ch == "_":
                    hint = " (state names must start with an uppercase letter)"
                raise make_parse_error(
                    f"Unexpected character: {ch!r}{hint}",
                    self.file,
                    token_line,
                    token_col,
                    remainder=self.text[token_offset:],
                    snippet=extract_snippet(self.text, token_line),
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, self.pos))

        return self.tokens


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
