"""
Parser for the state DSL.

Grammar::

    config      := item (separator? item)*
    item        := comment | enum | list | singleton
    singleton   := Identifier
    enum        := Identifier '{' item* '}'
    list        := Identifier '[' item* ']'
    comment     := '//' <rest of line, trimmed>

Separators (``,``) are optional everywhere and redundant ones are absorbed.
The parser never recovers: the first malformed construct raises ParseError.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .errors import ParseError, extract_snippet, make_parse_error
from .lexer import Token, TokenType, tokenize
from .nodes import CommentNode, EnumNode, ListNode, ParseNode, SingletonNode

CLOSING = {
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
}


@dataclass
class OpenGroup:
    """A ``{`` or ``[`` group whose closing bracket has not been read yet."""

    opening: Token
    name: str
    children: list[ParseNode] = field(default_factory=list)

    @property
    def closing(self) -> TokenType:
        return CLOSING[self.opening.type]

    def build(self) -> ParseNode:
        if self.opening.type == TokenType.LBRACE:
            return EnumNode(name=self.name, children=self.children)
        return ListNode(name=self.name, children=self.children)


class Parser:
    """
    Parser over the token stream produced by the lexer.

    Provides token navigation, matching, and error generation along with
    one method per grammar rule. Nested groups are parsed without recursion.
    """

    def __init__(self, tokens: list[Token], text: str, file: Path | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            text: Source text the tokens were read from (for error remainders)
            file: Source file path (for error reporting)
        """
        self.tokens = tokens
        self.text = text
        self.file = file
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def skip_separators(self) -> None:
        """Absorb any number of ``,`` separators."""
        while self.match(TokenType.COMMA):
            self.advance()

    def error(self, message: str, token: Token) -> ParseError:
        """Build a ParseError located at ``token``."""
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            remainder=self.text[token.offset :],
            snippet=extract_snippet(self.text, token.line),
        )

    def parse_config(self) -> list[ParseNode]:
        """
        Parse the whole input as a sequence of top-level items.

        Returns:
            Top-level nodes in source order (possibly empty)
        """
        items: list[ParseNode] = []
        self.skip_separators()
        while not self.match(TokenType.EOF):
            items.append(self.parse_item())
            self.skip_separators()
        return items

    def parse_item(self) -> ParseNode:
        """
        Parse a comment, enum, list or singleton.

        Groups are tracked on an explicit stack of open brackets, so nesting
        depth is bounded only by memory.

        Raises:
            ParseError: On an unexpected token, or a missing or mismatched
                closing bracket
        """
        stack: list[OpenGroup] = []

        while True:
            if stack:
                group = stack[-1]
                self.skip_separators()
                token = self.current_token()

                if token.type == group.closing:
                    self.advance()
                    stack.pop()
                    node = group.build()
                    if not stack:
                        return node
                    stack[-1].children.append(node)
                    continue

                if token.type == TokenType.EOF:
                    raise self.error(
                        f"Unterminated {group.opening.value!r} group for {group.name!r}: "
                        f"expected {group.closing.value!r} before end of input",
                        group.opening,
                    )

                if token.type in (TokenType.RBRACE, TokenType.RBRACKET):
                    raise self.error(
                        f"Mismatched {token.value!r} in group {group.name!r}: "
                        f"expected {group.closing.value!r}",
                        token,
                    )

            token = self.current_token()
            if token.type == TokenType.COMMENT:
                self.advance()
                node = CommentNode(text=token.value)
            elif token.type == TokenType.IDENTIFIER:
                name = self.advance().value
                if self.match(TokenType.LBRACE, TokenType.LBRACKET):
                    stack.append(OpenGroup(opening=self.advance(), name=name))
                    continue
                node = SingletonNode(name=name)
            else:
                found = "end of input" if token.type == TokenType.EOF else repr(token.value)
                raise self.error(f"Expected a state name or comment, got {found}", token)

            if not stack:
                return node
            stack[-1].children.append(node)


def parse_config(text: str, file: Path | None = None) -> list[ParseNode]:
    """
    Parse DSL text into its top-level nodes.

    Args:
        text: DSL source text
        file: Source file path (for error reporting)

    Returns:
        Top-level nodes in source order

    Raises:
        ParseError: If the text is not valid DSL
    """
    return Parser(tokenize(text, file), text, file).parse_config()


def parse_node(text: str, file: Path | None = None) -> ParseNode:
    """
    Parse text that holds exactly one item.

    Raises:
        ParseError: If the text is invalid or holds anything but a single item
    """
    parser = Parser(tokenize(text, file), text, file)
    parser.skip_separators()
    node = parser.parse_item()
    parser.skip_separators()
    if not parser.match(TokenType.EOF):
        raise parser.error("Expected a single item", parser.current_token())
    return node


def config_is_valid(text: str) -> bool:
    """
    Check that the whole of ``text`` parses with nothing left unconsumed.

    >>> config_is_valid("Name, Name2")
    True
    >>> config_is_valid("Name { A, B }")
    True
    >>> config_is_valid("Name { ")
    False
    """
    try:
        parse_config(text)
    except ParseError:
        return False
    return True
