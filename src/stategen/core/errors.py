"""
Error types for stategen parsing, naming, and generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class StategenError(Exception):
    """Base exception for all stategen errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(StategenError):
    """
    Raised when state DSL text cannot be parsed.

    Examples:
    - Unterminated ``{`` or ``[`` group
    - Mismatched closing bracket
    - Character that cannot start a state name, comment or separator

    Attributes:
        remainder: Unconsumed input at the point of failure
    """

    def __init__(
        self,
        message: str,
        context: Optional["ErrorContext"] = None,
        remainder: str = "",
    ):
        self.remainder = remainder
        super().__init__(message, context)


class DuplicateNameError(StategenError):
    """
    Raised when two states resolve to the same name under a naming scheme.

    Attributes:
        resolved_name: The colliding resolved name
        original_name: Base name of the state that produced the collision
    """

    def __init__(self, resolved_name: str, original_name: str):
        self.resolved_name = resolved_name
        self.original_name = original_name
        super().__init__(
            f"Duplicate name: resolved_name={resolved_name!r} original_name={original_name!r}"
        )


class InvariantError(StategenError):
    """
    Raised when an internal invariant of the flattening or naming stages breaks.

    This indicates a bug in stategen itself, never a problem with user input.
    """

    pass


class ConfigError(StategenError):
    """
    Raised when plugin configuration is invalid.

    Examples:
    - Unreadable or malformed TOML
    - Unknown naming scheme
    - Plugin or module name that is not an identifier
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file (None for in-memory text)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet around the error location
    """

    file: Path | None
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "states.txt:10:5"
        """
        location = f"{self.file or '<string>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def extract_snippet(text: str, line: int, context_lines: int = 2) -> str:
    """Return the lines of ``text`` surrounding ``line`` (1-indexed)."""
    lines = text.split("\n")
    start = max(0, line - 1 - context_lines)
    end = min(len(lines), line + context_lines)
    return "\n".join(lines[start:end])


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    remainder: str = "",
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path, if the text came from a file
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        remainder: Unconsumed input at the failure point
        snippet: Optional code snippet

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context, remainder=remainder)
