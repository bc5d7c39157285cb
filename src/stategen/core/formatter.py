"""
Best-effort external formatting of generated source.

The formatter is fed the source on stdin and must print the formatted
source on stdout. Any failure, including undecodable output, returns the input unchanged.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)


def format_source(source: str, command: list[str], timeout: float = 10.0) -> str:
    """
    Run ``command`` over ``source``.

    Args:
        source: Source text to format
        command: Formatter command line
        timeout: Seconds to wait before giving up

    Returns:
        Formatted source, or ``source`` verbatim if formatting failed
    """
    if not command:
        return source

    try:
        result = subprocess.run(
            command,
            input=source,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as e:
        logger.info("Formatter %r failed, keeping unformatted source: %s", command[0], e)
        return source

    if not result.stdout.strip():
        logger.info("Formatter %r produced no output, keeping unformatted source", command[0])
        return source
    return result.stdout
