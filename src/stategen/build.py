"""File wrappers around the compile pipeline.

Output files are written only after compilation succeeded, so a parse or
naming error never leaves a partial file behind.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .core.config import PluginConfig
from .core.header import parse_template_header
from .core.pipeline import compile_states

logger = logging.getLogger(__name__)


def generate_plugin(src: Path, dst: Path, config: PluginConfig | None = None) -> Path:
    """Compile the DSL file *src* and write the plugin source to *dst*.

    The output starts with a banner that names *src* and echoes its content.

    Args:
        src: DSL source file.
        dst: Output file, overwritten if present.
        config: Plugin configuration (defaults if omitted).

    Returns:
        The written path.

    Raises:
        StategenError: If compilation fails; *dst* is left untouched.
        OSError: If *src* cannot be read or *dst* cannot be written.
        UnicodeDecodeError: If *src* is not UTF-8 text.
    """
    source = src.read_text(encoding="utf-8")
    output = compile_states(source, config, src_path=str(src), file=src)

    dst.parent.mkdir(parents=True, exist_ok=True)
    dst.write_text(output, encoding="utf-8")
    logger.info("Generated %s from %s", dst, src)
    return dst


def update_template(path: Path, config: PluginConfig | None = None) -> Path:
    """Regenerate a template file in place.

    The leading comment block of *path* carries directives and the DSL; it is
    kept verbatim and followed by a blank line and freshly generated source.

    Args:
        path: Template file.
        config: Base configuration that header directives override.

    Returns:
        The rewritten path.
    """
    text = path.read_text(encoding="utf-8")
    header, config = parse_template_header(text, config or PluginConfig())

    output = compile_states(header.source, config)

    comments = "\n".join(header.comments_block)
    path.write_text(f"{comments}\n\n{output}" if comments else output, encoding="utf-8")
    logger.info("Updated template %s", path)
    return path
