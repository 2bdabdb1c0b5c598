"""Prefix root-relative import literals with a base path.

Relative literals ('./', '../') are left alone. The rewrite only touches
raw text; it does not change the parsed imports or resolved paths.
"""

import posixpath

from unflatten.parsers.import_extractor import find_import_literal, is_import_line
from unflatten.tracing.registry import FileRegistry


def rewrite_import_line(line: str, base_path: str) -> str:
    """Rewrite a single line if it is a non-relative import.

    Args:
        line: Any line of source text
        base_path: Directory to prefix literals with

    Returns:
        The rewritten line, or the line unchanged
    """
    if not is_import_line(line):
        return line

    span = find_import_literal(line)
    if span is None:
        return line

    start, end = span
    literal = line[start:end]
    if literal.startswith("."):
        return line

    new_literal = posixpath.normpath(posixpath.join(base_path, literal))
    return line[:start] + new_literal + line[end:]


def rewrite_content(content: str, base_path: str) -> str:
    """Rewrite every non-relative import of a file's text."""
    # split on '\n' only so that '\r\n' endings survive the round trip
    lines = content.split("\n")
    return "\n".join(rewrite_import_line(line, base_path) for line in lines)


def add_base_path_to_imports(registry: FileRegistry, base_path: str) -> int:
    """Rewrite the raw text of every file in a registry.

    Args:
        registry: Files to rewrite in place
        base_path: Directory to prefix literals with

    Returns:
        Number of files whose text changed
    """
    changed = 0
    for record in registry:
        rewritten = rewrite_content(record.raw_content, base_path)
        if rewritten != record.raw_content:
            record.raw_content = rewritten
            changed += 1
    return changed
