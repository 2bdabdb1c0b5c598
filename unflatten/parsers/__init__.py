"""Import extraction from raw file text."""

from unflatten.parsers.import_extractor import (
    extract_imports,
    find_import_literal,
    is_import_line,
    parse_import_literal,
)

__all__ = [
    "extract_imports",
    "find_import_literal",
    "is_import_line",
    "parse_import_literal",
]
