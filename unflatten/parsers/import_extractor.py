"""Import statement extraction.

Reads import literals straight from the text, line by line. No grammar
is involved: the literal is the quoted string on the line, or failing
that the last token.
"""

import re
from typing import Optional, List, Tuple

from unflatten.core.errors import MalformedImport
from unflatten.core.models import Import

IMPORT_KEYWORD = "import"

# import "./A.sol";  import {B} from '../B.sol';  import "./C.sol" as C;
IMPORT_LINE_PATTERN = re.compile(rf"^{IMPORT_KEYWORD}\b")
QUOTED_LITERAL_PATTERN = re.compile(r"""["']([^"']*)["']""")
# characters that never occur in a bare path literal
NON_PATH_PATTERN = re.compile(r"[{}*,]")
WORD_PATTERN = re.compile(r"\w")

LITERAL_PUNCTUATION = "'\";"


def is_import_line(line: str) -> bool:
    """Check whether a line is an import statement."""
    return bool(IMPORT_LINE_PATTERN.match(line.strip()))


def is_path_like(token: str) -> bool:
    """Check whether a bare token can be a path literal."""
    return bool(WORD_PATTERN.search(token)) and not NON_PATH_PATTERN.search(token)


def find_import_literal(line: str) -> Optional[Tuple[int, int]]:
    """Locate the path literal of an import line.

    Args:
        line: A line for which is_import_line() holds

    Returns:
        (start, end) offsets of the literal within the line, or None if the
        line has none
    """
    quoted = list(QUOTED_LITERAL_PATTERN.finditer(line))
    if quoted:
        match = quoted[-1]
        start, end = match.span(1)
        text = match.group(1)
        start += len(text) - len(text.lstrip())
        end -= len(text) - len(text.rstrip())
        return (start, end) if start < end else None

    tokens = line.split()
    if len(tokens) < 2:
        return None

    token = tokens[-1]
    literal = token.strip(LITERAL_PUNCTUATION)
    if not literal or literal == IMPORT_KEYWORD or not is_path_like(literal):
        return None

    # the last token ends the line once trailing whitespace is dropped
    token_start = len(line.rstrip()) - len(token)
    start = token_start + len(token) - len(token.lstrip(LITERAL_PUNCTUATION))
    return start, start + len(literal)


def parse_import_literal(line: str) -> Optional[str]:
    """Extract the path literal from an import line.

    Args:
        line: A line for which is_import_line() holds

    Returns:
        The literal without quotes or semicolons, or None if the line has none
    """
    span = find_import_literal(line)
    if span is None:
        return None
    start, end = span
    return line[start:end]


def extract_imports(name: str, content: str) -> List[Import]:
    """Extract the imports of one file, in authoring order.

    Args:
        name: File name, used for error reporting
        content: Raw file text

    Returns:
        List of Import records

    Raises:
        MalformedImport: If an import line carries no literal
    """
    imports = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        if not is_import_line(line):
            continue

        literal = parse_import_literal(line)
        if literal is None or literal.endswith("/"):
            raise MalformedImport(name, line_number, line)

        imports.append(Import.from_literal(literal, line_number))
    return imports
