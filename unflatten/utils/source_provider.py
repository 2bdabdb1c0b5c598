"""Retrieve the flattened files of a project.

Two sources are supported: a block explorer listing page, where each
file is shown under a 'File N of M : Name' caption followed by a code
block, and a local directory holding the flattened files.
"""

import logging
import urllib.error
import urllib.request
from html.parser import HTMLParser
from pathlib import Path
from typing import Optional, List, Dict, Union

from unflatten.core.errors import SourceError

logger = logging.getLogger(__name__)

FILE_CAPTION_MARKER = "File "
SOURCE_BLOCK_CLASS = "js-sourcecopyarea"
USER_AGENT = "Mozilla/5.0 (compatible; unflatten)"


class ListingParser(HTMLParser):
    """Collects (file name, code) pairs from a listing page."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.files: Dict[str, str] = {}
        self._file_name = ""
        self._block_tag: Optional[str] = None
        self._block_depth = 0
        self._buffer: List[str] = []

    def handle_starttag(self, tag, attrs):
        if self._block_tag is not None:
            if tag == self._block_tag:
                self._block_depth += 1
            return

        classes = dict(attrs).get("class") or ""
        if SOURCE_BLOCK_CLASS not in classes:
            return
        if not self._file_name:
            # not a source file block
            return

        self._block_tag = tag
        self._block_depth = 1
        self._buffer = []

    def handle_endtag(self, tag):
        if self._block_tag is None or tag != self._block_tag:
            return

        self._block_depth -= 1
        if self._block_depth == 0:
            self._finish_block()

    def handle_data(self, data):
        if self._block_tag is not None:
            self._buffer.append(data)
            return

        if FILE_CAPTION_MARKER in data:
            fields = data.split()
            if fields:
                self._file_name = fields[-1]

    def _finish_block(self):
        name = self._file_name
        if name in self.files:
            raise SourceError(f"listing contains file '{name}' more than once")

        self.files[name] = "".join(self._buffer)
        self._file_name = ""
        self._block_tag = None
        self._buffer = []


def parse_listing(html: str) -> Dict[str, str]:
    """Extract the flattened files from a listing page.

    Args:
        html: Page markup

    Returns:
        File name -> raw text, in page order
    """
    parser = ListingParser()
    parser.feed(html)
    parser.close()
    return parser.files


def fetch_listing(address: str, base_url: str, timeout: float = 30.0) -> Dict[str, str]:
    """Download a listing page and extract its files.

    Args:
        address: Address appended to base_url
        base_url: Listing URL prefix
        timeout: Request timeout in seconds

    Returns:
        File name -> raw text
    """
    address = address.strip()
    if not address:
        raise SourceError("address is required")

    url = base_url + address
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            charset = resp.headers.get_content_charset() or "utf-8"
            html = resp.read().decode(charset, errors="replace")
    except (urllib.error.URLError, OSError) as e:
        raise SourceError(f"get request failed: {e}") from e

    files = parse_listing(html)
    logger.info("Fetched %d file(s) from %s", len(files), url)
    if not files:
        raise SourceError(f"no source files found at {url}")
    return files


def load_directory(path: Union[str, Path]) -> Dict[str, str]:
    """Read a directory of flattened files.

    Only regular, non-hidden files directly inside the directory are read.

    Args:
        path: Directory to read

    Returns:
        File name -> raw text, sorted by name
    """
    directory = Path(path)
    if not directory.is_dir():
        raise SourceError(f"'{directory}' is not a directory")

    files: Dict[str, str] = {}
    for file_path in sorted(directory.iterdir()):
        if not file_path.is_file() or file_path.name.startswith("."):
            continue
        try:
            files[file_path.name] = file_path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise SourceError(f"could not read {file_path}: {e}") from e

    if not files:
        raise SourceError(f"no files found in '{directory}'")
    return files
