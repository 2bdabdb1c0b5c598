"""Write a resolved registry out as a directory tree."""

import logging
from pathlib import Path
from typing import Dict, Union

from unflatten.core.errors import IncompletePath
from unflatten.tracing.registry import FileRegistry

logger = logging.getLogger(__name__)

DIR_MODE = 0o750


def check_complete(registry: FileRegistry) -> None:
    """Refuse a registry that still has unrooted files.

    Raises:
        IncompletePath: For the first file without a rooted path
    """
    for record in registry:
        if not record.is_rooted:
            raise IncompletePath(record.name, record.path_fields)


def write_all_files(registry: FileRegistry, target_dir: Union[str, Path]) -> int:
    """Create the recovered directories and write every file.

    Every file is checked before anything touches the disk.

    Args:
        registry: Resolved registry
        target_dir: Directory the project root maps to

    Returns:
        Number of files written
    """
    check_complete(registry)

    root = Path(target_dir)
    written = 0
    for record in registry:
        dir_path = root.joinpath(*record.path_fields[1:])
        dir_path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)

        file_path = dir_path / record.name
        file_path.write_text(record.raw_content, encoding="utf-8")
        logger.debug("Wrote %s", file_path)
        written += 1

    return written


def build_tree(registry: FileRegistry) -> Dict[str, dict]:
    """Nested mapping of the recovered layout.

    Directories map to dicts, files map to None.

    Raises:
        IncompletePath: If a file is not rooted
    """
    check_complete(registry)

    tree: Dict[str, dict] = {}
    for record in registry:
        node = tree
        for segment in record.path_fields[1:]:
            node = node.setdefault(segment, {})
        node[record.name] = None
    return tree
