"""Core data models for unflatten.

A flattened listing gives every file a unique name and no directory.
These structures carry what the import statements say about where
each file used to live.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict

ROOT_DIR_NAME = "<ROOT>"
PLACEHOLDER_DIR_NAME = "dummy"


class ImportKind(Enum):
    """How an import literal navigates from the importing file."""
    PARENT = "parent"  # ../x/File
    CURRENT = "current"  # ./x/File
    ROOT = "root"  # x/File, relative to the project root


@dataclass
class Import:
    """An import statement as authored.

    Only the literal and the file name it ends with are kept; the
    target is matched against registry names, never against paths.
    """
    path: str  # e.g. '../lib/Math.sol', './IERC20.sol', 'lib/Token.sol'
    target: str  # e.g. 'Math.sol'
    line_number: int = 0

    @classmethod
    def from_literal(cls, literal: str, line_number: int = 0) -> "Import":
        return cls(path=literal, target=literal.rsplit("/", 1)[-1], line_number=line_number)

    @property
    def directory_fields(self) -> List[str]:
        """Segments of the literal without the final file name."""
        return [f for f in self.path.split("/")[:-1] if f]

    @property
    def kind(self) -> ImportKind:
        fields = self.directory_fields
        if fields and fields[0] == "..":
            return ImportKind.PARENT
        if fields and fields[0] == ".":
            return ImportKind.CURRENT
        return ImportKind.ROOT

    @property
    def is_relative(self) -> bool:
        return self.path.startswith(".")

    @property
    def parent_count(self) -> int:
        """Number of leading '..' segments."""
        count = 0
        for f in self.directory_fields:
            if f != "..":
                break
            count += 1
        return count

    @property
    def remainder(self) -> List[str]:
        """Directory segments left after the leading './' or '../' run."""
        fields = self.directory_fields
        kind = self.kind
        if kind is ImportKind.PARENT:
            fields = fields[self.parent_count:]
        elif kind is ImportKind.CURRENT:
            fields = fields[1:]
        return [f for f in fields if f != "."]


@dataclass
class FileRecord:
    """A single file of the flattened listing.

    path_fields stays empty until the resolver writes the final,
    ROOT-prefixed directory of the file.
    """
    name: str
    raw_content: str
    imports: List[Import] = field(default_factory=list)
    path_fields: List[str] = field(default_factory=list)

    @property
    def dependencies(self) -> List[str]:
        """Target names in authoring order."""
        return [imp.target for imp in self.imports]

    @property
    def is_rooted(self) -> bool:
        return bool(self.path_fields) and self.path_fields[0] == ROOT_DIR_NAME

    @property
    def relative_dir(self) -> str:
        """Directory below the project root, '' for top-level files."""
        return "/".join(self.path_fields[1:])

    @property
    def relative_path(self) -> str:
        if self.relative_dir:
            return f"{self.relative_dir}/{self.name}"
        return self.name

    def first_import_of(self, target: str) -> Optional[Import]:
        for imp in self.imports:
            if imp.target == target:
                return imp
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary (for JSON serialization)."""
        return {
            "name": self.name,
            "imports": [imp.path for imp in self.imports],
            "path_fields": list(self.path_fields),
            "relative_path": self.relative_path if self.is_rooted else None,
        }


@dataclass
class ResolutionReport:
    """What happened while resolving a registry."""
    sweeps: List[int] = field(default_factory=list)  # rooted count after each sweep
    seeded: List[str] = field(default_factory=list)  # placed to break a dependent cycle
    estimated: Dict[str, int] = field(default_factory=dict)  # name -> placeholder depth

    @property
    def sweep_count(self) -> int:
        return len(self.sweeps)


def navigate(base_fields: List[str], imp: Import) -> Optional[List[str]]:
    """Directory of an import's target, seen from a file at base_fields.

    Returns None when a '../' run climbs above the root.
    """
    kind = imp.kind
    if kind is ImportKind.ROOT:
        return [ROOT_DIR_NAME] + imp.remainder

    if kind is ImportKind.PARENT:
        keep = len(base_fields) - imp.parent_count
        if keep < 1:
            return None
        return base_fields[:keep] + imp.remainder

    return list(base_fields) + imp.remainder


def navigate_back(
    target_fields: List[str],
    imp: Import,
    placeholder: str = PLACEHOLDER_DIR_NAME,
) -> Optional[List[str]]:
    """Directory of the importing file, given where the target lives.

    Directories climbed over by '../' cannot be named, so they come back
    as placeholders. Root-relative literals say nothing about the importer
    and yield None, as does a target whose directory does not end with the
    literal's remaining segments.
    """
    kind = imp.kind
    if kind is ImportKind.ROOT:
        return None

    rest = imp.remainder
    keep = len(target_fields) - len(rest)
    if keep < 1 or target_fields[keep:] != rest:
        return None

    fields = target_fields[:keep]
    if kind is ImportKind.PARENT:
        fields = fields + [placeholder] * imp.parent_count
    return fields
