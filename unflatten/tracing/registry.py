"""Registry of the files of one flattened listing.

Files are keyed by their unique name. Insertion order is kept and is the
order every later sweep walks the files in.
"""

from typing import Optional, List, Dict, Iterator, Mapping

from unflatten.core.errors import UnknownReference
from unflatten.core.models import FileRecord
from unflatten.parsers.import_extractor import extract_imports


class FileRegistry:
    """Name -> FileRecord map, populated once from raw sources."""

    def __init__(self):
        self._files: Dict[str, FileRecord] = {}

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> "FileRegistry":
        """Build a registry from a name -> raw text mapping.

        Args:
            sources: Flattened files; keys must be unique file names

        Returns:
            Populated registry

        Raises:
            MalformedImport: If any file has an import line without a literal
        """
        registry = cls()
        for name, content in sources.items():
            registry.add_file(name, content)
        return registry

    def add_file(self, name: str, content: str) -> FileRecord:
        """Extract imports from a file and register it.

        Args:
            name: Unique file name
            content: Raw file text

        Returns:
            The new FileRecord
        """
        if name in self._files:
            raise ValueError(f"duplicate file name '{name}'")
        if not name or "/" in name:
            raise ValueError(f"invalid file name {name!r}")

        record = FileRecord(
            name=name,
            raw_content=content,
            imports=extract_imports(name, content),
        )
        self._files[name] = record
        return record

    def validate_references(self) -> None:
        """Check that every import target is a registered file.

        Raises:
            UnknownReference: On the first import naming an unknown file
        """
        for record in self._files.values():
            for imp in record.imports:
                if imp.target not in self._files:
                    raise UnknownReference(record.name, imp.target)

    def get(self, name: str) -> Optional[FileRecord]:
        return self._files.get(name)

    def __getitem__(self, name: str) -> FileRecord:
        return self._files[name]

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self._files.values())

    def __len__(self) -> int:
        return len(self._files)

    def names(self) -> List[str]:
        return list(self._files)

    def rooted(self) -> List[FileRecord]:
        return [f for f in self._files.values() if f.is_rooted]

    def unrooted(self) -> List[FileRecord]:
        return [f for f in self._files.values() if not f.is_rooted]

    def get_summary(self) -> str:
        """Get a text summary of the registry.

        Returns:
            Human-readable summary string
        """
        edges = sum(len(f.imports) for f in self._files.values())
        lines = [
            "Registry Summary:",
            f"  Files: {len(self._files)}",
            f"  Imports: {edges}",
            f"  Rooted: {len(self.rooted())}",
        ]

        directories = sorted({f.relative_dir for f in self.rooted()})
        if directories:
            lines.append("\n  Directories:")
            for directory in directories:
                lines.append(f"    /{directory}")

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Serialize the registry to a dictionary."""
        return {name: record.to_dict() for name, record in self._files.items()}
