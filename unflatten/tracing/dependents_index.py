"""Import edges in both directions: who imports a file, and what it imports."""

from collections import defaultdict
from typing import Optional, Dict, List, Tuple

from unflatten.core.models import FileRecord
from unflatten.tracing.registry import FileRegistry


class DependentsIndex:
    """File name -> files that import it, and file name -> files it imports.

    Built once from a registry and read-only afterwards. Dependents are
    listed in registry order; a file importing the same name twice is
    listed once. Dependencies keep the importing file's authoring order.
    """

    def __init__(
        self,
        dependents: Dict[str, Tuple[FileRecord, ...]],
        dependencies: Optional[Dict[str, Tuple[FileRecord, ...]]] = None,
    ):
        self._dependents = dependents
        self._dependencies = dependencies or {}

    @classmethod
    def build(cls, registry: FileRegistry) -> "DependentsIndex":
        """Build the index in one pass over all import edges.

        Args:
            registry: Populated registry

        Returns:
            The index
        """
        dependents: Dict[str, List[FileRecord]] = defaultdict(list)
        dependencies: Dict[str, Tuple[FileRecord, ...]] = {}
        for record in registry:
            targets: List[FileRecord] = []
            seen = set()
            for imp in record.imports:
                listed = dependents[imp.target]
                if not listed or listed[-1] is not record:
                    listed.append(record)

                # unknown names are reported by FileRegistry.validate_references
                target = registry.get(imp.target)
                if target is not None and target.name not in seen:
                    seen.add(target.name)
                    targets.append(target)
            dependencies[record.name] = tuple(targets)

        return cls(
            {name: tuple(records) for name, records in dependents.items()},
            dependencies,
        )

    def get_dependents(self, name: str) -> Tuple[FileRecord, ...]:
        """Get all files that import the given file.

        Args:
            name: File name

        Returns:
            Importing files, in registry order
        """
        return self._dependents.get(name, ())

    def get_dependencies(self, name: str) -> Tuple[FileRecord, ...]:
        """Get all files the given file imports.

        Args:
            name: File name

        Returns:
            Imported files, in the order their imports were written
        """
        return self._dependencies.get(name, ())

    def has_dependents(self, name: str) -> bool:
        return bool(self._dependents.get(name))

    @property
    def edge_count(self) -> int:
        return sum(len(records) for records in self._dependents.values())

    def most_imported(self, limit: int = 5) -> List[Tuple[str, int]]:
        """Names imported by the most files, most imported first."""
        counts = [(name, len(records)) for name, records in self._dependents.items()]
        counts.sort(key=lambda x: (-x[1], x[0]))
        return counts[:limit]
