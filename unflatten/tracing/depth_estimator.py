"""Nesting depth estimate for files nothing else can place.

When neither dependents nor imports pin a file down, the '../' runs in
its imports still tell how deep it must at least sit for every import to
stay inside the project.
"""

from typing import Optional, Dict, Set, Iterable

from unflatten.core.models import FileRecord, ImportKind
from unflatten.tracing.registry import FileRegistry


class DepthEstimator:
    """Estimates how many directories a file must sit below the root."""

    def __init__(self, registry: FileRegistry):
        self.registry = registry

    def estimate(self, record: FileRecord, in_flight: Optional[Iterable[str]] = None) -> int:
        """Estimate the placeholder depth needed by a file.

        Args:
            record: File to place
            in_flight: Names currently being resolved; reaching one of them
                gives no signal

        Returns:
            Number of placeholder directories below the root (0 or more)
        """
        visiting = set(in_flight) if in_flight else set()
        return self._estimate(record, visiting, {})

    def _estimate(self, record: FileRecord, visiting: Set[str], memo: Dict[str, int]) -> int:
        if record.name in memo:
            return memo[record.name]

        visiting.add(record.name)
        try:
            depth = 0
            for imp in record.imports:
                kind = imp.kind
                if kind is ImportKind.PARENT:
                    contribution = imp.parent_count
                elif kind is ImportKind.CURRENT:
                    target = self.registry.get(imp.target)
                    if target is None or target.name in visiting:
                        continue
                    # the target sits len(remainder) levels below this file
                    contribution = self._estimate(target, visiting, memo) - len(imp.remainder)
                else:
                    continue
                depth = max(depth, contribution)
        finally:
            visiting.discard(record.name)

        memo[record.name] = depth
        return depth
