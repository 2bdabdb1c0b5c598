"""Directory recovery from relative imports.

Every import edge D -> T with literal L pins T relative to D:

- '../../x/T': T is D's directory minus two segments, then 'x'
- './x/T':     T is D's directory, then 'x'
- 'x/T':       T is the project root, then 'x', wherever D lives

The resolver sweeps the registry until no sweep roots another file. A
file with dependents takes the longest path any rooted dependent points
it to; a file without dependents is placed from its first import whose
target already has a path, or else at an estimated depth made of
placeholder directories.
"""

import logging
from typing import Optional, List, Set, Mapping

from unflatten.core.errors import DependentEdgeMissing, UnresolvedFile
from unflatten.core.models import (
    FileRecord,
    ImportKind,
    ResolutionReport,
    ROOT_DIR_NAME,
    PLACEHOLDER_DIR_NAME,
    navigate,
    navigate_back,
)
from unflatten.tracing.dependents_index import DependentsIndex
from unflatten.tracing.depth_estimator import DepthEstimator
from unflatten.tracing.registry import FileRegistry

logger = logging.getLogger(__name__)


class PathResolver:
    """Assigns every file of a registry a rooted directory.

    Equal-length candidates from different dependents are settled in favour
    of the dependent that comes first in registry order.
    """

    def __init__(
        self,
        registry: FileRegistry,
        dependents: Optional[DependentsIndex] = None,
        placeholder: str = PLACEHOLDER_DIR_NAME,
    ):
        """Initialize the resolver.

        Args:
            registry: Populated registry; path fields are written in place
            dependents: Prebuilt dependents index, built from the registry if omitted
            placeholder: Directory name used where depth is known but the name is not
        """
        self.registry = registry
        self.dependents = dependents if dependents is not None else DependentsIndex.build(registry)
        self.placeholder = placeholder
        self.depth_estimator = DepthEstimator(registry)
        self.report = ResolutionReport()

    def resolve(self) -> ResolutionReport:
        """Sweep the registry until every file is rooted.

        Returns:
            Report of the sweeps

        Raises:
            UnknownReference: If an import names a file outside the registry
            DependentEdgeMissing: If the dependents index disagrees with the imports
            UnresolvedFile: If files are left without a rooted path
        """
        self.registry.validate_references()

        total_rooted = len(self.registry.rooted())
        while True:
            for record in self.registry:
                self.resolve_file(record, set())

            rooted = len(self.registry.rooted())
            self.report.sweeps.append(rooted)
            logger.debug("Sweep %d: %d/%d files rooted", self.report.sweep_count, rooted, len(self.registry))

            if rooted > total_rooted:
                total_rooted = rooted
                continue
            if rooted == len(self.registry):
                break

            # no progress: only cycles of unrooted files are left to break
            seed = self._next_seed()
            if seed is None:
                break
            self.report.seeded.append(seed.name)
            logger.debug("Breaking dependent cycle at %s", seed.name)
            self._place_from_imports(seed, {seed.name})
            total_rooted = len(self.registry.rooted())

        unresolved = [record.name for record in self.registry.unrooted()]
        if unresolved:
            raise UnresolvedFile(unresolved)
        return self.report

    def resolve_file(self, record: FileRecord, in_flight: Set[str]) -> None:
        """Try to root a single file.

        Args:
            record: File to resolve
            in_flight: Names being resolved further up the call chain; reaching
                one again makes no progress and leaves it to a later sweep
        """
        if record.is_rooted or record.name in in_flight:
            return

        in_flight.add(record.name)
        try:
            dependents = self.dependents.get_dependents(record.name)
            if not dependents:
                self._place_from_imports(record, in_flight)
                return

            best: Optional[List[str]] = None
            for dependent in dependents:
                self.resolve_file(dependent, in_flight)
                candidate = self.candidate_from_dependent(record, dependent)
                if candidate is not None and (best is None or len(candidate) > len(best)):
                    best = candidate

            if best is not None:
                self._place(record, best)
        finally:
            in_flight.discard(record.name)

    def candidate_from_dependent(self, record: FileRecord, dependent: FileRecord) -> Optional[List[str]]:
        """Directory the dependent's import of record points to.

        Args:
            record: The imported file
            dependent: A file importing it

        Returns:
            Rooted path fields, or None if the dependent gives nothing usable yet

        Raises:
            DependentEdgeMissing: If the dependent does not import record
        """
        imp = dependent.first_import_of(record.name)
        if imp is None:
            raise DependentEdgeMissing(record.name, dependent.name)

        if imp.kind is ImportKind.ROOT:
            return navigate([], imp)
        if not dependent.is_rooted:
            return None
        return navigate(dependent.path_fields, imp)

    def _next_seed(self) -> Optional[FileRecord]:
        """First unrooted file that no rooted file imports."""
        for record in self.registry.unrooted():
            dependents = self.dependents.get_dependents(record.name)
            if not any(dependent.is_rooted for dependent in dependents):
                return record
        return None

    def _place_from_imports(self, record: FileRecord, in_flight: Set[str]) -> None:
        """Place a file using its own imports, falling back to a depth estimate."""
        for imp in record.imports:
            if imp.kind is ImportKind.ROOT:
                continue

            target = self.registry[imp.target]
            self.resolve_file(target, in_flight)
            if not target.is_rooted:
                continue

            fields = navigate_back(target.path_fields, imp, self.placeholder)
            if fields is not None:
                self._place(record, fields)
                return

        depth = self.depth_estimator.estimate(record, in_flight)
        self.report.estimated[record.name] = depth
        self._place(record, [ROOT_DIR_NAME] + [self.placeholder] * depth)

    def _place(self, record: FileRecord, fields: List[str]) -> None:
        if record.is_rooted:
            return
        record.path_fields = list(fields)
        logger.debug("Placed %s at /%s", record.name, record.relative_dir)


def resolve_paths(
    sources: Mapping[str, str],
    placeholder: str = PLACEHOLDER_DIR_NAME,
) -> FileRegistry:
    """Convenience function to recover the layout of a flattened listing.

    Args:
        sources: File name -> raw text
        placeholder: Directory name for unnamed directories

    Returns:
        Registry with every file rooted
    """
    registry = FileRegistry.from_sources(sources)
    PathResolver(registry, placeholder=placeholder).resolve()
    return registry
