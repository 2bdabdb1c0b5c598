"""Errors raised while recovering a directory layout.

Every error aborts the whole run; nothing is retried.
"""

from typing import List


class UnflattenError(Exception):
    """Base class for all unflatten errors."""


class MalformedImport(UnflattenError):
    """An import line carries no path literal."""

    def __init__(self, file_name: str, line_number: int, line: str):
        self.file_name = file_name
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"{file_name}:{line_number}: import without a path literal: {line.strip()!r}"
        )


class UnknownReference(UnflattenError):
    """An import names a file that is not part of the listing."""

    def __init__(self, file_name: str, target: str):
        self.file_name = file_name
        self.target = target
        super().__init__(f"'{file_name}' imports unknown file '{target}'")


class DependentEdgeMissing(UnflattenError):
    """A dependent does not import the file it is indexed under."""

    def __init__(self, file_name: str, dependent: str):
        self.file_name = file_name
        self.dependent = dependent
        super().__init__(
            f"could not find file '{file_name}' in dependent's imports (Dependent: {dependent})"
        )


class UnresolvedFile(UnflattenError):
    """Files still lack a rooted path after resolution converged."""

    def __init__(self, file_names: List[str]):
        self.file_names = list(file_names)
        super().__init__(
            f"could not resolve a path for {len(self.file_names)} file(s): "
            + ", ".join(self.file_names)
        )


class IncompletePath(UnflattenError):
    """A file was handed to the materializer without a rooted path."""

    def __init__(self, file_name: str, path_fields: List[str]):
        self.file_name = file_name
        self.path_fields = list(path_fields)
        super().__init__(
            f"file {file_name} does not have a complete path: {'/'.join(self.path_fields)!r}"
        )


class SourceError(UnflattenError):
    """The flattened sources could not be retrieved or are inconsistent."""
