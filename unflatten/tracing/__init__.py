"""Directory recovery: registry, dependents index, resolver.

This package provides tools for:
- Registering flattened files and their imports
- Indexing which files import which
- Resolving every file to a directory below the project root
"""

from unflatten.tracing.registry import FileRegistry
from unflatten.tracing.dependents_index import DependentsIndex
from unflatten.tracing.depth_estimator import DepthEstimator
from unflatten.tracing.path_resolver import PathResolver, resolve_paths

__all__ = [
    "FileRegistry",
    "DependentsIndex",
    "DepthEstimator",
    "PathResolver",
    "resolve_paths",
]
