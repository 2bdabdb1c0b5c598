"""unflatten - Recover the directory layout of flattened source listings."""

__version__ = "0.1.0"
