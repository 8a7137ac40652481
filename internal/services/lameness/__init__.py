"""
Lameness service package

This package wires the lameness library (analyzers, classifier store, reporter,
field validator) to the configured snapshot storage.
"""

from .service import LamenessService

__all__ = ["LamenessService"]
