"""
Type Resolution Package.

Provides the read-only type model and the service that builds it from compiled
classes.

Modules:
    - ``types``: ``TypeRef``, ``MethodDescriptor`` and ``TypeDescriptor``.
    - ``classfile``: Class file and descriptor decoding.
    - ``snapshot``: JSON snapshots of resolved hierarchies.
    - ``hierarchy``: ``TypeHierarchy`` lookup and subtype queries.
    - ``resolver``: ``resolve()`` over jars, jmods, directories and snapshots.
"""

from propaudit.hierarchy.errors import ClassFormatError, ResolutionError
from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.resolver import resolve
from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor, TypeRef

__all__ = [
  "ClassFormatError",
  "MethodDescriptor",
  "ResolutionError",
  "TypeDescriptor",
  "TypeHierarchy",
  "TypeRef",
  "resolve",
]
