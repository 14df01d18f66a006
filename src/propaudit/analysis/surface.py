"""
API Surface Collection.

Walks a resolved hierarchy once and gathers the public API types, their public
methods and their properties into sorted containers.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from propaudit.analysis.api_filter import ApiSurfaceClassifier
from propaudit.analysis.properties import Property, PropertyExtractor
from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor

logger = logging.getLogger(__name__)

NESTING_MARKER = "$"


def type_sort_key(type_: TypeDescriptor) -> Tuple[str, str]:
  """Orders types by simple class name, then by full name for same-named types."""
  return type_.class_name, type_.name


@dataclass(frozen=True)
class Summary:
  """Counts shown in the report's Summary section."""

  packages: int
  types: int
  methods: int
  properties: int


@dataclass
class ApiSurface:
  """
  Included types with their public methods and extracted properties.

  ``types`` is sorted by ``type_sort_key``; ``properties`` only holds types that
  declare at least one property, each mapping sorted by property name.
  """

  packages: Dict[str, List[TypeDescriptor]] = field(default_factory=dict)
  types: List[TypeDescriptor] = field(default_factory=list)
  methods: Dict[TypeDescriptor, List[MethodDescriptor]] = field(default_factory=dict)
  properties: Dict[TypeDescriptor, Dict[str, Property]] = field(default_factory=dict)

  @property
  def summary(self) -> Summary:
    return Summary(
      packages=len(self.packages),
      types=len(self.types),
      methods=sum(len(m) for m in self.methods.values()),
      properties=sum(len(p) for p in self.properties.values()),
    )

  def iter_properties(self) -> Iterator[Tuple[TypeDescriptor, str, Property]]:
    """Yields ``(type, name, property)`` in report order."""
    for type_ in self.types:
      for name, prop in self.properties.get(type_, {}).items():
        yield type_, name, prop


def collect_surface(
  hierarchy: TypeHierarchy,
  classifier: ApiSurfaceClassifier,
  extractor: Optional[PropertyExtractor] = None,
) -> ApiSurface:
  """
  Builds the API surface of a hierarchy.

  A type is included when it is public, is not a nested or anonymous class
  (no ``$`` in its simple name), and is accepted by the classifier.

  Args:
      hierarchy: The resolved hierarchy.
      classifier: Allow/deny policy.
      extractor: Property extractor (defaults to a new one).

  Returns:
      ApiSurface: The collected surface.
  """
  extractor = extractor or PropertyExtractor()
  included = []
  for type_ in hierarchy.all_types():
    if not type_.is_public:
      continue
    if NESTING_MARKER in type_.class_name:
      continue
    if not classifier.include_type(type_):
      continue
    included.append(type_)

  surface = ApiSurface()
  surface.types = sorted(included, key=type_sort_key)
  for type_ in surface.types:
    surface.packages.setdefault(type_.package, []).append(type_)
    surface.methods[type_] = [m for m in type_.declared_methods if m.is_public]
    properties = extractor.extract(type_)
    if properties:
      surface.properties[type_] = properties

  surface.packages = dict(sorted(surface.packages.items()))
  logger.debug(
    "Collected %d API types in %d packages out of %d resolved types",
    len(surface.types),
    len(surface.packages),
    len(hierarchy),
  )
  return surface
