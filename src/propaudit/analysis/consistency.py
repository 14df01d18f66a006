"""
Property Consistency Analysis.

Runs the fixed battery of accessor checks over an ``ApiSurface``:

1.  Setters without a getter.
2.  Getter/setter type mismatches, split into "inconsistent" (no setter accepts
    the getter type) and "additional setter types" (one does, others differ).
3.  ``propertyName(value)`` methods that act as setters without the ``set`` prefix.
4.  Fluent setters (non-void return).
5.  Getters of lazy container types (providers, file collections) that are
    implemented rather than abstract.

Findings of every category are produced in report order: types by simple class
name, properties by name, setters by discovery order.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from propaudit.analysis.properties import Property
from propaudit.analysis.surface import ApiSurface, Summary
from propaudit.enums import FindingCategory
from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor, TypeRef, internal_name

logger = logging.getLogger(__name__)

DEFAULT_CALLBACK_TYPES = ["groovy.lang.Closure", "org.gradle.api.Action"]
DEFAULT_LAZY_MARKER_TYPES = [
  "org.gradle.api.provider.Provider",
  "org.gradle.api.file.ConfigurableFileCollection",
]


class AnalysisSettings(BaseModel):
  """
  Tunable inputs of the consistency checks.
  """

  callback_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_CALLBACK_TYPES),
    description="Parameter types that exempt a propertyName(value) method (callback/configuration idioms).",
  )
  lazy_marker_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_LAZY_MARKER_TYPES),
    description="Lazy value container types whose getters should be abstract.",
  )


@dataclass(frozen=True)
class Finding:
  """
  One reportable fact.

  Attributes:
      category: The check that produced it.
      type: The API type owning the property.
      property_name: The property concerned.
      method: The offending accessor.
      mismatched_types: For type-consistency findings, the types other than the getter's.
  """

  category: FindingCategory
  type: TypeDescriptor
  property_name: str
  method: MethodDescriptor
  mismatched_types: Tuple[TypeRef, ...] = ()


@dataclass
class AnalysisResult:
  """Summary counts plus findings grouped by category in report order."""

  summary: Summary
  findings: Dict[FindingCategory, List[Finding]] = field(
    default_factory=lambda: {category: [] for category in FindingCategory}
  )

  def add(self, finding: Finding) -> None:
    self.findings[finding.category].append(finding)

  def of(self, category: FindingCategory) -> List[Finding]:
    return self.findings[category]

  @property
  def total(self) -> int:
    return sum(len(f) for f in self.findings.values())


class ConsistencyAnalyzer:
  """
  Applies the accessor consistency checks.

  Usage::

      analyzer = ConsistencyAnalyzer(hierarchy)
      result = analyzer.analyze(surface)
  """

  def __init__(self, hierarchy: TypeHierarchy, settings: Optional[AnalysisSettings] = None):
    self.hierarchy = hierarchy
    self.settings = settings or AnalysisSettings()
    self._callback_types = frozenset(internal_name(t) for t in self.settings.callback_types)
    self._lazy_markers = self._resolve_markers()

  def _resolve_markers(self) -> List[TypeDescriptor]:
    markers = []
    for name in self.settings.lazy_marker_types:
      marker = self.hierarchy.lookup(name)
      if marker is None:
        # Any missing marker disables the check
        logger.debug("Lazy marker type %s is not on the classpath, skipping lazy getter check", name)
        return []
      markers.append(marker)
    return markers

  def analyze(self, surface: ApiSurface) -> AnalysisResult:
    """
    Runs every check over the surface.

    Args:
        surface: Collected API types and properties.

    Returns:
        AnalysisResult: Summary and categorized findings.
    """
    result = AnalysisResult(summary=surface.summary)
    checks = (
      self.check_setters_without_getters,
      self.check_setter_types,
      self.check_property_name_setters,
      self.check_fluent_setters,
      self.check_lazy_getters,
    )
    for check in checks:
      for type_, name, prop in surface.iter_properties():
        for finding in check(type_, name, prop, surface):
          result.add(finding)
    return result

  def check_setters_without_getters(
    self, type_: TypeDescriptor, name: str, prop: Property, surface: ApiSurface
  ) -> List[Finding]:
    if prop.getter is not None:
      return []
    return [Finding(FindingCategory.SETTER_WITHOUT_GETTER, type_, name, setter) for setter in prop.setters]

  def check_setter_types(self, type_: TypeDescriptor, name: str, prop: Property, surface: ApiSurface) -> List[Finding]:
    if prop.getter is None:
      return []
    types = prop.collect_types()
    if len(types) == 1:
      return []

    getter_type = prop.getter.return_type
    mismatched = tuple(t for t in types if t != getter_type)
    if prop.matching_getter_and_setter_type() is None:
      category = FindingCategory.INCONSISTENT_TYPES
    else:
      category = FindingCategory.ADDITIONAL_SETTER_TYPES
    return [Finding(category, type_, name, prop.getter, mismatched)]

  def check_property_name_setters(
    self, type_: TypeDescriptor, name: str, prop: Property, surface: ApiSurface
  ) -> List[Finding]:
    if prop.getter is None:
      return []
    for method in surface.methods.get(type_, []):
      if method.is_static or method.parameter_count != 2 or method.name != name:
        continue
      if method.parameter_type(1).name in self._callback_types:
        continue
      return [Finding(FindingCategory.PROPERTY_NAME_SETTER, type_, name, method)]
    return []

  def check_fluent_setters(
    self, type_: TypeDescriptor, name: str, prop: Property, surface: ApiSurface
  ) -> List[Finding]:
    return [
      Finding(FindingCategory.FLUENT_SETTER, type_, name, setter)
      for setter in prop.setters
      if not setter.return_type.is_void
    ]

  def check_lazy_getters(self, type_: TypeDescriptor, name: str, prop: Property, surface: ApiSurface) -> List[Finding]:
    getter = prop.getter
    if getter is None or type_.is_interface or getter.is_abstract:
      return []

    getter_type = self.hierarchy.lookup(getter.return_type)
    if getter_type is None:
      return []
    if any(self.hierarchy.is_subtype(marker, getter_type) for marker in self._lazy_markers):
      return [Finding(FindingCategory.LAZY_NON_ABSTRACT_GETTER, type_, name, getter)]
    return []
