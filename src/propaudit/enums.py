"""
Enumerations for propaudit.

This module defines the accessor roles recognised by property extraction and
the fixed finding categories reported by the consistency analysis.
"""

from enum import Enum


class MethodRole(str, Enum):
  """
  Role of an accessor method within a property.
  """

  GETTER = "getter"
  SETTER = "setter"


class FindingCategory(str, Enum):
  """
  Consistency check categories, declared in report order.
  """

  SETTER_WITHOUT_GETTER = "setter_without_getter"
  INCONSISTENT_TYPES = "inconsistent_types"
  ADDITIONAL_SETTER_TYPES = "additional_setter_types"
  PROPERTY_NAME_SETTER = "property_name_setter"
  FLUENT_SETTER = "fluent_setter"
  LAZY_NON_ABSTRACT_GETTER = "lazy_non_abstract_getter"

  @property
  def header(self) -> str:
    """Section title used in the Markdown report."""
    return _HEADERS[self]


_HEADERS = {
  FindingCategory.SETTER_WITHOUT_GETTER: "Setters without getters",
  FindingCategory.INCONSISTENT_TYPES: "Properties with inconsistent getter/setter types",
  FindingCategory.ADDITIONAL_SETTER_TYPES: (
    "Properties with consistent getter/setter types, but with additional setter types"
  ),
  FindingCategory.PROPERTY_NAME_SETTER: "Properties with `propertyName()` setters",
  FindingCategory.FLUENT_SETTER: "Fluent setters",
  FindingCategory.LAZY_NON_ABSTRACT_GETTER: "Lazy properties with non-abstract getters",
}
