"""
Property Extraction.

Groups accessor methods into logical properties following JavaBean naming:

- ``T getFoo()`` / ``T isFoo()`` are getters of ``foo``.
- ``R setFoo(T)`` is a setter of ``foo`` (any return type).

Parameter counts include the receiver, so a getter has one parameter and a
setter two.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from propaudit.enums import MethodRole
from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor, TypeRef

_GETTER_PREFIXES = (("get", 3), ("is", 2))
_SETTER_PREFIX = "set"


def property_name(method_name: str, prefix_length: int) -> str:
  """
  Derives a property name by dropping the accessor prefix and lowering the next character.

  Example: ``property_name("getFooBar", 3) == "fooBar"``.
  """
  return method_name[prefix_length].lower() + method_name[prefix_length + 1 :]


@dataclass(frozen=True)
class PropertyMethod:
  """
  An accessor method tagged with its role and the property it belongs to.
  """

  role: MethodRole
  property_name: str
  method: MethodDescriptor

  @classmethod
  def from_method(cls, method: MethodDescriptor) -> Optional["PropertyMethod"]:
    """
    Classifies a method as getter, setter, or neither.

    Args:
        method: A public, non-constructor method.

    Returns:
        Optional[PropertyMethod]: The tagged accessor, or None.
    """
    if method.is_static:
      return None

    name = method.name
    if method.parameter_count == 1 and not method.return_type.is_void:
      for prefix, length in _GETTER_PREFIXES:
        if name.startswith(prefix) and len(name) > length:
          return cls(MethodRole.GETTER, property_name(name, length), method)

    if method.parameter_count == 2 and name.startswith(_SETTER_PREFIX) and len(name) > 3:
      return cls(MethodRole.SETTER, property_name(name, 3), method)

    return None


@dataclass
class Property:
  """
  A named property of one type: at most one getter and any number of setters.
  """

  name: str
  getter: Optional[MethodDescriptor] = None
  setters: List[MethodDescriptor] = field(default_factory=list)

  def add(self, accessor: PropertyMethod) -> None:
    if accessor.role is MethodRole.GETTER:
      self.getter = accessor.method
    else:
      self.setters.append(accessor.method)

  @property
  def setter_types(self) -> List[TypeRef]:
    """Value parameter type of each setter, in discovery order."""
    return [s.parameter_type(1) for s in self.setters]

  def collect_types(self) -> Tuple[TypeRef, ...]:
    """
    Distinct types across the getter return and setter values.

    The getter's type comes first, then setter types in discovery order.
    """
    types: Dict[TypeRef, None] = {}
    if self.getter is not None:
      types[self.getter.return_type] = None
    for t in self.setter_types:
      types[t] = None
    return tuple(types)

  def matching_getter_and_setter_type(self) -> Optional[TypeRef]:
    """The first setter type equal to the getter type, if any."""
    if self.getter is None:
      return None
    getter_type = self.getter.return_type
    return next((t for t in self.setter_types if t == getter_type), None)


class PropertyExtractor:
  """
  Builds the property map of a type from its declared public methods.
  """

  @staticmethod
  def candidate_methods(type_: TypeDescriptor) -> List[MethodDescriptor]:
    return [
      m for m in type_.declared_methods if m.is_public and not m.is_constructor and not m.is_static_initializer
    ]

  def extract(self, type_: TypeDescriptor) -> Dict[str, Property]:
    """
    Extracts properties from a type.

    Args:
        type_: The type to scan, methods in declaration order.

    Returns:
        Dict[str, Property]: Properties keyed and sorted by name. Types without
        accessors produce an empty dict.
    """
    properties: Dict[str, Property] = {}
    for method in self.candidate_methods(type_):
      accessor = PropertyMethod.from_method(method)
      if accessor is None:
        continue
      if accessor.property_name not in properties:
        properties[accessor.property_name] = Property(accessor.property_name)
      properties[accessor.property_name].add(accessor)
    return dict(sorted(properties.items()))
