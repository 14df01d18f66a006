"""
Navigable Type Hierarchy.

Holds the resolved ``TypeDescriptor`` set and answers lookup and subtype
queries. The hierarchy is immutable once built; analysis passes only read it.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set, Union

from propaudit.hierarchy.types import OBJECT, TypeDescriptor, TypeRef, internal_name

logger = logging.getLogger(__name__)


class TypeHierarchy:
  """
  Class/interface graph keyed by internal type name.

  Types keep their load order. When two definitions share a name the first one
  wins, mirroring classpath shadowing.
  """

  def __init__(self, types: Iterable[TypeDescriptor] = ()):
    self._types: Dict[str, TypeDescriptor] = {}
    for type_ in types:
      self._add(type_)
    if OBJECT.name not in self._types:
      self._add(TypeDescriptor(name=OBJECT.name))

  def _add(self, type_: TypeDescriptor) -> None:
    if type_.name in self._types:
      logger.debug("Ignoring duplicate definition of %s", type_.name)
      return
    self._types[type_.name] = type_

  def __iter__(self) -> Iterator[TypeDescriptor]:
    return iter(self._types.values())

  def __len__(self) -> int:
    return len(self._types)

  def all_types(self) -> List[TypeDescriptor]:
    """Returns every type in load order."""
    return list(self._types.values())

  def lookup(self, name: Union[str, TypeRef]) -> Optional[TypeDescriptor]:
    """
    Finds a type by internal name, qualified name, or reference.

    Dotted names are always qualified names. A slash-separated name is tried as an
    internal name first, then as a slashed qualified name.

    Args:
        name: ``Lorg/gradle/api/Project``, ``org/gradle/api/Project``,
            ``org.gradle.api.Project`` or a TypeRef.

    Returns:
        Optional[TypeDescriptor]: The type, or None if absent or not a class type.
    """
    if isinstance(name, TypeRef):
      if not name.is_class:
        return None
      return self._types.get(name.name)
    if "." not in name and "/" in name and name in self._types:
      return self._types[name]
    return self._types.get(internal_name(name))

  def supertypes(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
    """Direct, resolvable super class and interfaces of a type."""
    names = ([type_.super_name] if type_.super_name else []) + list(type_.interface_names)
    result = []
    for name in names:
      parent = self._types.get(name)
      if parent is not None:
        result.append(parent)
    return result

  def is_subtype(self, ancestor: Optional[TypeDescriptor], descendant: Optional[TypeDescriptor]) -> bool:
    """
    Checks whether ``descendant`` is ``ancestor`` or inherits from it.

    Walks super classes and interfaces transitively. Links to types missing from
    the hierarchy end that branch of the walk.

    Args:
        ancestor: Candidate super type. None never matches.
        descendant: Candidate sub type. None never matches.

    Returns:
        bool: True if assignable.
    """
    if ancestor is None or descendant is None:
      return False

    seen: Set[str] = set()
    stack = [descendant]
    while stack:
      current = stack.pop()
      if current is ancestor:
        return True
      if current.name in seen:
        continue
      seen.add(current.name)
      stack.extend(self.supertypes(current))
    return False
