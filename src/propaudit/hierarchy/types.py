"""
Type Model for Resolved JVM Hierarchies.

This module defines the read-only descriptors handed out by the type-resolution
service. Names use the hierarchy's internal encoding:

- Class types: ``Lorg/gradle/api/Project`` (no trailing ``;``).
- Primitives: a single descriptor letter (``I``, ``Z``, ``V``, ...).
- Arrays: ``[`` followed by the element encoding (``[Ljava/lang/String``).

Classes:
    TypeRef: A type as it appears in a method descriptor.
    MethodDescriptor: A declared method and its signature.
    TypeDescriptor: A declared class or interface.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

PRIMITIVE_NAMES: Dict[str, str] = {
  "B": "byte",
  "C": "char",
  "D": "double",
  "F": "float",
  "I": "int",
  "J": "long",
  "S": "short",
  "Z": "boolean",
  "V": "void",
}

CONSTRUCTOR_NAME = "<init>"
STATIC_INITIALIZER_NAME = "<clinit>"


def internal_name(qualified_name: str) -> str:
  """
  Converts a dotted or slashed qualified name to the internal class encoding.

  Args:
      qualified_name: e.g. ``org.gradle.api.Project`` or ``org/gradle/api/Project``.

  Returns:
      str: e.g. ``Lorg/gradle/api/Project``.
  """
  return "L" + qualified_name.replace(".", "/")


@dataclass(frozen=True)
class TypeRef:
  """
  Reference to a type by its internal name.

  Two references are equal when their encodings are equal, so they can be
  collected into sets and compared across methods.
  """

  name: str

  @classmethod
  def of_class(cls, slashed_name: str) -> "TypeRef":
    """Builds a class reference from a ``pkg/Name`` string."""
    return cls("L" + slashed_name)

  @property
  def is_array(self) -> bool:
    return self.name.startswith("[")

  @property
  def is_primitive(self) -> bool:
    return len(self.name) == 1 and self.name in PRIMITIVE_NAMES

  @property
  def is_void(self) -> bool:
    return self.name == "V"

  @property
  def is_class(self) -> bool:
    return self.name.startswith("L")

  @property
  def element_type(self) -> "TypeRef":
    """
    The component type of an array reference.

    Raises:
        ValueError: If the reference is not an array.
    """
    if not self.is_array:
      raise ValueError(f"Not an array type: {self.name}")
    return TypeRef(self.name[1:])

  @property
  def package(self) -> Optional[str]:
    """Slash-separated package of a class type, or None for the default package."""
    if not self.is_class or "/" not in self.name:
      return None
    return self.name[1 : self.name.rindex("/")]

  @property
  def class_name(self) -> str:
    """Text after the last package separator (keeps ``$`` nesting markers)."""
    if not self.is_class:
      return self.name
    return self.name[1:].rsplit("/", 1)[-1]

  def __str__(self) -> str:
    return self.name


VOID = TypeRef("V")
OBJECT = TypeRef("Ljava/lang/Object")


@dataclass(frozen=True)
class MethodDescriptor:
  """
  A method declared on a type.

  ``parameter_types`` includes the implicit receiver as element 0 for instance
  methods, so ``parameter_count`` for ``String getName()`` is 1.
  """

  name: str
  declaring_type: TypeRef
  parameter_types: Tuple[TypeRef, ...]
  return_type: TypeRef
  is_public: bool = True
  is_static: bool = False
  is_abstract: bool = False

  @property
  def parameter_count(self) -> int:
    return len(self.parameter_types)

  @property
  def is_constructor(self) -> bool:
    return self.name == CONSTRUCTOR_NAME

  @property
  def is_static_initializer(self) -> bool:
    return self.name == STATIC_INITIALIZER_NAME

  def parameter_type(self, index: int) -> TypeRef:
    return self.parameter_types[index]

  @property
  def declared_parameters(self) -> Tuple[TypeRef, ...]:
    """Parameters as written in source, receiver excluded."""
    return self.parameter_types if self.is_static else self.parameter_types[1:]


@dataclass(eq=False)
class TypeDescriptor:
  """
  A class or interface declared in the resolved hierarchy.

  Descriptors are compared and hashed by identity: the hierarchy owns them
  and analysis code only holds references for the duration of a run.
  """

  name: str
  is_public: bool = True
  is_interface: bool = False
  is_abstract: bool = False
  super_name: Optional[str] = None
  interface_names: Tuple[str, ...] = ()
  methods: List[MethodDescriptor] = field(default_factory=list)

  @property
  def reference(self) -> TypeRef:
    return TypeRef(self.name)

  @property
  def package(self) -> Optional[str]:
    return self.reference.package

  @property
  def class_name(self) -> str:
    return self.reference.class_name

  @property
  def declared_methods(self) -> List[MethodDescriptor]:
    return list(self.methods)

  def __repr__(self) -> str:
    return f"TypeDescriptor({self.name!r})"
