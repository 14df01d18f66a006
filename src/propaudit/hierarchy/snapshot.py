"""
Hierarchy Snapshots.

Serializable JSON form of a resolved hierarchy, so that a classpath can be
resolved once and analysed later (or in tests) without the original archives.
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from propaudit.hierarchy.classfile import build_method, method_descriptor
from propaudit.hierarchy.classfile import ACC_ABSTRACT, ACC_PUBLIC, ACC_STATIC
from propaudit.hierarchy.errors import ResolutionError
from propaudit.hierarchy.types import TypeDescriptor, TypeRef

SNAPSHOT_VERSION = 1


class MethodSnapshot(BaseModel):
  """
  Serializable method signature.
  """

  name: str
  descriptor: str = Field(description="JVM method descriptor, e.g. '(Ljava/lang/String;)V'.")
  public: bool = True
  static: bool = False
  abstract: bool = False


class TypeSnapshot(BaseModel):
  """
  Serializable class or interface.
  """

  name: str = Field(description="Internal name, e.g. 'Lorg/gradle/api/Project'.")
  public: bool = True
  interface: bool = False
  abstract: bool = False
  super_name: Optional[str] = None
  interfaces: List[str] = Field(default_factory=list)
  methods: List[MethodSnapshot] = Field(default_factory=list)

  def to_descriptor(self) -> TypeDescriptor:
    declaring = TypeRef(self.name)
    methods = []
    for m in self.methods:
      flags = (ACC_PUBLIC if m.public else 0) | (ACC_STATIC if m.static else 0) | (ACC_ABSTRACT if m.abstract else 0)
      methods.append(build_method(declaring, m.name, m.descriptor, flags))
    return TypeDescriptor(
      name=self.name,
      is_public=self.public,
      is_interface=self.interface,
      is_abstract=self.abstract,
      super_name=self.super_name,
      interface_names=tuple(self.interfaces),
      methods=methods,
    )

  @classmethod
  def from_descriptor(cls, type_: TypeDescriptor) -> "TypeSnapshot":
    return cls(
      name=type_.name,
      public=type_.is_public,
      interface=type_.is_interface,
      abstract=type_.is_abstract,
      super_name=type_.super_name,
      interfaces=list(type_.interface_names),
      methods=[
        MethodSnapshot(
          name=m.name,
          descriptor=method_descriptor(m),
          public=m.is_public,
          static=m.is_static,
          abstract=m.is_abstract,
        )
        for m in type_.methods
      ],
    )


class HierarchySnapshot(BaseModel):
  """
  Top-level snapshot document.
  """

  version: int = SNAPSHOT_VERSION
  types: List[TypeSnapshot] = Field(default_factory=list)


def load_snapshot(path: Path) -> List[TypeDescriptor]:
  """
  Reads a JSON snapshot into type descriptors.

  Args:
      path: The snapshot file.

  Returns:
      List[TypeDescriptor]: Types in document order.

  Raises:
      ResolutionError: If the file is unreadable or does not match the schema.
  """
  try:
    raw = path.read_text(encoding="utf-8")
  except OSError as e:
    raise ResolutionError(f"Cannot read snapshot ({e.strerror})", path) from e

  try:
    snapshot = HierarchySnapshot.model_validate(json.loads(raw))
  except (json.JSONDecodeError, ValidationError) as e:
    raise ResolutionError(f"Invalid hierarchy snapshot ({e})", path) from e

  if snapshot.version != SNAPSHOT_VERSION:
    raise ResolutionError(f"Unsupported snapshot version {snapshot.version}", path)

  return [t.to_descriptor() for t in snapshot.types]


def dump_snapshot(types: Iterable[TypeDescriptor], path: Path) -> int:
  """
  Writes type descriptors to a JSON snapshot.

  Args:
      types: Types to serialize, in the order they should be reloaded.
      path: Destination file. Parent directories are created.

  Returns:
      int: Number of types written.
  """
  snapshot = HierarchySnapshot(types=[TypeSnapshot.from_descriptor(t) for t in types])
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(snapshot.model_dump_json(indent=2, exclude_defaults=True), encoding="utf-8")
  return len(snapshot.types)
