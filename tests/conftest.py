"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A builder for synthetic in-memory type hierarchies.
- A class file assembler producing real class file bytes.
- Console isolation so log capture does not leak between tests.
"""

import struct
import sys
import pytest
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

# Add src to path so we can import 'propaudit' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.types import PRIMITIVE_NAMES, MethodDescriptor, TypeDescriptor, TypeRef, internal_name
from propaudit.utils.console import reset_console

_KEYWORDS = {keyword: letter for letter, keyword in PRIMITIVE_NAMES.items()}


def ref(spec: str) -> TypeRef:
  """
  Builds a TypeRef from Java-like shorthand.

  ``"int"`` -> ``I``, ``"String[]"`` -> ``[Ljava/lang/String``,
  ``"org.gradle.api.provider.Property"`` -> ``Lorg/gradle/api/provider/Property``.
  Bare names without a package are taken from ``java.lang``.
  """
  if spec.endswith("[]"):
    return TypeRef("[" + ref(spec[:-2]).name)
  if spec in _KEYWORDS:
    return TypeRef(_KEYWORDS[spec])
  if "." not in spec:
    spec = "java.lang." + spec
  return TypeRef(internal_name(spec))


class HierarchyBuilder:
  """
  Assembles TypeDescriptors by hand for analysis tests.
  """

  def __init__(self) -> None:
    self.types: List[TypeDescriptor] = []

  def type(
    self,
    fqn: str,
    interface: bool = False,
    public: bool = True,
    abstract: bool = False,
    extends: Optional[str] = "java.lang.Object",
    implements: Iterable[str] = (),
  ) -> TypeDescriptor:
    type_ = TypeDescriptor(
      name=internal_name(fqn),
      is_public=public,
      is_interface=interface,
      is_abstract=abstract or interface,
      super_name=internal_name(extends) if extends else None,
      interface_names=tuple(internal_name(i) for i in implements),
    )
    self.types.append(type_)
    return type_

  def method(
    self,
    owner: TypeDescriptor,
    name: str,
    params: Sequence[str] = (),
    returns: str = "void",
    static: bool = False,
    abstract: bool = False,
    public: bool = True,
  ) -> MethodDescriptor:
    receiver: Tuple[TypeRef, ...] = () if static else (owner.reference,)
    method = MethodDescriptor(
      name=name,
      declaring_type=owner.reference,
      parameter_types=receiver + tuple(ref(p) for p in params),
      return_type=ref(returns),
      is_public=public,
      is_static=static,
      is_abstract=abstract,
    )
    owner.methods.append(method)
    return method

  def build(self) -> TypeHierarchy:
    return TypeHierarchy(self.types)


def assemble_class(
  name: str,
  super_name: Optional[str] = "java/lang/Object",
  interfaces: Sequence[str] = (),
  access: int = 0x0001,
  methods: Sequence[Tuple[int, str, str]] = (),
  fields: Sequence[Tuple[int, str, str]] = (),
) -> bytes:
  """
  Produces class file bytes.

  The constant pool also carries a long constant (two slots) and each method
  gets a dummy ``Code`` attribute, so readers must skip both correctly.

  Args:
      name: Slashed class name, e.g. ``org/gradle/api/Foo``.
      super_name: Slashed super class name, or None.
      interfaces: Slashed interface names.
      access: Class access flags.
      methods: ``(access_flags, name, descriptor)`` triples.
      fields: ``(access_flags, name, descriptor)`` triples.
  """
  pool: List[bytes] = []
  utf8_index = {}

  def utf8(value: str) -> int:
    if value not in utf8_index:
      raw = value.encode("utf-8", errors="surrogatepass")
      pool.append(struct.pack(">BH", 1, len(raw)) + raw)
      utf8_index[value] = len(pool)
    return utf8_index[value]

  def class_entry(value: str) -> int:
    name_index = utf8(value)
    pool.append(struct.pack(">BH", 7, name_index))
    return len(pool)

  this_index = class_entry(name)
  super_index = class_entry(super_name) if super_name else 0
  interface_indexes = [class_entry(i) for i in interfaces]
  pool.append(struct.pack(">Bq", 5, 42))
  pool.append(b"")  # second slot of the long constant
  code_index = utf8("Code")

  def members(entries: Sequence[Tuple[int, str, str]], with_code: bool) -> bytes:
    out = struct.pack(">H", len(entries))
    for flags, member_name, descriptor in entries:
      out += struct.pack(">HHH", flags, utf8(member_name), utf8(descriptor))
      if with_code:
        body = b"\x00\x01\x00\x01\x00\x00\x00\x01\xb1\x00\x00\x00\x00"
        out += struct.pack(">HHI", 1, code_index, len(body)) + body
      else:
        out += struct.pack(">H", 0)
    return out

  field_bytes = members(fields, with_code=False)
  method_bytes = members(methods, with_code=True)

  header = struct.pack(">IHH", 0xCAFEBABE, 0, 65)
  pool_bytes = struct.pack(">H", len(pool) + 1) + b"".join(pool)
  body = struct.pack(">HHH", access, this_index, super_index)
  body += struct.pack(">H", len(interface_indexes)) + b"".join(struct.pack(">H", i) for i in interface_indexes)
  return header + pool_bytes + body + field_bytes + method_bytes + struct.pack(">H", 0)


@pytest.fixture
def api() -> HierarchyBuilder:
  """Returns an empty synthetic hierarchy builder."""
  return HierarchyBuilder()


@pytest.fixture
def class_bytes():
  """Returns the class file assembler."""
  return assemble_class


@pytest.fixture(autouse=True)
def cleanup_console():
  """Ensures console is reset to stderr after every test."""
  reset_console()
  yield
  reset_console()
