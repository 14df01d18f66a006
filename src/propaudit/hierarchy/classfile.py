"""
JVM Class File Reader.

Decodes just enough of the class file format to build a ``TypeDescriptor``:
the constant pool, access flags, this/super/interface names, and method
names, descriptors and flags. Field and attribute bodies (including ``Code``)
are skipped over without being interpreted.
"""

import struct
from typing import List, Optional, Tuple

from propaudit.hierarchy.errors import ClassFormatError
from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor, TypeRef

MAGIC = 0xCAFEBABE

ACC_PUBLIC = 0x0001
ACC_STATIC = 0x0008
ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400

# Constant pool tags
CONSTANT_UTF8 = 1
CONSTANT_INTEGER = 3
CONSTANT_FLOAT = 4
CONSTANT_LONG = 5
CONSTANT_DOUBLE = 6
CONSTANT_CLASS = 7
CONSTANT_STRING = 8
CONSTANT_FIELDREF = 9
CONSTANT_METHODREF = 10
CONSTANT_INTERFACE_METHODREF = 11
CONSTANT_NAME_AND_TYPE = 12
CONSTANT_METHOD_HANDLE = 15
CONSTANT_METHOD_TYPE = 16
CONSTANT_DYNAMIC = 17
CONSTANT_INVOKE_DYNAMIC = 18
CONSTANT_MODULE = 19
CONSTANT_PACKAGE = 20

# Payload size in bytes for fixed-width entries
_ENTRY_SIZES = {
  CONSTANT_INTEGER: 4,
  CONSTANT_FLOAT: 4,
  CONSTANT_LONG: 8,
  CONSTANT_DOUBLE: 8,
  CONSTANT_CLASS: 2,
  CONSTANT_STRING: 2,
  CONSTANT_FIELDREF: 4,
  CONSTANT_METHODREF: 4,
  CONSTANT_INTERFACE_METHODREF: 4,
  CONSTANT_NAME_AND_TYPE: 4,
  CONSTANT_METHOD_HANDLE: 3,
  CONSTANT_METHOD_TYPE: 2,
  CONSTANT_DYNAMIC: 4,
  CONSTANT_INVOKE_DYNAMIC: 4,
  CONSTANT_MODULE: 2,
  CONSTANT_PACKAGE: 2,
}


def decode_modified_utf8(raw: bytes) -> str:
  """
  Decodes the JVM's modified UTF-8.

  NUL is stored as ``C0 80`` and supplementary characters as surrogate pairs.
  Unpaired surrogates are legal in string constants and are kept as is.
  """
  text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
  return text.encode("utf-16", errors="surrogatepass").decode("utf-16", errors="surrogatepass")


def parse_field_type(descriptor: str, pos: int = 0) -> Tuple[TypeRef, int]:
  """
  Parses one field type starting at ``pos``.

  Args:
      descriptor: A field or method descriptor.
      pos: Offset of the first character of the type.

  Returns:
      Tuple[TypeRef, int]: The type and the offset just past it.

  Raises:
      ClassFormatError: On a truncated or unknown type.
  """
  start = pos
  while pos < len(descriptor) and descriptor[pos] == "[":
    pos += 1
  if pos >= len(descriptor):
    raise ClassFormatError(f"Truncated type descriptor '{descriptor}'")

  tag = descriptor[pos]
  if tag == "L":
    end = descriptor.find(";", pos)
    if end < 0:
      raise ClassFormatError(f"Unterminated class type in descriptor '{descriptor}'")
    return TypeRef(descriptor[start:end]), end + 1
  if tag in "BCDFIJSZV":
    return TypeRef(descriptor[start : pos + 1]), pos + 1
  raise ClassFormatError(f"Unknown type tag '{tag}' in descriptor '{descriptor}'")


def parse_method_descriptor(descriptor: str) -> Tuple[List[TypeRef], TypeRef]:
  """
  Splits a method descriptor such as ``(Ljava/lang/String;I)V``.

  Args:
      descriptor: The raw method descriptor.

  Returns:
      Tuple[List[TypeRef], TypeRef]: Declared parameter types and return type.
  """
  if not descriptor.startswith("("):
    raise ClassFormatError(f"Malformed method descriptor '{descriptor}'")

  params = []
  pos = 1
  while pos < len(descriptor) and descriptor[pos] != ")":
    param, pos = parse_field_type(descriptor, pos)
    params.append(param)
  if pos >= len(descriptor):
    raise ClassFormatError(f"Malformed method descriptor '{descriptor}'")

  return_type, end = parse_field_type(descriptor, pos + 1)
  if end != len(descriptor):
    raise ClassFormatError(f"Trailing data in method descriptor '{descriptor}'")
  return params, return_type


def build_method(
  declaring: TypeRef,
  name: str,
  descriptor: str,
  access_flags: int,
) -> MethodDescriptor:
  """
  Creates a MethodDescriptor, prepending the receiver for instance methods.
  """
  params, return_type = parse_method_descriptor(descriptor)
  is_static = bool(access_flags & ACC_STATIC)
  if not is_static:
    params.insert(0, declaring)
  return MethodDescriptor(
    name=name,
    declaring_type=declaring,
    parameter_types=tuple(params),
    return_type=return_type,
    is_public=bool(access_flags & ACC_PUBLIC),
    is_static=is_static,
    is_abstract=bool(access_flags & ACC_ABSTRACT),
  )


class _Reader:
  """Big-endian cursor over class file bytes."""

  def __init__(self, data: bytes, source: str):
    self.data = data
    self.pos = 0
    self.source = source

  def unpack(self, fmt: str) -> Tuple:
    size = struct.calcsize(fmt)
    if self.pos + size > len(self.data):
      raise ClassFormatError("Truncated class file", self.source)
    values = struct.unpack_from(fmt, self.data, self.pos)
    self.pos += size
    return values

  def u1(self) -> int:
    return self.unpack(">B")[0]

  def u2(self) -> int:
    return self.unpack(">H")[0]

  def u4(self) -> int:
    return self.unpack(">I")[0]

  def read(self, length: int) -> bytes:
    if self.pos + length > len(self.data):
      raise ClassFormatError("Truncated class file", self.source)
    chunk = self.data[self.pos : self.pos + length]
    self.pos += length
    return chunk

  def skip(self, length: int) -> None:
    self.read(length)


class ClassFileParser:
  """
  Parses a single class file into a ``TypeDescriptor``.

  Usage::

      type_ = ClassFileParser(data, source="Foo.class").parse()
  """

  def __init__(self, data: bytes, source: str = "<bytes>"):
    self._reader = _Reader(data, source)
    self._source = source
    self._utf8: dict = {}
    self._classes: dict = {}

  def parse(self) -> TypeDescriptor:
    r = self._reader
    if r.u4() != MAGIC:
      raise ClassFormatError("Bad magic number", self._source)
    r.u2()  # minor version
    r.u2()  # major version

    self._read_constant_pool()

    access_flags = r.u2()
    this_name = self._class_name(r.u2())
    if this_name is None:
      raise ClassFormatError("Missing this_class entry", self._source)
    super_name = self._class_name(r.u2())
    interfaces = tuple(self._class_name(r.u2()) for _ in range(r.u2()))

    self._skip_members()  # fields
    declaring = TypeRef.of_class(this_name)
    methods = []
    for _ in range(r.u2()):
      flags = r.u2()
      name = self._string(r.u2())
      descriptor = self._string(r.u2())
      self._skip_attributes()
      methods.append(build_method(declaring, name, descriptor, flags))

    return TypeDescriptor(
      name=declaring.name,
      is_public=bool(access_flags & ACC_PUBLIC),
      is_interface=bool(access_flags & ACC_INTERFACE),
      is_abstract=bool(access_flags & ACC_ABSTRACT),
      super_name=TypeRef.of_class(super_name).name if super_name else None,
      interface_names=tuple(TypeRef.of_class(i).name for i in interfaces if i),
      methods=methods,
    )

  def _read_constant_pool(self) -> None:
    r = self._reader
    count = r.u2()
    index = 1
    while index < count:
      tag = r.u1()
      if tag == CONSTANT_UTF8:
        try:
          self._utf8[index] = decode_modified_utf8(r.read(r.u2()))
        except UnicodeDecodeError as e:
          raise ClassFormatError(f"Invalid UTF8 constant at index {index}", self._source) from e
      elif tag == CONSTANT_CLASS:
        self._classes[index] = r.u2()
      elif tag in _ENTRY_SIZES:
        r.skip(_ENTRY_SIZES[tag])
      else:
        raise ClassFormatError(f"Unknown constant pool tag {tag} at index {index}", self._source)
      # Long and double entries occupy two slots
      index += 2 if tag in (CONSTANT_LONG, CONSTANT_DOUBLE) else 1

  def _string(self, index: int) -> str:
    try:
      return self._utf8[index]
    except KeyError:
      raise ClassFormatError(f"Constant pool index {index} is not a UTF8 entry", self._source) from None

  def _class_name(self, index: int) -> Optional[str]:
    if index == 0:
      return None
    try:
      return self._string(self._classes[index])
    except KeyError:
      raise ClassFormatError(f"Constant pool index {index} is not a Class entry", self._source) from None

  def _skip_attributes(self) -> None:
    r = self._reader
    for _ in range(r.u2()):
      r.u2()
      r.skip(r.u4())

  def _skip_members(self) -> None:
    r = self._reader
    for _ in range(r.u2()):
      r.skip(6)  # access, name, descriptor
      self._skip_attributes()


def parse_class_file(data: bytes, source: str = "<bytes>") -> TypeDescriptor:
  """Convenience wrapper around ``ClassFileParser``."""
  return ClassFileParser(data, source).parse()


def type_descriptor(ref: TypeRef) -> str:
  """Inverse of ``parse_field_type``: ``Ljava/lang/String`` -> ``Ljava/lang/String;``."""
  if ref.is_array:
    return "[" + type_descriptor(ref.element_type)
  if ref.is_class:
    return ref.name + ";"
  return ref.name


def method_descriptor(method: MethodDescriptor) -> str:
  """Renders the JVM descriptor of a method, receiver excluded."""
  params = "".join(type_descriptor(p) for p in method.declared_parameters)
  return f"({params}){type_descriptor(method.return_type)}"
