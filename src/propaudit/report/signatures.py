"""
Source-like rendering of types and method signatures.
"""

from propaudit.hierarchy.types import PRIMITIVE_NAMES, MethodDescriptor, TypeRef


def to_simple_name(ref: TypeRef) -> str:
  """
  Renders a type the way it is written in Java source, without its package.

  Examples: ``I`` -> ``int``, ``[Ljava/lang/String`` -> ``String[]``,
  ``Lorg/gradle/api/Project$Inner`` -> ``Project$Inner``.
  """
  if ref.is_array:
    return to_simple_name(ref.element_type) + "[]"
  if ref.is_primitive:
    return PRIMITIVE_NAMES[ref.name]
  return ref.class_name


def to_simple_signature(method: MethodDescriptor) -> str:
  """
  Renders ``<returnType> <SimpleClassName>.<methodName>(<paramTypes>)``.

  The receiver of instance methods is not listed.
  """
  params = ", ".join(to_simple_name(p) for p in method.declared_parameters)
  return (
    f"{to_simple_name(method.return_type)} {to_simple_name(method.declaring_type)}.{method.name}({params})"
  )
