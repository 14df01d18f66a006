"""
Tests for the type model encodings.
"""

import pytest

from propaudit.hierarchy.types import MethodDescriptor, TypeDescriptor, TypeRef, internal_name


def test_internal_name():
  assert internal_name("org.gradle.api.Project") == "Lorg/gradle/api/Project"
  assert internal_name("org/gradle/api/Project") == "Lorg/gradle/api/Project"


def test_class_reference_parts():
  ref = TypeRef("Lorg/gradle/api/Project$Inner")
  assert ref.is_class
  assert not ref.is_array
  assert ref.package == "org/gradle/api"
  assert ref.class_name == "Project$Inner"


def test_default_package_reference():
  ref = TypeRef("LStandalone")
  assert ref.package is None
  assert ref.class_name == "Standalone"


def test_primitive_and_array_references():
  assert TypeRef("I").is_primitive
  assert TypeRef("V").is_void
  array = TypeRef("[[Ljava/lang/String")
  assert array.is_array
  assert array.element_type == TypeRef("[Ljava/lang/String")
  assert array.package is None


def test_element_type_of_non_array():
  with pytest.raises(ValueError):
    TypeRef("I").element_type


def test_type_descriptors_hash_by_identity():
  first = TypeDescriptor(name="Lorg/gradle/api/Project")
  second = TypeDescriptor(name="Lorg/gradle/api/Project")
  assert first != second
  assert len({first, second}) == 2


def test_method_parameters_include_receiver():
  owner = TypeRef("Lorg/gradle/api/Task")
  method = MethodDescriptor(
    name="setName",
    declaring_type=owner,
    parameter_types=(owner, TypeRef("Ljava/lang/String")),
    return_type=TypeRef("V"),
  )
  assert method.parameter_count == 2
  assert method.declared_parameters == (TypeRef("Ljava/lang/String"),)
  assert not method.is_constructor
