"""
Tests for the CLI 'snapshot' command handler.
"""

import json

import pytest

from propaudit.cli.handlers.snapshot import handle_snapshot
from propaudit.hierarchy.classfile import ACC_ABSTRACT, ACC_INTERFACE, ACC_PUBLIC
from propaudit.hierarchy.resolver import resolve


@pytest.fixture
def classes_dir(tmp_path, class_bytes, monkeypatch):
  monkeypatch.chdir(tmp_path)
  root = tmp_path / "classes"
  for package in ("org/gradle/api", "org/gradle/api/internal", "com/example"):
    (root / package).mkdir(parents=True)
  interface = ACC_PUBLIC | ACC_INTERFACE | ACC_ABSTRACT
  (root / "com/example/Base.class").write_bytes(class_bytes("com/example/Base", access=interface))
  (root / "com/example/Unused.class").write_bytes(class_bytes("com/example/Unused"))
  (root / "org/gradle/api/Task.class").write_bytes(
    class_bytes("org/gradle/api/Task", interfaces=["com/example/Base"], access=interface)
  )
  (root / "org/gradle/api/internal/Impl.class").write_bytes(class_bytes("org/gradle/api/internal/Impl"))
  return root


def load_names(path):
  return sorted(t["name"] for t in json.loads(path.read_text())["types"])


def test_snapshot_everything(tmp_path, classes_dir):
  out = tmp_path / "all.json"

  assert handle_snapshot([classes_dir], out) == 0

  assert load_names(out) == [
    "Lcom/example/Base",
    "Lcom/example/Unused",
    "Ljava/lang/Object",
    "Lorg/gradle/api/Task",
    "Lorg/gradle/api/internal/Impl",
  ]


def test_snapshot_api_only_keeps_ancestors(tmp_path, classes_dir):
  out = tmp_path / "api.json"

  assert handle_snapshot([classes_dir], out, api_only=True) == 0

  assert load_names(out) == ["Lcom/example/Base", "Ljava/lang/Object", "Lorg/gradle/api/Task"]
  hierarchy = resolve([out])
  assert hierarchy.is_subtype(hierarchy.lookup("com.example.Base"), hierarchy.lookup("org.gradle.api.Task"))


def test_snapshot_missing_entry(tmp_path, classes_dir):
  out = tmp_path / "api.json"

  assert handle_snapshot([tmp_path / "missing.jar"], out) == 1
  assert not out.exists()
