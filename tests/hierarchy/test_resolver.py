"""
Tests for classpath resolution over archives, directories and snapshots.
"""

import zipfile

import pytest

from propaudit.hierarchy.classfile import ACC_PUBLIC
from propaudit.hierarchy.errors import ClassFormatError, ResolutionError
from propaudit.hierarchy.resolver import read_entry, resolve


def write_jar(path, classes):
  with zipfile.ZipFile(path, "w") as jar:
    for member, data in classes.items():
      jar.writestr(member, data)
  return path


def test_resolve_jar(tmp_path, class_bytes):
  jar = write_jar(
    tmp_path / "api.jar",
    {
      "org/gradle/api/Task.class": class_bytes(
        "org/gradle/api/Task", methods=[(ACC_PUBLIC, "getName", "()Ljava/lang/String;")]
      ),
      "org/gradle/api/package-info.class": class_bytes("org/gradle/api/package-info"),
      "module-info.class": b"not a class",
      "META-INF/versions/11/org/gradle/api/Task.class": b"ignored",
      "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n",
    },
  )

  hierarchy = resolve([jar])

  task = hierarchy.lookup("org.gradle.api.Task")
  assert task is not None
  assert [m.name for m in task.methods] == ["getName"]
  assert hierarchy.lookup("org.gradle.api.package-info") is None


def test_resolve_jmod_strips_to_classes(tmp_path, class_bytes):
  jmod = write_jar(
    tmp_path / "java.base.jmod",
    {
      "classes/java/util/List.class": class_bytes("java/util/List"),
      "lib/native.class": b"ignored",
    },
  )

  types = read_entry(jmod)

  assert [t.name for t in types] == ["Ljava/util/List"]


def test_resolve_directory(tmp_path, class_bytes):
  root = tmp_path / "classes"
  (root / "org/gradle/api").mkdir(parents=True)
  (root / "org/gradle/api/Named.class").write_bytes(class_bytes("org/gradle/api/Named"))
  (root / "org/gradle/api/Task.class").write_bytes(class_bytes("org/gradle/api/Task"))
  (root / "org/gradle/api/notes.txt").write_text("skip")

  types = read_entry(root)

  assert [t.class_name for t in types] == ["Named", "Task"]


def test_baseline_loaded_first(tmp_path, class_bytes):
  base = write_jar(tmp_path / "base.jar", {"a/Shared.class": class_bytes("a/Shared", super_name=None)})
  app = write_jar(tmp_path / "app.jar", {"a/Shared.class": class_bytes("a/Shared")})

  hierarchy = resolve([app], baseline=[base])

  assert hierarchy.lookup("a.Shared").super_name is None


def test_missing_entry(tmp_path):
  with pytest.raises(ResolutionError, match="does not exist"):
    resolve([tmp_path / "nope.jar"])


def test_corrupt_archive(tmp_path):
  broken = tmp_path / "broken.jar"
  broken.write_bytes(b"definitely not a zip")

  with pytest.raises(ResolutionError, match="Cannot open archive") as info:
    resolve([broken])
  assert info.value.path == broken


def test_malformed_member_names_its_source(tmp_path):
  jar = write_jar(tmp_path / "bad.jar", {"org/gradle/api/Bad.class": b"\xca\xfe"})

  with pytest.raises(ClassFormatError) as info:
    resolve([jar])
  assert "bad.jar!org/gradle/api/Bad.class" in str(info.value)


def test_damaged_compressed_member(tmp_path, class_bytes):
  member = "org/gradle/api/Task.class"
  data = class_bytes("org/gradle/api/Task", methods=[(ACC_PUBLIC, f"getValue{i}", "()I") for i in range(40)])
  jar = tmp_path / "damaged.jar"
  with zipfile.ZipFile(jar, "w", compression=zipfile.ZIP_DEFLATED) as archive:
    archive.writestr(member, data)

  raw = bytearray(jar.read_bytes())
  start = 30 + len(member) + 5
  for i in range(start, start + 10):
    raw[i] ^= 0xFF
  jar.write_bytes(bytes(raw))

  with pytest.raises(ResolutionError, match="Cannot read archive member") as info:
    resolve([jar])
  assert info.value.path == jar


def test_unsupported_compression(tmp_path, class_bytes, monkeypatch):
  jar = write_jar(tmp_path / "api.jar", {"org/gradle/api/Task.class": class_bytes("org/gradle/api/Task")})

  def unsupported(self, name, pwd=None):
    raise NotImplementedError("That compression method is not supported")

  monkeypatch.setattr(zipfile.ZipFile, "read", unsupported)

  with pytest.raises(ResolutionError, match="Cannot read archive member"):
    resolve([jar])
