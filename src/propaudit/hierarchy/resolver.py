"""
Classpath Resolution.

Turns classpath entries into a ``TypeHierarchy``. Supported entries:

- Archives (``.jar``, ``.zip``, ``.jmod``): every ``*.class`` member is read.
- Directories: every ``*.class`` file below the directory is read.
- JSON snapshots (``.json``): see :mod:`propaudit.hierarchy.snapshot`.
"""

import logging
import zipfile
import zlib
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Union

from propaudit.hierarchy.classfile import parse_class_file
from propaudit.hierarchy.errors import ClassFormatError, ResolutionError
from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.snapshot import load_snapshot
from propaudit.hierarchy.types import TypeDescriptor

logger = logging.getLogger(__name__)

# Class files carrying module/package metadata rather than a type
_METADATA_CLASSES = {"module-info.class", "package-info.class"}
_JMOD_CLASSES_PREFIX = "classes/"
_VERSIONED_PREFIX = "META-INF/versions/"

PathLike = Union[str, Path]


def _is_type_member(member: str) -> bool:
  if not member.endswith(".class"):
    return False
  if member.startswith(_VERSIONED_PREFIX):
    return False
  return member.rsplit("/", 1)[-1] not in _METADATA_CLASSES


def _parse(data: bytes, source: str) -> TypeDescriptor:
  try:
    return parse_class_file(data, source)
  except ClassFormatError as e:
    if e.path is None:
      raise ClassFormatError(str(e), source) from e
    raise


def read_archive(path: Path) -> Iterator[TypeDescriptor]:
  """
  Yields the types stored in a jar, zip or jmod archive.

  Raises:
      ResolutionError: If the archive cannot be opened or a member is malformed.
  """
  try:
    archive = zipfile.ZipFile(path)
  except (OSError, zipfile.BadZipFile) as e:
    raise ResolutionError(f"Cannot open archive ({e})", path) from e

  with archive:
    members = sorted(n for n in archive.namelist() if _is_type_member(n))
    for member in members:
      if path.suffix == ".jmod" and not member.startswith(_JMOD_CLASSES_PREFIX):
        continue
      try:
        data = archive.read(member)
      except (OSError, zipfile.BadZipFile, zlib.error, NotImplementedError) as e:
        raise ResolutionError(f"Cannot read archive member {member} ({e})", path) from e
      yield _parse(data, f"{path}!{member}")


def read_directory(path: Path) -> Iterator[TypeDescriptor]:
  """
  Yields the types stored as ``.class`` files below a directory.

  Raises:
      ResolutionError: If a file cannot be read or is malformed.
  """
  for class_file in sorted(path.rglob("*.class")):
    relative = class_file.relative_to(path).as_posix()
    if not _is_type_member(relative):
      continue
    try:
      data = class_file.read_bytes()
    except OSError as e:
      raise ResolutionError(f"Cannot read class file ({e.strerror})", class_file) from e
    yield _parse(data, str(class_file))


def read_entry(entry: PathLike) -> List[TypeDescriptor]:
  """
  Reads all types from a single classpath entry.

  Args:
      entry: Archive, directory or snapshot path.

  Returns:
      List[TypeDescriptor]: Types in a stable (sorted member) order.

  Raises:
      ResolutionError: If the entry is missing or unreadable.
  """
  path = Path(entry)
  if not path.exists():
    raise ResolutionError("Classpath entry does not exist", path)

  if path.is_dir():
    types = list(read_directory(path))
  elif path.suffix == ".json":
    types = load_snapshot(path)
  else:
    types = list(read_archive(path))

  logger.debug("Loaded %d types from %s", len(types), path)
  return types


def resolve(classpath_entries: Sequence[PathLike], baseline: Iterable[PathLike] = ()) -> TypeHierarchy:
  """
  Builds a navigable hierarchy from classpath entries.

  Baseline entries (e.g. a JDK's ``java.base.jmod``) are loaded first so that
  library super types resolve. ``java/lang/Object`` is always present.

  Args:
      classpath_entries: The artifacts to analyse.
      baseline: Additional standard-library artifacts.

  Returns:
      TypeHierarchy: The resolved hierarchy.

  Raises:
      ResolutionError: If any entry cannot be opened or parsed.
  """
  types: List[TypeDescriptor] = []
  for entry in [*baseline, *classpath_entries]:
    types.extend(read_entry(entry))
  return TypeHierarchy(types)
