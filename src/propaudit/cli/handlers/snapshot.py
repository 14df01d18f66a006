"""
Snapshot Command Handler.

Captures a resolved classpath as a JSON hierarchy snapshot, so later report
runs (or other machines) can work without the original archives.
"""

from pathlib import Path
from typing import List, Optional

from propaudit.analysis.surface import NESTING_MARKER
from propaudit.config import AuditConfig
from propaudit.hierarchy.errors import ResolutionError
from propaudit.hierarchy.resolver import resolve
from propaudit.hierarchy.snapshot import dump_snapshot
from propaudit.utils.console import log_error, log_info, log_success, log_warning


def handle_snapshot(
  classpath: List[Path],
  out: Path,
  api_only: bool = False,
  baseline: Optional[List[Path]] = None,
) -> int:
  """
  Handles the 'snapshot' command.

  With ``api_only`` only public API types (per the configured classifier) are
  kept, plus every type they can reach through super types, so subtype queries
  against the snapshot still resolve.

  Args:
      classpath: Artifacts to resolve.
      out: Destination JSON file.
      api_only: Restrict the snapshot to the API surface and its ancestors.
      baseline: Standard-library artifacts (overrides configuration).

  Returns:
      int: Exit code.
  """
  try:
    config = AuditConfig.load(baseline=baseline)
  except ValueError as e:
    log_error(str(e))
    return 1

  try:
    hierarchy = resolve(classpath, config.baseline)
  except ResolutionError as e:
    log_error(f"Failed to resolve classpath: {e}")
    return 1

  types = hierarchy.all_types()
  if api_only:
    classifier = config.create_classifier()
    roots = [
      t for t in types if t.is_public and NESTING_MARKER not in t.class_name and classifier.include_type(t)
    ]
    keep = set()
    stack = list(roots)
    while stack:
      current = stack.pop()
      if current.name in keep:
        continue
      keep.add(current.name)
      stack.extend(hierarchy.supertypes(current))
    types = [t for t in types if t.name in keep]
    if not roots:
      log_warning("No public API types found on the classpath")

  log_info(f"Writing {len(types)} types to {out}")
  try:
    count = dump_snapshot(types, out)
  except OSError as e:
    log_error(f"Failed to write snapshot: {e}")
    return 1

  log_success(f"Captured {count} types")
  return 0
