"""
Report Command Handler.

Resolves a classpath, analyses its public API properties, and writes the
Markdown report to a file or standard output.
"""

import io
import sys
from pathlib import Path
from typing import List, Optional

from rich.table import Table

from propaudit.analysis.consistency import AnalysisResult
from propaudit.config import AuditConfig
from propaudit.enums import FindingCategory
from propaudit.hierarchy.errors import ResolutionError
from propaudit.report.generator import generate_report
from propaudit.utils.console import console, log_error, log_info, log_success


def handle_report(
  classpath: List[Path],
  out: Optional[Path],
  ignored_packages: Optional[List[str]] = None,
  ignored_types: Optional[List[str]] = None,
  baseline: Optional[List[Path]] = None,
) -> int:
  """
  Generates the property consistency report.

  The report is rendered in memory first, so a failed run never leaves a
  partial file behind.

  Args:
      classpath: Jars, jmods, class directories or JSON snapshots.
      out: Destination file, or None for standard output.
      ignored_packages: Additional dotted package prefixes to exclude.
      ignored_types: Additional fully qualified type names to exclude.
      baseline: Standard-library artifacts (overrides configuration).

  Returns:
      int: Exit code (0 on success, 1 on resolution, configuration or I/O failure).
  """
  try:
    config = AuditConfig.load(ignored_packages=ignored_packages, ignored_types=ignored_types, baseline=baseline)
  except ValueError as e:
    log_error(str(e))
    return 1

  log_info(f"Analysing {len(classpath)} classpath entries")
  buffer = io.StringIO()
  try:
    result = generate_report(
      config.create_classifier(),
      classpath,
      buffer,
      settings=config.analysis_settings,
      baseline=config.baseline,
    )
  except ResolutionError as e:
    log_error(f"Failed to resolve classpath: {e}")
    return 1

  try:
    if out is None:
      sys.stdout.write(buffer.getvalue())
      sys.stdout.flush()
    else:
      out.parent.mkdir(parents=True, exist_ok=True)
      out.write_text(buffer.getvalue(), encoding="utf-8")
  except OSError as e:
    log_error(f"Failed to write report: {e}")
    return 1

  _print_summary(result)
  if out is not None:
    log_success(f"Report written to {out}")
  return 0


def _print_summary(result: AnalysisResult) -> None:
  table = Table(title="Property Audit")
  table.add_column("Check", style="cyan")
  table.add_column("Findings", justify="right")

  for category in FindingCategory:
    count = len(result.of(category))
    table.add_row(category.header, f"[red]{count}[/red]" if count else "0")

  console.print(table)
  summary = result.summary
  console.print(
    f"Packages: {summary.packages}  Types: {summary.types}  "
    f"Methods: {summary.methods}  Properties: {summary.properties}"
  )
