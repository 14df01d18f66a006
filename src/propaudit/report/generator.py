"""
Report Generation Pipeline.

Wires resolution, classification, extraction, analysis and assembly into the
single ``generate_report`` operation.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from propaudit.analysis.api_filter import ApiSurfaceClassifier
from propaudit.analysis.consistency import AnalysisResult, AnalysisSettings, ConsistencyAnalyzer
from propaudit.analysis.surface import collect_surface
from propaudit.hierarchy.hierarchy import TypeHierarchy
from propaudit.hierarchy.resolver import resolve
from propaudit.report.assembler import ReportAssembler, TextSink

logger = logging.getLogger(__name__)


def analyze_hierarchy(
  hierarchy: TypeHierarchy,
  classifier: ApiSurfaceClassifier,
  settings: Optional[AnalysisSettings] = None,
) -> AnalysisResult:
  """
  Runs classification and the consistency checks over an already resolved hierarchy.

  Args:
      hierarchy: The resolved hierarchy.
      classifier: Allow/deny policy for API types.
      settings: Check tuning (callback and lazy marker types).

  Returns:
      AnalysisResult: Summary and findings.
  """
  surface = collect_surface(hierarchy, classifier)
  result = ConsistencyAnalyzer(hierarchy, settings).analyze(surface)
  logger.debug("Analysis produced %d findings", result.total)
  return result


def generate_report(
  classifier: ApiSurfaceClassifier,
  classpath_entries: Sequence[Union[str, Path]],
  sink: TextSink,
  settings: Optional[AnalysisSettings] = None,
  baseline: Iterable[Union[str, Path]] = (),
) -> AnalysisResult:
  """
  Resolves a classpath, analyses its API and writes the Markdown report.

  Nothing is written when resolution fails.

  Args:
      classifier: Allow/deny policy for API types.
      classpath_entries: Jars, jmods, class directories or JSON snapshots.
      sink: Destination with a ``write(str)`` method.
      settings: Check tuning.
      baseline: Standard-library artifacts loaded ahead of the classpath.

  Returns:
      AnalysisResult: The analysed data behind the report.

  Raises:
      ResolutionError: If the hierarchy cannot be built.
      OSError: If the sink cannot be written.
  """
  hierarchy = resolve(classpath_entries, baseline)
  result = analyze_hierarchy(hierarchy, classifier, settings)
  ReportAssembler().write(result, sink)
  return result
