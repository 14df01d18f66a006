"""
propaudit Package.

Reports accessor ("property") inconsistencies in the public API of a compiled
JVM codebase: setters without getters, mismatched getter/setter types,
``propertyName(value)`` setters, fluent setters, and implemented getters of lazy
value types.

Usage
-----

Simple String Report
^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import propaudit
    markdown = propaudit.audit(["build/libs/gradle-api.jar"])
    print(markdown)

Advanced Usage (Pipeline)
^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import sys
    from propaudit import ApiSurfaceClassifier, generate_report

    classifier = ApiSurfaceClassifier(ignored_packages=["org.gradle.api.experimental"])
    result = generate_report(classifier, ["gradle-api.jar"], sys.stdout)
    print(result.summary)
"""

import io
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from propaudit.analysis.api_filter import ApiSurfaceClassifier
from propaudit.analysis.consistency import AnalysisResult, AnalysisSettings, Finding
from propaudit.hierarchy import ResolutionError, TypeHierarchy, resolve
from propaudit.report.generator import analyze_hierarchy, generate_report

__version__ = "0.1.0"


def audit(
  classpath: Sequence[Union[str, Path]],
  ignored_packages: Iterable[str] = (),
  ignored_types: Iterable[str] = (),
  settings: Optional[AnalysisSettings] = None,
) -> str:
  """
  Analyses a classpath and returns the Markdown report.

  This is a convenience wrapper around `generate_report` writing to an
  in-memory buffer.

  Args:
      classpath: Jars, jmods, class directories or JSON snapshots.
      ignored_packages: Dotted package prefixes to exclude from the API.
      ignored_types: Fully qualified type names to exclude from the API.
      settings: Check tuning (callback and lazy marker types).

  Returns:
      str: The report document.

  Raises:
      ResolutionError: If a classpath entry cannot be read.
  """
  buffer = io.StringIO()
  generate_report(ApiSurfaceClassifier(ignored_packages, ignored_types), classpath, buffer, settings)
  return buffer.getvalue()


__all__ = [
  "AnalysisResult",
  "AnalysisSettings",
  "ApiSurfaceClassifier",
  "Finding",
  "ResolutionError",
  "TypeHierarchy",
  "analyze_hierarchy",
  "audit",
  "generate_report",
  "resolve",
  "__version__",
]
