"""
Public API Surface Classification.

Decides whether a declared type belongs to the published API, based on its
package. The allow-list of public namespaces is fixed and shared; deny rules
(packages and individual types) are supplied per classifier.
"""

import re
from typing import Dict, Iterable, List, Pattern

from propaudit.hierarchy.types import TypeDescriptor, internal_name

PUBLIC_API_PACKAGES: List[Pattern[str]] = [
  re.compile(p)
  for p in (
    "org/gradle/",
    "org/gradle/api/.*",
    "org/gradle/authentication/.*",
    "org/gradle/build/.*",
    "org/gradle/buildconfiguration/.*",
    "org/gradle/buildinit/.*",
    "org/gradle/caching/.*",
    "org/gradle/concurrent/.*",
    "org/gradle/deployment/.*",
    "org/gradle/external/javadoc/.*",
    "org/gradle/ide/.*",
    "org/gradle/ivy/.*",
    "org/gradle/jvm/.*",
    "org/gradle/language/.*",
    "org/gradle/maven/.*",
    "org/gradle/nativeplatform/.*",
    "org/gradle/normalization/.*",
    "org/gradle/platform/.*",
    "org/gradle/plugin/devel/.*",
    "org/gradle/plugin/use/",
    "org/gradle/plugin/management/",
    "org/gradle/plugins/.*",
    "org/gradle/process/.*",
    "org/gradle/testfixtures/.*",
    "org/gradle/testing/jacoco/.*",
    "org/gradle/tooling/.*",
    "org/gradle/swiftpm/.*",
    "org/gradle/model/.*",
    "org/gradle/testkit/.*",
    "org/gradle/testing/.*",
    "org/gradle/vcs/.*",
    "org/gradle/work/.*",
    "org/gradle/workers/.*",
    "org/gradle/util/.*",
  )
]

DEFAULT_IGNORED_PACKAGES: List[Pattern[str]] = [re.compile(".*/internal/.*")]


def package_pattern(dotted_prefix: str) -> Pattern[str]:
  """
  Compiles a deny pattern matching a package and all of its sub-packages.

  Args:
      dotted_prefix: e.g. ``org.gradle.api.experimental``.

  Returns:
      Pattern: Full-match pattern over slash-separated packages with a trailing slash.
  """
  return re.compile(re.escape(dotted_prefix.strip().replace(".", "/")) + "/.*")


class ApiSurfaceClassifier:
  """
  Allow/deny policy for public API types, with a per-instance verdict cache.

  The cache is a plain dict and is not thread-safe; use one classifier per
  analysis run.
  """

  def __init__(self, ignored_packages: Iterable[str] = (), ignored_types: Iterable[str] = ()):
    """
    Args:
        ignored_packages: Dotted package prefixes excluded together with their sub-packages.
        ignored_types: Fully qualified dotted type names to exclude.
    """
    self.ignored_packages: List[Pattern[str]] = DEFAULT_IGNORED_PACKAGES + [
      package_pattern(p) for p in ignored_packages
    ]
    self.ignored_types = frozenset(internal_name(t.strip()) for t in ignored_types)
    self._verdicts: Dict[TypeDescriptor, bool] = {}

  def include_type(self, type_: TypeDescriptor) -> bool:
    """
    Checks whether a type is part of the public API surface.

    Args:
        type_: The type to classify.

    Returns:
        bool: True if the type's package is allow-listed and not denied.
    """
    verdict = self._verdicts.get(type_)
    if verdict is None:
      verdict = self._evaluate(type_)
      self._verdicts[type_] = verdict
    return verdict

  def _evaluate(self, type_: TypeDescriptor) -> bool:
    package = type_.package
    if package is None:
      return False
    if type_.name in self.ignored_types:
      return False

    package_with_slash = package + "/"
    return any(p.fullmatch(package_with_slash) for p in PUBLIC_API_PACKAGES) and not any(
      p.fullmatch(package_with_slash) for p in self.ignored_packages
    )
