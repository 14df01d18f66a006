"""
Markdown Report Assembly.

Renders an ``AnalysisResult`` into the report document. Sections appear in a
fixed order: Summary, then one section per ``FindingCategory``. Every section is
emitted even when it has no entries.
"""

from typing import List, Protocol

from propaudit.analysis.consistency import AnalysisResult, Finding
from propaudit.analysis.surface import Summary
from propaudit.enums import FindingCategory
from propaudit.report.signatures import to_simple_name, to_simple_signature

SUMMARY_HEADER = "Summary"

_TYPE_CATEGORIES = {FindingCategory.INCONSISTENT_TYPES, FindingCategory.ADDITIONAL_SETTER_TYPES}


class TextSink(Protocol):
  """Anything accepting text, e.g. an open file or ``sys.stdout``."""

  def write(self, text: str) -> int: ...


class ReportAssembler:
  """
  Builds the Markdown document line by line.
  """

  def render(self, result: AnalysisResult) -> str:
    """
    Renders the whole report.

    Args:
        result: Summary counts and categorized findings.

    Returns:
        str: The Markdown document.
    """
    lines: List[str] = []
    self._header(lines, SUMMARY_HEADER)
    lines.extend(self.summary_lines(result.summary))

    for category in FindingCategory:
      self._header(lines, category.header)
      lines.extend(self.finding_line(f) for f in result.of(category))

    return "".join(line + "\n" for line in lines)

  def write(self, result: AnalysisResult, sink: TextSink) -> None:
    """
    Renders and writes the report. Errors raised by the sink propagate.
    """
    sink.write(self.render(result))

  @staticmethod
  def summary_lines(summary: Summary) -> List[str]:
    return [
      f"- Packages: {summary.packages}",
      f"- Types: {summary.types}",
      f"- Methods: {summary.methods}",
      f"- Properties: {summary.properties}",
    ]

  @staticmethod
  def finding_line(finding: Finding) -> str:
    line = f"- `{to_simple_signature(finding.method)}`"
    if finding.category in _TYPE_CATEGORIES:
      setter_types = ", ".join(f"`{to_simple_name(t)}`" for t in finding.mismatched_types)
      line += f" (setter: {setter_types})"
    return line

  @staticmethod
  def _header(lines: List[str], title: str) -> None:
    lines.extend(["", f"## {title}", ""])
