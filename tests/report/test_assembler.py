"""
Tests for Markdown report assembly.
"""

from propaudit.analysis.api_filter import ApiSurfaceClassifier
from propaudit.analysis.consistency import AnalysisResult
from propaudit.analysis.surface import Summary
from propaudit.report.assembler import ReportAssembler
from propaudit.report.generator import analyze_hierarchy

EMPTY_REPORT = """
## Summary

- Packages: 0
- Types: 0
- Methods: 0
- Properties: 0

## Setters without getters


## Properties with inconsistent getter/setter types


## Properties with consistent getter/setter types, but with additional setter types


## Properties with `propertyName()` setters


## Fluent setters


## Lazy properties with non-abstract getters

"""


def test_empty_report_lists_every_header():
  result = AnalysisResult(summary=Summary(packages=0, types=0, methods=0, properties=0))
  assert ReportAssembler().render(result) == EMPTY_REPORT


def test_full_report(api):
  api.type("org.gradle.api.provider.Provider", interface=True)
  api.type("org.gradle.api.file.ConfigurableFileCollection", interface=True)
  task = api.type("org.gradle.api.tasks.Copy")
  api.method(task, "<init>")
  api.method(task, "getName", returns="String")
  api.method(task, "setName", ["String"])
  api.method(task, "setName", ["Object"])
  api.method(task, "getTimeout", returns="long")
  api.method(task, "setTimeout", ["int"])
  api.method(task, "name", ["String"])
  api.method(task, "setMode", ["int"], returns="org.gradle.api.tasks.Copy")
  api.method(task, "getSource", returns="org.gradle.api.file.ConfigurableFileCollection")

  result = analyze_hierarchy(api.build(), ApiSurfaceClassifier())
  report = ReportAssembler().render(result)

  assert report == """
## Summary

- Packages: 3
- Types: 3
- Methods: 9
- Properties: 4

## Setters without getters

- `Copy Copy.setMode(int)`

## Properties with inconsistent getter/setter types

- `long Copy.getTimeout()` (setter: `int`)

## Properties with consistent getter/setter types, but with additional setter types

- `String Copy.getName()` (setter: `Object`)

## Properties with `propertyName()` setters

- `void Copy.name(String)`

## Fluent setters

- `Copy Copy.setMode(int)`

## Lazy properties with non-abstract getters

- `ConfigurableFileCollection Copy.getSource()`
"""
