"""
Tests for CLI argument handling and command dispatch.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from propaudit.cli.__main__ import main


@patch("propaudit.cli.commands.handle_report", return_value=0)
def test_report_arguments(mock_handle):
  ret = main(
    [
      "report",
      "a.jar",
      "classes",
      "--out",
      "report.md",
      "--ignore-package",
      "org.gradle.api.experimental",
      "--ignore-package",
      "org.gradle.tooling",
      "--ignore-type",
      "org.gradle.api.Incubating",
    ]
  )

  assert ret == 0
  mock_handle.assert_called_once_with(
    [Path("a.jar"), Path("classes")],
    Path("report.md"),
    ["org.gradle.api.experimental", "org.gradle.tooling"],
    ["org.gradle.api.Incubating"],
    None,
  )


@patch("propaudit.cli.commands.handle_report", return_value=1)
def test_report_exit_code_propagates(mock_handle):
  assert main(["report", "a.jar"]) == 1
  args = mock_handle.call_args[0]
  assert args[1] is None
  assert args[2] == []


@patch("propaudit.cli.commands.handle_snapshot", return_value=0)
def test_snapshot_arguments(mock_handle):
  main(["snapshot", "a.jar", "--out", "api.json", "--api-only", "--baseline", "java.base.jmod"])

  mock_handle.assert_called_once_with([Path("a.jar")], Path("api.json"), True, [Path("java.base.jmod")])


def test_snapshot_requires_out():
  with pytest.raises(SystemExit):
    main(["snapshot", "a.jar"])


def test_version(capsys):
  with pytest.raises(SystemExit) as info:
    main(["--version"])
  assert info.value.code == 0
  assert "0.1.0" in capsys.readouterr().out
