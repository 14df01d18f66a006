"""
Main Entry Point for propaudit CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `propaudit.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from propaudit.cli import commands
from propaudit.utils.console import set_verbose
from propaudit import __version__


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="propaudit: Public API property consistency report")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: REPORT ---
  cmd_report = subparsers.add_parser("report", help="Analyse a classpath and write the Markdown report")
  cmd_report.add_argument("classpath", type=Path, nargs="+", help="Jars, jmods, class directories or JSON snapshots")
  cmd_report.add_argument("--out", type=Path, default=None, help="Output file (default: stdout)")
  cmd_report.add_argument(
    "--ignore-package",
    dest="ignored_packages",
    action="append",
    default=[],
    help="Dotted package prefix to exclude from the API (repeatable)",
  )
  cmd_report.add_argument(
    "--ignore-type",
    dest="ignored_types",
    action="append",
    default=[],
    help="Fully qualified type name to exclude from the API (repeatable)",
  )
  cmd_report.add_argument(
    "--baseline",
    type=Path,
    action="append",
    default=None,
    help="Standard-library artifact loaded before the classpath (repeatable, overrides config)",
  )

  # --- Command: SNAPSHOT ---
  cmd_snap = subparsers.add_parser("snapshot", help="Capture a resolved classpath as a JSON snapshot")
  cmd_snap.add_argument("classpath", type=Path, nargs="+", help="Jars, jmods or class directories")
  cmd_snap.add_argument("--out", type=Path, required=True, help="Output JSON file")
  cmd_snap.add_argument(
    "--api-only",
    action="store_true",
    help="Keep only public API types and their super types",
  )
  cmd_snap.add_argument("--baseline", type=Path, action="append", default=None, help="Standard-library artifact")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "report":
    return commands.handle_report(
      args.classpath,
      args.out,
      args.ignored_packages,
      args.ignored_types,
      args.baseline,
    )

  elif args.command == "snapshot":
    return commands.handle_snapshot(args.classpath, args.out, args.api_only, args.baseline)

  return 0


if __name__ == "__main__":
  sys.exit(main())
