"""
CLI Command Handlers Facade.

Re-exports handlers from `propaudit.cli.handlers` so the entry point and tests
patch a single module.
"""

from propaudit.cli.handlers.report import handle_report
from propaudit.cli.handlers.snapshot import handle_snapshot

__all__ = [
  "handle_report",
  "handle_snapshot",
]
