from .report import handle_report
from .snapshot import handle_snapshot

__all__ = [
  "handle_report",
  "handle_snapshot",
]
