"""
Entry point for module execution (``python -m propaudit``).

This module delegates execution to the CLI handler in ``propaudit.cli.__main__``.
"""

import sys
from propaudit.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
