"""
Errors raised by the type-resolution service.
"""

from pathlib import Path
from typing import Optional, Union


class ResolutionError(Exception):
  """
  Raised when a classpath entry cannot be opened or holds unreadable content.

  Attributes:
      path: The offending classpath entry (or archive member), if known.
  """

  def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
    super().__init__(message if path is None else f"{message}: {path}")
    self.path = path


class ClassFormatError(ResolutionError):
  """Raised when class file bytes do not follow the class file format."""
