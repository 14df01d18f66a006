"""
Runtime Configuration Store.

Settings come from the ``[tool.propaudit]`` table of the nearest
``pyproject.toml`` and are overridden or extended by CLI arguments.

Example::

    [tool.propaudit]
    ignored_packages = ["org.gradle.api.experimental"]
    ignored_types = ["org.gradle.api.Incubating"]
    baseline = ["jdk/jmods/java.base.jmod"]
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from propaudit.analysis.api_filter import ApiSurfaceClassifier
from propaudit.analysis.consistency import DEFAULT_CALLBACK_TYPES, DEFAULT_LAZY_MARKER_TYPES, AnalysisSettings

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

TOOL_SECTION = "propaudit"


class AuditConfig(BaseModel):
  """
  Global configuration container for a report run.
  """

  ignored_packages: List[str] = Field(default_factory=list, description="Dotted package prefixes to exclude.")
  ignored_types: List[str] = Field(default_factory=list, description="Fully qualified type names to exclude.")
  callback_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_CALLBACK_TYPES),
    description="Parameter types exempting propertyName(value) methods.",
  )
  lazy_marker_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_LAZY_MARKER_TYPES),
    description="Lazy value container types whose getters should be abstract.",
  )
  baseline: List[Path] = Field(default_factory=list, description="Standard-library artifacts loaded first.")

  @field_validator("ignored_packages", "ignored_types", "callback_types", "lazy_marker_types")
  @classmethod
  def validate_names(cls, v: List[str]) -> List[str]:
    """
    Strips whitespace and rejects blank names.

    Args:
        v (List[str]): Raw names.

    Returns:
        List[str]: Cleaned names.

    Raises:
        ValueError: If a name is empty.
    """
    cleaned = [item.strip() for item in v]
    if any(not item for item in cleaned):
      raise ValueError("Names must not be empty")
    return cleaned

  def create_classifier(self) -> ApiSurfaceClassifier:
    """Builds a fresh classifier (with its own cache) from the deny lists."""
    return ApiSurfaceClassifier(self.ignored_packages, self.ignored_types)

  @property
  def analysis_settings(self) -> AnalysisSettings:
    return AnalysisSettings(callback_types=self.callback_types, lazy_marker_types=self.lazy_marker_types)

  @classmethod
  def load(
    cls,
    ignored_packages: Optional[List[str]] = None,
    ignored_types: Optional[List[str]] = None,
    baseline: Optional[List[Path]] = None,
    search_path: Optional[Path] = None,
  ) -> "AuditConfig":
    """
    Loads configuration from pyproject.toml and applies CLI arguments.

    Deny lists from the CLI are appended to the TOML ones. A CLI baseline
    replaces the TOML baseline.

    Args:
        ignored_packages (Optional[List[str]]): Extra package prefixes to exclude.
        ignored_types (Optional[List[str]]): Extra type names to exclude.
        baseline (Optional[List[Path]]): Override for baseline artifacts.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        AuditConfig: The fully resolved configuration object.

    Raises:
        ValueError: If the merged settings fail validation.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    # 1. Deny lists (merged)
    final_packages = _toml_list(toml_config, "ignored_packages") + list(ignored_packages or [])
    final_types = _toml_list(toml_config, "ignored_types") + list(ignored_types or [])

    # 2. Baseline (CLI wins), TOML paths are relative to the TOML file
    if baseline:
      final_baseline = [Path(p).resolve() for p in baseline]
    else:
      raw_paths = _toml_list(toml_config, "baseline")
      root = toml_dir or start_dir
      final_baseline = [(root / Path(p)).resolve() for p in raw_paths]

    values: Dict[str, Any] = {
      "ignored_packages": final_packages,
      "ignored_types": final_types,
      "baseline": final_baseline,
    }
    # 3. Check tuning (TOML only)
    for key in ("callback_types", "lazy_marker_types"):
      if key in toml_config:
        values[key] = toml_config[key]

    try:
      return cls(**values)
    except ValidationError as e:
      raise ValueError(f"Configuration validation failed: {e}") from e


def _toml_list(toml_config: Dict[str, Any], key: str) -> List[Any]:
  """
  Reads a list-valued TOML setting.

  Raises:
      ValueError: If the setting is present but is not an array.
  """
  value = toml_config.get(key, [])
  if not isinstance(value, list):
    raise ValueError(f"Configuration validation failed: tool.{TOOL_SECTION}.{key} must be an array, got {value!r}")
  return list(value)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", toml_path, e)
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
