"""
Runtime Configuration Store.

Settings are read from the `[tool.fluid_core]` table of the nearest
`pyproject.toml` and can be overridden by explicit keyword arguments.

Example::

    [tool.fluid_core]
    warn_unknown_arguments = false
    log_level = "DEBUG"

    [tool.fluid_core.view_helpers]
    "format.date" = "myapp.viewhelpers.DateViewHelper"
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from fluid_core.utils.console import set_log_level

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

CONFIG_SECTION = "fluid_core"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for template evaluation.
  """

  warn_unknown_arguments: bool = Field(
    True,
    description="If True, log supplied arguments that the view helper does not declare.",
  )
  log_level: str = Field("WARNING", description="Threshold of the fluid_core logger.")
  view_helpers: Dict[str, str] = Field(
    default_factory=dict,
    description="Map of {view helper name: dotted import path} registered on config-built factories.",
  )

  @field_validator("log_level")
  @classmethod
  def validate_log_level(cls, v: str) -> str:
    """
    Ensures the level is one of the standard `logging` level names.

    Args:
        v (str): Level name in any case.

    Returns:
        str: The upper-cased level name.

    Raises:
        ValueError: If the name is not a known logging level.
    """
    v_clean = v.upper().strip()
    if not isinstance(logging.getLevelName(v_clean), int):
      raise ValueError(f"Unknown log level: '{v}'")
    return v_clean

  @classmethod
  def load(
    cls,
    warn_unknown_arguments: Optional[bool] = None,
    log_level: Optional[str] = None,
    view_helpers: Optional[Dict[str, str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Args:
        warn_unknown_arguments (Optional[bool]): Override for unknown argument warnings.
        log_level (Optional[str]): Override for the log level.
        view_helpers (Optional[Dict[str, str]]): Extra view helper paths, merged over TOML ones.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())

    if warn_unknown_arguments is not None:
      final_warn = warn_unknown_arguments
    else:
      final_warn = toml_config.get("warn_unknown_arguments", True)

    final_level = log_level or toml_config.get("log_level", "WARNING")
    final_helpers = {**toml_config.get("view_helpers", {}), **(view_helpers or {})}

    return cls(
      warn_unknown_arguments=final_warn,
      log_level=final_level,
      view_helpers=final_helpers,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the start directory and its parents for 'pyproject.toml'.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config table and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      with open(toml_path, "rb") as f:
        data = tomllib.load(f)
      return data.get("tool", {}).get(CONFIG_SECTION, {}), parent

  return {}, None


_ACTIVE_CONFIG: Optional[RuntimeConfig] = None


def get_config() -> RuntimeConfig:
  """Returns the process-wide configuration, creating defaults on first use."""
  global _ACTIVE_CONFIG
  if _ACTIVE_CONFIG is None:
    _ACTIVE_CONFIG = RuntimeConfig()
  return _ACTIVE_CONFIG


def set_config(config: Optional[RuntimeConfig]) -> None:
  """
  Installs the process-wide configuration.

  Also applies the configured log level. Passing None restores the defaults
  on the next `get_config()` call.
  """
  global _ACTIVE_CONFIG
  _ACTIVE_CONFIG = config
  if config is not None:
    set_log_level(config.log_level)
