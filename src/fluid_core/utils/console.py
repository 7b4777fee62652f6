"""
Logging and Console Utilities.

All diagnostics of fluid-core are emitted through the standard `logging`
library on the `fluid_core` logger hierarchy, rendered by `rich`.

The rich Console is held behind a proxy so the output destination can be
swapped at runtime via `set_console` (e.g. a recording console inside a web
request or a test) while modules keep importing the same `console` object.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
    PACKAGE_LOGGER (str): Name of the logger every module logs beneath.
"""

import logging
from typing import Any, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

PACKAGE_LOGGER = "fluid_core"

_THEME = Theme(
  {
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "helper": "bold magenta",
    "identifier": "bold blue",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  When the backend changes, the proxy also re-attaches the `RichHandler`
  of the package logger so that `logging` output follows the new console.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh stderr console."""
    self._backend = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    """The currently active Rich Console."""
    return self._backend

  def _configure_logging(self) -> None:
    # Only one RichHandler per package logger, bound to the active backend
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    logger.addHandler(rich_handler)
    if logger.level == logging.NOTSET:
      logger.setLevel(logging.WARNING)

  def print(self, *args: Any, **kwargs: Any) -> None:
    """Forwards `print` calls to the active backend."""
    self._backend.print(*args, **kwargs)

  def export_text(self, **kwargs: Any) -> str:
    """Forwards `export_text` (useful for log capturing)."""
    return self._backend.export_text(**kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Global helper to reset logging and console to stderr."""
  console.reset()


def get_console() -> Console:
  """
  Retrieves the currently active console backend.

  Returns:
      Console: The active Rich Console.
  """
  return console.backend


def set_log_level(level: Union[int, str]) -> None:
  """
  Sets the threshold of the package logger.

  Args:
      level (Union[int, str]): A `logging` level number or name (e.g. "DEBUG").
  """
  if isinstance(level, str):
    level = level.upper()
  logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def _logger() -> logging.Logger:
  return logging.getLogger(PACKAGE_LOGGER)


def log_debug(msg: str) -> None:
  """Logs a debug message on the package logger."""
  _logger().debug(msg, extra={"markup": True})


def log_info(msg: str) -> None:
  """Logs an informational message on the package logger."""
  _logger().info(msg, extra={"markup": True})


def log_warning(msg: str) -> None:
  """Logs a warning message on the package logger."""
  _logger().warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """Logs an error message on the package logger."""
  _logger().error(f"❌ {msg}", extra={"markup": True})
