"""
Error Taxonomy.

All exceptions raised by fluid-core derive from `FluidError`. Fatal errors
propagate unmodified to whoever triggered the template render; the only
error recovered inside the package is `ViewHelperException` raised from a
view helper's `render()` call, whose message replaces the helper's output.

Fatal errors additionally inherit from the closest builtin exception so that
callers unaware of this package can still catch them sensibly.
"""

from typing import Iterable, Optional


class FluidError(Exception):
  """
  Base class for every error raised by fluid-core.

  Attributes:
      code (Optional[int]): Stable numeric identifier of the failure site.
  """

  code: Optional[int] = None

  def __init__(self, message: str = "", code: Optional[int] = None):
    super().__init__(message)
    if code is not None:
      self.code = code


class MissingContextError(FluidError, RuntimeError):
  """
  No rendering context was available when a node was evaluated.

  Signals a framework-integration bug, not a template-authoring bug.
  """

  code = 1242669031


class ExtensionResolutionError(FluidError, LookupError):
  """The object factory could not resolve or construct a view helper."""

  def __init__(self, identifier: str, reason: str = ""):
    self.identifier = identifier
    message = f"Could not create view helper '{identifier}'"
    if reason:
      message += f": {reason}"
    super().__init__(message)


class ArgumentDefinitionError(FluidError, ValueError):
  """A view helper declared its arguments inconsistently."""


class ArgumentValidationError(FluidError, ValueError):
  """An evaluated argument failed the view helper's own validation."""


class VariableContainerError(FluidError, ValueError):
  """Invalid access to the template variable container."""


class ViewHelperException(FluidError):
  """
  Raised by view helpers from within `render()`.

  Caught by the invoking `ViewHelperNode`, which substitutes the message
  for the rendered output so that the surrounding template keeps rendering.
  """


class ContextLeakError(FluidError, RuntimeError):
  """
  A view helper changed the identifiers visible in the variable container.

  Attributes:
      view_helper_name (str): The offending view helper.
      identifiers (List[str]): The identifiers that differ between snapshots.
  """

  code = 1236081302

  def __init__(self, view_helper_name: str, identifiers: Iterable[str]):
    self.view_helper_name = view_helper_name
    self.identifiers = list(identifiers)
    super().__init__(
      f'The following context variable has been changed after the view helper "{view_helper_name}" '
      f"has been called: {', '.join(self.identifiers)}"
    )
