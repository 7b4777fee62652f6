"""
Rendering Context.

Bundles the services shared by every node of one template render pass:
the object factory, the template variable container and the controller
context. It also carries the "argument evaluation mode" side channel, which
is active while a view helper's arguments are being evaluated (collaborators
may use it to e.g. skip output escaping of argument values).
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, TYPE_CHECKING

from fluid_core.core.variables import TemplateVariableContainer

if TYPE_CHECKING:
  from fluid_core.core.object_factory import ObjectFactory


@dataclass
class ControllerContext:
  """
  Request-level data made available to view helpers.

  Attributes:
      request_arguments (Dict[str, Any]): Arguments of the current request.
      format (str): Requested output format (e.g. 'html', 'json').
  """

  request_arguments: Dict[str, Any] = field(default_factory=dict)
  format: str = "html"


class RenderingContext:
  """
  Context object threaded through one evaluation of a syntax tree.

  The context is borrowed by nodes, never owned; it outlives every single
  node evaluation. It is not thread-safe: evaluations sharing a context must
  not interleave.
  """

  def __init__(
    self,
    object_factory: Optional["ObjectFactory"] = None,
    variable_container: Optional[TemplateVariableContainer] = None,
    controller_context: Optional[ControllerContext] = None,
  ):
    """
    Initializes the rendering context.

    Args:
        object_factory: Factory used to instantiate view helpers and argument sets.
            Defaults to a factory backed by the global view helper registry.
        variable_container: Variables visible to template expressions.
        controller_context: Request-level data for view helpers.
    """
    if object_factory is None:
      from fluid_core.core.object_factory import ObjectFactory

      object_factory = ObjectFactory()

    self._object_factory = object_factory
    self._variable_container = variable_container if variable_container is not None else TemplateVariableContainer()
    self._controller_context = controller_context if controller_context is not None else ControllerContext()
    self._argument_evaluation_mode = False

  def get_object_factory(self) -> "ObjectFactory":
    return self._object_factory

  def set_object_factory(self, object_factory: "ObjectFactory") -> None:
    self._object_factory = object_factory

  def get_template_variable_container(self) -> TemplateVariableContainer:
    return self._variable_container

  def set_template_variable_container(self, variable_container: TemplateVariableContainer) -> None:
    self._variable_container = variable_container

  def get_controller_context(self) -> ControllerContext:
    return self._controller_context

  def set_controller_context(self, controller_context: ControllerContext) -> None:
    self._controller_context = controller_context

  def get_argument_evaluation_mode(self) -> bool:
    """True while view helper arguments are being evaluated."""
    return self._argument_evaluation_mode

  def set_argument_evaluation_mode(self, mode: bool) -> None:
    self._argument_evaluation_mode = bool(mode)

  @contextmanager
  def argument_evaluation(self) -> Iterator["RenderingContext"]:
    """
    Scoped activation of the argument evaluation mode.

    The previous mode is restored on exit, also when the body raises. At the
    outermost level this resets the mode to False; nested scopes (a view
    helper inside another helper's argument) hand the outer scope back intact.

    Yields:
        RenderingContext: This context.
    """
    previous = self._argument_evaluation_mode
    self._argument_evaluation_mode = True
    try:
      yield self
    finally:
      self._argument_evaluation_mode = previous
