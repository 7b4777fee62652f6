"""
View Helper Invocation Node.

`ViewHelperNode` is the syntax tree node behind every view helper tag. When
evaluated it:

1.  Creates a fresh view helper through the context's object factory.
2.  Evaluates each declared argument (or takes its default), converting
    "boolean" arguments, while the argument evaluation mode is active.
3.  Binds arguments, variable container, controller context and itself onto
    the helper; child nodes and the rendering context too if the helper
    declares `Capability.CHILD_NODE_ACCESS`.
4.  Runs `validate_arguments()`, `initialize()` and `render()`. A
    `ViewHelperException` from `render()` degrades to its message text.
5.  Verifies the helper left the variable container's identifiers as it
    found them, raising `ContextLeakError` otherwise.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING
from rich.markup import escape

from fluid_core.config import get_config
from fluid_core.core.conversion import convert_argument_value
from fluid_core.core.nodes import AbstractNode
from fluid_core.enums import Capability
from fluid_core.errors import ContextLeakError, ViewHelperException
from fluid_core.utils.console import log_debug, log_warning
from fluid_core.viewhelpers.arguments import ViewHelperArguments

if TYPE_CHECKING:
  from fluid_core.core.rendering_context import RenderingContext


class ViewHelperNode(AbstractNode):
  """
  Node which calls the view helper associated with it.

  Attributes:
      view_helper_name (str): Identifier resolved by the object factory.
      arguments (Dict[str, AbstractNode]): Argument name -> unevaluated expression.
  """

  def __init__(self, view_helper_name: str, arguments: Optional[Dict[str, AbstractNode]] = None):
    """
    Initializes the node. No validation happens here; unknown helpers and
    malformed arguments surface on evaluation.

    Args:
        view_helper_name (str): Identifier of the view helper.
        arguments (Optional[Dict[str, AbstractNode]]): Argument expressions, each independently evaluable.
    """
    super().__init__()
    self.view_helper_name = view_helper_name
    self.arguments: Dict[str, AbstractNode] = dict(arguments or {})

  def get_view_helper_name(self) -> str:
    return self.view_helper_name

  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    """
    Calls the view helper and returns its output.

    Args:
        rendering_context: Context to evaluate against; defaults to the bound one.

    Returns:
        Any: The render result, or the message of a `ViewHelperException` raised while rendering.

    Raises:
        MissingContextError: If no rendering context is available.
        ExtensionResolutionError: If the view helper cannot be created.
        ArgumentValidationError: If the helper rejects its arguments.
        ContextLeakError: If rendering changed the visible variable identifiers.
    """
    context = self._require_context(rendering_context)
    object_factory = context.get_object_factory()
    variable_container = context.get_template_variable_container()

    view_helper = object_factory.create(self.view_helper_name)
    argument_definitions = view_helper.prepare_arguments()

    context_variables = variable_container.get_all_identifiers()

    evaluated_arguments: Dict[str, Any] = {}
    render_method_parameters: List[Any] = []
    with context.argument_evaluation():
      for argument_name, argument_definition in argument_definitions.items():
        if argument_name in self.arguments:
          argument_value = self.arguments[argument_name]
          argument_value.set_rendering_context(context)
          evaluated_arguments[argument_name] = convert_argument_value(
            argument_value.evaluate(), argument_definition.get_type()
          )
        else:
          evaluated_arguments[argument_name] = argument_definition.get_default_value()
        if argument_definition.is_method_parameter:
          render_method_parameters.append(evaluated_arguments[argument_name])

    self._report_unknown_arguments(argument_definitions)

    view_helper_arguments = object_factory.create(ViewHelperArguments, evaluated_arguments)
    view_helper.set_arguments(view_helper_arguments)
    view_helper.set_template_variable_container(variable_container)
    view_helper.set_controller_context(context.get_controller_context())
    view_helper.set_view_helper_node(self)

    if view_helper.supports(Capability.CHILD_NODE_ACCESS):
      view_helper.set_child_nodes(self.child_nodes)
      view_helper.set_rendering_context(context)

    view_helper.validate_arguments()
    view_helper.initialize()
    try:
      output = view_helper.render(*render_method_parameters)
    except ViewHelperException as exception:
      log_debug(f"View helper '{self.view_helper_name}' failed to render: {escape(str(exception))}")
      output = str(exception)

    self._check_context_variables(context_variables, variable_container.get_all_identifiers())
    return output

  def _report_unknown_arguments(self, argument_definitions: Dict[str, Any]) -> None:
    unknown = [name for name in self.arguments if name not in argument_definitions]
    if unknown and get_config().warn_unknown_arguments:
      log_warning(
        f"View helper '{self.view_helper_name}' does not declare the argument(s) {', '.join(unknown)}; ignoring them."
      )

  def _check_context_variables(self, before: List[str], after: List[str]) -> None:
    """
    Compares the identifier snapshots taken around the view helper call.

    The snapshots are compared as ordered lists, so a reordering of
    identifiers counts as a change as well.

    Raises:
        ContextLeakError: If the snapshots differ.
    """
    if before == after:
      return
    changed = [identifier for identifier in before if identifier not in after]
    changed += [identifier for identifier in after if identifier not in before]
    if not changed:
      changed = [identifier for position, identifier in enumerate(after) if before[position] != identifier]
    raise ContextLeakError(self.view_helper_name, changed)

  def __repr__(self) -> str:
    return f"ViewHelperNode({self.view_helper_name!r}, arguments={sorted(self.arguments)})"
