"""
View Helper Base Class.

A view helper is the Python implementation behind a template tag such as
`<f:format.date date="{post.created}" />`. One instance is created per
invocation by the `ObjectFactory`, configured by the invoking
`ViewHelperNode` and then rendered.

Arguments are declared in two complementary ways:
1.  `initialize_arguments()` calling `register_argument(...)` for named
    arguments that are read from `self.arguments`.
2.  Parameters of `render()` itself. They are registered automatically as
    method parameters and receive their values positionally.

Example:
    @register_view_helper("format.upper")
    class UpperViewHelper(AbstractViewHelper):
      def initialize_arguments(self):
        self.register_argument("strip", ArgumentType.BOOLEAN, "Trim whitespace first", default_value=False)

      def render(self, value: str = ""):
        text = value.strip() if self.arguments["strip"] else value
        return text.upper()
"""

import inspect
import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Dict, FrozenSet, Optional, Union, TYPE_CHECKING

from fluid_core.core.nodes import AbstractNode
from fluid_core.enums import ArgumentType, Capability
from fluid_core.errors import ArgumentDefinitionError, ArgumentValidationError
from fluid_core.viewhelpers.arguments import ArgumentDefinition, ViewHelperArguments

if TYPE_CHECKING:
  from fluid_core.core.rendering_context import ControllerContext
  from fluid_core.core.variables import TemplateVariableContainer

# Annotation (object or its string form) -> declared type tag
_ANNOTATION_TYPES: Dict[Any, ArgumentType] = {
  bool: ArgumentType.BOOLEAN,
  str: ArgumentType.STRING,
  int: ArgumentType.INTEGER,
  float: ArgumentType.FLOAT,
  list: ArgumentType.ARRAY,
  tuple: ArgumentType.ARRAY,
  dict: ArgumentType.ARRAY,
  "bool": ArgumentType.BOOLEAN,
  "str": ArgumentType.STRING,
  "int": ArgumentType.INTEGER,
  "float": ArgumentType.FLOAT,
  "list": ArgumentType.ARRAY,
  "tuple": ArgumentType.ARRAY,
  "dict": ArgumentType.ARRAY,
}


def _matches_type(value: Any, type_tag: str) -> bool:
  """Checks a non-None value against the built-in type tags. Unknown tags always match."""
  if type_tag == ArgumentType.STRING.value:
    return isinstance(value, str)
  if type_tag == ArgumentType.BOOLEAN.value:
    return isinstance(value, bool)
  if type_tag == ArgumentType.INTEGER.value:
    return isinstance(value, int) and not isinstance(value, bool)
  if type_tag == ArgumentType.FLOAT.value:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
  if type_tag == ArgumentType.ARRAY.value:
    return isinstance(value, (Mapping, Iterable)) and not isinstance(value, (str, bytes))
  return True


class AbstractViewHelper(ABC):
  """
  Base class for all view helpers.

  Attributes:
      capabilities (FrozenSet[Capability]): Facets this helper supports.
      arguments (ViewHelperArguments): Evaluated arguments of the current invocation.
      template_variable_container (Optional[TemplateVariableContainer]): Shared variables.
      controller_context (Optional[ControllerContext]): Request-level data.
  """

  capabilities: FrozenSet[Capability] = frozenset()

  def __init__(self) -> None:
    self.arguments: ViewHelperArguments = ViewHelperArguments()
    self.template_variable_container: Optional["TemplateVariableContainer"] = None
    self.controller_context: Optional["ControllerContext"] = None
    self._view_helper_node: Optional[weakref.ReferenceType] = None
    self._registered_arguments: Dict[str, ArgumentDefinition] = {}
    self._argument_definitions: Optional[Dict[str, ArgumentDefinition]] = None

  # --- Capabilities ---

  def supports(self, capability: Capability) -> bool:
    """
    Explicit capability query used by the invoking node.

    Args:
        capability (Capability): The facet in question.

    Returns:
        bool: True if the helper declares the facet.
    """
    return capability in type(self).capabilities

  # --- Argument declaration ---

  def initialize_arguments(self) -> None:
    """Hook for subclasses: call `register_argument()` here."""

  def register_argument(
    self,
    name: str,
    type: Union[ArgumentType, str],
    description: str = "",
    required: bool = False,
    default_value: Any = None,
  ) -> "AbstractViewHelper":
    """
    Declares a named argument.

    Args:
        name: Argument name used in templates.
        type: Declared type tag.
        description: Human-readable description.
        required: If True, a None value fails validation.
        default_value: Value used when the template omits the argument.

    Returns:
        AbstractViewHelper: self, for chaining.

    Raises:
        ArgumentDefinitionError: If the name is already registered.
    """
    if name in self._registered_arguments:
      raise ArgumentDefinitionError(
        f'Argument "{name}" has already been defined for {type_name(self)}, thus it should not be defined again.'
      )
    self._registered_arguments[name] = ArgumentDefinition(
      name=name, type=type, description=description, required=required, default_value=default_value
    )
    return self

  def override_argument(
    self,
    name: str,
    type: Union[ArgumentType, str],
    description: str = "",
    required: bool = False,
    default_value: Any = None,
  ) -> "AbstractViewHelper":
    """
    Replaces a previously registered argument, e.g. one declared by a parent class.

    Raises:
        ArgumentDefinitionError: If no argument of that name exists.
    """
    if name not in self._registered_arguments:
      raise ArgumentDefinitionError(
        f'Argument "{name}" has not been defined for {type_name(self)}, thus it can\'t be overridden.'
      )
    self._registered_arguments[name] = ArgumentDefinition(
      name=name, type=type, description=description, required=required, default_value=default_value
    )
    return self

  def prepare_arguments(self) -> Dict[str, ArgumentDefinition]:
    """
    Returns the authoritative argument schema of this helper.

    Registered arguments come first (in registration order), followed by
    the parameters of `render()` in signature order. The result is cached
    on the instance.

    Returns:
        Dict[str, ArgumentDefinition]: Ordered mapping of name -> definition.

    Raises:
        ArgumentDefinitionError: If a render parameter repeats a registered
            name or is keyword-only.
    """
    if self._argument_definitions is None:
      self.initialize_arguments()
      definitions = dict(self._registered_arguments)
      for name, definition in self._render_method_arguments().items():
        if name in definitions:
          raise ArgumentDefinitionError(
            f'Argument "{name}" of {type_name(self)} is both registered and a render() parameter.'
          )
        definitions[name] = definition
      self._argument_definitions = definitions
    return self._argument_definitions

  def _render_method_arguments(self) -> Dict[str, ArgumentDefinition]:
    definitions: Dict[str, ArgumentDefinition] = {}
    for param in inspect.signature(self.render).parameters.values():
      if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
        continue
      if param.kind == inspect.Parameter.KEYWORD_ONLY:
        # render() receives its parameters positionally
        raise ArgumentDefinitionError(
          f'Parameter "{param.name}" of {type_name(self)}.render() is keyword-only; '
          "declare it positionally or register it in initialize_arguments()."
        )
      has_default = param.default is not inspect.Parameter.empty
      definitions[param.name] = ArgumentDefinition(
        name=param.name,
        type=_ANNOTATION_TYPES.get(param.annotation, ArgumentType.MIXED),
        required=not has_default,
        default_value=param.default if has_default else None,
        is_method_parameter=True,
      )
    return definitions

  # --- Binding (called by the invoking node) ---

  def set_arguments(self, arguments: ViewHelperArguments) -> None:
    self.arguments = arguments

  def set_template_variable_container(self, container: "TemplateVariableContainer") -> None:
    self.template_variable_container = container

  def set_controller_context(self, controller_context: "ControllerContext") -> None:
    self.controller_context = controller_context

  def set_view_helper_node(self, node: AbstractNode) -> None:
    """Stores a weak back-reference to the invoking node."""
    self._view_helper_node = weakref.ref(node)

  def get_view_helper_node(self) -> Optional[AbstractNode]:
    """Returns the invoking node, or None once it has been discarded."""
    if self._view_helper_node is None:
      return None
    return self._view_helper_node()

  def render_children(self) -> Any:
    """
    Evaluates the child nodes of the invoking node.

    Returns:
        Any: The combined child output, or None without an invoking node.
    """
    node = self.get_view_helper_node()
    if node is None:
      return None
    return node.evaluate_child_nodes()

  # --- Lifecycle ---

  def validate_arguments(self) -> None:
    """
    Checks the evaluated arguments against the declared schema.

    Raises:
        ArgumentValidationError: If a required argument is None, or a value
            does not match its built-in type tag.
    """
    for name, definition in self.prepare_arguments().items():
      value = self.arguments.get(name)
      if value is None:
        if definition.required:
          raise ArgumentValidationError(f'Required argument "{name}" was not supplied to {type_name(self)}.')
        continue
      if not _matches_type(value, definition.type):
        raise ArgumentValidationError(
          f'The argument "{name}" was registered with type "{definition.type}", '
          f'but is of type "{type(value).__name__}" in view helper "{type_name(self)}".'
        )

  def initialize(self) -> None:
    """Hook called after validation, right before `render()`."""

  @abstractmethod
  def render(self, *args: Any) -> Any:
    """Produces the helper's output. Subclasses declare their own parameters."""


def type_name(view_helper: AbstractViewHelper) -> str:
  return type(view_helper).__qualname__
