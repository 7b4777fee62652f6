"""
Syntax Tree Nodes.

Defines the node types a template parser produces:
    - AbstractNode       -> base contract (children, rendering context, evaluate)
    - RootNode           -> container of a whole template or of a section
    - TextNode           -> literal template text
    - LiteralNode        -> an already-typed value (numbers, lists, ...)
    - ObjectAccessorNode -> `{user.name}`-style variable lookups

`ViewHelperNode` lives in its own module.

Every node evaluates against a `RenderingContext`, which is either passed
explicitly to `evaluate()` or bound beforehand with `set_rendering_context()`.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, TYPE_CHECKING

from fluid_core.errors import MissingContextError

if TYPE_CHECKING:
  from fluid_core.core.rendering_context import RenderingContext


class AbstractNode(ABC):
  """
  Abstract base class for all syntax tree nodes.

  Attributes:
      child_nodes (List[AbstractNode]): Owned children in document order.
      rendering_context (Optional[RenderingContext]): Late-bound, borrowed context.
  """

  def __init__(self) -> None:
    self.child_nodes: List["AbstractNode"] = []
    self.rendering_context: Optional["RenderingContext"] = None

  def add_child_node(self, child_node: "AbstractNode") -> None:
    self.child_nodes.append(child_node)

  def get_child_nodes(self) -> List["AbstractNode"]:
    """Returns the child list itself (not a copy)."""
    return self.child_nodes

  def set_rendering_context(self, rendering_context: "RenderingContext") -> None:
    self.rendering_context = rendering_context

  def _require_context(self, rendering_context: Optional["RenderingContext"]) -> "RenderingContext":
    """
    Resolves the context an evaluation runs against.

    An explicitly passed context is also bound onto the node.

    Raises:
        MissingContextError: If neither an explicit nor a bound context exists.
    """
    if rendering_context is not None:
      self.rendering_context = rendering_context
    if self.rendering_context is None:
      raise MissingContextError(
        f"RenderingContext is null in {type(self).__name__}, but necessary. "
        "If this error appears, please report a bug!"
      )
    return self.rendering_context

  @abstractmethod
  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    """
    Evaluates the node.

    Args:
        rendering_context: Context to evaluate against; defaults to the bound one.

    Returns:
        Any: The node's value.
    """

  def evaluate_child_nodes(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    """
    Evaluates all children and combines their values.

    A single child's value is returned unchanged; several values are
    concatenated as strings. No children evaluate to None.

    Args:
        rendering_context: Context to evaluate against; defaults to the bound one.

    Returns:
        Any: The combined value.
    """
    context = rendering_context if rendering_context is not None else self.rendering_context
    return evaluate_nodes(self.child_nodes, context)


def evaluate_nodes(nodes: Sequence[AbstractNode], rendering_context: Optional["RenderingContext"]) -> Any:
  """
  Evaluates a node sequence in order and combines the results.

  Args:
      nodes: Nodes to evaluate.
      rendering_context: Bound onto each node before evaluation when given.

  Returns:
      Any: None for no nodes, the single value for one node, else the concatenated string.
  """
  output = None
  for node in nodes:
    if rendering_context is not None:
      node.set_rendering_context(rendering_context)
    value = node.evaluate()
    if output is None:
      output = value
    else:
      output = to_output_string(output) + to_output_string(value)
  return output


def to_output_string(value: Any) -> str:
  """Stringifies a node value for concatenation; None becomes ''."""
  if value is None:
    return ""
  return str(value)


class RootNode(AbstractNode):
  """Container node; evaluates to the combination of its children."""

  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    return self.evaluate_child_nodes(rendering_context)


class TextNode(AbstractNode):
  """
  Literal template text.

  Attributes:
      text (str): The text exactly as it appeared in the template.
  """

  def __init__(self, text: str):
    super().__init__()
    if not isinstance(text, str):
      raise TypeError(f"Text node requires a string, got {type(text).__name__}.")
    self.text = text

  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> str:
    return self.text

  def __repr__(self) -> str:
    return f"TextNode({self.text!r})"


class LiteralNode(AbstractNode):
  """A value that needs no further evaluation (numbers, arrays, booleans)."""

  def __init__(self, value: Any):
    super().__init__()
    self.value = value

  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    return self.value

  def __repr__(self) -> str:
    return f"LiteralNode({self.value!r})"


class ObjectAccessorNode(AbstractNode):
  """
  Resolves a dotted path against the template variable container.

  The first segment names a variable; each following segment is looked up
  as a mapping key first, then as an attribute. Any missing segment makes
  the whole path evaluate to None.

  Example:
      `user.address.city` -> container["user"]["address"].city
  """

  def __init__(self, object_path: str):
    super().__init__()
    self.object_path = object_path

  def evaluate(self, rendering_context: Optional["RenderingContext"] = None) -> Any:
    context = self._require_context(rendering_context)
    container = context.get_template_variable_container()

    identifier, *segments = self.object_path.split(".")
    if not container.exists(identifier):
      return None

    current = container.get(identifier)
    for segment in segments:
      current = _get_property(current, segment)
      if current is None:
        return None
    return current

  def __repr__(self) -> str:
    return f"ObjectAccessorNode({self.object_path!r})"


def _get_property(subject: Any, name: str) -> Any:
  if isinstance(subject, dict):
    return subject.get(name)
  if isinstance(subject, (list, tuple)) and name.isdigit():
    index = int(name)
    return subject[index] if index < len(subject) else None
  return getattr(subject, name, None)
