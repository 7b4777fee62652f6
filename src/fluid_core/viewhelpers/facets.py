"""
Optional View Helper Facets.

A facet is declared by mixing in the class here; the mixin adds the matching
`Capability` to the helper's `capabilities`, which is what the invoking node
queries.
"""

from typing import Any, List, Optional, TYPE_CHECKING

from fluid_core.core.nodes import AbstractNode, evaluate_nodes
from fluid_core.enums import Capability

if TYPE_CHECKING:
  from fluid_core.core.rendering_context import RenderingContext


class ChildNodeAccess:
  """
  Facet for helpers that evaluate their own child nodes on demand.

  The invoking node hands over its child list by reference together with
  the full rendering context, so e.g. a loop helper can add an alias
  variable, evaluate the body, and remove the alias again for every item.

  Must precede `AbstractViewHelper` in the bases:

      class ForViewHelper(ChildNodeAccess, AbstractViewHelper): ...

  A subclass assigning `capabilities` in its own body keeps exactly that
  set, which allows opting out of the facet again.
  """

  def __init_subclass__(cls, **kwargs: Any) -> None:
    super().__init_subclass__(**kwargs)
    if "capabilities" in cls.__dict__:
      return
    cls.capabilities = frozenset(getattr(cls, "capabilities", frozenset())) | {Capability.CHILD_NODE_ACCESS}

  def set_child_nodes(self, child_nodes: List[AbstractNode]) -> None:
    self.child_nodes = child_nodes

  def set_rendering_context(self, rendering_context: "RenderingContext") -> None:
    self.rendering_context = rendering_context

  def evaluate_child_nodes(self) -> Any:
    """
    Evaluates the bound child nodes against the bound rendering context.

    Returns:
        Any: Combined output (see `evaluate_nodes`), or None without children.
    """
    child_nodes: Optional[List[AbstractNode]] = getattr(self, "child_nodes", None)
    if not child_nodes:
      return None
    return evaluate_nodes(child_nodes, getattr(self, "rendering_context", None))
