"""
fluid-core Package.

The evaluation core of a Fluid-style template engine: syntax tree nodes that
invoke pluggable view helpers with typed arguments, optional child-node
access, and isolation checks on the shared template variables.

Parsing template text into nodes is left to the host; this package evaluates
the resulting tree.

Usage
-----

.. code-block:: python

    from fluid_core import (
      AbstractViewHelper,
      ChildNodeAccess,
      LiteralNode,
      RenderingContext,
      TextNode,
      ViewHelperNode,
      register_view_helper,
    )

    @register_view_helper("repeat")
    class RepeatViewHelper(ChildNodeAccess, AbstractViewHelper):
      def render(self, count: int = 1):
        return "".join(str(self.evaluate_child_nodes()) for _ in range(count))

    node = ViewHelperNode("repeat", {"count": LiteralNode(3)})
    node.add_child_node(TextNode("x"))
    print(node.evaluate(RenderingContext()))
    # xxx
"""

from fluid_core.config import RuntimeConfig, get_config, set_config
from fluid_core.core.nodes import AbstractNode, LiteralNode, ObjectAccessorNode, RootNode, TextNode
from fluid_core.core.object_factory import ObjectFactory, register_view_helper
from fluid_core.core.rendering_context import ControllerContext, RenderingContext
from fluid_core.core.variables import TemplateVariableContainer
from fluid_core.core.view_helper_node import ViewHelperNode
from fluid_core.enums import ArgumentType, Capability
from fluid_core.errors import (
  ArgumentDefinitionError,
  ArgumentValidationError,
  ContextLeakError,
  ExtensionResolutionError,
  FluidError,
  MissingContextError,
  VariableContainerError,
  ViewHelperException,
)
from fluid_core.viewhelpers import AbstractViewHelper, ArgumentDefinition, ChildNodeAccess, ViewHelperArguments

__version__ = "0.1.0"

__all__ = [
  "AbstractNode",
  "AbstractViewHelper",
  "ArgumentDefinition",
  "ArgumentDefinitionError",
  "ArgumentType",
  "ArgumentValidationError",
  "Capability",
  "ChildNodeAccess",
  "ContextLeakError",
  "ControllerContext",
  "ExtensionResolutionError",
  "FluidError",
  "LiteralNode",
  "MissingContextError",
  "ObjectAccessorNode",
  "ObjectFactory",
  "RenderingContext",
  "RootNode",
  "RuntimeConfig",
  "TemplateVariableContainer",
  "TextNode",
  "VariableContainerError",
  "ViewHelperArguments",
  "ViewHelperException",
  "ViewHelperNode",
  "get_config",
  "register_view_helper",
  "set_config",
  "__version__",
]
