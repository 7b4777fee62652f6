"""
Enumerations for fluid-core.

This module defines standard enumerations used across the codebase for
argument type tags and view helper capabilities.
"""

from enum import Enum


class ArgumentType(str, Enum):
  """
  Declared type tags for view helper arguments.

  Tags are compared as plain strings, so third-party view helpers may also
  declare tags outside this set (e.g. a class name). Those are passed through
  without conversion or validation.
  """

  BOOLEAN = "boolean"
  STRING = "string"
  INTEGER = "integer"
  FLOAT = "float"
  ARRAY = "array"
  MIXED = "mixed"


class Capability(str, Enum):
  """
  Optional facets a view helper may declare.

  Queried through `AbstractViewHelper.supports()` by the invoking node.
  """

  CHILD_NODE_ACCESS = "child_node_access"  # receives child nodes + rendering context
