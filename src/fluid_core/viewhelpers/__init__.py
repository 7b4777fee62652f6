"""
View Helper API.

Base class, argument schema and optional facets that view helper
implementations build upon. Concrete helpers live in host applications and
register themselves with `fluid_core.core.object_factory.register_view_helper`.
"""

from fluid_core.viewhelpers.arguments import ArgumentDefinition, ViewHelperArguments
from fluid_core.viewhelpers.base import AbstractViewHelper
from fluid_core.viewhelpers.facets import ChildNodeAccess

__all__ = [
  "AbstractViewHelper",
  "ArgumentDefinition",
  "ChildNodeAccess",
  "ViewHelperArguments",
]
