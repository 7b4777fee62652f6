"""
Object Factory and View Helper Registry.

View helpers are registered under a short name with the
`@register_view_helper` decorator and instantiated per invocation through an
`ObjectFactory`. The factory also builds the argument set objects handed to
view helpers, so hosts can substitute their own implementations.

Resolution order of `ObjectFactory.create(identifier)`:
1. A class object is instantiated directly.
2. A name registered on the factory itself.
3. A name in the global registry.
4. A dotted `package.module.ClassName` import path.
"""

import importlib
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from fluid_core.errors import ExtensionResolutionError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

_VIEW_HELPER_REGISTRY: Dict[str, type] = {}


def register_view_helper(name: str) -> Callable[[T], T]:
  """
  Class decorator registering a view helper under `name`.

  Args:
      name: The identifier templates use to invoke the helper (e.g. "format.date").
  """

  def wrapper(cls: T) -> T:
    _VIEW_HELPER_REGISTRY[name] = cls
    return cls

  return wrapper


def get_view_helper_class(name: str) -> Optional[type]:
  return _VIEW_HELPER_REGISTRY.get(name)


def available_view_helpers() -> List[str]:
  """Returns the sorted names of all globally registered view helpers."""
  return sorted(_VIEW_HELPER_REGISTRY)


def clear_view_helpers() -> None:
  """Resets the global registry. Primarily for testing."""
  _VIEW_HELPER_REGISTRY.clear()


class ObjectFactory:
  """
  Creates view helper instances and argument sets by identifier.

  Attributes:
      _registry (Dict[str, type]): Names registered on this factory only.
  """

  def __init__(self, registry: Optional[Dict[str, type]] = None):
    self._registry: Dict[str, type] = dict(registry or {})

  @classmethod
  def from_config(cls, config: Any) -> "ObjectFactory":
    """
    Builds a factory with the `view_helpers` paths of a RuntimeConfig.

    Args:
        config (RuntimeConfig): Configuration holding name -> import path pairs.

    Returns:
        ObjectFactory: A factory whose local registry contains the resolved classes.

    Raises:
        ExtensionResolutionError: If a configured path cannot be imported.
    """
    factory = cls()
    for name, path in config.view_helpers.items():
      factory.register(name, factory.resolve_class(path))
    return factory

  def register(self, name: str, view_helper_class: type) -> None:
    self._registry[name] = view_helper_class

  def resolve_class(self, identifier: Union[str, type]) -> type:
    """
    Maps an identifier onto a class without instantiating it.

    Args:
        identifier: A class, a registered name or a dotted import path.

    Returns:
        type: The resolved class.

    Raises:
        ExtensionResolutionError: If the identifier is unknown or cannot be imported.
    """
    if isinstance(identifier, type):
      return identifier

    if identifier in self._registry:
      return self._registry[identifier]
    if identifier in _VIEW_HELPER_REGISTRY:
      return _VIEW_HELPER_REGISTRY[identifier]

    module_name, _, class_name = identifier.rpartition(".")
    if not module_name:
      raise ExtensionResolutionError(identifier, "no view helper registered under this name")

    try:
      module = importlib.import_module(module_name)
    except ImportError as e:
      raise ExtensionResolutionError(identifier, f"module '{module_name}' could not be imported") from e

    resolved = getattr(module, class_name, None)
    if not isinstance(resolved, type):
      raise ExtensionResolutionError(identifier, f"'{class_name}' is not a class in '{module_name}'")
    return resolved

  def create(self, identifier: Union[str, type], *args: Any, **kwargs: Any) -> Any:
    """
    Instantiates the object named by `identifier`.

    Args:
        identifier: A class, a registered name or a dotted import path.
        *args: Positional constructor arguments.
        **kwargs: Keyword constructor arguments.

    Returns:
        Any: The new instance.

    Raises:
        ExtensionResolutionError: If resolution or construction fails.
    """
    cls = self.resolve_class(identifier)
    try:
      instance = cls(*args, **kwargs)
    except Exception as e:
      name = identifier if isinstance(identifier, str) else cls.__qualname__
      raise ExtensionResolutionError(name, f"construction failed ({e})") from e

    logger.debug(f"Created {cls.__qualname__} for '{identifier}'")
    return instance
