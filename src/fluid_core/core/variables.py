"""
Template Variable Container.

Holds the identifiers visible to template expressions during one render
pass. View helpers that introduce variables (loop aliases, etc.) must remove
them again before returning, which the invoking node verifies.
"""

from typing import Any, Dict, Iterator, List, Optional

from fluid_core.errors import VariableContainerError

# Identifiers that parse as boolean literals and can never be variables
RESERVED_IDENTIFIERS = frozenset({"true", "false", "on", "off", "yes", "no"})


class TemplateVariableContainer:
  """
  Ordered mapping of identifier -> value.

  Attributes:
      _variables (Dict[str, Any]): Backing storage in insertion order.
  """

  def __init__(self, variables: Optional[Dict[str, Any]] = None):
    self._variables: Dict[str, Any] = {}
    for identifier, value in (variables or {}).items():
      self.add(identifier, value)

  def add(self, identifier: str, value: Any) -> None:
    """
    Adds a new variable.

    Args:
        identifier (str): Name of the variable.
        value (Any): Value bound to the name.

    Raises:
        VariableContainerError: If the identifier exists or is reserved.
    """
    if identifier in self._variables:
      raise VariableContainerError(f'Duplicate variable declaration, "{identifier}" already set!')
    if identifier.lower() in RESERVED_IDENTIFIERS:
      raise VariableContainerError(f'"{identifier}" is a reserved variable name and cannot be used.')
    self._variables[identifier] = value

  def get(self, identifier: str) -> Any:
    """
    Returns the value of a variable.

    Raises:
        VariableContainerError: If the identifier is unknown.
    """
    if identifier not in self._variables:
      raise VariableContainerError(f'Tried to get a variable "{identifier}" which is not stored in the context!')
    return self._variables[identifier]

  def remove(self, identifier: str) -> None:
    """
    Removes a variable.

    Raises:
        VariableContainerError: If the identifier is unknown.
    """
    if identifier not in self._variables:
      raise VariableContainerError(f'Tried to remove a variable "{identifier}" which is not stored in the context!')
    del self._variables[identifier]

  def exists(self, identifier: str) -> bool:
    return identifier in self._variables

  def get_all_identifiers(self) -> List[str]:
    """
    Snapshot of the identifiers currently held, in insertion order.

    Returns:
        List[str]: A new list; later mutations of the container do not affect it.
    """
    return list(self._variables.keys())

  def get_all(self) -> Dict[str, Any]:
    """Returns a shallow copy of all variables."""
    return dict(self._variables)

  def __contains__(self, identifier: object) -> bool:
    return identifier in self._variables

  def __iter__(self) -> Iterator[str]:
    return iter(self._variables)

  def __len__(self) -> int:
    return len(self._variables)
