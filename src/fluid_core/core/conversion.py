"""
Argument Value Conversion.

Template arguments arrive as whatever their expression evaluated to, most
often strings. Only the "boolean" type tag is coerced; every other declared
type is passed through untouched and left to the view helper's validation.
"""

from collections.abc import Sized
from numbers import Number
from typing import Any

from fluid_core.enums import ArgumentType


def convert_argument_value(value: Any, type_tag: str) -> Any:
  """
  Converts an evaluated argument according to its declared type.

  Args:
      value (Any): The raw evaluation result.
      type_tag (str): The declared type of the argument definition.

  Returns:
      Any: The boolean interpretation for "boolean" arguments, otherwise `value` itself.
  """
  if type_tag == ArgumentType.BOOLEAN.value:
    return convert_to_boolean(value)
  return value


def convert_to_boolean(value: Any) -> bool:
  """
  Interprets a template value as a boolean.

  Rules:
      - booleans pass through
      - strings are True unless empty or case-insensitively "false" ("0" is True)
      - numbers are True iff strictly greater than zero
      - sized collections are True iff non-empty
      - any other object is True
      - None is False

  Args:
      value (Any): The value to interpret.

  Returns:
      bool: The boolean meaning of the value.
  """
  if isinstance(value, bool):
    return value
  if isinstance(value, str):
    return value.lower() != "false" and value != ""
  if isinstance(value, Number):
    try:
      return value > 0
    except (TypeError, ArithmeticError):
      # complex numbers are not ordered; Decimal NaN refuses comparison
      return False
  if isinstance(value, Sized):
    return len(value) > 0
  if value is None:
    return False
  return True
