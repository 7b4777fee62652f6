"""
Argument Schemas for View Helpers.

- `ArgumentDefinition`: one declared input of a view helper (name, type tag,
  default, and whether it is also a positional parameter of `render()`).
- `ViewHelperArguments`: the read-only argument set built from evaluated
  values on every invocation.
"""

from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArgumentDefinition(BaseModel):
  """
  Schema entry describing one named view helper argument.

  Read-only; produced by the view helper in `prepare_arguments()`.
  """

  model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

  name: str = Field(description="Argument name as used in templates.")
  type: str = Field(description="Declared type tag (e.g. 'boolean', 'string', 'mixed').")
  description: str = Field("", description="Human-readable explanation of the argument.")
  required: bool = Field(False, description="If True, validation rejects a missing (None) value.")
  default_value: Any = Field(None, description="Value used verbatim when the template omits the argument.")
  is_method_parameter: bool = Field(
    False,
    description="If True, the value is also passed positionally to render().",
  )

  @field_validator("type", mode="before")
  @classmethod
  def normalize_type(cls, v: Any) -> Any:
    """Accepts `ArgumentType` members as well as plain strings."""
    if isinstance(v, Enum):
      return v.value
    return v

  def get_name(self) -> str:
    return self.name

  def get_type(self) -> str:
    return self.type

  def get_description(self) -> str:
    return self.description

  def is_required(self) -> bool:
    return self.required

  def get_default_value(self) -> Any:
    return self.default_value


class ViewHelperArguments(Mapping[str, Any]):
  """
  Immutable mapping of argument name -> evaluated value.

  Example:
      >>> args = ViewHelperArguments({"count": 3})
      >>> args["count"]
      3
  """

  def __init__(self, arguments: Optional[Dict[str, Any]] = None):
    self._arguments: Dict[str, Any] = dict(arguments or {})

  def __getitem__(self, name: str) -> Any:
    return self._arguments[name]

  def __iter__(self) -> Iterator[str]:
    return iter(self._arguments)

  def __len__(self) -> int:
    return len(self._arguments)

  def __setitem__(self, name: str, value: Any) -> None:
    raise TypeError("View helper arguments are read-only.")

  def __delitem__(self, name: str) -> None:
    raise TypeError("View helper arguments are read-only.")

  def has_argument(self, name: str) -> bool:
    return name in self._arguments

  def __repr__(self) -> str:
    return f"ViewHelperArguments({self._arguments!r})"
