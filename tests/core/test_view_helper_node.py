"""
Tests for ViewHelperNode.

Verifies:
1.  View helper resolution failures propagate.
2.  Argument evaluation: defaults, boolean conversion, render parameter order, unknown arguments.
3.  Argument evaluation mode is scoped to argument evaluation only.
4.  Binding of arguments, collaborators, back-reference and child nodes.
5.  Lifecycle order and error policy (downgrade vs. propagate).
6.  Variable container leak detection.
7.  End-to-end rendering of a child-node-access helper.
"""

import logging
import pytest
from unittest.mock import MagicMock

from fluid_core.config import RuntimeConfig, set_config
from fluid_core.core.nodes import AbstractNode, LiteralNode, ObjectAccessorNode, TextNode, to_output_string
from fluid_core.core.object_factory import ObjectFactory, register_view_helper
from fluid_core.core.rendering_context import RenderingContext
from fluid_core.core.view_helper_node import ViewHelperNode
from fluid_core.enums import ArgumentType
from fluid_core.errors import (
  ArgumentDefinitionError,
  ArgumentValidationError,
  ContextLeakError,
  ExtensionResolutionError,
  MissingContextError,
  ViewHelperException,
)
from fluid_core.viewhelpers import AbstractViewHelper, ChildNodeAccess, ViewHelperArguments

# --- Test Helpers ---


class RepeatViewHelper(ChildNodeAccess, AbstractViewHelper):
  """Renders its children `count` times."""

  def render(self, count: int = 1):
    return "".join(to_output_string(self.evaluate_child_nodes()) for _ in range(count))


class LenientEchoViewHelper(AbstractViewHelper):
  """Returns its evaluated arguments; accepts any value."""

  def initialize_arguments(self):
    self.register_argument("flag", ArgumentType.BOOLEAN, "A flag", default_value="false")
    self.register_argument("label", ArgumentType.STRING, "A label", default_value="none")

  def validate_arguments(self):
    pass

  def render(self):
    return dict(self.arguments)


class ParamsViewHelper(AbstractViewHelper):
  def initialize_arguments(self):
    self.register_argument("extra", ArgumentType.STRING, default_value="x")

  def render(self, first: str = "a", second: str = "b"):
    return (first, second)


class LifecycleViewHelper(AbstractViewHelper):
  def __init__(self):
    super().__init__()
    self.calls = []

  def validate_arguments(self):
    self.calls.append("validate_arguments")
    super().validate_arguments()

  def initialize(self):
    self.calls.append("initialize")

  def render(self, value: int = 0):
    self.calls.append("render")
    return value


class FailingViewHelper(AbstractViewHelper):
  def render(self):
    raise ViewHelperException("Something broke")


class CrashingViewHelper(AbstractViewHelper):
  def render(self):
    raise KeyError("not a view helper error")


class FailingValidationViewHelper(AbstractViewHelper):
  def validate_arguments(self):
    raise ViewHelperException("invalid")

  def render(self):
    return "unreachable"


class LeakingViewHelper(AbstractViewHelper):
  def render(self):
    self.template_variable_container.add("leaked", 1)
    return ""


class RemovingViewHelper(AbstractViewHelper):
  def render(self):
    self.template_variable_container.remove("existing")
    return ""


class ReorderingViewHelper(AbstractViewHelper):
  def render(self):
    value = self.template_variable_container.get("a")
    self.template_variable_container.remove("a")
    self.template_variable_container.add("a", value)
    return ""


class ScopedAliasViewHelper(ChildNodeAccess, AbstractViewHelper):
  """Adds an alias for the duration of the child evaluation only."""

  def render(self, value=None, alias: str = "item"):
    self.template_variable_container.add(alias, value)
    output = self.evaluate_child_nodes()
    self.template_variable_container.remove(alias)
    return output


class KeywordOnlyViewHelper(AbstractViewHelper):
  def render(self, *, label="x"):
    return label


class PositionalOnlyViewHelper(AbstractViewHelper):
  def render(self, label="x", /):
    return label


class ModeProbeViewHelper(ChildNodeAccess, AbstractViewHelper):
  def render(self):
    return str(self.rendering_context.get_argument_evaluation_mode())


class ModeRecordingNode(AbstractNode):
  """Expression node recording the argument evaluation mode it was evaluated in."""

  def __init__(self, value, fail=False):
    super().__init__()
    self.value = value
    self.fail = fail
    self.seen_modes = []

  def evaluate(self, rendering_context=None):
    self.seen_modes.append(self.rendering_context.get_argument_evaluation_mode())
    if self.fail:
      raise RuntimeError("argument failed")
    return self.value


class RecordingFactory(ObjectFactory):
  """Object factory remembering every instance it created."""

  def __init__(self, registry=None):
    super().__init__(registry)
    self.created = []

  def create(self, identifier, *args, **kwargs):
    instance = super().create(identifier, *args, **kwargs)
    self.created.append(instance)
    return instance


@pytest.fixture
def factory():
  return RecordingFactory(
    {
      "repeat": RepeatViewHelper,
      "echo": LenientEchoViewHelper,
      "params": ParamsViewHelper,
      "lifecycle": LifecycleViewHelper,
      "failing": FailingViewHelper,
      "crashing": CrashingViewHelper,
      "failing_validation": FailingValidationViewHelper,
      "leaking": LeakingViewHelper,
      "removing": RemovingViewHelper,
      "reordering": ReorderingViewHelper,
      "alias": ScopedAliasViewHelper,
      "mode": ModeProbeViewHelper,
      "keyword_only": KeywordOnlyViewHelper,
      "positional_only": PositionalOnlyViewHelper,
    }
  )


@pytest.fixture
def ctx(factory, variables):
  return RenderingContext(object_factory=factory, variable_container=variables)


# --- Resolution & Context ---


def test_unknown_view_helper_raises_resolution_error(ctx):
  """Unknown identifiers fail evaluation without producing output."""
  node = ViewHelperNode("does.not.exist")
  with pytest.raises(ExtensionResolutionError):
    node.evaluate(ctx)


def test_missing_context_raises():
  """Evaluating without any rendering context is an integration bug."""
  node = ViewHelperNode("repeat", {"count": LiteralNode(2)})
  with pytest.raises(MissingContextError) as exc:
    node.evaluate()
  assert exc.value.code == 1242669031


def test_bound_context_is_used_when_none_passed(ctx):
  node = ViewHelperNode("repeat", {"count": LiteralNode(2)})
  node.add_child_node(TextNode("ab"))
  node.set_rendering_context(ctx)

  assert node.evaluate() == "abab"


def test_explicit_context_is_bound(ctx):
  node = ViewHelperNode("repeat")
  node.evaluate(ctx)
  assert node.rendering_context is ctx


def test_global_registry_is_used_by_default_factory(variables):
  """A RenderingContext without factory resolves names through @register_view_helper."""
  register_view_helper("test.global_repeat")(RepeatViewHelper)
  node = ViewHelperNode("test.global_repeat", {"count": LiteralNode(2)})
  node.add_child_node(TextNode("y"))

  assert node.evaluate(RenderingContext(variable_container=variables)) == "yy"


# --- Arguments ---


def test_defaults_are_used_verbatim(ctx):
  """Defaults bypass type conversion, even for boolean arguments."""
  node = ViewHelperNode("echo")
  result = node.evaluate(ctx)

  assert result == {"flag": "false", "label": "none"}


@pytest.mark.parametrize(
  "raw, expected",
  [
    ("false", False),
    ("FALSE", False),
    ("", False),
    ("0", True),
    (0, False),
    (5, True),
    ([], False),
    ([1], True),
  ],
)
def test_supplied_boolean_arguments_are_converted(ctx, raw, expected):
  node = ViewHelperNode("echo", {"flag": LiteralNode(raw)})
  assert node.evaluate(ctx)["flag"] is expected


def test_non_boolean_arguments_pass_through(ctx):
  node = ViewHelperNode("echo", {"label": LiteralNode("false")})
  assert node.evaluate(ctx)["label"] == "false"


def test_arguments_evaluate_against_variables(ctx, variables):
  variables.add("user", {"name": "Ada"})
  node = ViewHelperNode("echo", {"label": ObjectAccessorNode("user.name")})

  assert node.evaluate(ctx)["label"] == "Ada"


def test_render_parameters_follow_definition_order(ctx):
  """Only method parameters are passed positionally, in definition order."""
  node = ViewHelperNode(
    "params",
    {"second": LiteralNode("B"), "first": LiteralNode("A"), "extra": LiteralNode("E")},
  )
  assert node.evaluate(ctx) == ("A", "B")


def test_render_parameters_use_defaults(ctx):
  node = ViewHelperNode("params", {"second": LiteralNode("B")})
  assert node.evaluate(ctx) == ("a", "B")


def test_keyword_only_render_parameter_is_rejected(ctx):
  """Keyword-only parameters cannot be passed positionally and fail at definition time."""
  node = ViewHelperNode("keyword_only", {"label": LiteralNode("y")})
  with pytest.raises(ArgumentDefinitionError, match="keyword-only"):
    node.evaluate(ctx)


def test_positional_only_render_parameter(ctx):
  node = ViewHelperNode("positional_only", {"label": LiteralNode("y")})
  assert node.evaluate(ctx) == "y"


def test_unknown_argument_is_ignored(ctx):
  """Arguments absent from the schema have no effect on rendering."""
  node = ViewHelperNode("repeat", {"count": LiteralNode(2), "bogus": LiteralNode("zzz")})
  node.add_child_node(TextNode("x"))

  assert node.evaluate(ctx) == "xx"


def test_unknown_argument_is_not_evaluated(ctx):
  bogus = ModeRecordingNode("zzz")
  node = ViewHelperNode("params", {"bogus": bogus})

  assert node.evaluate(ctx) == ("a", "b")
  assert bogus.seen_modes == []


def test_unknown_argument_warning(ctx, caplog):
  node = ViewHelperNode("repeat", {"bogus": LiteralNode("zzz")})
  with caplog.at_level(logging.WARNING, logger="fluid_core"):
    node.evaluate(ctx)
  assert "bogus" in caplog.text


def test_unknown_argument_warning_can_be_disabled(ctx, caplog):
  set_config(RuntimeConfig(warn_unknown_arguments=False))
  node = ViewHelperNode("repeat", {"bogus": LiteralNode("zzz")})
  with caplog.at_level(logging.WARNING, logger="fluid_core"):
    node.evaluate(ctx)
  assert "bogus" not in caplog.text


# --- Argument Evaluation Mode ---


def test_argument_evaluation_mode_is_scoped(ctx):
  """Mode is True strictly while arguments evaluate."""
  probe = ModeRecordingNode("label")
  node = ViewHelperNode("echo", {"label": probe})

  assert ctx.get_argument_evaluation_mode() is False
  node.evaluate(ctx)

  assert probe.seen_modes == [True]
  assert ctx.get_argument_evaluation_mode() is False


def test_argument_evaluation_mode_reset_on_failure(ctx):
  probe = ModeRecordingNode("label", fail=True)
  node = ViewHelperNode("echo", {"label": probe})

  with pytest.raises(RuntimeError, match="argument failed"):
    node.evaluate(ctx)

  assert probe.seen_modes == [True]
  assert ctx.get_argument_evaluation_mode() is False


def test_render_runs_outside_argument_evaluation_mode(ctx):
  assert ViewHelperNode("mode").evaluate(ctx) == "False"


def test_nested_view_helper_in_argument_keeps_outer_mode(ctx):
  """A helper evaluated as another helper's argument renders in argument evaluation mode."""
  inner = ViewHelperNode("mode")
  outer = ViewHelperNode("echo", {"label": inner})

  assert outer.evaluate(ctx)["label"] == "True"
  assert ctx.get_argument_evaluation_mode() is False


# --- Binding ---


def test_collaborators_are_bound(ctx, factory, variables):
  node = ViewHelperNode("echo", {"label": LiteralNode("hi")})
  node.evaluate(ctx)

  helper, arguments = factory.created
  assert isinstance(helper, LenientEchoViewHelper)
  assert isinstance(arguments, ViewHelperArguments)
  assert helper.arguments is arguments
  assert helper.template_variable_container is variables
  assert helper.controller_context is ctx.get_controller_context()
  assert helper.get_view_helper_node() is node


def test_child_nodes_are_shared_by_reference(ctx, factory):
  node = ViewHelperNode("repeat")
  node.add_child_node(TextNode("x"))
  node.evaluate(ctx)

  helper = factory.created[0]
  assert helper.child_nodes is node.child_nodes
  assert helper.rendering_context is ctx


def test_child_nodes_not_bound_without_capability(ctx, factory):
  node = ViewHelperNode("echo")
  node.add_child_node(TextNode("x"))
  node.evaluate(ctx)

  helper = factory.created[0]
  assert not hasattr(helper, "child_nodes")


def test_call_sequence_with_mock_collaborators(variables):
  """The helper is configured, validated, initialized and rendered, in that order."""
  helper = MagicMock()
  helper.prepare_arguments.return_value = {}
  helper.supports.return_value = False
  helper.render.return_value = "out"
  argument_set = object()

  factory = MagicMock()
  factory.create.side_effect = [helper, argument_set]
  ctx = RenderingContext(object_factory=factory, variable_container=variables)

  node = ViewHelperNode("mocked")
  assert node.evaluate(ctx) == "out"

  assert factory.create.call_args_list[0].args == ("mocked",)
  assert factory.create.call_args_list[1].args == (ViewHelperArguments, {})
  helper.set_arguments.assert_called_once_with(argument_set)
  assert [call[0] for call in helper.mock_calls] == [
    "prepare_arguments",
    "set_arguments",
    "set_template_variable_container",
    "set_controller_context",
    "set_view_helper_node",
    "supports",
    "validate_arguments",
    "initialize",
    "render",
  ]


# --- Lifecycle & Errors ---


def test_lifecycle_order(ctx, factory):
  node = ViewHelperNode("lifecycle", {"value": LiteralNode(7)})
  assert node.evaluate(ctx) == 7
  assert factory.created[0].calls == ["validate_arguments", "initialize", "render"]


def test_validation_error_propagates_and_skips_render(ctx, factory):
  node = ViewHelperNode("lifecycle", {"value": LiteralNode("seven")})
  with pytest.raises(ArgumentValidationError):
    node.evaluate(ctx)
  assert factory.created[0].calls == ["validate_arguments"]


def test_view_helper_exception_is_downgraded(ctx):
  """A failing but well-behaved helper yields its error message as output."""
  assert ViewHelperNode("failing").evaluate(ctx) == "Something broke"


def test_view_helper_exception_outside_render_propagates(ctx):
  with pytest.raises(ViewHelperException):
    ViewHelperNode("failing_validation").evaluate(ctx)


def test_other_render_errors_propagate(ctx):
  with pytest.raises(KeyError):
    ViewHelperNode("crashing").evaluate(ctx)


# --- Leak Detection ---


def test_added_variable_is_detected(ctx):
  with pytest.raises(ContextLeakError) as exc:
    ViewHelperNode("leaking").evaluate(ctx)

  assert exc.value.view_helper_name == "leaking"
  assert exc.value.identifiers == ["leaked"]
  assert '"leaking"' in str(exc.value)
  assert exc.value.code == 1236081302


def test_removed_variable_is_detected(ctx, variables):
  variables.add("existing", 1)
  with pytest.raises(ContextLeakError) as exc:
    ViewHelperNode("removing").evaluate(ctx)
  assert exc.value.identifiers == ["existing"]


def test_reordered_variables_are_reported(ctx, variables):
  """Snapshots compare as ordered lists; re-adding a variable changes the order."""
  variables.add("a", 1)
  variables.add("b", 2)
  with pytest.raises(ContextLeakError) as exc:
    ViewHelperNode("reordering").evaluate(ctx)
  assert set(exc.value.identifiers) == {"a", "b"}


def test_scoped_alias_is_not_a_leak(ctx, variables):
  node = ViewHelperNode("alias", {"value": LiteralNode("Ada"), "alias": LiteralNode("name")})
  node.add_child_node(TextNode("Hello "))
  node.add_child_node(ObjectAccessorNode("name"))

  assert node.evaluate(ctx) == "Hello Ada"
  assert variables.get_all_identifiers() == []


# --- End to End ---


def test_repeat_end_to_end(ctx):
  node = ViewHelperNode("repeat", {"count": LiteralNode(3)})
  node.add_child_node(TextNode("x"))

  assert node.evaluate(ctx) == "xxx"


def test_repeat_uses_default_count(ctx):
  node = ViewHelperNode("repeat")
  node.add_child_node(TextNode("x"))

  assert node.evaluate(ctx) == "x"


def test_nested_view_helper_children(ctx):
  inner = ViewHelperNode("repeat", {"count": LiteralNode(2)})
  inner.add_child_node(TextNode("-"))
  outer = ViewHelperNode("repeat", {"count": LiteralNode(2)})
  outer.add_child_node(TextNode("["))
  outer.add_child_node(inner)
  outer.add_child_node(TextNode("]"))

  assert outer.evaluate(ctx) == "[--][--]"


def test_node_is_reusable(ctx):
  node = ViewHelperNode("repeat", {"count": LiteralNode(2)})
  node.add_child_node(TextNode("z"))

  assert node.evaluate(ctx) == "zz"
  assert node.evaluate(ctx) == "zz"
  assert node.get_view_helper_name() == "repeat"
