"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Global view helper registry isolation so helpers registered by one test do not leak.
- Reset of the process-wide RuntimeConfig.
"""

import sys
import pytest
from pathlib import Path

# Add src to path so we can import 'fluid_core' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from fluid_core.config import set_config  # noqa: E402
from fluid_core.core.object_factory import _VIEW_HELPER_REGISTRY  # noqa: E402
from fluid_core.core.rendering_context import RenderingContext  # noqa: E402
from fluid_core.core.variables import TemplateVariableContainer  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_view_helper_registry():
  """
  Ensures that view helpers registered inside a test do not leak between tests.
  """
  original_registry = _VIEW_HELPER_REGISTRY.copy()
  yield
  _VIEW_HELPER_REGISTRY.clear()
  _VIEW_HELPER_REGISTRY.update(original_registry)


@pytest.fixture(autouse=True)
def reset_runtime_config():
  """Restores default configuration after every test."""
  set_config(None)
  yield
  set_config(None)


@pytest.fixture
def variables():
  """An empty template variable container."""
  return TemplateVariableContainer()


@pytest.fixture
def rendering_context(variables):
  """A rendering context backed by the global registry and the `variables` fixture."""
  return RenderingContext(variable_container=variables)
