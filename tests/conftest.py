import importlib.machinery
import logging
import sys
import types
from pathlib import Path
from types import SimpleNamespace

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tfbridge.runtime import hooks  # noqa: E402
from tfbridge.runtime.deferred import DeferredModule  # noqa: E402

FAKE_TF = "fake_tensorflow"


@pytest.fixture(autouse=True)
def isolated_hooks():
    """Empty hook registries for each test, restored afterwards."""
    saved = (
        list(hooks._suppress_handlers),
        list(hooks._class_filters),
        list(hooks._help_handlers),
    )
    hooks.clear_hooks()
    yield
    hooks.clear_hooks()
    hooks._suppress_handlers.extend(saved[0])
    hooks._class_filters.extend(saved[1])
    hooks._help_handlers.extend(saved[2])


@pytest.fixture
def stub_module(monkeypatch, tmp_path):
    """
    Factory installing an importable module object under `name`.
    Its location is reported as tmp_path/<name>.
    """

    def make(name: str = FAKE_TF) -> types.ModuleType:
        package_dir = tmp_path / name
        package_dir.mkdir(exist_ok=True)
        module = types.ModuleType(name)
        module.__spec__ = importlib.machinery.ModuleSpec(
            name, None, origin=str(package_dir / "__init__.py")
        )
        monkeypatch.setitem(sys.modules, name, module)
        return module

    return make


@pytest.fixture
def modern_tf(stub_module):
    """TensorFlow 2.x lookalike with tf.version.VERSION and tf.get_logger()."""
    module = stub_module()
    module.version = SimpleNamespace(VERSION="2.3.0")
    tf_logger = logging.getLogger("tests.fake_tensorflow")
    tf_logger.setLevel(logging.INFO)
    module.get_logger = lambda: tf_logger
    return module


@pytest.fixture
def legacy_tf(stub_module):
    """TensorFlow 1.x lookalike with tf.VERSION and tf.logging verbosity."""
    module = stub_module()
    module.VERSION = "1.13.1"
    state = {"verbosity": 20}

    def set_verbosity(level):
        state["verbosity"] = level

    module.logging = SimpleNamespace(
        ERROR=40,
        get_verbosity=lambda: state["verbosity"],
        set_verbosity=set_verbosity,
    )
    return module


@pytest.fixture
def binding():
    return DeferredModule(FAKE_TF)


@pytest.fixture
def missing_binding():
    return DeferredModule("tfbridge_tests_missing_module")
