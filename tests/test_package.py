import logging
import os
from types import SimpleNamespace

import pytest

from tfbridge import package
from tfbridge.constants import INSTALL_HINT, TENSOR_CLASS
from tfbridge.errors import TensorFlowNotFoundError, VersionError
from tfbridge.options import Session
from tfbridge.runtime import hooks
from tfbridge.runtime.deferred import BindingState, DeferredModule
from tfbridge.runtime.hooks import classify, help_url, suppress_warnings
from tfbridge.runtime.interpreter import RUNTIME_PYTHON_ENV
from tfbridge.version import Version


@pytest.mark.parametrize(
    "version, expected",
    [
        ("0.12.1", False),
        ("1.13.2", False),
        ("1.14.0", True),
        ("1.14", True),
        ("1.15.0rc1", True),
        ("2.3.0", True),
        ("10.0.0", True),
        (Version(1, 9), False),
    ],
)
def test_is_modern_version(version, expected):
    assert package.is_modern_version(version) is expected


def test_is_modern_version_rejects_malformed():
    with pytest.raises(VersionError):
        package.is_modern_version("2")


def test_is_modern_api_reads_binding_version(modern_tf, binding):
    assert package.is_modern_api(binding) is True


def test_is_modern_api_for_legacy_binding(legacy_tf, binding):
    assert package.is_modern_api(binding) is False


def test_is_modern_api_fails_loudly_when_unavailable(missing_binding):
    with pytest.raises(VersionError):
        package.is_modern_api(missing_binding)


def test_modern_suppress_and_restore(modern_tf, binding):
    tf_logger = modern_tf.get_logger()
    tf_logger.setLevel(logging.INFO)

    context = package.suppress(binding)
    assert context.strategy == "modern"
    assert context.level == logging.INFO
    assert tf_logger.level == logging.ERROR

    package.restore(context, binding)
    assert tf_logger.level == logging.INFO


def test_restore_wins_over_intervening_changes(modern_tf, binding):
    tf_logger = modern_tf.get_logger()
    tf_logger.setLevel(logging.WARNING)

    context = package.suppress(binding)
    tf_logger.setLevel(logging.DEBUG)
    package.restore(context, binding)

    assert tf_logger.level == logging.WARNING


def test_legacy_suppress_and_restore(legacy_tf, binding):
    assert legacy_tf.logging.get_verbosity() == 20

    context = package.suppress(binding)
    assert context.strategy == "legacy"
    assert legacy_tf.logging.get_verbosity() == legacy_tf.logging.ERROR

    package.restore(context, binding)
    assert legacy_tf.logging.get_verbosity() == 20


def test_select_suppression_follows_version(modern_tf, binding):
    assert isinstance(package.select_suppression(binding), package.ModernSuppression)


def test_tensor_class_filter_prepends_tag_once():
    classes = ["tensorflow.python.framework.ops.Tensor", "builtins.object"]
    tagged = package.tensor_class_filter(classes)

    assert tagged == [TENSOR_CLASS, *classes]
    assert classes == ["tensorflow.python.framework.ops.Tensor", "builtins.object"]
    assert package.tensor_class_filter(tagged) == tagged


def test_tensor_class_filter_recognizes_variables():
    classes = ["tensorflow.python.ops.variables.Variable"]
    assert package.tensor_class_filter(classes)[0] == TENSOR_CLASS


def test_tensor_class_filter_passes_unrelated_classes_through():
    classes = ["numpy.ndarray", "builtins.object"]
    assert package.tensor_class_filter(classes) == classes


def test_tensor_class_filter_uses_configured_classes():
    classes = ["tensorflow.python.framework.tensor.Tensor"]
    assert package.tensor_class_filter(classes) == classes
    with Session(tensor_classes=("tensorflow.python.framework.tensor.Tensor",)):
        assert package.tensor_class_filter(classes) == [TENSOR_CLASS, *classes]
    assert package.tensor_class_filter(
        classes, foreign_classes=["tensorflow.python.framework.tensor.Tensor"]
    )[0] == TENSOR_CLASS


class Tensor:
    pass


class ResourceVariable:
    pass


Tensor.__module__ = "tensorflow.python.framework.ops"
ResourceVariable.__module__ = "tensorflow.python.ops.resource_variable_ops"


def test_is_tensor_uses_registered_filter():
    hooks.register_class_filter(package.tensor_class_filter)

    assert package.is_tensor(Tensor())
    assert classify(Tensor())[0] == TENSOR_CLASS
    assert not package.is_tensor(ResourceVariable())
    assert not package.is_tensor(3.0)


def test_initialize_registers_filter_once(monkeypatch):
    monkeypatch.setattr(package, "_initialized", False)
    package.initialize()
    package.initialize()
    assert hooks._class_filters.count(package.tensor_class_filter) == 1


def _clear_env(monkeypatch, *names):
    # setenv first so the original value is restored after the test
    for name in names:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_forward_environment(monkeypatch, tmp_path):
    _clear_env(monkeypatch, RUNTIME_PYTHON_ENV, "TF_CPP_MIN_LOG_LEVEL")
    python = str(tmp_path / "python")
    monkeypatch.setenv("TENSORFLOW_PYTHON", python)

    with Session(cpp_min_log_level=None):
        package.forward_environment()
    assert os.environ[RUNTIME_PYTHON_ENV] == python
    assert "TF_CPP_MIN_LOG_LEVEL" not in os.environ


@pytest.mark.parametrize("level, expected", [(3, "1"), (1, "1"), (0, "0"), (-2, "0")])
def test_forward_environment_clamps_log_level(monkeypatch, level, expected):
    _clear_env(monkeypatch, "TENSORFLOW_PYTHON", "TF_CPP_MIN_LOG_LEVEL")
    with Session(cpp_min_log_level=level):
        package.forward_environment()
    assert os.environ["TF_CPP_MIN_LOG_LEVEL"] == expected


def test_package_binding_is_deferred():
    assert package.tf.name == "tensorflow"
    assert package.tf.priority == 5
    assert package.tf.environment == "tfbridge"


def test_on_error_raises_diagnostic():
    with pytest.raises(TensorFlowNotFoundError) as excinfo:
        package._on_error(ImportError("No module named 'tensorflow'"))
    message = str(excinfo.value)
    assert message.startswith("Installation of TensorFlow not found.")
    assert INSTALL_HINT in message
    assert isinstance(excinfo.value, ImportError)


def test_missing_binding_fails_with_diagnostic(missing_binding):
    proxy = DeferredModule(missing_binding.name, on_error=package._on_error)
    with pytest.raises(TensorFlowNotFoundError, match="Installation of TensorFlow"):
        proxy.constant
    assert proxy.state is BindingState.FAILED


def test_on_load_registers_hooks(modern_tf, monkeypatch):
    entered = []
    modern_tf.python = SimpleNamespace(
        util=SimpleNamespace(
            deprecation=SimpleNamespace(
                silence=lambda: SimpleNamespace(__enter__=lambda: entered.append(1))
            )
        )
    )
    monkeypatch.setattr(package, "tf", DeferredModule("fake_tensorflow"))

    package._on_load()

    assert entered == [1]
    assert len(hooks._suppress_handlers) == 1
    assert help_url("tf.nn.relu").endswith("tf/nn/relu")

    tf_logger = modern_tf.get_logger()
    tf_logger.setLevel(logging.INFO)
    with suppress_warnings():
        assert tf_logger.level == logging.ERROR
    assert tf_logger.level == logging.INFO


def test_on_load_tolerates_missing_deprecation_hook(modern_tf, monkeypatch, caplog):
    caplog.set_level(logging.DEBUG, logger="tfbridge")
    monkeypatch.setattr(package, "tf", DeferredModule("fake_tensorflow"))

    package._on_load()

    assert len(hooks._suppress_handlers) == 1
    assert len(hooks._help_handlers) == 2
    assert "Silencing TensorFlow deprecation warnings failed" in caplog.text


def test_deferred_binding_runs_on_load(modern_tf, monkeypatch):
    proxy = DeferredModule("fake_tensorflow", on_load=package._on_load)
    monkeypatch.setattr(package, "tf", proxy)

    assert proxy.get_logger() is modern_tf.get_logger()
    assert len(hooks._suppress_handlers) == 1


def test_package_binding_keeps_import_time_environment():
    with Session(environment="later", priority=1):
        assert package.tf.environment == "tfbridge"
        assert package.tf.priority == 5
