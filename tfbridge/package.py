"""
Deferred TensorFlow binding and the hooks installed around it.

``tf`` is created on import of this module but TensorFlow itself is only
imported on first attribute access. Once it loads, a logging suppression
handler and a help handler are registered and TensorFlow's deprecation
warnings are silenced. If it cannot be imported, the failure is reported
through :class:`~tfbridge.errors.TensorFlowNotFoundError`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from tfbridge.constants import (
    TENSOR_CLASS,
    TENSORFLOW_PYTHON_ENV,
    TF_CPP_MIN_LOG_LEVEL_ENV,
    TF_MODULE,
)
from tfbridge.errors import TensorFlowNotFoundError, VersionError
from tfbridge.options import Config
from tfbridge.runtime.deferred import DeferredModule, import_deferred
from tfbridge.runtime.hooks import (
    SuppressWarningsHandler,
    classify,
    register_class_filter,
    register_suppress_warnings_handler,
)
from tfbridge.runtime.interpreter import RUNTIME_PYTHON_ENV
from tfbridge.runtime.result import attempt
from tfbridge.version import Version, parse_version

logger = logging.getLogger(__name__)

# 1.14 already shows deprecation warnings through tf.get_logger()
MODERN_API_THRESHOLD = Version(1, 14)

_initialized = False


def _on_load() -> None:
    from tfbridge.help import register_tf_help_handler

    attempt(
        register_suppress_warnings_handler,
        SuppressWarningsHandler(suppress=suppress, restore=restore),
        description="Registering TensorFlow suppress warnings handler",
        level=logging.WARNING,
    )
    attempt(
        register_tf_help_handler,
        description="Registering TensorFlow help handler",
        level=logging.WARNING,
    )
    # Crash-causing deprecation warnings; the hook is missing in some versions
    attempt(
        lambda: tf.python.util.deprecation.silence().__enter__(),
        description="Silencing TensorFlow deprecation warnings",
    )


def _on_error(exc: ImportError) -> None:
    from tfbridge.reporter import config_error_message

    raise TensorFlowNotFoundError(config_error_message())


tf: DeferredModule = import_deferred(
    TF_MODULE,
    priority=Config().priority,
    environment=Config().environment,
    on_load=_on_load,
    on_error=_on_error,
)


def forward_environment() -> None:
    """
    Forward TENSORFLOW_PYTHON to the runtime's interpreter selection
    variable and apply Config().cpp_min_log_level to TF_CPP_MIN_LOG_LEVEL.
    """
    tensorflow_python = os.environ.get(TENSORFLOW_PYTHON_ENV)
    if tensorflow_python is not None:
        os.environ[RUNTIME_PYTHON_ENV] = tensorflow_python

    # INFO (1) may be silenced, warnings (2) and errors (3) are always shown
    level = Config().cpp_min_log_level
    if level is not None:
        os.environ[TF_CPP_MIN_LOG_LEVEL_ENV] = str(max(min(level, 1), 0))


def initialize() -> None:
    """Runs once per process; later calls do nothing."""
    global _initialized
    if _initialized:
        return
    forward_environment()
    register_class_filter(tensor_class_filter)
    _initialized = True
    logger.debug("tfbridge initialized; %r", tf)


def tensor_class_filter(
    classes: List[str], foreign_classes: Optional[Iterable[str]] = None
) -> List[str]:
    """
    Prepend TENSOR_CLASS when any of `classes` is a TensorFlow tensor or
    variable class.

    Parameters
    ----------
    classes : List[str]
        Fully qualified class names, most derived first.
    foreign_classes : Optional[Iterable[str]]
        Class names that mark a tensor. Defaults to Config().tensor_classes.

    Returns
    -------
    List[str]
        A new list; `classes` itself is not modified.
    """
    if foreign_classes is None:
        foreign_classes = Config().tensor_classes
    markers = set(foreign_classes)
    if TENSOR_CLASS in classes or markers.isdisjoint(classes):
        return list(classes)
    return [TENSOR_CLASS, *classes]


def is_tensor(obj: Any) -> bool:
    return TENSOR_CLASS in classify(obj)


def is_modern_version(version: Any) -> bool:
    if not isinstance(version, Version):
        version = parse_version(version)
    return version >= MODERN_API_THRESHOLD


def is_modern_api(binding: Optional[DeferredModule] = None) -> bool:
    """
    True when TensorFlow exposes ``tf.get_logger()`` (1.14 and later).

    Raises
    ------
    VersionError
        If TensorFlow is not available or its version cannot be parsed.
    """
    from tfbridge.reporter import tf_version

    version = tf_version(binding)
    if version is None:
        raise VersionError("TensorFlow version is unavailable")
    return is_modern_version(version)


@dataclass(frozen=True)
class SuppressionContext:
    """Level captured by :func:`suppress`, to be handed to :func:`restore`."""

    level: Any
    strategy: str


class ModernSuppression:
    name = "modern"

    def suppress(self, module: Any) -> SuppressionContext:
        tf_logger = module.get_logger()
        old_level = tf_logger.level
        tf_logger.setLevel(logging.ERROR)
        return SuppressionContext(old_level, self.name)

    def restore(self, module: Any, context: SuppressionContext) -> None:
        module.get_logger().setLevel(context.level)


class LegacySuppression:
    name = "legacy"

    def suppress(self, module: Any) -> SuppressionContext:
        old_verbosity = module.logging.get_verbosity()
        module.logging.set_verbosity(module.logging.ERROR)
        return SuppressionContext(old_verbosity, self.name)

    def restore(self, module: Any, context: SuppressionContext) -> None:
        module.logging.set_verbosity(context.level)


STRATEGIES = {
    ModernSuppression.name: ModernSuppression(),
    LegacySuppression.name: LegacySuppression(),
}


def select_suppression(binding: Optional[DeferredModule] = None):
    if is_modern_api(binding):
        return STRATEGIES[ModernSuppression.name]
    return STRATEGIES[LegacySuppression.name]


def suppress(binding: Optional[DeferredModule] = None) -> SuppressionContext:
    """
    Raise TensorFlow's log threshold to errors only.

    Returns the context needed by :func:`restore`.
    """
    module = binding if binding is not None else tf
    return select_suppression(module).suppress(module)


def restore(
    context: SuppressionContext, binding: Optional[DeferredModule] = None
) -> None:
    module = binding if binding is not None else tf
    STRATEGIES[context.strategy].restore(module, context)
