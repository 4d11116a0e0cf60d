"""
Interop runtime: deferred module bindings, hook registries and interpreter
discovery. Nothing here knows about TensorFlow.
"""

from tfbridge.runtime import deferred, hooks, interpreter, result
from tfbridge.runtime.deferred import (
    BindingState,
    DeferredModule,
    import_deferred,
    preferred_environment,
)
from tfbridge.runtime.hooks import (
    SuppressWarningsHandler,
    classify,
    help_url,
    register_class_filter,
    register_help_handler,
    register_suppress_warnings_handler,
    suppress_warnings,
)
from tfbridge.runtime.interpreter import (
    RUNTIME_PYTHON_ENV,
    InterpreterConfig,
    interpreter_config,
    module_available,
)
from tfbridge.runtime.result import Result, attempt

__all__ = [
    "deferred",
    "hooks",
    "interpreter",
    "result",
    "BindingState",
    "DeferredModule",
    "import_deferred",
    "preferred_environment",
    "SuppressWarningsHandler",
    "classify",
    "help_url",
    "register_class_filter",
    "register_help_handler",
    "register_suppress_warnings_handler",
    "suppress_warnings",
    "RUNTIME_PYTHON_ENV",
    "InterpreterConfig",
    "interpreter_config",
    "module_available",
    "Result",
    "attempt",
]
