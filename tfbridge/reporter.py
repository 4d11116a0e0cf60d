"""
TensorFlow configuration reporting.

`tf_config` describes whether TensorFlow can be imported, which version it
is and which interpreter it runs in. When TensorFlow is missing the report
carries the interpreters that were searched and a diagnostic message.
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from tfbridge.constants import INSTALL_HINT, TF_MODULE
from tfbridge.runtime.deferred import DeferredModule
from tfbridge.runtime.hooks import suppress_warnings
from tfbridge.runtime.interpreter import (
    InterpreterConfig,
    interpreter_config,
    module_available,
)
from tfbridge.runtime.result import attempt
from tfbridge.version import Version, parse_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TensorFlowConfig:
    """
    Report produced by :func:`tf_config`.

    `available` selects which fields are populated: version, version_str,
    location, python and python_version when True; python_versions and
    error_message when False.
    """

    available: bool
    version: Optional[Version] = None
    version_str: Optional[str] = None
    location: Optional[str] = None
    python: Optional[str] = None
    python_version: Optional[str] = None
    python_versions: Tuple[str, ...] = ()
    error_message: Optional[str] = None

    def __str__(self) -> str:
        return format_config(self)


def _modern_version(module: Any) -> Optional[str]:
    version = getattr(module, "version", None)
    return getattr(version, "VERSION", None)


def _legacy_version(module: Any) -> Optional[str]:
    return getattr(module, "VERSION", None)


def _dunder_version(module: Any) -> Optional[str]:
    return getattr(module, "__version__", None)


# Tried in order, the first string wins
VERSION_STRATEGIES: Tuple[Callable[[Any], Optional[str]], ...] = (
    _modern_version,
    _legacy_version,
    _dunder_version,
)


def extract_version_string(module: Any) -> Optional[str]:
    for strategy in VERSION_STRATEGIES:
        found = strategy(module)
        if isinstance(found, str):
            return found
    return None


def _binding(binding: Optional[DeferredModule]) -> DeferredModule:
    if binding is not None:
        return binding
    from tfbridge.package import tf

    return tf


def _unavailable(
    module: DeferredModule, config: InterpreterConfig
) -> TensorFlowConfig:
    return TensorFlowConfig(
        available=False,
        python_versions=config.python_versions,
        error_message=config_error_message(module, config=config),
    )


def tf_config(binding: Optional[DeferredModule] = None) -> TensorFlowConfig:
    """
    Describe the current TensorFlow configuration.

    Parameters
    ----------
    binding : Optional[DeferredModule]
        Binding to report on; the package-wide ``tfbridge.tf`` by default.

    Returns
    -------
    TensorFlowConfig
        A fresh report on every call. A module that is installed but fails
        to import is reported as unavailable.

    Raises
    ------
    VersionError
        If TensorFlow is importable but reports no version or a malformed
        one.
    """
    module = _binding(binding)
    config = interpreter_config(module.name)
    if not module_available(module.name):
        return _unavailable(module, config)

    # Installed but broken, e.g. a failed native library load
    try:
        resolved = module.resolve()
    except ImportError as exc:
        logger.debug("%s is installed but cannot be imported: %r", module.name, exc)
        return _unavailable(module, config)

    version_raw = extract_version_string(resolved)
    version = parse_version(version_raw)
    return TensorFlowConfig(
        available=True,
        version=version,
        version_str=version_raw,
        location=config.required_module_path,
        python=config.python,
        python_version=config.version,
    )


def tf_version(binding: Optional[DeferredModule] = None) -> Optional[Version]:
    config = tf_config(binding)
    return config.version if config.available else None


def _normalize_path(path: str) -> str:
    try:
        return os.path.realpath(os.path.expanduser(path))
    except (OSError, ValueError) as exc:
        logger.debug("Could not normalize %r: %r", path, exc)
        return path


def config_error_message(
    binding: Optional[DeferredModule] = None,
    config: Optional[InterpreterConfig] = None,
) -> str:
    """
    Diagnostic shown when TensorFlow cannot be found. Never raises.
    """
    message = "Installation of TensorFlow not found."
    if config is None:
        name = binding.name if binding is not None else TF_MODULE
        found = attempt(
            interpreter_config, name, description="Interpreter discovery"
        )
        config = found.value
    if config is not None and len(config.python_versions) > 0:
        message += (
            f"\n\nPython environments searched for "
            f"'{config.required_module or TF_MODULE}' package:\n"
        )
        message += "\n".join(
            f" {_normalize_path(path)}" for path in config.python_versions
        )
        message += "\n"
    message += f"\n{INSTALL_HINT}\n"
    return message


def _aliased(path: Optional[str]) -> str:
    if path is None:
        return ""
    home = os.environ.get("HOME") or os.path.expanduser("~")
    home = home.rstrip(os.sep)
    if not home:
        return path
    if path == home:
        return "~"
    if path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path


def format_config(config: TensorFlowConfig) -> str:
    if not config.available:
        return config.error_message or ""
    return (
        f"TensorFlow v{config.version_str} ({_aliased(config.location)})\n"
        f"Python v{config.python_version} ({_aliased(config.python)})"
    )


def gpu_configured(
    verbose: bool = True, binding: Optional[DeferredModule] = None
) -> Optional[bool]:
    """
    Whether TensorFlow sees a GPU.

    Parameters
    ----------
    verbose : bool
        Also print whether TensorFlow was built with CUDA and the GPU
        device name.
    binding : Optional[DeferredModule]
        Binding to probe; the package-wide ``tfbridge.tf`` by default.

    Returns
    -------
    Optional[bool]
        None when it could not be determined; a warning is emitted then.
    """
    module = _binding(binding)
    try:
        with suppress_warnings():
            result: Optional[bool] = bool(module.test.is_gpu_available())
    except Exception as exc:
        logger.warning("GPU probe failed: %r", exc)
        warnings.warn(
            "Can not determine if GPU is configured.", RuntimeWarning, stacklevel=2
        )
        result = None

    if verbose:
        attempt(_print_gpu_details, module, description="GPU details")
    return result


def _print_gpu_details(module: Any) -> None:
    print(f"TensorFlow built with CUDA:  {module.test.is_built_with_cuda()}")
    print(f"GPU device name:  {module.test.gpu_device_name()}")
