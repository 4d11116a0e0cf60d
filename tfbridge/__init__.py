"""Lazy TensorFlow binding with configuration reporting."""

# TensorFlow is not imported here; `tf` resolves on first attribute access.

import logging

from tfbridge import constants, errors, help, options, runtime
from tfbridge.errors import TensorFlowNotFoundError, TfBridgeError, VersionError
from tfbridge.options import Config, Session
from tfbridge.package import (
    initialize,
    is_modern_api,
    is_tensor,
    restore,
    suppress,
    tensor_class_filter,
    tf,
)
from tfbridge.reporter import (
    TensorFlowConfig,
    config_error_message,
    format_config,
    gpu_configured,
    tf_config,
    tf_version,
)
from tfbridge.version import Version, parse_version

logging.getLogger(__name__).addHandler(logging.NullHandler())

initialize()


__all__ = [
    "constants",
    "errors",
    "help",
    "options",
    "runtime",
    "Config",
    "Session",
    "TensorFlowConfig",
    "TensorFlowNotFoundError",
    "TfBridgeError",
    "Version",
    "VersionError",
    "config_error_message",
    "format_config",
    "gpu_configured",
    "initialize",
    "is_modern_api",
    "is_tensor",
    "parse_version",
    "restore",
    "suppress",
    "tensor_class_filter",
    "tf",
    "tf_config",
    "tf_version",
]
