"""
Error types raised by tfbridge.
"""


class TfBridgeError(Exception):
    """Base class for tfbridge errors."""


class TensorFlowNotFoundError(TfBridgeError, ImportError):
    """
    Raised when the deferred TensorFlow binding cannot be resolved.

    The message is the diagnostic built by
    :func:`tfbridge.reporter.config_error_message`.
    """


class VersionError(TfBridgeError, ValueError):
    """Raised when a version string is absent or malformed."""
