"""
Links from TensorFlow objects and topics to the TensorFlow API reference.
"""

from __future__ import annotations

from typing import Any, Optional

from tfbridge.constants import TF_API_DOCS
from tfbridge.runtime.hooks import register_help_handler

_TOPIC_PREFIXES = ("tf.", "tensorflow.")


def _api_name(target: Any) -> Optional[str]:
    if isinstance(target, str):
        for prefix in _TOPIC_PREFIXES:
            if target.startswith(prefix) and len(target) > len(prefix):
                return target[len(prefix):]
        return None
    # Symbols exported through tf_export carry their public names
    names = getattr(target, "_tf_api_names", None)
    if names:
        return names[0]
    return None


def tf_help_url(target: Any) -> Optional[str]:
    """
    API reference URL for a TensorFlow symbol.

    Examples
    --------
    >>> tf_help_url("tf.nn.relu")
    'https://www.tensorflow.org/api_docs/python/tf/nn/relu'
    """
    name = _api_name(target)
    if name is None:
        return None
    return f"{TF_API_DOCS}tf/{name.replace('.', '/')}"


def register_tf_help_handler() -> None:
    register_help_handler("tensorflow", tf_help_url)
    register_help_handler("tf.", tf_help_url)
