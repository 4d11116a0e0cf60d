import logging
import os
from typing import Any, Optional, Tuple

from tfbridge.constants import (
    CPP_MIN_LOG_LEVEL_OPTION_ENV,
    DEFAULT_ENVIRONMENT,
    DEFAULT_PRIORITY,
    TENSOR_FOREIGN_CLASSES,
)

logger = logging.getLogger(__name__)


def _level_from_environment() -> Optional[int]:
    raw = os.environ.get(CPP_MIN_LOG_LEVEL_OPTION_ENV)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(
            "Ignoring %s=%r: not an integer", CPP_MIN_LOG_LEVEL_OPTION_ENV, raw
        )
        return None


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._cpp_min_log_level = _level_from_environment()
            self._environment = DEFAULT_ENVIRONMENT
            self._priority = DEFAULT_PRIORITY
            self._tensor_classes = TENSOR_FOREIGN_CLASSES

    @property
    def cpp_min_log_level(self) -> Optional[int]:
        """
        Requested TensorFlow C++ log level, clamped to 0..1 when applied.
        None leaves TF_CPP_MIN_LOG_LEVEL untouched.
        """
        return self._cpp_min_log_level

    def set_cpp_min_log_level(self, level: Optional[int]) -> None:
        self._cpp_min_log_level = None if level is None else int(level)

    @property
    def environment(self) -> str:
        """
        Virtualenv name searched for TensorFlow. Read once, when
        tfbridge.package.tf is created on import; later changes only affect
        bindings registered afterwards.
        """
        return self._environment

    def set_environment(self, environment: str) -> None:
        self._environment = str(environment)

    @property
    def priority(self) -> int:
        """
        Priority of the TensorFlow binding. Read once on import, like
        `environment`.
        """
        return self._priority

    def set_priority(self, priority: int) -> None:
        self._priority = int(priority)

    @property
    def tensor_classes(self) -> Tuple[str, ...]:
        """
        Foreign class names treated as tensors by the classification filter
        """
        return self._tensor_classes

    def set_tensor_classes(self, classes: Tuple[str, ...]) -> None:
        self._tensor_classes = tuple(str(c) for c in classes)


class Session:
    """
    Lightweight context manager to scope Config settings.

    Example:
        with Session(tensor_classes=("my.Tensor",)):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    _UNSET = object()

    def __init__(
        self,
        *,
        cpp_min_log_level: Any = _UNSET,
        environment: Optional[str] = None,
        priority: Optional[int] = None,
        tensor_classes: Optional[Tuple[str, ...]] = None,
    ) -> None:
        cfg = Config()
        self._prev = {
            "cpp_min_log_level": cfg.cpp_min_log_level,
            "environment": cfg.environment,
            "priority": cfg.priority,
            "tensor_classes": cfg.tensor_classes,
        }
        self._cpp_min_log_level = cpp_min_log_level
        self._environment = environment
        self._priority = priority
        self._tensor_classes = tensor_classes
        self._cfg = cfg

    def __enter__(self) -> "Config":
        if self._cpp_min_log_level is not Session._UNSET:
            self._cfg.set_cpp_min_log_level(self._cpp_min_log_level)
        if self._environment is not None:
            self._cfg.set_environment(self._environment)
        if self._priority is not None:
            self._cfg.set_priority(self._priority)
        if self._tensor_classes is not None:
            self._cfg.set_tensor_classes(self._tensor_classes)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cfg.set_cpp_min_log_level(self._prev["cpp_min_log_level"])
        self._cfg.set_environment(self._prev["environment"])
        self._cfg.set_priority(self._prev["priority"])
        self._cfg.set_tensor_classes(self._prev["tensor_classes"])
