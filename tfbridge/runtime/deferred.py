"""
Deferred module bindings.

A `DeferredModule` stands in for a module that is imported on first
attribute access. Resolution happens once per process: the outcome,
the module or the error, is cached and returned on every later access.
"""

from __future__ import annotations

import importlib
import logging
import threading
from enum import Enum
from types import ModuleType
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class BindingState(Enum):
    DEFERRED = "deferred"
    RESOLVED = "resolved"
    FAILED = "failed"


class DeferredModule:
    """
    Proxy that imports `name` on first use.

    Parameters
    ----------
    name : str
        Importable module name.
    priority : int
        Priority of this binding when bindings disagree on the environment.
    environment : Optional[str]
        Name of the virtual environment the module is expected in.
    on_load : Optional[Callable[[], None]]
        Called once after a successful import.
    on_error : Optional[Callable[[ImportError], None]]
        Called once after a failed import. Whatever it raises replaces the
        original ImportError.
    """

    __slots__ = (
        "_name",
        "_priority",
        "_environment",
        "_on_load",
        "_on_error",
        "_state",
        "_module",
        "_error",
        "_lock",
    )

    def __init__(
        self,
        name: str,
        *,
        priority: int = 0,
        environment: Optional[str] = None,
        on_load: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[ImportError], None]] = None,
    ) -> None:
        self._name = name
        self._priority = priority
        self._environment = environment
        self._on_load = on_load
        self._on_error = on_error
        self._module: Optional[ModuleType] = None
        self._error: Optional[BaseException] = None
        self._lock = threading.RLock()
        self._state = BindingState.DEFERRED

    @property
    def name(self) -> str:
        return self._name

    @property
    def priority(self) -> int:
        return self._priority

    @property
    def environment(self) -> Optional[str]:
        return self._environment

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return self._state is BindingState.RESOLVED

    def resolve(self) -> ModuleType:
        """
        Import the module if that has not happened yet and return it.

        Raises
        ------
        Exception
            The cached resolution error when the import failed, on this or
            any earlier call.
        """
        if self._state is BindingState.RESOLVED:
            return self._module  # type: ignore[return-value]
        with self._lock:
            if self._state is BindingState.RESOLVED:
                return self._module  # type: ignore[return-value]
            if self._state is BindingState.FAILED:
                raise self._error  # type: ignore[misc]
            try:
                module = importlib.import_module(self._name)
            except ImportError as exc:
                logger.debug("Deferred import of %r failed: %r", self._name, exc)
                self._fail(exc)
                if self._error is exc:
                    raise
                raise self._error from exc  # type: ignore[misc]
            self._module = module
            self._state = BindingState.RESOLVED
            logger.debug("Resolved deferred module %r", self._name)
            if self._on_load is not None:
                self._on_load()
            return module

    def _fail(self, exc: ImportError) -> None:
        self._state = BindingState.FAILED
        self._error = exc
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception as err:
            self._error = err

    def has_attr(self, name: str) -> bool:
        return hasattr(self.resolve(), name)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.resolve(), name)

    def __dir__(self) -> List[str]:
        if self._state is BindingState.RESOLVED:
            return dir(self._module)
        return sorted(set(dir(type(self))))

    def __repr__(self) -> str:
        return f"<DeferredModule {self._name!r} ({self._state.value})>"


_registry: List[DeferredModule] = []


def import_deferred(
    name: str,
    *,
    priority: int = 0,
    environment: Optional[str] = None,
    on_load: Optional[Callable[[], None]] = None,
    on_error: Optional[Callable[[ImportError], None]] = None,
) -> DeferredModule:
    """
    Register a deferred binding for `name`; nothing is imported yet.
    """
    module = DeferredModule(
        name,
        priority=priority,
        environment=environment,
        on_load=on_load,
        on_error=on_error,
    )
    _registry.append(module)
    return module


def registered_modules() -> List[DeferredModule]:
    return list(_registry)


def preferred_environment() -> Optional[str]:
    """
    Environment of the highest-priority registration that names one.
    Ties go to the earliest registration.
    """
    best: Optional[DeferredModule] = None
    for module in _registry:
        if module.environment is None:
            continue
        if best is None or module.priority > best.priority:
            best = module
    return best.environment if best is not None else None
