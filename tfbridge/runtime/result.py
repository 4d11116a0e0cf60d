"""
Explicit outcomes for best-effort calls.

`attempt` runs a callable that is allowed to fail. Failures are logged and
returned as a failed `Result` instead of propagating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def attempt(
    fn: Callable[..., T],
    *args: Any,
    description: str,
    level: int = logging.DEBUG,
    **kwargs: Any,
) -> Result[T]:
    """
    Call `fn(*args, **kwargs)` and capture its outcome.

    Parameters
    ----------
    fn : Callable[..., T]
        Callable to run.
    description : str
        Short description of the call, used in the log record on failure.
    level : int
        Logging level for failures. Defaults to DEBUG.

    Returns
    -------
    Result[T]
        ``Result(value=...)`` on success, ``Result(error=...)`` on failure.
    """
    try:
        return Result(value=fn(*args, **kwargs))
    except Exception as exc:
        logger.log(
            level, "%s failed: %r", description, exc, extra={"hook": description}
        )
        return Result(error=exc)
