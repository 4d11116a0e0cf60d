"""
Process-wide hook registries used by deferred bindings.

Three kinds of hooks are kept here:

* suppression handlers, which silence a library's own logging while
  ``suppress_warnings()`` is active,
* class filters, which rewrite the list of type tags computed for a value,
* help handlers, which map a value or a topic string to a documentation URL.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ClassFilter = Callable[[List[str]], List[str]]
HelpHandler = Callable[[Any], Optional[str]]


@dataclass(frozen=True)
class SuppressWarningsHandler:
    """
    Pair of callables; ``restore`` receives exactly what ``suppress``
    returned.
    """

    suppress: Callable[[], Any]
    restore: Callable[[Any], None]


_suppress_handlers: List[SuppressWarningsHandler] = []
_class_filters: List[ClassFilter] = []
_help_handlers: List[Tuple[str, HelpHandler]] = []


def register_suppress_warnings_handler(handler: SuppressWarningsHandler) -> None:
    _suppress_handlers.append(handler)
    logger.debug("Registered suppress warnings handler %r", handler)


def register_class_filter(class_filter: ClassFilter) -> None:
    if class_filter in _class_filters:
        return
    _class_filters.append(class_filter)
    logger.debug("Registered class filter %r", class_filter)


def register_help_handler(prefix: str, handler: HelpHandler) -> None:
    _help_handlers.append((prefix, handler))
    logger.debug("Registered help handler for %r", prefix)


def clear_hooks() -> None:
    _suppress_handlers.clear()
    _class_filters.clear()
    _help_handlers.clear()


@contextmanager
def suppress_warnings() -> Iterator[None]:
    """
    Silence every registered library for the duration of the block.

    Handlers are suppressed in registration order and restored in reverse
    order, also when the block raises.
    """
    contexts = []
    try:
        for handler in list(_suppress_handlers):
            contexts.append((handler, handler.suppress()))
        yield
    finally:
        for handler, context in reversed(contexts):
            handler.restore(context)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def object_classes(obj: Any) -> List[str]:
    """
    Fully qualified names of the classes in ``type(obj).__mro__``.

    Examples
    --------
    >>> object_classes(True)
    ['builtins.bool', 'builtins.int', 'builtins.object']
    """
    return [qualified_name(cls) for cls in type(obj).__mro__]


def classify(obj: Any) -> List[str]:
    """
    Type tags for `obj` after every registered class filter has run.
    """
    classes = object_classes(obj)
    for class_filter in list(_class_filters):
        classes = class_filter(classes)
    return classes


def _target_name(target: Any) -> str:
    if isinstance(target, str):
        return target
    module = getattr(target, "__module__", None)
    name = getattr(target, "__qualname__", None)
    if module and name:
        return f"{module}.{name}"
    return qualified_name(type(target))


def help_url(target: Any) -> Optional[str]:
    """
    Documentation URL for `target`, a value or a topic string.

    Returns the first non-None answer of the handlers whose prefix matches,
    or None when no handler knows the target.
    """
    name = _target_name(target)
    for prefix, handler in list(_help_handlers):
        if not name.startswith(prefix):
            continue
        url = handler(target)
        if url is not None:
            return url
    return None
