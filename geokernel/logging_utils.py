"""Verbose DEBUG tracing for kernel entry points.

Element collections can be large, so arguments are rendered through a
summarising repr: elements print as ``<kind id>``, element mappings print as a
count plus the first few ids, numpy arrays print as shape and range.
"""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Optional, Sequence, Set, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_repr = reprlib.Repr()
_repr.maxother = 120
_repr.maxstring = 80
_repr.maxlist = 6
_repr.maxtuple = 6
_repr.maxdict = 6

_MAX_ITEMS = 4


def _is_element(value: Any) -> bool:
    return hasattr(value, "kind") and hasattr(value, "id") and hasattr(value, "definition")


def _summarize_array(value: np.ndarray) -> str:
    parts = [f"ndarray(shape={tuple(value.shape)})"]
    if value.size and np.issubdtype(value.dtype, np.number):
        finite = value[np.isfinite(value)]
        if finite.size:
            parts.append(f"min={float(finite.min()):.6g}")
            parts.append(f"max={float(finite.max()):.6g}")
    return " ".join(parts)


def summarize(value: Any) -> str:
    """Return a short, log-friendly rendering of ``value``."""

    if _is_element(value):
        return f"<{value.kind} {value.id}>"
    if isinstance(value, np.ndarray):
        return _summarize_array(value)
    if isinstance(value, Mapping):
        if value and all(_is_element(v) for v in value.values()):
            keys = list(value)[:_MAX_ITEMS]
            more = ", ..." if len(value) > _MAX_ITEMS else ""
            return f"elements[{len(value)}]({', '.join(keys)}{more})"
        items = [f"{summarize(k)}: {summarize(v)}" for k, v in list(value.items())[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append("...")
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (list, tuple)):
        items = [summarize(item) for item in value[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append("...")
        open_br, close_br = ("(", ")") if isinstance(value, tuple) else ("[", "]")
        return f"{open_br}{', '.join(items)}{close_br}"
    if callable(value) and not isinstance(value, type):
        return f"<callable {getattr(value, '__qualname__', type(value).__name__)}>"
    try:
        return _repr.repr(value)
    except Exception as exc:  # pragma: no cover - repr of foreign objects
        return f"<repr-error {exc!r}>"


def _format_arguments(args: Sequence[Any], kwargs: Mapping[str, Any]) -> str:
    parts = [summarize(arg) for arg in args]
    parts.extend(f"{key}={summarize(value)}" for key, value in kwargs.items())
    return ", ".join(parts) if parts else "no-args"


def debug_log_call(
    logger: logging.Logger, *, name: Optional[str] = None, log_result: bool = True
) -> Callable[[F], F]:
    """Return a decorator that logs entry, exit and failures at DEBUG level."""

    def decorator(func: F) -> F:
        if getattr(func, "_debug_logging_wrapped", False):
            return func

        qualname = name or getattr(func, "__qualname__", func.__name__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("-> %s(%s)", qualname, _format_arguments(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.debug("!! %s raised", qualname, exc_info=True)
                raise
            if log_result:
                logger.debug("<- %s = %s", qualname, summarize(result))
            else:
                logger.debug("<- %s", qualname)
            return result

        setattr(wrapper, "_debug_logging_wrapped", True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap the public module-level functions of ``namespace`` with :func:`debug_log_call`.

    Private helpers (leading underscore) are left alone; they run in tight
    sampling loops and would flood the log.
    """

    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(module_name if isinstance(module_name, str) else __name__)
    skip_set: Set[str] = set(skip or ())

    for attr, value in list(namespace.items()):
        if attr.startswith("_") or attr in skip_set:
            continue
        if inspect.isfunction(value) and value.__module__ == module_name:
            namespace[attr] = debug_log_call(logger, name=attr)(value)


__all__ = ["apply_debug_logging", "debug_log_call", "summarize"]
