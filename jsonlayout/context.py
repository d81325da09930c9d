"""
Mapped diagnostic context (MDC) backed by contextvars.

Each write replaces the stored dict, so a snapshot taken during a call is
never changed by later writes and every thread or asyncio task sees its own
context.

Example:
    with context.bound(request_id='req-1'):
        logger.info('Handling request')   # includes request_id
"""

import contextvars
from contextlib import contextmanager
from typing import Any, Dict, Iterator

_mdc: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar(
    'jsonlayout_mdc', default={}
)


def put(key: str, value: Any) -> None:
    """Set one context entry"""
    current = dict(_mdc.get())
    current[str(key)] = value
    _mdc.set(current)


def remove(*keys: str) -> None:
    current = dict(_mdc.get())
    for key in keys:
        current.pop(key, None)
    _mdc.set(current)


def clear() -> None:
    _mdc.set({})


def snapshot() -> Dict[str, Any]:
    """Return a copy of the current context, empty when nothing is set"""
    return dict(_mdc.get())


@contextmanager
def bound(**fields: Any) -> Iterator[None]:
    """Add entries for the duration of the block, then restore the previous context"""
    current = dict(_mdc.get())
    current.update(fields)
    token = _mdc.set(current)
    try:
        yield
    finally:
        _mdc.reset(token)
