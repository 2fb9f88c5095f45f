"""Telemetry — span trees for service calls, collected only under --verbose.

A ``@traced`` service method opens a root span; ``trace_span`` opens
children beneath whatever span is current, and ``annotate`` attaches
values to it. When the call returns a ServiceResult, the finished tree
lands in ``result.meta["telemetry"]``. With telemetry off every helper
returns after a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar, overload

import structlog

from enumlab.services.result import ServiceResult

log = structlog.get_logger("enumlab.telemetry")

_verbose_enabled: ContextVar[bool] = ContextVar("_verbose_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("_current_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """One timed region of a service call."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def child(self, name: str) -> Span:
        span = Span(name=name, parent=self)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


def enable_telemetry() -> None:
    """Turn span collection on (AppContext does this for --verbose)."""
    _verbose_enabled.set(True)


def disable_telemetry() -> None:
    _verbose_enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    if not _verbose_enabled.get():
        return None
    return _current_span.get()


def annotate(**values: Any) -> None:
    """Attach *values* to the innermost open span, if any."""
    span = get_current_span()
    if span is not None:
        span.annotations.update(values)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Open a child span under the current one.

    Yields None when telemetry is off or no traced call is running.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return

    span = parent.child(name)
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


def _finish(span: Span, *, ok: bool) -> None:
    span.end()
    log.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
        children=len(span.children),
    )


def _wrap(func: Callable[_P, _R], name: str) -> Callable[_P, _R]:
    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _verbose_enabled.get():
            return func(*args, **kwargs)

        span = Span(name=name)
        token = _current_span.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception:
            _finish(span, ok=False)
            raise
        finally:
            _current_span.reset(token)

        if not isinstance(result, ServiceResult):
            _finish(span, ok=True)
            return result
        if result.error is not None:
            span.annotate("error", result.error.code)
        _finish(span, ok=result.ok)
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


@overload
def traced(func: Callable[_P, _R], /) -> Callable[_P, _R]: ...


@overload
def traced(name: str, /) -> Callable[[Callable[_P, _R]], Callable[_P, _R]]: ...


def traced(target: Any, /) -> Any:
    """Trace a service method as a root span.

    Use bare (``@traced``, span named after the method's qualname) or
    with an explicit span name (``@traced("account.replay")``).
    """
    if isinstance(target, str):
        return lambda func: _wrap(func, target)
    return _wrap(target, target.__qualname__)
