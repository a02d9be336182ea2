"""Span helpers for registry calls.

Everything here goes through the OpenTelemetry API only; spans are no-ops
until the application installs an SDK and exporter.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Keyword arguments recorded as span attributes. Schema text, metadata and
# credentials stay out of traces.
_RECORDED_ARGS = frozenset({
    "subject", "version", "schema_id", "method", "path",
    "normalize", "deleted", "permanent",
})


def _record_args(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for name, value in kwargs.items():
        if name in _RECORDED_ARGS:
            span.set_attribute(f"registry.{name}", str(value))


def traced(
    span_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Run a coroutine function inside its own span.

    The span is marked ERROR with the exception recorded when the call
    raises, OK otherwise. Only allowlisted keyword arguments are attached.

    Args:
        span_name: Span name (defaults to module.qualname).
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        tracer = trace.get_tracer(__name__)
        name = span_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                _record_args(span, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_event(name: str, attributes: dict[str, str] | None = None) -> None:
    """Attach an event to the current span when one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
