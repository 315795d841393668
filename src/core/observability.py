"""Observability helpers for the reconciliation engine.

Structured logging is configured once at import from settings
(``APP_LOG_LEVEL``, ``APP_ENV``). The ``traced`` decorator records entry,
exit, duration and failures of a call and is applied at the adapter boundary,
where network calls can be slow or fail.
"""

import functools
import inspect
import logging
import sys
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar, cast

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

from src.config.settings import get_settings

F = TypeVar("F", bound=Callable[..., Any])


def configure_logging() -> None:
    """Route structlog through stdlib logging; JSON in production or when piped."""
    settings = get_settings()
    json_output = settings.is_production or not sys.stderr.isatty()
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("src").setLevel(settings.app_log_level.upper())


configure_logging()
logger = structlog.get_logger("src.trace")


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to every log line emitted in this context."""
    bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    unbind_contextvars("correlation_id")


@contextmanager
def _span(name: str, level: int, metadata: dict[str, Any]) -> Iterator[None]:
    execution_id = f"{name}_{time.time_ns() // 1000}"
    bind_contextvars(execution_id=execution_id)
    logger.log(level, f"Executing function: {name}", execution_id=execution_id, **metadata)
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(
            f"Error in function: {name}",
            execution_id=execution_id,
            duration_ms=(time.perf_counter() - started) * 1000,
            error_type=type(e).__name__,
            error_message=str(e),
            **metadata,
        )
        raise
    else:
        logger.log(
            level,
            f"Successfully executed: {name}",
            execution_id=execution_id,
            duration_ms=(time.perf_counter() - started) * 1000,
            **metadata,
        )
    finally:
        unbind_contextvars("execution_id")


def traced(*, log_level: str = "INFO", add_metadata: dict[str, Any] | None = None) -> Callable[[F], F]:
    """Decorator tracing a sync or async function; exceptions are re-raised.

    Example:
        >>> @traced(log_level="DEBUG")
        ... async def fetch_catalog() -> list[dict]:
        ...     return []
    """
    level = logging.getLevelName(log_level.upper())
    metadata = dict(add_metadata or {})

    def decorator(func: F) -> F:
        name = f"{func.__module__}.{func.__qualname__}"

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _span(name, level, metadata):
                    return await func(*args, **kwargs)

            return cast(F, async_wrapper)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _span(name, level, metadata):
                return func(*args, **kwargs)

        return cast(F, sync_wrapper)

    return decorator


def trace_adapter(func: F) -> F:
    """Trace an adapter-layer call (network I/O)."""
    return traced(log_level="INFO", add_metadata={"layer": "adapter"})(func)
