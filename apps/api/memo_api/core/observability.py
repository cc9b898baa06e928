"""Logging, request context and function tracing."""

import asyncio
import logging
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable, TypeVar

from fastapi import Request, Response

from memo_api.core.feature_flags import is_enabled

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_logging_configured = False


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging once for the process."""
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _logging_configured = True


def get_request_id() -> str:
    """Get current request ID."""
    return request_id_var.get()


def get_trace_id() -> str:
    """Get current trace ID."""
    return trace_id_var.get()


def set_request_context(request_id: str, trace_id: str | None = None) -> None:
    """Set request context variables."""
    request_id_var.set(request_id)
    trace_id_var.set(trace_id or request_id)


async def request_middleware(request: Request, call_next: Callable) -> Response:
    """Tag each request with ids and log its outcome."""
    request_id = str(uuid.uuid4())
    trace_id = request.headers.get("x-trace-id", request_id)

    set_request_context(request_id, trace_id)
    request.state.request_id = request_id
    request.state.trace_id = trace_id

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["x-request-id"] = request_id
    response.headers["x-trace-id"] = trace_id
    response.headers["x-process-time"] = str(process_time)

    logger.info(
        "Request processed",
        extra={
            "request_id": request_id,
            "trace_id": trace_id,
            "method": request.method,
            "url": str(request.url),
            "status_code": response.status_code,
            "process_time": process_time,
        },
    )

    return response


def _context(function_name: str) -> dict[str, Any]:
    return {
        "request_id": get_request_id(),
        "trace_id": get_trace_id(),
        "function": function_name,
    }


def _log_success(function_name: str, start_time: float) -> None:
    logger.info(
        f"Completed {function_name}",
        extra={
            **_context(function_name),
            "duration": time.time() - start_time,
            "status": "success",
        },
    )


def _log_failure(function_name: str, start_time: float, error: Exception) -> None:
    logger.error(
        f"Failed {function_name}",
        extra={
            **_context(function_name),
            "duration": time.time() - start_time,
            "status": "error",
            "error": str(error),
        },
        exc_info=True,
    )


def trace_function(name: str | None = None) -> Callable[[F], F]:
    """Decorator that logs start, completion and failure of a call."""
    def decorator(func: F) -> F:
        if not is_enabled("enable_tracing"):
            return func

        function_name = name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            logger.info(f"Starting {function_name}", extra=_context(function_name))
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_failure(function_name, start_time, e)
                raise
            _log_success(function_name, start_time)
            return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            logger.info(f"Starting {function_name}", extra=_context(function_name))
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_failure(function_name, start_time, e)
                raise
            _log_success(function_name, start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
