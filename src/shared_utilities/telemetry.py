"""
OpenTelemetry instrumentation utilities for monitoring and observability
"""

import functools
import os
import sys
import time
from collections.abc import Callable
from contextlib import contextmanager
from typing import Any

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Status, StatusCode


class TelemetryManager:
    """Manages OpenTelemetry setup and instrumentation"""

    def __init__(self, service_name: str = "nixos-update-status"):
        """
        Initialize telemetry manager.

        Args:
            service_name: Name of the service for telemetry identification
        """
        self.service_name = service_name
        self.tracer = None
        self.enabled = os.getenv("OTEL_SDK_DISABLED", "false").lower() != "true"

        if self.enabled:
            self._setup_telemetry()

    def _setup_telemetry(self) -> None:
        """Set up OpenTelemetry tracing"""
        resource = Resource.create(
            {
                "service.name": self.service_name,
                "service.version": "0.1.0",
            }
        )

        tracer_provider = TracerProvider(resource=resource)

        # stdout is reserved for tool output
        if self._console_export_requested():
            tracer_provider.add_span_processor(
                BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr))
            )

        self.tracer = tracer_provider.get_tracer(__name__)

    def _console_export_requested(self) -> bool:
        """Check whether spans should be printed to the console"""
        return os.getenv("OTEL_TRACES_EXPORTER", "").lower() == "console"

    @contextmanager
    def trace_operation(
        self, operation_name: str, attributes: dict[str, Any] | None = None
    ):
        """
        Context manager for tracing operations.

        Args:
            operation_name: Name of the operation being traced
            attributes: Additional attributes to add to the span

        Yields:
            The current span
        """
        if not self.enabled or not self.tracer:
            yield None
            return

        with self.tracer.start_as_current_span(operation_name) as span:
            if attributes:
                for key, value in attributes.items():
                    span.set_attribute(key, str(value))

            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise

    def trace_function(
        self,
        operation_name: str | None = None,
        include_args: bool = False,
        include_result: bool = False,
    ):
        """
        Decorator for tracing function calls.

        Args:
            operation_name: Custom operation name (defaults to function name)
            include_args: Whether to include function arguments as attributes
            include_result: Whether to include return value as attribute

        Returns:
            Decorated function
        """

        def decorator(func: Callable) -> Callable:
            if not self.enabled:
                return func

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                name = operation_name or f"{func.__module__}.{func.__name__}"

                with self.trace_operation(name) as span:
                    if span and include_args:
                        for i, arg in enumerate(args):
                            span.set_attribute(f"arg.{i}", str(arg)[:100])

                        for key, value in kwargs.items():
                            span.set_attribute(f"kwarg.{key}", str(value)[:100])

                    start_time = time.time()
                    result = func(*args, **kwargs)

                    if span:
                        span.set_attribute("duration_seconds", time.time() - start_time)

                        if include_result and result is not None:
                            span.set_attribute("result", str(result)[:100])

                    return result

            return wrapper

        return decorator


# Global telemetry manager instance
_telemetry_manager: TelemetryManager | None = None


def get_telemetry_manager() -> TelemetryManager:
    """Get or create the global telemetry manager instance"""
    global _telemetry_manager
    if _telemetry_manager is None:
        _telemetry_manager = TelemetryManager()
    return _telemetry_manager


@contextmanager
def trace_operation(operation_name: str, attributes: dict[str, Any] | None = None):
    """
    Convenience function for tracing operations.

    The manager is looked up on entry, so environment loaded after import
    (``.env`` files) still applies when used as a decorator.

    Args:
        operation_name: Name of the operation
        attributes: Additional attributes
    """
    with get_telemetry_manager().trace_operation(operation_name, attributes) as span:
        yield span


def trace_function(
    operation_name: str | None = None,
    include_args: bool = False,
    include_result: bool = False,
):
    """
    Convenience decorator for tracing functions.

    The manager is looked up per call rather than at decoration time.

    Args:
        operation_name: Custom operation name
        include_args: Whether to include function arguments
        include_result: Whether to include return value
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            traced = get_telemetry_manager().trace_function(
                operation_name, include_args, include_result
            )(func)
            return traced(*args, **kwargs)

        return wrapper

    return decorator
