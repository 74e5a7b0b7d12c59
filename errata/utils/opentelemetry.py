"""\
OpenTelemetry
=============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Sunday, October 18 2026
Last updated on: Sunday, October 18 2026

This module provides `OpenTelemetry` integration for the framework. It
configures a tracer from the framework's configuration and records
classified errors on spans together with their error class and SQL
state, so traces can be filtered by error class.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.trace import Status
from opentelemetry.trace import StatusCode

from errata.core.config import Config
from errata.core.exceptions import ErrataThrowable

__all__: list[str] = [
    "ERROR_CLASS_ATTRIBUTE",
    "SQL_STATE_ATTRIBUTE",
    "get_tracer",
    "record_error",
]

ERROR_CLASS_ATTRIBUTE: str = "errata.error_class"
SQL_STATE_ATTRIBUTE: str = "db.response.status_code"


def get_tracer(
    config: Config | None = None,
    name: str | None = None,
) -> trace.Tracer:
    """Configure and return a tracer with proper integration.

    This function sets up `OpenTelemetry TracerProvider` with
    configuration based on the framework's configurations. Spans are
    printed to the console in debug mode and exported over OTLP
    otherwise.

    :param config: An optional configuration object to initialise the
        tracer. If not provided, a default `Config` instance is created.
    :param name: Override for the service name, defaults to `None`. If
        not provided, uses the name from the configuration.
    :return: A configured `OpenTelemetry Tracer` instance.
    """
    if config is None:
        config = Config()
    service = name or config.telemetry.name or config.name
    resource = Resource.create(
        {
            "service.name": service,
            "service.version": config.version,
            "deployment.environment": (
                "development" if config.debug else "production"
            ),
            "telemetry.sdk.name": "errata",
        }
    )
    provider = TracerProvider(resource=resource)
    if config.telemetry.enabled:
        if config.debug:
            processor = SimpleSpanProcessor(ConsoleSpanExporter())
        else:
            processor = BatchSpanProcessor(OTLPSpanExporter())
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    return trace.get_tracer(service)


def record_error(
    error: BaseException,
    span: trace.Span | None = None,
) -> None:
    """Record an error on a span.

    The error is recorded as a span event and the span status is set to
    error. For classified errors, the error class and the SQL state are
    also set as span attributes when present.

    :param error: The error to record.
    :param span: The span to record the error on, defaults to the
        current span.
    """
    if span is None:
        span = trace.get_current_span()
    attributes: dict[str, str] = {}
    if isinstance(error, ErrataThrowable):
        if error.error_class is not None:
            attributes[ERROR_CLASS_ATTRIBUTE] = error.error_class
        if error.sql_state is not None:
            attributes[SQL_STATE_ATTRIBUTE] = error.sql_state
    span.record_exception(error, attributes=attributes)
    span.set_attributes(attributes)
    span.set_status(Status(StatusCode.ERROR, str(error)))
