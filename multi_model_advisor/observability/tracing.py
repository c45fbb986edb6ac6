"""
OpenTelemetry tracing for multi-model-advisor.

Three kinds of spans exist:
- one SERVER span per inbound HTTP request (TracingMiddleware)
- one ``dispatch <model>`` span per model in a query batch
- outbound calls to Ollama carry the W3C ``traceparent`` header

The trace ID of the active span is also stamped on every log line
(see core.logging.add_trace_id).
"""

from typing import Any, Callable, Optional

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.propagate import extract, inject
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer

HTTP_TRACER_NAME = "multi_model_advisor.http"

_provider: Optional[TracerProvider] = None


def _span_processor(otlp_endpoint: Optional[str]) -> SpanProcessor:
    """Batch spans to the OTLP collector, or to the console when none is set."""
    if not otlp_endpoint:
        return BatchSpanProcessor(ConsoleSpanExporter())

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter,
    )

    return BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint))


def setup_tracing(
    service_name: str = "multi-model-advisor",
    otlp_endpoint: Optional[str] = None,
    service_version: str = "1.0.0",
) -> TracerProvider:
    """
    Install the global TracerProvider for the advisor.

    Args:
        service_name: Reported as ``service.name``
        otlp_endpoint: OTLP gRPC collector, e.g. http://localhost:4317
        service_version: Reported as ``service.version``

    Returns:
        The installed provider
    """
    global _provider

    provider = TracerProvider(
        resource=Resource.create(
            {SERVICE_NAME: service_name, SERVICE_VERSION: service_version}
        )
    )
    provider.add_span_processor(_span_processor(otlp_endpoint))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans. Safe to call when tracing was never set up."""
    global _provider

    if _provider is None:
        return
    _provider.shutdown()
    _provider = None


def get_tracer(name: str) -> Tracer:
    return trace.get_tracer(name)


def get_current_trace_id() -> Optional[str]:
    """Hex trace ID of the active span, or None outside any span."""
    trace_id = trace.get_current_span().get_span_context().trace_id
    return format(trace_id, "032x") if trace_id else None


def inject_trace_context(headers: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Add ``traceparent`` (when a span is active) to outbound headers."""
    carrier = {} if headers is None else headers
    inject(carrier)
    return carrier


def extract_trace_context(headers: dict[str, Any]) -> Context:
    """Parent context carried by inbound headers."""
    return extract(headers)


class TracingMiddleware:
    """
    ASGI middleware opening a SERVER span around each HTTP request.

    Requests to ``exclude_paths`` (health probes) are passed through
    untraced. 5xx responses and escaping exceptions mark the span as
    an error.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        exclude_paths: Optional[list[str]] = None,
    ) -> None:
        self.app = app
        self.exclude_paths = frozenset(exclude_paths or ())
        self.tracer = get_tracer(HTTP_TRACER_NAME)

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http" or scope.get("path") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")
        inbound = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", [])
        }

        with self.tracer.start_as_current_span(
            f"{method} {path}",
            context=extract_trace_context(inbound),
            kind=SpanKind.SERVER,
            attributes={"http.method": method, "http.route": path},
        ) as span:

            async def send_with_status(message: dict[str, Any]) -> None:
                if message["type"] == "http.response.start":
                    status_code = message.get("status", 500)
                    span.set_attribute("http.status_code", status_code)
                    if status_code >= 500:
                        span.set_status(Status(StatusCode.ERROR))
                await send(message)

            try:
                await self.app(scope, receive, send_with_status)
            except Exception as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise
