"""OpenTelemetry tracing for kubemcp.

Instrumented code only touches the OpenTelemetry API through
:func:`get_tracer`; until :func:`configure_telemetry` installs an SDK
provider every span is a no-op.

Spans emitted:

* ``kubemcp.rpc`` per JSON-RPC request (``kubemcp.rpc.method``)
* ``kubemcp.tools.call`` per tool call (name, namespace, is_error)
* ``kubemcp.process.run`` per spawned program (program, argc, exit code)

Exporters write to stderr or OTLP, never stdout, which carries the
protocol stream.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from kubemcp.settings.models import TelemetrySettings

ATTR_RPC_METHOD = "kubemcp.rpc.method"
ATTR_TOOL_NAME = "kubemcp.tool.name"
ATTR_TOOL_NAMESPACE = "kubemcp.tool.namespace"
ATTR_TOOL_IS_ERROR = "kubemcp.tool.is_error"
ATTR_PROCESS_PROGRAM = "kubemcp.process.program"
ATTR_PROCESS_ARGC = "kubemcp.process.argc"
ATTR_PROCESS_EXIT_CODE = "kubemcp.process.exit_code"

_INSTRUMENTATION_NAME = "kubemcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer; a no-op one unless telemetry has been configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    settings: TelemetrySettings | None = None,
    *,
    service_name: str = _INSTRUMENTATION_NAME,
) -> Any:
    """Install an SDK tracer provider (requires ``kubemcp[otel]``).

    Spans go to the OTLP endpoint from *settings* when one is set, and
    to stderr as JSON otherwise.  Returns the provider; call its
    ``shutdown()`` on exit to flush batched spans.

    Raises:
        ImportError: If ``opentelemetry-sdk`` (or, for OTLP,
            ``opentelemetry-exporter-otlp``) is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import export  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required to enable tracing. "
            "Install it with: pip install kubemcp[otel]"
        )
        raise ImportError(msg) from exc

    endpoint = settings.otlp_endpoint if settings is not None else None
    if endpoint:
        processor = export.BatchSpanProcessor(_otlp_exporter(endpoint))
    else:
        processor = export.SimpleSpanProcessor(export.ConsoleSpanExporter(out=sys.stderr))

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    return provider


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install kubemcp[otel]"
        )
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
