from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge

registry = CollectorRegistry()

EXECUTIONS = Counter(
    "reqbridge_executions_total",
    "Outbound requests executed, by outcome",
    ["outcome"],
    registry=registry,
)
EMITTED_ROUTINES = Counter(
    "reqbridge_emitted_routines_total",
    "Client-side request routines generated",
    registry=registry,
)
STREAM_EVENTS = Counter(
    "reqbridge_stream_events_total",
    "Event-stream frames written to peers",
    registry=registry,
)
STREAM_SESSIONS = Gauge(
    "reqbridge_stream_sessions_active",
    "Event-stream sessions currently open",
    registry=registry,
)
