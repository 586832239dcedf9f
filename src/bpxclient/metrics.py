"""
Prometheus counters for the Backpack client.

Only low-cardinality labels are used: no symbol, path, stream name or key
material ever becomes a label value.
"""

from __future__ import annotations

from prometheus_client import Counter
from prometheus_client.registry import CollectorRegistry

FORBIDDEN_LABELS = frozenset(
    {
        "symbol",
        "endpoint",
        "path",
        "query",
        "instruction",
        "stream",
        "api_key",
        "order_id",
    }
)

REST_OUTCOMES = frozenset({"ok", "api_error", "transport_error", "decode_error"})
WS_OUTCOMES = frozenset({"forwarded", "dropped", "decode_failed", "error_frame", "malformed"})


class ClientMetrics:
    """
    Counters for REST dispatches and websocket frames.

    Usage:
        registry = CollectorRegistry()
        metrics = ClientMetrics(registry=registry)
        client = BpxClient.builder().metrics(metrics).build()
        # generate_latest(registry) -> bytes for a /metrics endpoint
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._rest_requests = Counter(
            "bpx_rest_requests_total",
            "REST requests dispatched, by signing and outcome",
            labelnames=("signed", "outcome"),
            registry=self._registry,
        )
        self._ws_messages = Counter(
            "bpx_ws_messages_total",
            "Websocket frames received, by outcome",
            labelnames=("outcome",),
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_rest(self, *, signed: bool, outcome: str) -> None:
        """Count one dispatched REST request.

        Raises:
            ValueError: If outcome is not one of REST_OUTCOMES.
        """
        if outcome not in REST_OUTCOMES:
            raise ValueError(f"Unknown REST outcome: {outcome}")
        self._rest_requests.labels(signed="true" if signed else "false", outcome=outcome).inc()

    def record_ws(self, outcome: str) -> None:
        """Count one inbound websocket frame.

        Raises:
            ValueError: If outcome is not one of WS_OUTCOMES.
        """
        if outcome not in WS_OUTCOMES:
            raise ValueError(f"Unknown websocket outcome: {outcome}")
        self._ws_messages.labels(outcome=outcome).inc()
