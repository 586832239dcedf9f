"""Tests for client prometheus counters."""

from __future__ import annotations

import re

import pytest
from prometheus_client import generate_latest
from prometheus_client.registry import CollectorRegistry

from bpxclient.metrics import FORBIDDEN_LABELS, REST_OUTCOMES, WS_OUTCOMES, ClientMetrics


class TestClientMetrics:
    """Counter names, labels and validation."""

    def test_rest_counter(self) -> None:
        """REST requests are counted by signed/outcome."""
        registry = CollectorRegistry()
        metrics = ClientMetrics(registry=registry)

        metrics.record_rest(signed=True, outcome="ok")
        metrics.record_rest(signed=True, outcome="ok")
        metrics.record_rest(signed=False, outcome="api_error")

        assert registry.get_sample_value(
            "bpx_rest_requests_total", {"signed": "true", "outcome": "ok"}
        ) == 2.0
        assert registry.get_sample_value(
            "bpx_rest_requests_total", {"signed": "false", "outcome": "api_error"}
        ) == 1.0

    def test_ws_counter(self) -> None:
        """Websocket frames are counted by outcome."""
        registry = CollectorRegistry()
        metrics = ClientMetrics(registry=registry)

        metrics.record_ws("forwarded")
        metrics.record_ws("malformed")

        assert registry.get_sample_value("bpx_ws_messages_total", {"outcome": "forwarded"}) == 1.0
        assert registry.get_sample_value("bpx_ws_messages_total", {"outcome": "malformed"}) == 1.0

    def test_unknown_outcome_rejected(self) -> None:
        """Outcomes outside the fixed set are refused."""
        metrics = ClientMetrics()
        with pytest.raises(ValueError):
            metrics.record_rest(signed=False, outcome="BTC_USDC")
        with pytest.raises(ValueError):
            metrics.record_ws("ticker.SOL_USDC")

    def test_outcome_sets(self) -> None:
        """Outcome sets are the documented ones."""
        assert REST_OUTCOMES == {"ok", "api_error", "transport_error", "decode_error"}
        assert WS_OUTCOMES == {"forwarded", "dropped", "decode_failed", "error_frame", "malformed"}

    def test_no_forbidden_labels(self) -> None:
        """Exported samples use only low-cardinality labels."""
        registry = CollectorRegistry()
        metrics = ClientMetrics(registry=registry)
        for outcome in REST_OUTCOMES:
            metrics.record_rest(signed=True, outcome=outcome)
        for outcome in WS_OUTCOMES:
            metrics.record_ws(outcome)

        output = generate_latest(registry).decode("utf-8")
        labels = {
            pair.split("=")[0]
            for match in re.finditer(r"\{([^}]+)\}", output)
            for pair in match.group(1).split(",")
        }

        assert labels <= {"signed", "outcome"}
        assert not labels & FORBIDDEN_LABELS

    def test_separate_registries(self) -> None:
        """Two instances on separate registries do not collide."""
        ClientMetrics(registry=CollectorRegistry())
        ClientMetrics(registry=CollectorRegistry())
