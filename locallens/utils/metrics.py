"""Prometheus metrics for gateway calls and booking workflow."""

from prometheus_client import Counter, Histogram

# Gateway call metrics
gateway_latency_ms = Histogram(
    "gateway_latency_ms",
    "AI gateway call latency in milliseconds",
    ["operation", "outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000, 64000],
)

gateway_errors_total = Counter(
    "gateway_errors_total",
    "Total AI gateway call errors",
    ["operation", "reason"],
)

# Booking workflow metrics
booking_transitions_total = Counter(
    "booking_transitions_total",
    "Booking status transitions applied",
    ["status"],
)


class PrometheusGatewayMetrics:
    """Prometheus-based gateway metrics implementation."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record gateway call latency."""
        gateway_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)

    def inc_error(self, operation: str, reason: str) -> None:
        """Increment error counter."""
        gateway_errors_total.labels(operation=operation, reason=reason).inc()
