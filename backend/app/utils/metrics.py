"""Prometheus metrics for publishing, image checks and autosave."""

from prometheus_client import Counter, Histogram

# Publish metrics
flex_publish_total = Counter(
    "flex_publish_total",
    "Total publish attempts",
    ["outcome"],
)

# Image check metrics
image_check_total = Counter(
    "image_check_total",
    "Total image reachability checks",
    ["level"],
)

image_check_latency_ms = Histogram(
    "image_check_latency_ms",
    "Image check latency in milliseconds",
    ["level"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

# Autosave metrics
autosave_total = Counter(
    "autosave_total",
    "Total autosave attempts",
    ["outcome"],
)


class PrometheusFlexMetrics:
    """Prometheus-based workflow metrics implementation."""

    def inc_publish(self, outcome: str) -> None:
        """Increment publish counter."""
        flex_publish_total.labels(outcome=outcome).inc()

    def record_image_check(self, level: str, latency_ms: float) -> None:
        """Record image check outcome and latency."""
        image_check_total.labels(level=level).inc()
        image_check_latency_ms.labels(level=level).observe(latency_ms)

    def inc_autosave(self, outcome: str) -> None:
        """Increment autosave counter."""
        autosave_total.labels(outcome=outcome).inc()
