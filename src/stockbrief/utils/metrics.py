"""Prometheus metrics for monitoring."""

from prometheus_client import Counter, Histogram, start_http_server

# Fetch layer metrics
requests_total = Counter(
    "stockbrief_requests_total",
    "Total HTTP requests sent to the data source",
    ["endpoint", "outcome"],
)

challenges_detected = Counter(
    "stockbrief_challenges_detected_total",
    "Total bot-challenge pages served instead of content",
    ["endpoint"],
)

identity_rotations = Counter(
    "stockbrief_identity_rotations_total",
    "Total session/device identity rotations",
    ["reason"],
)

rate_limit_retries = Counter(
    "stockbrief_rate_limit_retries_total",
    "Total retries triggered by HTTP 429 responses",
    ["endpoint"],
)

stock_fetch_duration = Histogram(
    "stockbrief_stock_fetch_duration_seconds",
    "Time spent fetching the page and all JSON endpoints for one stock",
    ["exchange", "status"],
    # One stock costs up to 6 endpoints x 2 attempts x 30s in the worst case
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 360.0],
)

# Prompt metrics
prompts_generated = Counter(
    "stockbrief_prompts_generated_total",
    "Total analysis prompts generated",
    ["investor_type"],
)


def start_metrics_server(port: int = 9090) -> None:
    """Start Prometheus metrics HTTP server.

    Args:
        port: Port to expose metrics on
    """
    start_http_server(port)
