# clickbus/metrics.py
from prometheus_client import Counter, Histogram, Gauge

REQUESTS = Counter(
    "clickbus_requests_total", "Total HTTP requests", ["endpoint", "method", "code"]
)
LATENCY = Histogram(
    "clickbus_request_latency_seconds", "Request latency", ["endpoint", "method"]
)
ACTIONS = Counter(
    "clickbus_actions_total", "Logged user actions", ["action"]
)
LOG_BUFFER_ENTRIES = Gauge(
    "clickbus_log_buffer_entries", "Entries currently held in the pod log buffer"
)
SINK_ERRORS = Counter(
    "clickbus_sink_errors_total", "Failures forwarding events to the sink"
)
