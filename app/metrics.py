from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "path", "status"],
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total HTTP 5xx responses",
    ["method", "path", "status"],
)

TOPOLOGY_OPERATIONS = Counter(
    "topology_operations_total",
    "Topology planning operations by outcome",
    ["operation", "outcome"],
)


def observe_topology_operation(operation: str, outcome: str) -> None:
    TOPOLOGY_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
