"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
rpc_requests_total = Counter(
    "rpc_requests_total",
    "Total chain JSON-RPC requests",
    ["method", "status"],
)

payment_verifications_total = Counter(
    "payment_verifications_total",
    "Total payment verifications by outcome",
    ["outcome"],  # verified or an ErrorKind value
)

access_decisions_total = Counter(
    "access_decisions_total",
    "Total access decisions by reason",
    ["reason"],
)

gateway_fetches_total = Counter(
    "gateway_fetches_total",
    "Total metadata gateway attempts",
    ["status"],  # success, http_error, timeout, invalid
)

subscription_operations_total = Counter(
    "subscription_operations_total",
    "Total subscription ledger writes",
    ["operation"],  # create, renew, cancel
)

# Histograms
rpc_request_duration_seconds = Histogram(
    "rpc_request_duration_seconds",
    "Chain JSON-RPC request duration",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
