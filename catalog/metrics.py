import logging
from time import perf_counter

from flask import Blueprint, current_app, g, request, Response
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

logger = logging.getLogger(__name__)

metrics_bp = Blueprint("metrics", __name__)

# HTTP traffic, labelled by route pattern
REQUEST_LATENCY = Histogram(
    "movies_http_request_latency_seconds",
    "Latency of movie API requests",
    ["method", "path"],
)
REQUEST_COUNT = Counter(
    "movies_http_requests_total",
    "Movie API requests by route and status",
    ["method", "path", "status"],
)
ERROR_COUNT = Counter(
    "movies_http_errors_total",
    "Movie API responses with a 5xx status",
    ["method", "path", "status"],
)

# Catalog state
MOVIES_STORED = Gauge(
    "movies_stored",
    "Movies currently held by the store",
)
MOVIE_WRITES = Counter(
    "movies_writes_total",
    "Successful catalog mutations",
    ["operation"],
)
VALIDATION_ISSUES = Counter(
    "movies_validation_issues_total",
    "Rejected payload fields by field and issue code",
    ["field", "code"],
)


def record_write(operation: str):
    MOVIE_WRITES.labels(operation).inc()

def record_validation_issues(issues):
    for issue in issues:
        path = issue.get("path") or ["<body>"]
        VALIDATION_ISSUES.labels(str(path[0]), issue.get("code", "unknown")).inc()


@metrics_bp.before_app_request
def _metrics_before():
    g._t_start = perf_counter()

@metrics_bp.after_app_request
def _metrics_after(resp):
    start = getattr(g, "_t_start", None)
    if start is None:
        return resp
    try:
        method = request.method
        path = request.url_rule.rule if request.url_rule else "<unmatched>"
        status = str(resp.status_code)

        REQUEST_LATENCY.labels(method, path).observe(perf_counter() - start)
        REQUEST_COUNT.labels(method, path, status).inc()
        if resp.status_code >= 500:
            ERROR_COUNT.labels(method, path, status).inc()
    except Exception:
        logger.exception("Failed to record request metrics")
    return resp

@metrics_bp.get("/metrics")
def metrics():
    # the gauge follows whichever store serves this app
    MOVIES_STORED.set(current_app.extensions["movie_store"].count())
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
