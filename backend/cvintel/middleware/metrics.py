"""
Prometheus Metrics

HTTP metrics are collected by PrometheusMiddleware for every route except
/metrics itself. Pipeline metrics are recorded from the services through the
record_* helpers at the bottom of this module:

    provider_call_seconds{stage}      latency of each provider call
    pipeline_failures_total{stage}    aborted analyses and optimizations
    cv_overall_score                  distribution of computed overall scores
    cv_analyses_saved_total           analyses written to the store

Usage:
    from cvintel.middleware.metrics import setup_metrics

    setup_metrics(app)  # adds the middleware and GET /metrics
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"

# ==================== HTTP ====================

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Time spent handling a request",
    ["method", "endpoint", "status"],
    # /ai/* requests wait on several model calls
    buckets=[0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 120.0]
)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Requests handled, by route template and status",
    ["method", "endpoint", "status"]
)

ACTIVE_REQUESTS = Gauge(
    "http_requests_active",
    "Requests currently in progress",
    ["method"]
)

# ==================== Pipeline ====================

PROVIDER_CALL_LATENCY = Histogram(
    "provider_call_seconds",
    "Generative-text provider call latency",
    ["stage"],  # parse, signals, explain, optimize
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 40.0]
)

PIPELINE_FAILURES = Counter(
    "pipeline_failures_total",
    "Pipeline runs aborted, by failing stage",
    ["stage"]
)

OVERALL_SCORE = Histogram(
    "cv_overall_score",
    "Overall CV score distribution",
    # 30 is the floor; 50 and 75 are the risk tier edges
    buckets=[30, 40, 50, 60, 75, 90, 100]
)

ANALYSES_SAVED = Counter(
    "cv_analyses_saved_total",
    "Analyses persisted to the store"
)


def route_template(request: Request) -> str:
    """
    Path template of the route that served this request.

    /history/abc-123 is reported as /history/{user_id} so label
    cardinality stays bounded by the number of routes. Only valid after
    routing, when the router has written "route" and "path_params" into
    the request scope.
    """
    path = request.url.path
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    path_regex = getattr(route, "path_regex", None)
    if template and path_regex is not None and path_regex.match(path):
        return template

    # Routes registered through a prefixed router may carry a relative path
    for name, value in request.scope.get("path_params", {}).items():
        if value != "":
            path = path.replace(f"/{value}", f"/{{{name}}}", 1)
    return path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Records latency and count per route template, in-flight requests per method."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        in_flight = ACTIVE_REQUESTS.labels(method=method)
        in_flight.inc()
        status = "500"
        started = time.perf_counter()
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        except Exception as e:
            logger.error(f"{method} {request.url.path} raised before responding: {e}")
            raise
        finally:
            in_flight.dec()
            endpoint = route_template(request)
            REQUEST_LATENCY.labels(method=method, endpoint=endpoint, status=status).observe(
                time.perf_counter() - started
            )
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    """Install the request middleware and expose GET /metrics."""
    app.add_middleware(PrometheusMiddleware)
    app.add_route(METRICS_PATH, metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics configured")


# ==================== Pipeline recorders ====================

def record_provider_latency(stage: str, duration: float) -> None:
    PROVIDER_CALL_LATENCY.labels(stage=stage).observe(duration)


def record_pipeline_failure(stage: str) -> None:
    PIPELINE_FAILURES.labels(stage=stage).inc()


def record_overall_score(score: int) -> None:
    OVERALL_SCORE.observe(score)


def record_analysis_saved() -> None:
    ANALYSES_SAVED.inc()
