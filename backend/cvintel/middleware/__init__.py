"""HTTP middleware and pipeline metrics."""

from cvintel.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    record_analysis_saved,
    record_overall_score,
    record_pipeline_failure,
    record_provider_latency,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "record_analysis_saved",
    "record_overall_score",
    "record_pipeline_failure",
    "record_provider_latency",
]
