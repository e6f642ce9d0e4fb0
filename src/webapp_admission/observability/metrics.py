"""
Prometheus metrics for the webapp admission webhook.

This module provides admission decision counters, a latency histogram and a
small HTTP server exposing them next to a liveness endpoint.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

# aiohttp is provided transitively by Kopf (required for its webhook server)
from aiohttp.web import AppRunner, Application, Request, Response, TCPSite
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from webapp_admission.models.admission import AdmissionDecision

logger = logging.getLogger(__name__)

_metrics_registry = CollectorRegistry()

ADMISSION_REQUESTS_TOTAL = Counter(
    "webapp_admission_requests_total",
    "Total number of admission requests decided",
    ["operation", "result"],
    registry=_metrics_registry,
)

ADMISSION_VIOLATIONS_TOTAL = Counter(
    "webapp_admission_violations_total",
    "Total number of field violations reported in denials",
    ["field", "type"],
    registry=_metrics_registry,
)

ADMISSION_WARNINGS_TOTAL = Counter(
    "webapp_admission_warnings_total",
    "Total number of admission warnings returned to clients",
    ["operation"],
    registry=_metrics_registry,
)

ADMISSION_DURATION = Histogram(
    "webapp_admission_duration_seconds",
    "Time spent deciding admission requests",
    ["operation"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=_metrics_registry,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get the registry holding the admission metrics."""
    return _metrics_registry


class MetricsCollector:
    """Records admission outcomes."""

    @contextmanager
    def track_admission(self, operation: str) -> Iterator[None]:
        """
        Context manager timing one admission check.

        Args:
            operation: Admission operation (CREATE, UPDATE, DELETE)
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            ADMISSION_DURATION.labels(operation=operation).observe(
                time.perf_counter() - start_time
            )

    def record_decision(self, operation: str, decision: AdmissionDecision) -> None:
        """Count a decision, its violations and its warnings."""
        result = "allowed" if decision.allowed else "denied"
        ADMISSION_REQUESTS_TOTAL.labels(operation=operation, result=result).inc()

        for violation in decision.violations:
            ADMISSION_VIOLATIONS_TOTAL.labels(
                field=violation.path, type=violation.type
            ).inc()

        if decision.warnings:
            ADMISSION_WARNINGS_TOTAL.labels(operation=operation).inc(
                len(decision.warnings)
            )


class MetricsServer:
    """HTTP server for exposing Prometheus metrics."""

    def __init__(self, port: int = 8081, host: str = "0.0.0.0"):
        """
        Initialize metrics server.

        Args:
            port: Port to serve metrics on
            host: Host interface to bind to
        """
        self.port = port
        self.host = host
        self.app = Application()
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_get("/metrics", self._metrics_handler)
        self.app.router.add_get("/healthz", self._healthz_handler)

    async def _metrics_handler(self, request: Request) -> Response:
        """Handle /metrics endpoint for Prometheus scraping."""
        try:
            metrics_data = generate_latest(get_metrics_registry())
            return Response(
                body=metrics_data, headers={"Content-Type": CONTENT_TYPE_LATEST}
            )
        except Exception as e:
            logger.error(f"Failed to generate metrics: {e}")
            return Response(
                text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
                status=500,
            )

    async def _healthz_handler(self, request: Request) -> Response:
        """Handle /healthz endpoint; returns 200 while the process is serving."""
        return Response(text="ok")

    async def start(self) -> None:
        """Start the metrics server."""
        self.runner = AppRunner(self.app)
        await self.runner.setup()

        self.site = TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        logger.info(f"Metrics available at http://{self.host}:{self.port}/metrics")

    async def stop(self) -> None:
        """Stop the metrics server."""
        if self.site:
            await self.site.stop()
            self.site = None

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        logger.info("Metrics server stopped")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()


# Global metrics collector instance
metrics_collector = MetricsCollector()
