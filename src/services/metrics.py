# -*- coding: utf-8 -*-
"""
Service for managing Prometheus metrics.

Provides a centralized service for creating, registering, and collecting metrics.
Also includes middleware for automatically recording HTTP request metrics.
"""

import os
import time
import uuid
from typing import Optional
from flask import Flask, request, g, current_app, has_app_context
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram
from prometheus_client.exposition import generate_latest


def init_metrics(app: Flask) -> None:
    """Initialize metrics service and endpoints."""
    service = MetricsService()
    app.extensions['metrics'] = service

    if service.enabled:
        @app.before_request
        def before_request():
            g.start_time = time.time()

        @app.after_request
        def after_request(response):
            duration = time.time() - getattr(g, 'start_time', time.time())
            service.record_http_request(
                route=request.path,
                method=request.method,
                status_code=response.status_code,
                duration_seconds=duration
            )
            return response

        @app.route("/metrics")
        def metrics():
            return generate_latest(service.registry), 200, {
                'Content-Type': 'text/plain; version=0.0.4; charset=utf-8'}


def get_metrics_service() -> Optional['MetricsService']:
    """Get the metrics service instance from the current app context."""
    if has_app_context():
        return current_app.extensions.get('metrics')
    return None


class MetricsService:
    """Service for managing Prometheus metrics."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.enabled = os.environ.get(
            "LANDIVO_METRICS_ENABLED",
            "true").lower() == "true"
        self.registry = registry if registry is not None else REGISTRY

        if self.enabled:
            self.http_requests_total = Counter(
                "landivo_http_requests_total",
                "Total number of HTTP requests.",
                ["route", "method", "status"],
                registry=self.registry
            )
            self.http_request_duration_seconds = Histogram(
                "landivo_http_request_duration_seconds",
                "Duration of HTTP requests in seconds.",
                ["route", "method"],
                registry=self.registry
            )
            self.buyers_created_total = Counter(
                "landivo_buyers_created_total",
                "Total number of buyers created.",
                ["source"],
                registry=self.registry
            )
            self.vip_list_reconciliations_total = Counter(
                "landivo_vip_list_reconciliations_total",
                "VIP email list reconciliation outcomes.",
                ["result"],
                registry=self.registry
            )
            self.import_rows_total = Counter(
                "landivo_import_rows_total",
                "Buyer import rows by outcome.",
                ["outcome"],
                registry=self.registry
            )

    def record_http_request(
            self,
            route: str,
            method: str,
            status_code: int,
            duration_seconds: float):
        """Record an HTTP request."""
        if self.enabled:
            normalized_route = self._normalize_route(route)
            self.http_requests_total.labels(
                route=normalized_route,
                method=method,
                status=status_code).inc()
            self.http_request_duration_seconds.labels(
                route=normalized_route, method=method).observe(duration_seconds)

    def record_buyer_created(self, source: Optional[str]):
        if self.enabled:
            self.buyers_created_total.labels(source=source or 'Unknown').inc()

    def record_vip_reconciliation(self, result: str):
        """Record a VIP list reconciliation outcome (added, already_member, pruned, failed)."""
        if self.enabled:
            self.vip_list_reconciliations_total.labels(result=result).inc()

    def record_import_row(self, outcome: str):
        if self.enabled:
            self.import_rows_total.labels(outcome=outcome).inc()

    def get_metrics(self) -> str:
        """Get metrics data as text."""
        if self.enabled:
            return generate_latest(self.registry).decode('utf-8')
        return ""

    def _normalize_route(self, route: str) -> str:
        parts = route.split('/')
        for i, part in enumerate(parts):
            if part.isdigit():
                parts[i] = '{id}'
            try:
                uuid.UUID(part)
                parts[i] = '{uuid}'
            except (ValueError, AttributeError):
                pass
        return '/'.join(parts)


def record_buyer_created(source: Optional[str]):
    service = get_metrics_service()
    if service:
        service.record_buyer_created(source)


def record_vip_reconciliation(result: str):
    service = get_metrics_service()
    if service:
        service.record_vip_reconciliation(result)


def record_import_row(outcome: str):
    service = get_metrics_service()
    if service:
        service.record_import_row(outcome)
