"""
Test suite for Prometheus metrics functionality.

Tests metrics collection, domain counters and feature flag behavior.
"""

import pytest
import os
from unittest.mock import patch
from flask import Flask

from src.services.metrics import MetricsService, get_metrics_service, init_metrics


class TestMetricsService:
    """Test MetricsService functionality."""

    def test_metrics_service_initialization(self, app):
        service = get_metrics_service()
        assert service.enabled is True
        for name in ('http_requests_total', 'http_request_duration_seconds', 'buyers_created_total',
                     'vip_list_reconciliations_total', 'import_rows_total'):
            assert hasattr(service, name)

    def test_metrics_disabled(self):
        with patch.dict(os.environ, {"LANDIVO_METRICS_ENABLED": "false"}):
            app = Flask(__name__)
            with app.app_context():
                init_metrics(app)
                assert get_metrics_service().enabled is False
                assert app.test_client().get("/metrics").status_code == 404

    def test_route_normalization(self):
        service = MetricsService()
        route = service._normalize_route('/api/buyer/3f1c7a52-8f2b-4a0e-9d8e-2b6a1c0f4e11/activity')
        assert route == '/api/buyer/{uuid}/activity'
        assert service._normalize_route('/api/items/42') == '/api/items/{id}'


class TestMetricsIntegration:
    """Test metrics integration with the Landivo app."""

    def test_metrics_endpoint(self, client):
        client.get('/healthz')
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.content_type == "text/plain; version=0.0.4; charset=utf-8"
        assert "landivo_http_requests_total" in response.get_data(as_text=True)

    def test_buyer_creation_counted(self, client):
        client.post('/api/buyer/create', json={
            'email': 'metrics@example.com',
            'phone': '555-0199',
            'firstName': 'Meta',
            'lastName': 'Rick',
            'buyerType': 'Investor',
            'preferredAreas': ['DFW'],
        })

        data = get_metrics_service().get_metrics()
        assert 'landivo_buyers_created_total{source="Manual Entry"} 1.0' in data

    def test_import_rows_counted(self, client):
        client.post('/api/buyer/import', json={
            'buyers': [
                {'email': 'one@example.com', 'isNew': True},
                {'email': '', 'isNew': True},
            ]
        })

        data = get_metrics_service().get_metrics()
        assert 'landivo_import_rows_total{outcome="created"} 1.0' in data
        assert 'landivo_import_rows_total{outcome="failed"} 1.0' in data
