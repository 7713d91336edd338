"""
Test suite for health and readiness endpoints.
"""

import pytest
import time
from unittest.mock import patch


class TestHealthEndpoint:
    """Test /healthz endpoint functionality."""

    @pytest.mark.parametrize('path', ['/healthz', '/health'])
    def test_health_endpoint_response_format(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert response.content_type == 'application/json'

        data = response.get_json()
        assert set(data.keys()) == {'status', 'service', 'timestamp'}
        assert data['status'] == 'healthy'
        assert data['service'] == 'landivo-api'
        assert abs(time.time() - data['timestamp']) < 5

    def test_health_endpoint_head_method(self, client):
        response = client.head('/healthz')
        assert response.status_code == 200
        assert response.data == b''


class TestReadinessEndpoint:
    """Test /readyz endpoint functionality."""

    def test_ready_when_database_answers(self, client):
        response = client.get('/readyz')
        assert response.status_code == 200

        data = response.get_json()
        assert data['status'] == 'ready'
        assert data['service'] == 'landivo-api'
        assert data['checks'] == {'database': True}

    def test_not_ready_when_database_fails(self, client):
        with patch('src.routes.health.db.session.execute', side_effect=RuntimeError('db down')):
            response = client.get('/readyz')

        assert response.status_code == 503
        data = response.get_json()
        assert data['status'] == 'not_ready'
        assert data['checks']['database'] is False

    def test_health_unaffected_by_database_failure(self, client):
        with patch('src.routes.health.db.session.execute', side_effect=RuntimeError('db down')):
            response = client.get('/healthz')
        assert response.status_code == 200

    def test_health_endpoints_methods(self, app):
        rules = {rule.rule: rule for rule in app.url_map.iter_rules()}
        for path in ('/healthz', '/readyz'):
            assert 'GET' in rules[path].methods
            assert 'HEAD' in rules[path].methods
