# -*- coding: utf-8 -*-
"""
Tests for buyer activity ingestion and the formatted activity views.
"""
from unittest.mock import patch

from src.models import BuyerActivity


class TestRecordActivity:
    """POST /api/buyer/activity"""

    def test_records_events(self, client, make_buyer):
        buyer = make_buyer()

        response = client.post('/api/buyer/activity', json={
            'buyerId': buyer.id,
            'events': [
                {'eventType': 'property_view', 'eventData': {'propertyId': 'p1', 'propertyTitle': 'Ranch'}},
                {'eventType': 'click', 'page': '/lots', 'eventData': {'elementType': 'cta'},
                 'timestamp': '2026-05-01T12:00:00Z'},
            ]
        })
        assert response.status_code == 201
        assert response.get_json() == {'recorded': 2}
        assert BuyerActivity.query.filter_by(buyer_id=buyer.id).count() == 2

    def test_unknown_event_type(self, client, make_buyer):
        buyer = make_buyer()

        response = client.post('/api/buyer/activity', json={
            'buyerId': buyer.id,
            'events': [{'eventType': 'teleport'}],
        })
        assert response.status_code == 400

    def test_requires_events(self, client, make_buyer):
        buyer = make_buyer()

        response = client.post('/api/buyer/activity', json={'buyerId': buyer.id, 'events': []})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Buyer ID and at least one event are required'

    def test_unknown_buyer(self, client):
        response = client.post('/api/buyer/activity', json={
            'buyerId': 'missing',
            'events': [{'eventType': 'click'}],
        })
        assert response.status_code == 404


class TestActivityViews:

    def test_summary_contains_every_category(self, client, make_buyer, make_offer):
        buyer = make_buyer(first_name='Ada', last_name='King')
        make_offer(buyer)
        client.post('/api/buyer/activity', json={
            'buyerId': buyer.id,
            'events': [
                {'eventType': 'search', 'eventData': {'query': 'acreage', 'resultsCount': 4}},
                {'eventType': 'session_start', 'ipAddress': '10.1.1.1', 'userAgent': 'Safari',
                 'eventData': {'loginTime': '2026-05-01T09:00:00Z'}},
            ]
        })

        response = client.get(f'/api/buyer/{buyer.id}/activity/summary')
        assert response.status_code == 200

        data = response.get_json()
        assert data['buyerName'] == 'Ada King'
        for key in ('propertyViews', 'clickEvents', 'pageVisits', 'searchHistory',
                    'emailInteractions', 'sessionHistory', 'offerHistory'):
            assert isinstance(data[key], list)
        assert data['searchHistory'][0]['query'] == 'acreage'
        assert data['searchHistory'][0]['results'] == 4
        assert data['sessionHistory'][0]['device'] == 'Safari'
        assert data['sessionHistory'][0]['ipAddress'] == '10.1.1.1'
        assert data['offerHistory'][0]['propertyTitle'] == 'Lakeview Lot'
        assert data['lastActive'] is not None

    def test_summary_for_missing_buyer(self, client):
        assert client.get('/api/buyer/missing/activity/summary').status_code == 404

    def test_detailed_activity_paginates(self, client, make_buyer):
        buyer = make_buyer()
        client.post('/api/buyer/activity', json={
            'buyerId': buyer.id,
            'events': [
                {'eventType': 'page_view', 'page': f'/page/{n}', 'timestamp': f'2026-05-0{n}T00:00:00'}
                for n in range(1, 4)
            ]
        })

        response = client.get(f'/api/buyer/{buyer.id}/activity?type=pageVisits&page=1&limit=2')
        assert response.status_code == 200

        data = response.get_json()
        assert data['type'] == 'pageVisits'
        assert [visit['url'] for visit in data['activities']] == ['/page/3', '/page/2']

        response = client.get(f'/api/buyer/{buyer.id}/activity?type=pageVisits&page=2&limit=2')
        assert [visit['url'] for visit in response.get_json()['activities']] == ['/page/1']

    def test_detailed_activity_requires_known_type(self, client, make_buyer):
        buyer = make_buyer()
        assert client.get(f'/api/buyer/{buyer.id}/activity').status_code == 400
        assert client.get(f'/api/buyer/{buyer.id}/activity?type=dreams').status_code == 400
        assert client.get(f'/api/buyer/{buyer.id}/activity?type=pageVisits&limit=x').status_code == 400


class TestEnhancedOfferHistoryEndpoint:
    """GET /api/buyer/<id>/offers/history"""

    def test_offers_enriched_and_sorted(self, client, make_buyer, make_offer, make_property):
        from datetime import datetime, timezone

        buyer = make_buyer()
        older = make_offer(buyer, make_property(title='Old Lot'),
                           timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc))
        newer = make_offer(buyer, make_property(title='New Lot'),
                           timestamp=datetime(2026, 3, 1, tzinfo=timezone.utc),
                           offer_history=[{'previousStatus': 'PENDING', 'newStatus': 'COUNTERED'}],
                           offer_status='COUNTERED')

        response = client.get(f'/api/buyer/{buyer.id}/offers/history')
        assert response.status_code == 200

        data = response.get_json()
        assert data['buyerId'] == buyer.id
        assert [offer['id'] for offer in data['offers']] == [newer.id, older.id]
        assert data['offers'][0]['propertyTitle'] == 'New Lot'
        assert data['offers'][0]['history'][0]['newStatus'] == 'COUNTERED'
        assert data['offers'][1]['history'][0]['updatedByName'] == 'System'

    def test_property_lookup_failure_keeps_offer(self, client, make_buyer, make_offer):
        buyer = make_buyer()
        offer = make_offer(buyer)

        with patch('src.services.activity_service.fetch_property', side_effect=ConnectionError('lookup failed')):
            response = client.get(f'/api/buyer/{buyer.id}/offers/history')

        assert response.status_code == 200
        [enhanced] = response.get_json()['offers']
        assert enhanced['id'] == offer.id
        assert enhanced['propertyTitle'] == 'Unknown Property'

    def test_no_offers(self, client, make_buyer):
        buyer = make_buyer()
        response = client.get(f'/api/buyer/{buyer.id}/offers/history')
        assert response.get_json()['offers'] == []

    def test_detailed_offer_history_uses_enhanced_path(self, client, make_buyer, make_offer):
        buyer = make_buyer()
        make_offer(buyer)

        response = client.get(f'/api/buyer/{buyer.id}/activity?type=offerHistory')
        assert response.status_code == 200
        assert response.get_json()['activities'][0]['propertyTitle'] == 'Lakeview Lot'

    def test_service_call_from_synchronous_code(self, app, make_buyer, make_offer, make_property):
        from src.services import activity_service

        buyer = make_buyer()
        make_offer(buyer, make_property(title='First Lot'))
        make_offer(buyer, make_property(title='Second Lot'))

        offers = activity_service.get_enhanced_offer_history(buyer.id)
        assert sorted(offer['propertyTitle'] for offer in offers) == ['First Lot', 'Second Lot']
