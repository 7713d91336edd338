# -*- coding: utf-8 -*-
"""
Tests for buyer service rules called directly.
"""
import pytest
from unittest.mock import patch

from src.database import db
from src.models import Buyer, Offer
from src.services import buyer_service
from src.utils.errors import ValidationError, NotFoundError, ConflictError


class TestCreateBuyerService:

    def test_defaults(self, app):
        buyer = buyer_service.create_buyer({
            'email': '  MIXED@Case.com ',
            'phone': '555-000-1111',
            'first_name': 'Ann',
            'last_name': 'Lee',
        })
        assert buyer.email == 'mixed@case.com'
        assert buyer.source == 'Manual Entry'
        assert buyer.preferred_areas == []
        assert buyer.email_status == 'available'

    def test_conflict_carries_existing_record(self, app, make_buyer):
        existing = make_buyer(email='dup@example.com')

        with pytest.raises(ConflictError) as exc_info:
            buyer_service.create_buyer({
                'email': 'DUP@example.com',
                'phone': '555-000-2222',
                'first_name': 'Ann',
                'last_name': 'Lee',
            })
        assert exc_info.value.payload['existingBuyer']['id'] == existing.id

    def test_blank_required_field(self, app):
        with pytest.raises(ValidationError):
            buyer_service.create_buyer({'email': 'a@b.com', 'phone': ' ', 'first_name': 'A', 'last_name': 'B'})


class TestFindByEmailOrPhone:

    def test_matches_on_either_key(self, app, make_buyer):
        buyer = make_buyer(email='match@example.com', phone='555-444-3333')

        assert buyer_service.find_by_email_or_phone('MATCH@example.com', None).id == buyer.id
        assert buyer_service.find_by_email_or_phone('other@example.com', '555-444-3333').id == buyer.id
        assert buyer_service.find_by_email_or_phone('other@example.com', '555-000-0000') is None


class TestDeleteBuyerService:

    def test_offers_stay_deleted_when_buyer_delete_fails(self, app, make_buyer, make_offer):
        buyer = make_buyer()
        make_offer(buyer)
        make_offer(buyer)
        buyer_id = buyer.id

        original_delete = db.session.delete

        def failing_delete(instance):
            if isinstance(instance, Buyer):
                raise RuntimeError('delete failed')
            return original_delete(instance)

        with patch.object(db.session, 'delete', side_effect=failing_delete):
            with pytest.raises(RuntimeError):
                buyer_service.delete_buyer(buyer_id)

        db.session.rollback()
        assert Offer.query.filter_by(buyer_id=buyer_id).count() == 0
        assert db.session.get(Buyer, buyer_id) is not None

    def test_missing_buyer(self, app):
        with pytest.raises(NotFoundError):
            buyer_service.delete_buyer('missing')


class TestPersonalizeContent:

    def test_placeholders_substituted(self, app, make_buyer):
        buyer = make_buyer(first_name='Sam', last_name='Hill', email='sam@example.com',
                           preferred_areas=['Austin', 'Houston'])

        body = buyer_service.personalize_content(
            'Hi {firstName} {lastName} ({email}): {preferredAreas}. {unknown}', buyer
        )
        assert body == 'Hi Sam Hill (sam@example.com): Austin, Houston. {unknown}'

    def test_missing_names_become_empty(self, app, make_buyer):
        buyer = make_buyer(first_name=None, last_name=None)
        assert buyer_service.personalize_content('Hi {firstName}!', buyer) == 'Hi !'


class TestBuyersByArea:

    def test_requires_area(self, app):
        with pytest.raises(ValidationError):
            buyer_service.get_buyers_by_area('')
