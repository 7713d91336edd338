# -*- coding: utf-8 -*-
"""
Tests for the bulk buyer import.
"""
import pytest

from src.database import db
from src.models import Buyer
from src.services.buyer_import import import_buyers
from src.utils.errors import ValidationError


class TestImportBuyers:

    def test_missing_email_fails_row_only(self, app):
        result = import_buyers([
            {'email': '', 'isNew': True},
            {'email': 'A@B.com', 'isNew': True},
        ])

        assert result.created == 1
        assert result.failed == 1
        assert result.errors[0]['reason'] == 'Missing required email field'
        assert Buyer.query.one().email == 'a@b.com'

    def test_whitespace_email_counts_as_missing(self, app):
        result = import_buyers([{'email': '   ', 'isNew': True}])

        assert (result.created, result.failed) == (0, 1)
        assert result.errors[0]['reason'] == 'Missing required email field'
        assert Buyer.query.count() == 0

    def test_created_rows_get_batch_defaults(self, app):
        result = import_buyers([{'email': 'new@example.com', 'isNew': True}], source='Spring Expo')

        buyer = Buyer.query.one()
        assert result.created_buyer_ids == [buyer.id]
        assert buyer.source == 'Spring Expo'
        assert buyer.email_status == 'available'
        assert buyer.preferred_areas == []
        assert buyer.phone is None
        assert buyer.buyer_type is None

    def test_default_source(self, app):
        import_buyers([{'email': 'new@example.com', 'isNew': True}], source=None)
        assert Buyer.query.one().source == 'CSV Import'

    def test_partial_update_keeps_unprovided_fields(self, app, make_buyer):
        buyer = make_buyer(first_name='Keep', last_name='Me', buyer_type='Builder',
                           preferred_areas=['DFW'], source='Manual Entry')

        result = import_buyers([{
            'email': buyer.email,
            'existingBuyerId': buyer.id,
            'lastName': 'Changed',
            'firstName': '',
            'preferredAreas': ['Houston', 'Houston'],
        }])

        assert result.updated == 1
        assert result.updated_buyer_ids == [buyer.id]
        updated = db.session.get(Buyer, buyer.id)
        assert updated.first_name == 'Keep'
        assert updated.last_name == 'Changed'
        assert updated.buyer_type == 'Builder'
        assert updated.preferred_areas == ['Houston']
        assert updated.source == 'CSV Import'

    def test_unknown_existing_id_fails_row(self, app):
        result = import_buyers([{'email': 'x@example.com', 'existingBuyerId': 'nope'}])

        assert result.failed == 1
        assert result.errors[0]['reason'] == 'Buyer nope not found'

    def test_rows_without_flags_are_skipped(self, app):
        result = import_buyers([{'email': 'skip@example.com'}])

        assert (result.created, result.updated, result.failed) == (0, 0, 0)
        assert Buyer.query.count() == 0

    def test_unique_violation_rolls_back_row_and_continues(self, app, make_buyer):
        make_buyer(email='dup@example.com')

        result = import_buyers([
            {'email': 'dup@example.com', 'isNew': True},
            {'email': 'fresh@example.com', 'isNew': True},
        ])

        assert result.failed == 1
        assert result.created == 1
        assert Buyer.query.count() == 2

    def test_unknown_area_fails_row(self, app):
        result = import_buyers([{'email': 'a@example.com', 'isNew': True, 'preferredAreas': ['Mars']}])

        assert result.failed == 1
        assert 'Mars' in result.errors[0]['reason']

    def test_non_object_row_fails(self, app):
        result = import_buyers(['not a row', {'email': 'ok@example.com', 'isNew': True}])
        assert result.failed == 1
        assert result.created == 1

    def test_empty_payload(self, app):
        with pytest.raises(ValidationError) as exc_info:
            import_buyers([])
        assert exc_info.value.message == 'No buyer data provided'

    def test_result_shape(self, app):
        result = import_buyers([{'email': 'a@example.com', 'isNew': True}]).to_dict()
        assert set(result) == {'created', 'updated', 'failed', 'errors', 'createdBuyerIds', 'updatedBuyerIds'}
