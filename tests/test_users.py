# -*- coding: utf-8 -*-
"""
Tests for back office user administration.
"""
from src.models import Property


class TestUserListing:

    def test_filters_by_role_and_status(self, client, make_user):
        admin = make_user(role='ADMIN')
        disabled = make_user(role='USER', is_active=False)

        assert {u['id'] for u in client.get('/api/user').get_json()} == {admin.id, disabled.id}
        assert [u['id'] for u in client.get('/api/user?role=ADMIN').get_json()] == [admin.id]
        assert [u['id'] for u in client.get('/api/user?status=disabled').get_json()] == [disabled.id]
        assert len(client.get('/api/user?role=all&status=active').get_json()) == 1

    def test_create_user(self, client):
        response = client.post('/api/user', json={'email': 'New@Landivo.com', 'firstName': 'New'})
        assert response.status_code == 201

        data = response.get_json()
        assert data['email'] == 'new@landivo.com'
        assert data['role'] == 'USER'
        assert data['isActive'] is True

        assert client.post('/api/user', json={'email': 'new@landivo.com'}).status_code == 409

    def test_create_user_requires_email(self, client):
        assert client.post('/api/user', json={'firstName': 'Nobody'}).status_code == 400


class TestUserStatus:

    def test_disable_refused_while_owning_properties(self, client, make_user, make_property):
        owner = make_user()
        make_property(owner_id=owner.id)
        make_property(owner_id=owner.id)

        response = client.put(f'/api/user/{owner.id}/status', json={'isActive': False})
        assert response.status_code == 409
        assert response.get_json()['propertiesCount'] == 2

    def test_disable_and_enable(self, client, make_user):
        user = make_user()

        response = client.put(f'/api/user/{user.id}/status', json={'isActive': False})
        assert response.status_code == 200
        assert response.get_json()['isActive'] is False

        response = client.put(f'/api/user/{user.id}/status', json={'isActive': True})
        assert response.get_json()['isActive'] is True

    def test_status_requires_flag(self, client, make_user):
        user = make_user()
        assert client.put(f'/api/user/{user.id}/status', json={}).status_code == 400

    def test_missing_user(self, client):
        assert client.put('/api/user/missing/status', json={'isActive': True}).status_code == 404


class TestReassignProperties:

    def test_reassign_then_disable(self, client, make_user, make_property):
        owner = make_user()
        target = make_user()
        make_property(owner_id=owner.id)

        count = client.get(f'/api/user/{owner.id}/properties-count').get_json()
        assert count == {'userId': owner.id, 'count': 1}

        response = client.post(f'/api/user/{owner.id}/reassign-properties', json={'targetUserId': target.id})
        assert response.status_code == 200
        assert response.get_json()['count'] == 1
        assert Property.query.filter_by(owner_id=target.id).count() == 1

        assert client.put(f'/api/user/{owner.id}/status', json={'isActive': False}).status_code == 200

    def test_target_must_be_active(self, client, make_user, make_property):
        owner = make_user()
        inactive = make_user(is_active=False)
        make_property(owner_id=owner.id)

        response = client.post(f'/api/user/{owner.id}/reassign-properties', json={'targetUserId': inactive.id})
        assert response.status_code == 400
        assert Property.query.filter_by(owner_id=owner.id).count() == 1

    def test_target_must_exist(self, client, make_user):
        owner = make_user()
        response = client.post(f'/api/user/{owner.id}/reassign-properties', json={'targetUserId': 'missing'})
        assert response.status_code == 400
