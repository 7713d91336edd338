"""
User routes
Back office account administration.
"""
from flask import Blueprint, request, jsonify

from src.schemas import load_payload
from src.schemas.user import UserCreateSchema, UserStatusSchema, ReassignPropertiesSchema
from src.services import user_service

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['GET'])
def list_users():
    """
    List users

    Query Parameters:
    - role: ADMIN, USER or all
    - status: active or disabled
    """
    users = user_service.list_users(role=request.args.get('role'), status=request.args.get('status'))
    return jsonify([user.to_dict() for user in users]), 200


@users_bp.route('', methods=['POST'])
def create_user():
    data = load_payload(UserCreateSchema(), request.get_json(silent=True), 'Email is required')
    user = user_service.create_user(data)
    return jsonify(user.to_dict()), 201


@users_bp.route('/<user_id>/properties-count', methods=['GET'])
def get_properties_count(user_id: str):
    return jsonify({
        'userId': user_id,
        'count': user_service.get_properties_count(user_id)
    }), 200


@users_bp.route('/<user_id>/status', methods=['PUT'])
def update_user_status(user_id: str):
    """
    Enable or disable a user

    Disabling fails with 409 while the user still owns properties.
    """
    data = load_payload(UserStatusSchema(), request.get_json(silent=True), 'isActive is required')
    user = user_service.update_user_status(user_id, data['is_active'])
    return jsonify(user.to_dict()), 200


@users_bp.route('/<user_id>/reassign-properties', methods=['POST'])
def reassign_properties(user_id: str):
    data = load_payload(ReassignPropertiesSchema(), request.get_json(silent=True), 'Target user ID is required')
    moved = user_service.reassign_properties(user_id, data['target_user_id'])
    return jsonify({
        'message': f"Reassigned {moved} properties",
        'userId': user_id,
        'targetUserId': data['target_user_id'],
        'count': moved
    }), 200
