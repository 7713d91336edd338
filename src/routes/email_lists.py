"""
Email list routes
Manual list management for the admin panel.
"""
from flask import Blueprint, request, jsonify

from src.schemas import load_payload
from src.schemas.email_list import (
    EmailListCreateSchema,
    EmailListUpdateSchema,
    MembersSchema,
    LIST_NAME_REQUIRED_MESSAGE,
    MEMBERS_REQUIRED_MESSAGE,
)
from src.services import email_list_service

email_lists_bp = Blueprint('email_lists', __name__)


@email_lists_bp.route('', methods=['GET'])
def list_email_lists():
    email_lists = email_list_service.list_email_lists()
    return jsonify([email_list.to_dict() for email_list in email_lists]), 200


@email_lists_bp.route('', methods=['POST'])
def create_email_list():
    """
    Create an email list

    Request Body:
    - name: unique list name
    - description
    - criteria: {areas, buyerTypes, isVIP}; applied once when buyerIds is empty
    - buyerIds: explicit members
    """
    data = load_payload(EmailListCreateSchema(), request.get_json(silent=True), LIST_NAME_REQUIRED_MESSAGE)
    email_list = email_list_service.create_email_list(data)
    return jsonify({
        'message': 'Email list created successfully',
        'emailList': email_list.to_dict(include_members=True)
    }), 201


@email_lists_bp.route('/<list_id>', methods=['GET'])
def get_email_list(list_id: str):
    email_list = email_list_service.get_email_list(list_id)
    return jsonify(email_list.to_dict(include_members=True)), 200


@email_lists_bp.route('/<list_id>', methods=['PUT'])
def update_email_list(list_id: str):
    data = load_payload(EmailListUpdateSchema(), request.get_json(silent=True), LIST_NAME_REQUIRED_MESSAGE)
    email_list = email_list_service.update_email_list(list_id, data)
    return jsonify(email_list.to_dict()), 200


@email_lists_bp.route('/<list_id>', methods=['DELETE'])
def delete_email_list(list_id: str):
    deleted = email_list_service.delete_email_list(list_id)
    return jsonify({
        'message': 'Email list deleted successfully',
        'emailList': deleted
    }), 200


@email_lists_bp.route('/<list_id>/members', methods=['POST'])
def add_members(list_id: str):
    data = load_payload(MembersSchema(), request.get_json(silent=True), MEMBERS_REQUIRED_MESSAGE)
    return jsonify(email_list_service.add_members(list_id, data['buyer_ids'])), 200


@email_lists_bp.route('/<list_id>/members', methods=['DELETE'])
def remove_members(list_id: str):
    data = load_payload(MembersSchema(), request.get_json(silent=True), MEMBERS_REQUIRED_MESSAGE)
    return jsonify(email_list_service.remove_members(list_id, data['buyer_ids'])), 200
