"""
Buyer routes
Admin and public endpoints for buyer records, VIP registration, import and
bulk email.
"""
from flask import Blueprint, request, jsonify

from src.infra.log import get_logger
from src.schemas import load_payload
from src.schemas.buyer import (
    BuyerCreateSchema,
    BuyerUpdateSchema,
    VipBuyerSchema,
    SendEmailSchema,
    BuyerImportSchema,
    CREATE_REQUIRED_MESSAGE,
    VIP_REQUIRED_MESSAGE,
    UPDATE_REQUIRED_MESSAGE,
    SEND_EMAIL_REQUIRED_MESSAGES,
)
from src.services import buyer_service
from src.services.buyer_import import import_buyers
from src.services.vip_email_lists import create_vip_buyer

logger = get_logger(__name__)
buyers_bp = Blueprint('buyers', __name__)


# =============================================================================
# CREATE
# =============================================================================

@buyers_bp.route('/create', methods=['POST'])
def create_buyer():
    """
    Create a buyer from the admin panel

    Request Body:
    - email, phone, firstName, lastName: required
    - buyerType, source, preferredAreas, emailStatus, emailPermissionStatus
    - emailLists: names of lists to join
    """
    data = load_payload(BuyerCreateSchema(), request.get_json(silent=True), CREATE_REQUIRED_MESSAGE)
    buyer = buyer_service.create_buyer(data)

    return jsonify({
        'message': 'Buyer created successfully.',
        'buyer': buyer.to_dict(include_lists=True)
    }), 201


@buyers_bp.route('/createVipBuyer', methods=['POST'])
def create_vip_buyer_route():
    """
    Register a VIP buyer

    The buyer is upserted first; list reconciliation is best effort and its
    per-area outcomes are returned as emailListResults.
    """
    data = load_payload(VipBuyerSchema(), request.get_json(silent=True), VIP_REQUIRED_MESSAGE)
    buyer, outcomes = create_vip_buyer(data)

    return jsonify({
        'message': 'VIP Buyer created successfully.',
        'buyer': buyer.to_dict(include_lists=True),
        'emailListResults': [outcome.to_dict() for outcome in outcomes]
    }), 201


# =============================================================================
# READ
# =============================================================================

@buyers_bp.route('/all', methods=['GET'])
def get_all_buyers():
    buyers = buyer_service.get_all_buyers()
    return jsonify([buyer.to_dict(include_offers=True, include_lists=True) for buyer in buyers]), 200


@buyers_bp.route('/stats', methods=['GET'])
def get_buyer_stats():
    return jsonify(buyer_service.get_buyer_stats()), 200


@buyers_bp.route('/byArea/<area_id>', methods=['GET'])
def get_buyers_by_area(area_id: str):
    buyers = buyer_service.get_buyers_by_area(area_id)
    return jsonify({
        'areaId': area_id,
        'count': len(buyers),
        'buyers': [buyer.to_dict(include_offers=True, include_lists=True) for buyer in buyers]
    }), 200


@buyers_bp.route('/byAuth0Id', methods=['GET'])
def get_buyer_by_auth0_id():
    buyer = buyer_service.get_buyer_by_auth0_id(request.args.get('auth0Id'))
    return jsonify(buyer.to_dict(include_offers=True, include_lists=True)), 200


@buyers_bp.route('/<buyer_id>', methods=['GET'])
def get_buyer(buyer_id: str):
    buyer = buyer_service.get_buyer_or_404(buyer_id)
    return jsonify(buyer.to_dict(include_offers=True, include_lists=True)), 200


# =============================================================================
# UPDATE / DELETE
# =============================================================================

@buyers_bp.route('/update/<buyer_id>', methods=['PUT'])
def update_buyer(buyer_id: str):
    """
    Replace a buyer's editable fields

    Absent optional fields are cleared.
    """
    data = load_payload(BuyerUpdateSchema(), request.get_json(silent=True), UPDATE_REQUIRED_MESSAGE)
    buyer = buyer_service.update_buyer(buyer_id, data)
    return jsonify(buyer.to_dict(include_offers=True, include_lists=True)), 200


@buyers_bp.route('/delete/<buyer_id>', methods=['DELETE'])
def delete_buyer(buyer_id: str):
    deleted = buyer_service.delete_buyer(buyer_id)
    return jsonify({
        'message': 'Buyer and associated offers deleted successfully',
        'buyer': deleted
    }), 200


# =============================================================================
# BULK OPERATIONS
# =============================================================================

@buyers_bp.route('/sendEmail', methods=['POST'])
def send_email():
    """
    Send a templated email to selected buyers (simulated)

    Request Body:
    - buyerIds: list of buyer ids
    - subject, content: content may use {firstName}, {lastName}, {email}, {preferredAreas}
    - includeUnsubscribed: also mail unsubscribed buyers
    """
    data = load_payload(SendEmailSchema(), request.get_json(silent=True), SEND_EMAIL_REQUIRED_MESSAGES)
    summary = buyer_service.send_email_to_buyers(
        data['buyer_ids'],
        data['subject'],
        data['content'],
        include_unsubscribed=data['include_unsubscribed']
    )
    return jsonify(summary), 200


@buyers_bp.route('/import', methods=['POST'])
def import_buyers_route():
    """
    Bulk upsert of parsed CSV rows

    Request Body:
    - buyers: rows with email and isNew or existingBuyerId
    - source: provenance tag (default "CSV Import")
    """
    data = load_payload(BuyerImportSchema(), request.get_json(silent=True), 'No buyer data provided')
    result = import_buyers(data['buyers'], data.get('source'))

    logger.info("Buyer import request processed", rows=len(data['buyers']), source=data.get('source'))
    return jsonify({
        'message': (
            f"Processed {len(data['buyers'])} buyers: {result.created} created, "
            f"{result.updated} updated, {result.failed} failed"
        ),
        'results': result.to_dict()
    }), 200
