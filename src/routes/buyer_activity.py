"""
Buyer activity routes
Tracking ingestion from the public site and formatted activity views for the
admin panel.
"""
from flask import Blueprint, request, jsonify

from src.schemas import load_payload
from src.schemas.activity import RecordActivitySchema, ACTIVITY_REQUIRED_MESSAGE
from src.services import activity_service
from src.utils.errors import ValidationError

buyer_activity_bp = Blueprint('buyer_activity', __name__)


def _int_arg(name: str, default: int) -> int:
    value = request.args.get(name)
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    if number < 1:
        raise ValidationError(f"{name} must be positive")
    return number


@buyer_activity_bp.route('/activity', methods=['POST'])
def record_activity():
    """
    Record tracking events for a buyer

    Request Body:
    - buyerId: buyer the events belong to
    - events: [{eventType, eventData, page, timestamp, ipAddress, userAgent}]
    """
    data = load_payload(RecordActivitySchema(), request.get_json(silent=True), ACTIVITY_REQUIRED_MESSAGE)
    activities = activity_service.record_activities(data['buyer_id'], data['events'])
    return jsonify({'recorded': len(activities)}), 201


@buyer_activity_bp.route('/<buyer_id>/activity/summary', methods=['GET'])
def get_activity_summary(buyer_id: str):
    return jsonify(activity_service.get_activity_summary(buyer_id)), 200


@buyer_activity_bp.route('/<buyer_id>/activity', methods=['GET'])
def get_detailed_activity(buyer_id: str):
    """
    One activity category

    Query Parameters:
    - type: propertyViews, clickEvents, pageVisits, searchHistory, searchQuery,
      offerHistory, emailInteractions or sessionHistory
    - page, limit: pagination (limit defaults to 500)
    """
    activity_type = request.args.get('type')
    if not activity_type:
        raise ValidationError('Activity type is required')

    activities = activity_service.get_detailed_activity(
        buyer_id,
        activity_type,
        page=_int_arg('page', 1),
        limit=_int_arg('limit', activity_service.DEFAULT_LIMIT)
    )
    return jsonify({
        'buyerId': buyer_id,
        'type': activity_type,
        'activities': activities
    }), 200


@buyer_activity_bp.route('/<buyer_id>/offers/history', methods=['GET'])
def get_offer_history(buyer_id: str):
    return jsonify({
        'buyerId': buyer_id,
        'offers': activity_service.get_enhanced_offer_history(buyer_id)
    }), 200
