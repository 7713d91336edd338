# -*- coding: utf-8 -*-
"""
Buyer activity read and write path.

Stores raw tracking events and serves them through the activity formatters.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.infra.db import db
from src.infra.log import get_logger
from src.models.activity import BuyerActivity
from src.models.offer import Offer, Property
from src.services import activity_formatting as formatting
from src.services.buyer_service import get_buyer_or_404
from src.utils.errors import ValidationError

logger = get_logger('landivo.activity')

EVENT_TYPES = [
    'property_view',
    'click',
    'page_view',
    'search',
    'search_query',
    'offer_submission',
    'email_interaction',
    'session_start',
    'session_end',
]

# UI category -> stored event type
ACTIVITY_TYPES = {
    'propertyViews': 'property_view',
    'clickEvents': 'click',
    'pageVisits': 'page_view',
    'searchHistory': 'search',
    'searchQuery': 'search_query',
    'offerHistory': 'offer_submission',
    'emailInteractions': 'email_interaction',
    'sessionHistory': 'session_start',
}

FORMATTERS = {
    'propertyViews': formatting.format_property_views,
    'clickEvents': formatting.format_click_events,
    'pageVisits': formatting.format_page_visits,
    'searchHistory': formatting.format_search_history,
    'emailInteractions': formatting.format_email_interactions,
    'sessionHistory': formatting.format_session_history,
}

DEFAULT_LIMIT = 500


def _session_record(activity: BuyerActivity) -> Dict[str, Any]:
    """Session events carry login/logout times inside eventData."""
    record = activity.to_dict()
    data = record['eventData']
    record['loginTime'] = data.get('loginTime') or record['timestamp']
    record['logoutTime'] = data.get('logoutTime')
    return record


def _raw_records(activities: List[BuyerActivity], activity_type: str) -> List[Dict[str, Any]]:
    if activity_type == 'sessionHistory':
        return [_session_record(activity) for activity in activities]
    return [activity.to_dict() for activity in activities]


def record_activities(buyer_id: str, events: List[Dict[str, Any]]) -> List[BuyerActivity]:
    """Store tracking events for a buyer in one commit."""
    buyer = get_buyer_or_404(buyer_id)
    if not events:
        raise ValidationError('At least one event is required')

    activities = []
    for event in events:
        activity = BuyerActivity(
            buyer_id=buyer.id,
            event_type=event['event_type'],
            page=event.get('page'),
            event_data=event.get('event_data') or {},
            ip_address=event.get('ip_address'),
            user_agent=event.get('user_agent'),
            timestamp=event.get('timestamp') or datetime.now(timezone.utc),
        )
        db.session.add(activity)
        activities.append(activity)

    db.session.commit()
    logger.info("Activity recorded", buyer_id=buyer.id, events=len(activities))
    return activities


def _activities_of_type(buyer_id: str, event_type: str, page: int = 1,
                        limit: Optional[int] = None) -> List[BuyerActivity]:
    query = (
        BuyerActivity.query
        .filter_by(buyer_id=buyer_id, event_type=event_type)
        .order_by(BuyerActivity.timestamp.desc())
    )
    if limit:
        query = query.offset((max(page, 1) - 1) * limit).limit(limit)
    return query.all()


def _offer_records(buyer_id: str) -> List[Dict[str, Any]]:
    offers = Offer.query.filter_by(buyer_id=buyer_id).order_by(Offer.timestamp.desc()).all()
    records = []
    for offer in offers:
        record = offer.to_dict()
        record['property'] = offer.property.to_dict() if offer.property else None
        records.append(record)
    return records


async def fetch_property(property_id: str) -> Optional[Dict[str, Any]]:
    """
    Property lookup used by the enhanced offer history.

    The session query blocks, so lookups for one buyer run one after another
    inside the gather; the coroutine only isolates each offer's failure.
    """
    prop = db.session.get(Property, property_id) if property_id else None
    return prop.to_dict() if prop else None


def get_enhanced_offer_history(buyer_id: str) -> List[Dict[str, Any]]:
    """
    Offers of a buyer with property details, newest first.

    Runs its own event loop with asyncio.run, so it must be called from
    synchronous code such as a Flask view, never from a running loop.
    """
    buyer = get_buyer_or_404(buyer_id)
    offers = [offer.to_dict() for offer in
              Offer.query.filter_by(buyer_id=buyer.id).all()]
    if not offers:
        logger.info("No offers found for buyer", buyer_id=buyer.id)
        return []
    return asyncio.run(formatting.format_enhanced_offer_history(offers, fetch_property))


def get_activity_summary(buyer_id: str) -> Dict[str, Any]:
    """All activity categories for a buyer, formatted for display."""
    buyer = get_buyer_or_404(buyer_id)

    summary = {
        'buyerId': buyer.id,
        'buyerName': buyer.full_name,
    }
    for activity_type, formatter in FORMATTERS.items():
        activities = _activities_of_type(buyer.id, ACTIVITY_TYPES[activity_type])
        summary[activity_type] = formatter(_raw_records(activities, activity_type))
    summary['offerHistory'] = formatting.format_offer_history(_offer_records(buyer.id))

    latest = (
        BuyerActivity.query
        .filter_by(buyer_id=buyer.id)
        .order_by(BuyerActivity.timestamp.desc())
        .first()
    )
    summary['lastActive'] = latest.timestamp.isoformat() if latest else None
    return summary


def get_detailed_activity(buyer_id: str, activity_type: str, page: int = 1,
                          limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
    """One activity category; offer history uses the enhanced path."""
    if activity_type == 'offerHistory':
        return get_enhanced_offer_history(buyer_id)

    if activity_type not in ACTIVITY_TYPES:
        raise ValidationError(f"Unknown activity type: {activity_type}")

    buyer = get_buyer_or_404(buyer_id)
    activities = _activities_of_type(buyer.id, ACTIVITY_TYPES[activity_type], page, limit or DEFAULT_LIMIT)
    records = _raw_records(activities, activity_type)

    formatter = FORMATTERS.get(activity_type)
    return formatter(records) if formatter else records
