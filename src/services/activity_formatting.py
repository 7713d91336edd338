# -*- coding: utf-8 -*-
"""
Activity formatters.

Pure functions normalizing raw activity events and offers into the fixed
shapes the activity views display. Every formatter accepts anything: a
non-list input logs a warning and yields an empty list. Event payloads are
read from `eventData` when present, otherwise from the top level.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from src.infra.log import get_logger

logger = get_logger('landivo.activity')

DEFAULT_DURATION_SECONDS = 60
UNKNOWN_PROPERTY = 'Unknown Property'
ADDRESS_NOT_AVAILABLE = 'Address not available'

PropertyFetcher = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_list(records, label: str) -> List[Dict[str, Any]]:
    if not isinstance(records, list):
        logger.warning(f"Invalid {label} data", received_type=type(records).__name__)
        return []
    return [record for record in records if isinstance(record, dict)]


def _payload(record: Dict[str, Any]) -> Dict[str, Any]:
    """eventData when it is a dict, else the record itself."""
    data = record.get('eventData')
    return data if isinstance(data, dict) else record


def _valid_timestamp(value) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00')).isoformat()
    except ValueError:
        logger.warning("Invalid timestamp in session history", value=str(value))
        return None


def format_property_address(prop: Optional[Dict[str, Any]]) -> str:
    prop = prop or {}
    street = prop.get('streetAddress')
    if not street:
        return ADDRESS_NOT_AVAILABLE
    return ', '.join(part for part in (street, prop.get('city'), prop.get('state')) if part)


def format_property_views(views) -> List[Dict[str, Any]]:
    formatted = []
    for view in _as_list(views, 'property views'):
        data = _payload(view)
        formatted.append({
            'propertyId': data.get('propertyId') or view.get('propertyId'),
            'propertyTitle': data.get('propertyTitle') or UNKNOWN_PROPERTY,
            'propertyAddress': data.get('propertyAddress') or ADDRESS_NOT_AVAILABLE,
            'propertyCity': data.get('propertyCity'),
            'propertyState': data.get('propertyState'),
            'propertyZip': data.get('propertyZip'),
            'timestamp': view.get('timestamp') or _now_iso(),
            'duration': data.get('duration') or DEFAULT_DURATION_SECONDS,
            'details': data.get('details') or 'Viewed property details',
        })
    return formatted


def format_click_events(clicks) -> List[Dict[str, Any]]:
    formatted = []
    for click in _as_list(clicks, 'click events'):
        data = _payload(click)
        formatted.append({
            'element': data.get('elementType') or data.get('element') or 'Unknown element',
            'page': data.get('path') or data.get('page') or click.get('page') or 'Unknown page',
            'timestamp': click.get('timestamp'),
        })
    return formatted


def format_page_visits(visits) -> List[Dict[str, Any]]:
    formatted = []
    for visit in _as_list(visits, 'page visits'):
        data = _payload(visit)
        formatted.append({
            'url': data.get('path') or data.get('url') or visit.get('page') or 'Unknown page',
            'timestamp': visit.get('timestamp'),
            'duration': data.get('duration') or DEFAULT_DURATION_SECONDS,
        })
    return formatted


def format_search_history(searches) -> List[Dict[str, Any]]:
    formatted = []
    for search in _as_list(searches, 'search history'):
        data = _payload(search)
        formatted.append({
            'query': data.get('query') or 'Unknown search',
            'timestamp': search.get('timestamp'),
            'results': data.get('resultsCount') or 0,
            'searchType': data.get('searchType') or 'standard',
            'context': data.get('context') or '',
            'area': data.get('area') or None,
            'filters': data.get('filters') or {},
        })
    return formatted


def format_email_interactions(emails) -> List[Dict[str, Any]]:
    formatted = []
    for email in _as_list(emails, 'email interactions'):
        data = _payload(email)
        opened = data.get('opened')
        clicks = data.get('clicks') if isinstance(data.get('clicks'), list) else []
        formatted.append({
            'emailId': email.get('id') or f"email-{int(datetime.now(timezone.utc).timestamp() * 1000)}",
            'subject': data.get('subject') or 'Email from Landivo',
            'opened': True if opened is None else bool(opened),
            'openTimestamp': email.get('timestamp'),
            'clicks': [
                {'url': click.get('url'), 'timestamp': click.get('timestamp')}
                for click in clicks if isinstance(click, dict)
            ],
        })
    return formatted


def format_session_history(sessions) -> List[Dict[str, Any]]:
    formatted = []
    for session in _as_list(sessions, 'session history'):
        data = _payload(session)
        login_time = _valid_timestamp(session.get('loginTime') or data.get('loginTime'))
        logout_time = _valid_timestamp(session.get('logoutTime') or data.get('logoutTime'))
        formatted.append({
            'loginTime': login_time or _now_iso(),
            'logoutTime': logout_time,
            'device': (data.get('device') or session.get('device') or session.get('userAgent')
                       or data.get('userAgent') or 'Unknown device'),
            'ipAddress': session.get('ipAddress') or data.get('ipAddress') or 'Unknown',
        })
    return formatted


def format_offer_history(offers) -> List[Dict[str, Any]]:
    """Summary offer rows; property details come embedded in each offer."""
    formatted = []
    for offer in _as_list(offers, 'offer history'):
        prop = offer.get('property') if isinstance(offer.get('property'), dict) else {}
        formatted.append({
            'id': offer.get('id'),
            'propertyId': offer.get('propertyId'),
            'propertyTitle': prop.get('title') or UNKNOWN_PROPERTY,
            'propertyAddress': format_property_address(prop),
            'amount': offer.get('offeredPrice'),
            'counteredPrice': offer.get('counteredPrice'),
            'status': offer.get('offerStatus') or offer.get('status') or 'PENDING',
            'timestamp': offer.get('timestamp'),
            'buyerMessage': offer.get('buyerMessage'),
            'sysMessage': offer.get('sysMessage'),
            'offerHistory': offer.get('offerHistory') or [],
        })
    return formatted


def normalize_offer_history_entries(offer: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Status-change entries of an offer, filled from the offer where missing.

    An offer without history gets one entry synthesized from its current state.
    """
    entries = offer.get('offerHistory')
    entries = [entry for entry in entries if isinstance(entry, dict)] if isinstance(entries, list) else []
    status = offer.get('offerStatus') or 'PENDING'

    if not entries:
        entries = [{
            'timestamp': offer.get('timestamp') or _now_iso(),
            'newStatus': status,
            'newPrice': offer.get('offeredPrice'),
            'counteredPrice': offer.get('counteredPrice'),
            'buyerMessage': offer.get('buyerMessage'),
            'sysMessage': offer.get('sysMessage'),
        }]

    return [{
        'timestamp': entry.get('timestamp') or offer.get('timestamp'),
        'previousStatus': entry.get('previousStatus'),
        'newStatus': entry.get('newStatus') or status,
        'previousPrice': entry.get('previousPrice'),
        'newPrice': entry.get('newPrice') or offer.get('offeredPrice'),
        'counteredPrice': entry.get('counteredPrice') or offer.get('counteredPrice'),
        'buyerMessage': entry.get('buyerMessage') or offer.get('buyerMessage'),
        'sysMessage': entry.get('sysMessage') or offer.get('sysMessage'),
        'updatedByName': entry.get('updatedByName') or 'System',
    } for entry in entries]


async def _enhance_offer(offer: Dict[str, Any], fetch_property: PropertyFetcher) -> Optional[Dict[str, Any]]:
    try:
        try:
            prop = await fetch_property(offer.get('propertyId'))
            if not prop:
                raise LookupError(f"Property {offer.get('propertyId')} not found")
        except Exception as e:
            logger.log_best_effort_failure('property_fetch', str(e), property_id=offer.get('propertyId'))
            prop = {'title': UNKNOWN_PROPERTY, 'streetAddress': ADDRESS_NOT_AVAILABLE}

        return {
            'id': offer.get('id'),
            'propertyId': offer.get('propertyId'),
            'propertyTitle': prop.get('title') or UNKNOWN_PROPERTY,
            'propertyAddress': format_property_address(prop),
            'amount': offer.get('offeredPrice'),
            'counteredPrice': offer.get('counteredPrice'),
            'status': offer.get('offerStatus') or 'PENDING',
            'timestamp': offer.get('timestamp'),
            'buyerMessage': offer.get('buyerMessage'),
            'sysMessage': offer.get('sysMessage'),
            'history': normalize_offer_history_entries(offer),
        }
    except Exception as e:
        logger.log_best_effort_failure('offer_enhancement', str(e), offer_id=offer.get('id'))
        return None


def _timestamp_sort_key(offer: Dict[str, Any]) -> datetime:
    value = offer.get('timestamp')
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
        except ValueError:
            parsed = datetime.min
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def format_enhanced_offer_history(offers, fetch_property: PropertyFetcher) -> List[Dict[str, Any]]:
    """
    Offer history with property details and normalized status changes.

    Property lookups run concurrently, one per offer. A failed lookup gets a
    placeholder property; an offer that cannot be processed at all is
    dropped. The result is sorted newest first.
    """
    offers = _as_list(offers, 'offer history')
    if not offers:
        return []

    enhanced = await asyncio.gather(*(_enhance_offer(offer, fetch_property) for offer in offers))
    valid = [offer for offer in enhanced if offer is not None]
    valid.sort(key=_timestamp_sort_key, reverse=True)
    return valid
