# -*- coding: utf-8 -*-
"""
Buyer Service

Create, update, delete and query buyers. Owns the identity rules:
- email is lower-cased before every comparison and write
- email and phone are unique across buyers
- a buyer's offers are deleted before the buyer itself

Multi-step writes commit per step and are not wrapped in one transaction.
"""
import re
from collections import defaultdict
from typing import Dict, List, Optional, Any

from src.infra.db import db
from src.infra.log import get_logger
from src.config.buyers import (
    SOURCE_MANUAL_ENTRY,
    SOURCE_VIP,
    DEFAULT_EMAIL_STATUS,
)
from src.models.buyer import Buyer, normalize_email, normalize_areas
from src.models.offer import Offer
from src.models.email_list import EmailList, EmailListMembership
from src.services.metrics import record_buyer_created
from src.utils.errors import ValidationError, NotFoundError, ConflictError

logger = get_logger('landivo.buyers')

PLACEHOLDER_PATTERN = re.compile(r'\{(firstName|lastName|email|preferredAreas)\}')


def find_by_email_or_phone(email: str, phone: Optional[str]) -> Optional[Buyer]:
    """Return the first buyer matching the lower-cased email OR the phone."""
    conditions = [Buyer.email == normalize_email(email)]
    if phone:
        conditions.append(Buyer.phone == phone)
    return Buyer.query.filter(db.or_(*conditions)).first()


def get_buyer_or_404(buyer_id: str) -> Buyer:
    buyer = db.session.get(Buyer, buyer_id) if buyer_id else None
    if not buyer:
        raise NotFoundError('Buyer not found')
    return buyer


def create_buyer(data: Dict[str, Any]) -> Buyer:
    """
    Create a buyer and attach the named email lists in the same commit.

    Args:
        data: loaded BuyerCreateSchema payload

    Raises:
        ValidationError: a required field is missing
        ConflictError: email or phone already belongs to a buyer; the
            existing record is returned as `existingBuyer`
    """
    email = normalize_email(data.get('email'))
    phone = (data.get('phone') or '').strip()
    if not email or not phone or not data.get('first_name') or not data.get('last_name'):
        raise ValidationError("Email, phone, firstName, and lastName are required.")

    existing = find_by_email_or_phone(email, phone)
    if existing:
        raise ConflictError(
            'A buyer with this email or phone number already exists.',
            payload={'existingBuyer': existing.to_dict()}
        )

    buyer = Buyer(
        email=email,
        phone=phone,
        first_name=data.get('first_name'),
        last_name=data.get('last_name'),
        buyer_type=data.get('buyer_type'),
        source=data.get('source') or SOURCE_MANUAL_ENTRY,
        preferred_areas=normalize_areas(data.get('preferred_areas')),
        email_status=data.get('email_status') or DEFAULT_EMAIL_STATUS,
        email_permission_status=data.get('email_permission_status'),
    )

    list_names = data.get('email_lists') or []
    if list_names:
        for email_list in EmailList.query.filter(EmailList.name.in_(list_names)).all():
            buyer.email_list_memberships.append(EmailListMembership(email_list=email_list))

    db.session.add(buyer)
    db.session.commit()

    record_buyer_created(buyer.source)
    logger.info("Buyer created", buyer_id=buyer.id, source=buyer.source,
                email_lists=len(buyer.email_list_memberships))
    return buyer


def update_buyer(buyer_id: str, data: Dict[str, Any]) -> Buyer:
    """
    Replace the editable fields of a buyer.

    Absent optional fields are written as null (preferred areas as an empty
    list); emailStatus, consent flags and auth0Id are left untouched.
    """
    email = normalize_email(data.get('email'))
    if not email:
        raise ValidationError('Email is required')

    buyer = get_buyer_or_404(buyer_id)

    if email != buyer.email:
        email_owner = Buyer.query.filter(Buyer.email == email, Buyer.id != buyer.id).first()
        if email_owner:
            raise ConflictError('Email already in use by another buyer')

    phone = (data.get('phone') or '').strip() or None
    if phone and phone != buyer.phone:
        phone_owner = Buyer.query.filter(Buyer.phone == phone, Buyer.id != buyer.id).first()
        if phone_owner:
            raise ConflictError('Phone number already in use by another buyer')

    buyer.email = email
    buyer.phone = phone
    buyer.first_name = data.get('first_name') or None
    buyer.last_name = data.get('last_name') or None
    buyer.buyer_type = data.get('buyer_type') or None
    buyer.source = data.get('source') or None
    buyer.preferred_areas = normalize_areas(data.get('preferred_areas'))

    db.session.commit()
    logger.info("Buyer updated", buyer_id=buyer.id)
    return buyer


def delete_buyer(buyer_id: str) -> Dict[str, Any]:
    """
    Delete a buyer's offers, then the buyer.

    The two steps commit separately. If the second one fails the buyer
    remains without offers.
    """
    buyer = get_buyer_or_404(buyer_id)
    snapshot = buyer.to_dict()

    offers_deleted = Offer.query.filter_by(buyer_id=buyer.id).delete(synchronize_session=False)
    db.session.commit()

    db.session.delete(buyer)
    db.session.commit()

    logger.info("Buyer deleted", buyer_id=buyer_id, offers_deleted=offers_deleted)
    return snapshot


def get_all_buyers() -> List[Buyer]:
    return Buyer.query.order_by(Buyer.created_at.desc()).all()


def get_buyers_by_area(area_id: str) -> List[Buyer]:
    """Buyers whose preferred areas contain area_id, newest first."""
    if not area_id:
        raise ValidationError('Area ID is required')
    return [buyer for buyer in get_all_buyers() if buyer.has_area(area_id)]


def get_buyer_by_auth0_id(auth0_id: str) -> Buyer:
    if not auth0_id:
        raise ValidationError('Auth0 ID is required')
    buyer = Buyer.query.filter_by(auth0_id=auth0_id).first()
    if not buyer:
        raise NotFoundError('Buyer not found')
    return buyer


def get_buyer_stats() -> Dict[str, Any]:
    """
    Aggregate counts for the admin dashboard in one pass over all buyers.

    A buyer with N preferred areas is counted in N area buckets.
    """
    by_area = defaultdict(int)
    by_type = defaultdict(int)
    by_source = defaultdict(int)
    monthly_growth = defaultdict(int)
    total = 0
    vip = 0

    for buyer in Buyer.query.all():
        total += 1
        for area in buyer.preferred_areas or []:
            by_area[area] += 1
        if buyer.buyer_type:
            by_type[buyer.buyer_type] += 1
        source = buyer.source or 'Unknown'
        by_source[source] += 1
        if source == SOURCE_VIP:
            vip += 1
        if buyer.created_at:
            monthly_growth[buyer.created_at.strftime('%Y-%m')] += 1

    return {
        'totalCount': total,
        'vipCount': vip,
        'byArea': dict(by_area),
        'byType': dict(by_type),
        'bySource': dict(by_source),
        'monthlyGrowth': dict(monthly_growth),
    }


def personalize_content(content: str, buyer: Buyer) -> str:
    values = {
        'firstName': buyer.first_name or '',
        'lastName': buyer.last_name or '',
        'email': buyer.email,
        'preferredAreas': ', '.join(buyer.preferred_areas or []),
    }
    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], content)


def send_email_to_buyers(buyer_ids: List[str], subject: str, content: str,
                         include_unsubscribed: bool = False) -> Dict[str, Any]:
    """
    Simulated bulk send: personalizes the content per buyer and logs it.

    Unsubscribed buyers are skipped unless include_unsubscribed is set.
    """
    if not buyer_ids:
        raise ValidationError('At least one buyer ID is required')
    if not subject or not content:
        raise ValidationError('Email subject and content are required')

    query = Buyer.query.filter(Buyer.id.in_(buyer_ids))
    if not include_unsubscribed:
        query = query.filter(Buyer.unsubscribed.is_(False))
    buyers = query.all()

    if not buyers:
        raise NotFoundError('No eligible buyers found with the provided IDs')

    emails_sent = []
    for buyer in buyers:
        body = personalize_content(content, buyer)
        logger.debug("Simulated email send", buyer_id=buyer.id, subject=subject, body_length=len(body))
        emails_sent.append({
            'buyerId': buyer.id,
            'email': buyer.email,
            'name': buyer.full_name,
            'status': 'sent',
        })

    logger.info("Bulk email simulated", requested=len(buyer_ids), sent=len(emails_sent))
    return {
        'message': f"Successfully sent emails to {len(emails_sent)} buyers",
        'emailsSent': emails_sent,
        'failedCount': len(buyer_ids) - len(emails_sent),
    }
