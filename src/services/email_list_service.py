# -*- coding: utf-8 -*-
"""
Email List Service

Manual marketing lists. Criteria (areas, buyer types, VIP only) are applied
once when a list is built without explicit members; later buyer changes do
not re-evaluate them.
"""
from typing import Any, Dict, List

from src.infra.db import db
from src.infra.log import get_logger
from src.config.buyers import SOURCE_VIP
from src.models.buyer import Buyer
from src.models.email_list import EmailList, EmailListMembership
from src.utils.errors import ValidationError, NotFoundError, ConflictError

logger = get_logger('landivo.email_lists')


def normalize_criteria(criteria: Dict[str, Any]) -> Dict[str, Any]:
    criteria = criteria or {}
    return {
        'areas': list(criteria.get('areas') or []),
        'buyerTypes': list(criteria.get('buyer_types') or criteria.get('buyerTypes') or []),
        'isVIP': bool(criteria.get('is_vip') or criteria.get('isVIP')),
    }


def criteria_is_empty(criteria: Dict[str, Any]) -> bool:
    return not (criteria['areas'] or criteria['buyerTypes'] or criteria['isVIP'])


def buyer_matches_criteria(buyer: Buyer, criteria: Dict[str, Any]) -> bool:
    """An empty criterion matches every buyer."""
    if criteria['areas'] and not set(criteria['areas']) & set(buyer.preferred_areas or []):
        return False
    if criteria['buyerTypes'] and buyer.buyer_type not in criteria['buyerTypes']:
        return False
    if criteria['isVIP'] and buyer.source != SOURCE_VIP:
        return False
    return True


def get_email_list_or_404(list_id: str) -> EmailList:
    email_list = db.session.get(EmailList, list_id) if list_id else None
    if not email_list:
        raise NotFoundError('Email list not found')
    return email_list


def get_email_list(list_id: str) -> EmailList:
    return get_email_list_or_404(list_id)


def _ensure_name_available(name: str, exclude_id: str = None):
    query = EmailList.query.filter(EmailList.name == name)
    if exclude_id:
        query = query.filter(EmailList.id != exclude_id)
    if query.first():
        raise ConflictError('An email list with this name already exists')


def create_email_list(data: Dict[str, Any]) -> EmailList:
    """
    Create a list.

    Members are the given buyerIds; without them, the buyers matching the
    criteria at this moment.
    """
    name = (data.get('name') or '').strip()
    if not name:
        raise ValidationError('List name is required')
    _ensure_name_available(name)

    criteria = normalize_criteria(data.get('criteria'))
    email_list = EmailList(name=name, description=data.get('description'), criteria=criteria)

    buyer_ids = data.get('buyer_ids') or []
    if buyer_ids:
        buyers = Buyer.query.filter(Buyer.id.in_(buyer_ids)).all()
    elif not criteria_is_empty(criteria):
        buyers = [buyer for buyer in Buyer.query.all() if buyer_matches_criteria(buyer, criteria)]
    else:
        buyers = []

    for buyer in buyers:
        email_list.memberships.append(EmailListMembership(buyer=buyer))

    db.session.add(email_list)
    db.session.commit()
    logger.info("Email list created", list_id=email_list.id, members=len(buyers))
    return email_list


def list_email_lists() -> List[EmailList]:
    return EmailList.query.order_by(EmailList.created_at.desc()).all()


def update_email_list(list_id: str, data: Dict[str, Any]) -> EmailList:
    """Update name, description or criteria; membership is left as is."""
    email_list = get_email_list_or_404(list_id)

    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError('List name is required')
        _ensure_name_available(name, exclude_id=email_list.id)
        email_list.name = name
    if 'description' in data:
        email_list.description = data.get('description')
    if 'criteria' in data:
        email_list.criteria = normalize_criteria(data.get('criteria'))

    db.session.commit()
    return email_list


def delete_email_list(list_id: str) -> Dict[str, Any]:
    """Delete the list's memberships, then the list."""
    email_list = get_email_list_or_404(list_id)
    snapshot = email_list.to_summary_dict()

    removed = EmailListMembership.query.filter_by(email_list_id=email_list.id).delete(synchronize_session=False)
    db.session.commit()

    db.session.delete(email_list)
    db.session.commit()

    logger.info("Email list deleted", list_id=list_id, memberships_removed=removed)
    return snapshot


def add_members(list_id: str, buyer_ids: List[str]) -> Dict[str, Any]:
    """Add buyers to a list; existing members are left alone."""
    email_list = get_email_list_or_404(list_id)
    if not buyer_ids:
        raise ValidationError('At least one buyer ID is required')

    buyers = {buyer.id: buyer for buyer in Buyer.query.filter(Buyer.id.in_(buyer_ids)).all()}
    current = {m.buyer_id for m in email_list.memberships}

    added = []
    for buyer_id in dict.fromkeys(buyer_ids):
        if buyer_id in buyers and buyer_id not in current:
            db.session.add(EmailListMembership(buyer_id=buyer_id, email_list_id=email_list.id))
            added.append(buyer_id)

    db.session.commit()
    return {
        'listId': email_list.id,
        'added': added,
        'alreadyMembers': [buyer_id for buyer_id in buyer_ids if buyer_id in current],
        'notFound': [buyer_id for buyer_id in buyer_ids if buyer_id not in buyers],
    }


def remove_members(list_id: str, buyer_ids: List[str]) -> Dict[str, Any]:
    email_list = get_email_list_or_404(list_id)
    if not buyer_ids:
        raise ValidationError('At least one buyer ID is required')

    removed = (
        EmailListMembership.query
        .filter(EmailListMembership.email_list_id == email_list.id)
        .filter(EmailListMembership.buyer_id.in_(buyer_ids))
        .delete(synchronize_session=False)
    )
    db.session.commit()
    return {'listId': email_list.id, 'removed': removed}
