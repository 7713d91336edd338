# -*- coding: utf-8 -*-
"""
VIP Buyer Registration and Email List Reconciliation

VIP registration upserts the buyer, then keeps the buyer's membership in the
VIP-owned email lists in line with its preferred areas and buyer type:
- one reconciliation per preferred area, in order
- a stale-membership prune for areas or types that no longer apply

List maintenance is best-effort. Each step commits or rolls back on its own,
and a failing step is logged and reported without failing the registration.
"""
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Any

from src.infra.db import db
from src.infra.log import get_logger
from src.config.buyers import SOURCE_VIP, area_label, buyer_type_label
from src.models.buyer import Buyer, normalize_email, normalize_areas
from src.models.email_list import EmailList, EmailListMembership
from src.services.buyer_service import find_by_email_or_phone
from src.services.metrics import record_buyer_created, record_vip_reconciliation
from src.utils.errors import ValidationError

logger = get_logger('landivo.vip')

VIP_KEY_PREFIX = 'vip'

# Reported to the caller; the exception text goes to the log only
VIP_LIST_ERROR = 'Could not update the VIP email list'


@dataclass
class ReconciliationOutcome:
    """Result of one best-effort list step for one area."""
    area: str
    ok: bool
    action: Optional[str] = None
    list_id: Optional[str] = None
    list_name: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            'area': data['area'],
            'ok': data['ok'],
            'action': data['action'],
            'listId': data['list_id'],
            'listName': data['list_name'],
            'error': data['error'],
        }


def vip_list_key(area: str, buyer_type: str) -> str:
    return f"{VIP_KEY_PREFIX}:{area}:{buyer_type}"


def vip_list_name(area: str, buyer_type: str) -> str:
    return f"VIP Buyers - {area_label(area)} - {buyer_type_label(buyer_type)}"


def parse_vip_list_key(system_key: Optional[str]):
    """Return (area, buyer_type) for a VIP-owned list key, else None."""
    if not system_key:
        return None
    parts = system_key.split(':', 2)
    if len(parts) != 3 or parts[0] != VIP_KEY_PREFIX:
        return None
    return parts[1], parts[2]


def upsert_vip_buyer(data: Dict[str, Any]) -> Buyer:
    """
    Create or update the buyer matching the lower-cased email OR the phone.

    A match keeps its email and phone; name, type, areas, source and auth0Id
    are overwritten.
    """
    email = normalize_email(data.get('email'))
    phone = (data.get('phone') or '').strip()
    areas = normalize_areas(data.get('preferred_areas'))
    required = [email, phone, data.get('buyer_type'), data.get('first_name'), data.get('last_name')]
    if not all(required) or not areas:
        raise ValidationError("All fields are required including preferred areas.")

    buyer = find_by_email_or_phone(email, phone)
    created = buyer is None

    if created:
        buyer = Buyer(email=email, phone=phone)
        db.session.add(buyer)

    buyer.first_name = data.get('first_name')
    buyer.last_name = data.get('last_name')
    buyer.buyer_type = data.get('buyer_type')
    buyer.preferred_areas = areas
    buyer.source = SOURCE_VIP
    buyer.auth0_id = data.get('auth0_id')

    db.session.commit()

    if created:
        record_buyer_created(SOURCE_VIP)
    logger.info("VIP buyer upserted", buyer_id=buyer.id, created=created, areas=areas)
    return buyer


def available_list_name(base: str) -> str:
    """base, or base with a numeric suffix when another list already uses it."""
    name = base
    suffix = 1
    while EmailList.query.filter_by(name=name).first():
        suffix += 1
        name = f"{base} ({suffix})"
    return name


def get_or_create_vip_list(area: str, buyer_type: str) -> EmailList:
    key = vip_list_key(area, buyer_type)
    email_list = EmailList.query.filter_by(system_key=key).first()
    if email_list:
        return email_list

    email_list = EmailList(
        name=available_list_name(vip_list_name(area, buyer_type)),
        description=f"VIP buyers interested in {area_label(area)} ({buyer_type_label(buyer_type)})",
        criteria={'areas': [area], 'buyerTypes': [buyer_type], 'isVIP': True},
        system_key=key,
    )
    db.session.add(email_list)
    db.session.flush()
    logger.info("VIP email list created", list_id=email_list.id, system_key=key)
    return email_list


def reconcile_vip_list(buyer: Buyer, area: str, buyer_type: str) -> ReconciliationOutcome:
    """Ensure the buyer belongs to the VIP list for (area, buyer_type)."""
    email_list = get_or_create_vip_list(area, buyer_type)

    membership = EmailListMembership.query.filter_by(
        buyer_id=buyer.id,
        email_list_id=email_list.id
    ).first()

    action = 'already_member'
    if not membership:
        db.session.add(EmailListMembership(buyer_id=buyer.id, email_list_id=email_list.id))
        action = 'added'

    db.session.commit()
    return ReconciliationOutcome(
        area=area,
        ok=True,
        action=action,
        list_id=email_list.id,
        list_name=email_list.name,
    )


def prune_stale_vip_memberships(buyer: Buyer) -> List[str]:
    """
    Remove the buyer from VIP-owned lists whose area is no longer preferred
    or whose buyer type differs. Manually built lists are never touched.

    Returns the ids of the lists the buyer was removed from.
    """
    areas = set(buyer.preferred_areas or [])
    removed = []

    memberships = (
        EmailListMembership.query
        .join(EmailList)
        .filter(EmailListMembership.buyer_id == buyer.id)
        .filter(EmailList.system_key.isnot(None))
        .all()
    )
    for membership in memberships:
        parsed = parse_vip_list_key(membership.email_list.system_key)
        if not parsed:
            continue
        area, buyer_type = parsed
        if area not in areas or buyer_type != buyer.buyer_type:
            removed.append(membership.email_list_id)
            db.session.delete(membership)

    db.session.commit()
    return removed


def reconcile_vip_lists(buyer: Buyer) -> List[ReconciliationOutcome]:
    """
    Run list reconciliation for every preferred area, then prune.

    Never raises: each failure rolls back its own step and is reported in
    the returned outcomes.
    """
    outcomes = []
    buyer_id = buyer.id
    buyer_type = buyer.buyer_type

    for area in list(buyer.preferred_areas or []):
        try:
            outcome = reconcile_vip_list(buyer, area, buyer_type)
            record_vip_reconciliation(outcome.action)
            logger.info("VIP email list reconciled", buyer_id=buyer_id, area=area,
                        action=outcome.action, list_id=outcome.list_id)
        except Exception as e:
            db.session.rollback()
            record_vip_reconciliation('failed')
            logger.log_best_effort_failure('vip_list_reconciliation', str(e), buyer_id=buyer_id, area=area)
            outcome = ReconciliationOutcome(area=area, ok=False, error=VIP_LIST_ERROR)
        outcomes.append(outcome)

    try:
        removed = prune_stale_vip_memberships(buyer)
        for _ in removed:
            record_vip_reconciliation('pruned')
        if removed:
            logger.info("Stale VIP memberships removed", buyer_id=buyer_id, list_ids=removed)
    except Exception as e:
        db.session.rollback()
        record_vip_reconciliation('failed')
        logger.log_best_effort_failure('vip_list_prune', str(e), buyer_id=buyer_id)

    return outcomes


def create_vip_buyer(data: Dict[str, Any]):
    """
    Register a VIP buyer and reconcile its VIP list memberships.

    Returns:
        (buyer, outcomes) where outcomes holds one entry per preferred area
    """
    buyer = upsert_vip_buyer(data)
    outcomes = reconcile_vip_lists(buyer)
    return buyer, outcomes
