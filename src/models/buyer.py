"""
Buyer model
A lead registered through the public site, the VIP flow, admin entry or import.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any, List

from src.infra.db import db
from src.config.buyers import DEFAULT_EMAIL_STATUS


def normalize_email(email: str) -> str:
    """Lower-case and trim an email for storage and comparison."""
    return (email or '').strip().lower()


def normalize_areas(areas) -> List[str]:
    """De-duplicate preferred areas, keeping first-seen order."""
    seen = []
    for area in areas or []:
        if area not in seen:
            seen.append(area)
    return seen


class Buyer(db.Model):
    __tablename__ = 'buyers'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Identity; email is always stored lower-cased
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(40), unique=True, nullable=True, index=True)

    first_name = db.Column(db.String(120))
    last_name = db.Column(db.String(120))
    buyer_type = db.Column(db.String(40))
    source = db.Column(db.String(120))
    preferred_areas = db.Column(db.JSON, default=list, nullable=False)

    # Communication consent
    email_status = db.Column(db.String(40), default=DEFAULT_EMAIL_STATUS)
    email_permission_status = db.Column(db.String(40))
    unsubscribed = db.Column(db.Boolean, default=False, nullable=False)

    auth0_id = db.Column(db.String(255), index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Offers are deleted explicitly before the buyer, never by cascade
    offers = db.relationship('Offer', back_populates='buyer', lazy=True,
                             order_by='Offer.timestamp.desc()')
    email_list_memberships = db.relationship('EmailListMembership', back_populates='buyer', lazy=True,
                                             cascade='all, delete-orphan')
    activities = db.relationship('BuyerActivity', back_populates='buyer', lazy=True,
                                 cascade='all, delete-orphan')

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def has_area(self, area_id: str) -> bool:
        return area_id in (self.preferred_areas or [])

    def to_dict(self, include_offers: bool = False, include_lists: bool = False) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'email': self.email,
            'phone': self.phone,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'buyerType': self.buyer_type,
            'source': self.source,
            'preferredAreas': list(self.preferred_areas or []),
            'emailStatus': self.email_status,
            'emailPermissionStatus': self.email_permission_status,
            'unsubscribed': bool(self.unsubscribed),
            'auth0Id': self.auth0_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_offers:
            result['offers'] = [offer.to_summary_dict() for offer in self.offers]

        if include_lists:
            result['emailListMemberships'] = [m.to_dict() for m in self.email_list_memberships]

        return result
