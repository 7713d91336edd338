"""
Offer and property models
An offer belongs to one buyer and one property.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from src.infra.db import db
from src.config.buyers import DEFAULT_OFFER_STATUS


class Property(db.Model):
    """Listing record; only the fields the buyer back office reads."""
    __tablename__ = 'properties'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(255))
    street_address = db.Column(db.String(255))
    city = db.Column(db.String(120))
    state = db.Column(db.String(40))
    zip = db.Column(db.String(20))
    status = db.Column(db.String(40), default='Available')
    owner_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    owner = db.relationship('User', back_populates='properties', lazy=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'streetAddress': self.street_address,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'status': self.status,
            'ownerId': self.owner_id,
        }


class Offer(db.Model):
    __tablename__ = 'offers'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    buyer_id = db.Column(db.String(36), db.ForeignKey('buyers.id'), nullable=False, index=True)
    property_id = db.Column(db.String(36), db.ForeignKey('properties.id'), nullable=False, index=True)

    offered_price = db.Column(db.Numeric(14, 2))
    countered_price = db.Column(db.Numeric(14, 2))
    offer_status = db.Column(db.String(20), default=DEFAULT_OFFER_STATUS, nullable=False)
    buyer_message = db.Column(db.Text)
    sys_message = db.Column(db.Text)

    # Status-change entries: {timestamp, previousStatus, newStatus, previousPrice, newPrice, ...}
    offer_history = db.Column(db.JSON, default=list)

    timestamp = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    buyer = db.relationship('Buyer', back_populates='offers', lazy=True)
    property = db.relationship('Property', lazy=True)

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'propertyId': self.property_id,
            'offeredPrice': float(self.offered_price) if self.offered_price is not None else None,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        result = self.to_summary_dict()
        result.update({
            'buyerId': self.buyer_id,
            'counteredPrice': float(self.countered_price) if self.countered_price is not None else None,
            'offerStatus': self.offer_status,
            'buyerMessage': self.buyer_message,
            'sysMessage': self.sys_message,
            'offerHistory': list(self.offer_history or []),
        })
        return result
