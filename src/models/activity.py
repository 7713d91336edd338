"""
Buyer activity model
Raw tracking events recorded by the public site.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from src.infra.db import db


class BuyerActivity(db.Model):
    __tablename__ = 'buyer_activities'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    buyer_id = db.Column(db.String(36), db.ForeignKey('buyers.id', ondelete='CASCADE'), nullable=False, index=True)

    event_type = db.Column(db.String(40), nullable=False, index=True)
    page = db.Column(db.String(500))
    event_data = db.Column(db.JSON, default=dict)
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.String(500))

    timestamp = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), nullable=False, index=True)

    buyer = db.relationship('Buyer', back_populates='activities', lazy=True)

    def to_dict(self) -> Dict[str, Any]:
        """Raw event shape consumed by the activity formatters."""
        return {
            'id': self.id,
            'buyerId': self.buyer_id,
            'eventType': self.event_type,
            'page': self.page,
            'eventData': dict(self.event_data or {}),
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }
