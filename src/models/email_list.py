"""
Email list models
Named marketing lists and the buyer membership join table.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

from src.infra.db import db


class EmailList(db.Model):
    __tablename__ = 'email_lists'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text)

    # {areas: [...], buyerTypes: [...], isVIP: bool}; applied once when the list is built
    criteria = db.Column(db.JSON, default=dict)

    # Set only on lists maintained by VIP reconciliation, e.g. "vip:DFW:Investor"
    system_key = db.Column(db.String(120), unique=True, nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    memberships = db.relationship('EmailListMembership', back_populates='email_list', lazy=True,
                                  cascade='all, delete-orphan')

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
        }

    def to_dict(self, include_members: bool = False) -> Dict[str, Any]:
        result = self.to_summary_dict()
        result.update({
            'criteria': dict(self.criteria or {}),
            'systemKey': self.system_key,
            'buyerCount': len(self.memberships),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        })
        if include_members:
            result['buyers'] = [m.buyer.to_dict() for m in self.memberships]
        return result


class EmailListMembership(db.Model):
    __tablename__ = 'email_list_memberships'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    buyer_id = db.Column(db.String(36), db.ForeignKey('buyers.id', ondelete='CASCADE'), nullable=False, index=True)
    email_list_id = db.Column(db.String(36), db.ForeignKey('email_lists.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint('buyer_id', 'email_list_id', name='uq_buyer_email_list'),
    )

    buyer = db.relationship('Buyer', back_populates='email_list_memberships', lazy=True)
    email_list = db.relationship('EmailList', back_populates='memberships', lazy=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'buyerId': self.buyer_id,
            'emailListId': self.email_list_id,
            'emailList': self.email_list.to_summary_dict() if self.email_list else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
