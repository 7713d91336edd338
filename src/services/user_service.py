# -*- coding: utf-8 -*-
"""
User Service

Back office accounts are soft-disabled. A user who still owns properties
cannot be disabled until the properties are reassigned.
"""
from typing import Any, Dict, List, Optional

from src.infra.db import db
from src.infra.log import get_logger
from src.models.buyer import normalize_email
from src.models.offer import Property
from src.models.user import User
from src.utils.errors import ValidationError, NotFoundError, ConflictError

logger = get_logger('landivo.users')


def get_user_or_404(user_id: str) -> User:
    user = db.session.get(User, user_id) if user_id else None
    if not user:
        raise NotFoundError('User not found')
    return user


def list_users(role: Optional[str] = None, status: Optional[str] = None) -> List[User]:
    """List users, optionally filtered by role and by status (active|disabled)."""
    query = User.query
    if role and role != 'all':
        query = query.filter(User.role == role)
    if status == 'active':
        query = query.filter(User.is_active.is_(True))
    elif status == 'disabled':
        query = query.filter(User.is_active.is_(False))
    return query.order_by(User.created_at.desc()).all()


def create_user(data: Dict[str, Any]) -> User:
    email = normalize_email(data.get('email'))
    if not email:
        raise ValidationError('Email is required')
    if User.query.filter_by(email=email).first():
        raise ConflictError('A user with this email already exists')

    user = User(
        email=email,
        first_name=data.get('first_name'),
        last_name=data.get('last_name'),
        role=data.get('role') or 'USER',
    )
    db.session.add(user)
    db.session.commit()
    logger.info("User created", user_id=user.id, role=user.role)
    return user


def get_properties_count(user_id: str) -> int:
    user = get_user_or_404(user_id)
    return Property.query.filter_by(owner_id=user.id).count()


def update_user_status(user_id: str, is_active: bool) -> User:
    """
    Enable or disable a user.

    Raises:
        ConflictError: disabling a user who still owns properties; the body
            carries `propertiesCount`
    """
    user = get_user_or_404(user_id)

    if not is_active:
        owned = Property.query.filter_by(owner_id=user.id).count()
        if owned:
            raise ConflictError(
                'User owns properties that must be reassigned before disabling',
                payload={'propertiesCount': owned}
            )

    user.is_active = bool(is_active)
    db.session.commit()
    logger.info("User status updated", user_id=user.id, is_active=user.is_active)
    return user


def reassign_properties(user_id: str, target_user_id: str) -> int:
    """Move every property owned by user_id to target_user_id."""
    user = get_user_or_404(user_id)
    if not target_user_id or target_user_id == user.id:
        raise ValidationError('A different target user is required')

    target = db.session.get(User, target_user_id)
    if not target or not target.is_active:
        raise ValidationError('Target user must exist and be active')

    moved = (
        Property.query
        .filter_by(owner_id=user.id)
        .update({Property.owner_id: target.id}, synchronize_session=False)
    )
    db.session.commit()
    logger.info("Properties reassigned", from_user_id=user.id, to_user_id=target.id, count=moved)
    return moved
