"""baseline_schema

Revision ID: a1c4e7d2b9f0
Revises: 
Create Date: 2026-10-19 09:12:44.318210

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7d2b9f0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables for the Landivo buyer back office (baseline schema)."""

    # Users table (properties reference it)
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=120), nullable=True),
        sa.Column('last_name', sa.String(length=120), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Buyers table
    op.create_table(
        'buyers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=40), nullable=True),
        sa.Column('first_name', sa.String(length=120), nullable=True),
        sa.Column('last_name', sa.String(length=120), nullable=True),
        sa.Column('buyer_type', sa.String(length=40), nullable=True),
        sa.Column('source', sa.String(length=120), nullable=True),
        sa.Column('preferred_areas', sa.JSON(), nullable=False),
        sa.Column('email_status', sa.String(length=40), nullable=True),
        sa.Column('email_permission_status', sa.String(length=40), nullable=True),
        sa.Column('unsubscribed', sa.Boolean(), nullable=False),
        sa.Column('auth0_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_buyers_email'), 'buyers', ['email'], unique=True)
    op.create_index(op.f('ix_buyers_phone'), 'buyers', ['phone'], unique=True)
    op.create_index(op.f('ix_buyers_auth0_id'), 'buyers', ['auth0_id'], unique=False)

    # Properties table
    op.create_table(
        'properties',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('street_address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('state', sa.String(length=40), nullable=True),
        sa.Column('zip', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=40), nullable=True),
        sa.Column('owner_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_properties_owner_id'), 'properties', ['owner_id'], unique=False)

    # Offers table
    op.create_table(
        'offers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('buyer_id', sa.String(length=36), nullable=False),
        sa.Column('property_id', sa.String(length=36), nullable=False),
        sa.Column('offered_price', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('countered_price', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('offer_status', sa.String(length=20), nullable=False),
        sa.Column('buyer_message', sa.Text(), nullable=True),
        sa.Column('sys_message', sa.Text(), nullable=True),
        sa.Column('offer_history', sa.JSON(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['buyer_id'], ['buyers.id'], ),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_offers_buyer_id'), 'offers', ['buyer_id'], unique=False)
    op.create_index(op.f('ix_offers_property_id'), 'offers', ['property_id'], unique=False)

    # Email lists and memberships
    op.create_table(
        'email_lists',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('criteria', sa.JSON(), nullable=True),
        sa.Column('system_key', sa.String(length=120), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(op.f('ix_email_lists_system_key'), 'email_lists', ['system_key'], unique=True)

    op.create_table(
        'email_list_memberships',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('buyer_id', sa.String(length=36), nullable=False),
        sa.Column('email_list_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['buyer_id'], ['buyers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['email_list_id'], ['email_lists.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('buyer_id', 'email_list_id', name='uq_buyer_email_list')
    )
    op.create_index(op.f('ix_email_list_memberships_buyer_id'), 'email_list_memberships', ['buyer_id'], unique=False)
    op.create_index(op.f('ix_email_list_memberships_email_list_id'), 'email_list_memberships', ['email_list_id'], unique=False)

    # Buyer activity
    op.create_table(
        'buyer_activities',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('buyer_id', sa.String(length=36), nullable=False),
        sa.Column('event_type', sa.String(length=40), nullable=False),
        sa.Column('page', sa.String(length=500), nullable=True),
        sa.Column('event_data', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['buyer_id'], ['buyers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_buyer_activities_buyer_id'), 'buyer_activities', ['buyer_id'], unique=False)
    op.create_index(op.f('ix_buyer_activities_event_type'), 'buyer_activities', ['event_type'], unique=False)
    op.create_index(op.f('ix_buyer_activities_timestamp'), 'buyer_activities', ['timestamp'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('buyer_activities')
    op.drop_table('email_list_memberships')
    op.drop_table('email_lists')
    op.drop_table('offers')
    op.drop_table('properties')
    op.drop_table('buyers')
    op.drop_table('users')
