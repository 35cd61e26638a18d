"""Create affiliate attribution and commission ledger tables.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create affiliates, links, attributions, promo codes, subscriptions, ledger, invites."""

    op.create_table(
        'affiliates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE', comment='ACTIVE, INACTIVE, SUSPENDED'),
        sa.Column('parent_affiliate_id', sa.Integer(), nullable=True),
        sa.Column('custom_user_commission_pct', sa.DECIMAL(7, 4), nullable=True),
        sa.Column('custom_business_commission_pct', sa.DECIMAL(7, 4), nullable=True),
        sa.Column('custom_parent_user_commission_pct', sa.DECIMAL(7, 4), nullable=True),
        sa.Column('custom_parent_business_commission_pct', sa.DECIMAL(7, 4), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['parent_affiliate_id'], ['affiliates.id'], ondelete='SET NULL'),
        sa.CheckConstraint(
            'parent_affiliate_id IS NULL OR parent_affiliate_id != id',
            name='check_affiliate_not_own_parent',
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_affiliates_user_id'), 'affiliates', ['user_id'], unique=True)
    op.create_index(op.f('ix_affiliates_status'), 'affiliates', ['status'])
    op.create_index(op.f('ix_affiliates_parent_affiliate_id'), 'affiliates', ['parent_affiliate_id'])

    op.create_table(
        'referral_links',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('deactivated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_referral_links_code'), 'referral_links', ['code'], unique=True)
    op.create_index(op.f('ix_referral_links_affiliate_id'), 'referral_links', ['affiliate_id'])

    op.create_table(
        'attributions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False, comment='USER_SIGNUP, BUSINESS_SIGNUP'),
        sa.Column('source', sa.String(32), nullable=False, server_default='REFERRAL_LINK'),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_attributions_user_id'), 'attributions', ['user_id'])
    op.create_index(op.f('ix_attributions_affiliate_id'), 'attributions', ['affiliate_id'])
    op.create_index('idx_attributions_user_type_window', 'attributions', ['user_id', 'type', 'ends_at'])

    op.create_table(
        'promo_codes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(32), nullable=False),
        sa.Column('discount_share_pct', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id']),
        sa.CheckConstraint(
            'discount_share_pct >= 0 AND discount_share_pct <= 100',
            name='check_promo_discount_share_range',
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_promo_codes_code'), 'promo_codes', ['code'], unique=True)
    op.create_index(op.f('ix_promo_codes_affiliate_id'), 'promo_codes', ['affiliate_id'])

    op.create_table(
        'business_subscriptions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('business_user_id', sa.String(64), nullable=False),
        sa.Column('external_subscription_id', sa.String(255), nullable=False),
        sa.Column('attribution_id', sa.Integer(), nullable=True),
        sa.Column('promo_code_id', sa.Integer(), nullable=True),
        sa.Column('price_cents', sa.BigInteger(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='eur'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['attribution_id'], ['attributions.id']),
        sa.ForeignKeyConstraint(['promo_code_id'], ['promo_codes.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        op.f('ix_business_subscriptions_external_subscription_id'),
        'business_subscriptions',
        ['external_subscription_id'],
        unique=True,
    )
    op.create_index(op.f('ix_business_subscriptions_business_user_id'), 'business_subscriptions', ['business_user_id'])

    op.create_table(
        'commission_ledger',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('event_id', sa.String(255), nullable=False, comment='Idempotency key'),
        sa.Column('event_type', sa.String(32), nullable=False, comment='INVOICE_PAID, ORDER_PAID, REFUND, CHARGEBACK'),
        sa.Column('affiliate_id', sa.Integer(), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False, comment='Signed, negative for reversals'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='eur'),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('available_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('business_subscription_id', sa.Integer(), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['affiliate_id'], ['affiliates.id']),
        sa.ForeignKeyConstraint(['business_subscription_id'], ['business_subscriptions.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_commission_ledger_event_id'), 'commission_ledger', ['event_id'], unique=True)
    op.create_index(op.f('ix_commission_ledger_affiliate_id'), 'commission_ledger', ['affiliate_id'])
    op.create_index('idx_commission_ledger_affiliate_status', 'commission_ledger', ['affiliate_id', 'status'])
    op.create_index('idx_commission_ledger_status_available', 'commission_ledger', ['status', 'available_at'])

    op.create_table(
        'sub_affiliate_invites',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('parent_affiliate_id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('invite_token', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_affiliate_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['parent_affiliate_id'], ['affiliates.id']),
        sa.ForeignKeyConstraint(['accepted_affiliate_id'], ['affiliates.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sub_affiliate_invites_invite_token'), 'sub_affiliate_invites', ['invite_token'], unique=True)
    op.create_index(op.f('ix_sub_affiliate_invites_parent_affiliate_id'), 'sub_affiliate_invites', ['parent_affiliate_id'])


def downgrade() -> None:
    """Drop affiliate tables."""

    op.drop_table('sub_affiliate_invites')
    op.drop_table('commission_ledger')
    op.drop_table('business_subscriptions')
    op.drop_table('promo_codes')
    op.drop_table('attributions')
    op.drop_table('referral_links')
    op.drop_table('affiliates')
