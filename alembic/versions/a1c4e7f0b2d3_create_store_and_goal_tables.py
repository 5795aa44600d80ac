"""Create users, sessions, stores, products, orders, order items and sales goals

Revision ID: a1c4e7f0b2d3
Revises:
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers
revision: str = 'a1c4e7f0b2d3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(table_name):
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _has_table('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('display_name', sa.String(), nullable=True),
            sa.Column('is_active', sa.Boolean(), server_default='1'),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
            sa.Column('last_login', sa.DateTime(), nullable=True),
        )

    if not _has_table('user_sessions'):
        op.create_table(
            'user_sessions',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
            sa.Column('token', sa.String(64), nullable=False, unique=True, index=True),
            sa.Column('expires_at', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        )

    if not _has_table('stores'):
        op.create_table(
            'stores',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )

    if not _has_table('products'):
        op.create_table(
            'products',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('store_id', sa.String(36), sa.ForeignKey('stores.id'), nullable=False, index=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('price', sa.Numeric(10, 2), nullable=False),
            sa.Column('is_archived', sa.Boolean(), server_default='0'),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )

    if not _has_table('orders'):
        op.create_table(
            'orders',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('store_id', sa.String(36), sa.ForeignKey('stores.id'), nullable=False, index=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True, index=True),
            sa.Column('is_paid', sa.Boolean(), server_default='0', index=True),
            sa.Column('phone', sa.String(), server_default=''),
            sa.Column('address', sa.Text(), server_default=''),
            sa.Column('created_at', sa.DateTime(), index=True),
            sa.Column('updated_at', sa.DateTime()),
        )

    if not _has_table('order_items'):
        op.create_table(
            'order_items',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('order_id', sa.String(36), sa.ForeignKey('orders.id'), nullable=False, index=True),
            sa.Column('product_id', sa.String(36), sa.ForeignKey('products.id'), nullable=False, index=True),
        )

    if not _has_table('sales_goals'):
        op.create_table(
            'sales_goals',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('store_id', sa.String(36), sa.ForeignKey('stores.id'), nullable=False, index=True),
            sa.Column('metric_type', sa.Enum('REVENUE', 'UNITS_SOLD', name='metrictype'), nullable=False),
            sa.Column('time_period', sa.Enum('DAILY', 'WEEKLY', 'MONTHLY', name='timeperiod'), nullable=False),
            sa.Column('target_value', sa.Float(), nullable=False),
            sa.Column('created_at', sa.DateTime()),
            sa.Column('updated_at', sa.DateTime()),
        )


def downgrade() -> None:
    for table_name in ('sales_goals', 'order_items', 'orders', 'products', 'stores', 'user_sessions', 'users'):
        if _has_table(table_name):
            op.drop_table(table_name)
