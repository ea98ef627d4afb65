"""create_media_and_receipt_tables

Revision ID: 3f2c9d7e1a40
Revises:
Create Date: 2026-10-17 09:12:44.118203

"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2c9d7e1a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# IRS Schedule E expense lines
DEFAULT_CATEGORIES = [
    ("Advertising", "5"),
    ("Auto and Travel", "6"),
    ("Cleaning and Maintenance", "7"),
    ("Commissions", "8"),
    ("Insurance", "9"),
    ("Legal and Professional Fees", "10"),
    ("Management Fees", "11"),
    ("Mortgage Interest", "12"),
    ("Other Interest", "13"),
    ("Repairs", "14"),
    ("Supplies", "15"),
    ("Taxes", "16"),
    ("Utilities", "17"),
    ("Depreciation", "18"),
    ("Other", "19"),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the property media and receipt schema.

    Creates:
    - accounts, users (tenant boundary and auto-provisioned users)
    - properties, property_photos (with one-primary-per-property index)
    - expense_categories (seeded with Schedule E lines)
    - work_orders, expenses, receipts
    - outbox_events (post-commit notifications)
    """
    # 1. Tenants and users
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('auth_user_id', sa.String(length=255), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_auth_user_id', 'users', ['auth_user_id'], unique=True)
    op.create_index('ix_users_account_id', 'users', ['account_id'])

    # 2. Properties and photos
    op.create_table(
        'properties',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('street', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('zip_code', sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_properties_account_id', 'properties', ['account_id'])

    op.create_table(
        'property_photos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('storage_key', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_storage_key', sa.String(length=500), nullable=True),
        sa.Column('original_file_name', sa.String(length=255), nullable=False),
        sa.Column('content_type', sa.String(length=100), nullable=False),
        sa.Column('file_size_bytes', sa.BigInteger(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('storage_key')
    )
    op.create_index('ix_property_photos_account_id', 'property_photos', ['account_id'])
    op.create_index('ix_property_photos_property_id', 'property_photos', ['property_id'])
    op.create_index(
        'ix_property_photos_property_display_order', 'property_photos', ['property_id', 'display_order']
    )
    op.create_index(
        'uq_property_photos_primary',
        'property_photos',
        ['property_id'],
        unique=True,
        sqlite_where=sa.text('is_primary = 1'),
        postgresql_where=sa.text('is_primary = true'),
    )

    # 3. Expense categories (global, seeded)
    categories = op.create_table(
        'expense_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('schedule_e_line', sa.String(length=20), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.bulk_insert(
        categories,
        [
            {"id": uuid.uuid4(), "name": name, "schedule_e_line": line, "sort_order": sort_order}
            for sort_order, (name, line) in enumerate(DEFAULT_CATEGORIES)
        ],
    )

    # 4. Work orders and expenses
    op.create_table(
        'work_orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=9), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_work_orders_account_id', 'work_orders', ['account_id'])
    op.create_index('ix_work_orders_property_id', 'work_orders', ['property_id'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('property_id', sa.Uuid(), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('receipt_id', sa.Uuid(), nullable=True),
        sa.Column('work_order_id', sa.Uuid(), nullable=True),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['expense_categories.id']),
        sa.ForeignKeyConstraint(['work_order_id'], ['work_orders.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_expenses_account_id', 'expenses', ['account_id'])
    op.create_index('ix_expenses_property_id', 'expenses', ['property_id'])
    op.create_index('ix_expenses_date', 'expenses', ['date'])
    op.create_index('ix_expenses_receipt_id', 'expenses', ['receipt_id'])
    op.create_index(
        'ix_expenses_account_property_date', 'expenses', ['account_id', 'property_id', 'date']
    )

    # 5. Receipts (references expenses, so created after them)
    op.create_table(
        'receipts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('storage_key', sa.String(length=500), nullable=False),
        sa.Column('thumbnail_storage_key', sa.String(length=500), nullable=True),
        sa.Column('original_file_name', sa.String(length=255), nullable=True),
        sa.Column('content_type', sa.String(length=100), nullable=True),
        sa.Column('file_size_bytes', sa.BigInteger(), nullable=True),
        sa.Column('property_id', sa.Uuid(), nullable=True),
        sa.Column('expense_id', sa.Uuid(), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('storage_key')
    )
    op.create_index('ix_receipts_account_id', 'receipts', ['account_id'])
    op.create_index('ix_receipts_account_processed', 'receipts', ['account_id', 'processed_at'])

    # 6. Outbox
    op.create_table(
        'outbox_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('event_type', sa.String(length=100), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False),
        sa.Column('dispatched_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_outbox_events_account_pending', 'outbox_events', ['account_id', 'dispatched_at'])


def downgrade() -> None:
    """
    Drop the whole schema.

    WARNING: This deletes all photos, receipts and expenses. Objects in
    storage are left in place.
    """
    op.drop_table('outbox_events')
    op.drop_table('receipts')
    op.drop_table('expenses')
    op.drop_table('work_orders')
    op.drop_table('expense_categories')
    op.drop_index('uq_property_photos_primary', table_name='property_photos')
    op.drop_table('property_photos')
    op.drop_table('properties')
    op.drop_table('users')
    op.drop_table('accounts')
