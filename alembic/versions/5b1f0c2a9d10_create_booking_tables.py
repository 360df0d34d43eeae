"""create_booking_tables

Revision ID: 5b1f0c2a9d10
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b1f0c2a9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('plans',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('monthly_appointment_limit', sa.Integer(), nullable=True),
        sa.Column('unlimited_appointments', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('establishments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('plan_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('booking_slug', sa.String(length=120), nullable=True),
        sa.Column('timezone', sa.String(length=50), nullable=True),
        sa.Column('working_hours', sa.JSON(), nullable=True),
        sa.Column('slots_per_hour', sa.Integer(), nullable=False),
        sa.Column('earliest_booking_time', sa.String(length=20), nullable=True),
        sa.Column('latest_booking_time', sa.String(length=20), nullable=True),
        sa.Column('required_fields', sa.JSON(), nullable=True),
        sa.Column('booking_fee_enabled', sa.Boolean(), nullable=True),
        sa.Column('booking_fee_type', sa.String(length=20), nullable=True),
        sa.Column('booking_fee_amount', sa.Numeric(precision=8, scale=2), nullable=True),
        sa.Column('booking_fee_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('payment_access_token', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_slug')
    )
    op.create_index(op.f('ix_establishments_slug'), 'establishments', ['slug'], unique=True)

    op.create_table('services',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('has_promotion', sa.Boolean(), nullable=True),
        sa.Column('promotion_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint('duration_minutes > 0', name='ck_services_duration_positive'),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_services_establishment_id'), 'services', ['establishment_id'], unique=False)
    op.create_index(op.f('ix_services_is_active'), 'services', ['is_active'], unique=False)

    op.create_table('blocked_dates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('blocked_date', sa.Date(), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('establishment_id', 'blocked_date', name='uq_blocked_dates_establishment_date')
    )

    op.create_table('blocked_times',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('blocked_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.CheckConstraint('start_time < end_time', name='ck_blocked_times_range'),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blocked_times_establishment_date', 'blocked_times', ['establishment_id', 'blocked_date'], unique=False)

    op.create_table('customers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_customers_phone'), 'customers', ['phone'], unique=True)

    op.create_table('customer_establishments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', 'establishment_id', name='uq_customer_establishment')
    )

    op.create_table('coupons',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('value', sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        sa.Column('used_count', sa.Integer(), nullable=False),
        sa.Column('valid_from', sa.Date(), nullable=True),
        sa.Column('valid_until', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('establishment_id', 'code', name='uq_coupons_establishment_code')
    )

    op.create_table('appointments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('establishment_id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Uuid(), nullable=False),
        sa.Column('service_id', sa.Uuid(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('discount_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('discount_code', sa.String(length=50), nullable=True),
        sa.Column('booking_fee_amount', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.ForeignKeyConstraint(['establishment_id'], ['establishments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_id'], ['services.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_appointments_establishment_scheduled', 'appointments', ['establishment_id', 'scheduled_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_appointments_establishment_scheduled', table_name='appointments')
    op.drop_table('appointments')
    op.drop_table('coupons')
    op.drop_table('customer_establishments')
    op.drop_index(op.f('ix_customers_phone'), table_name='customers')
    op.drop_table('customers')
    op.drop_index('ix_blocked_times_establishment_date', table_name='blocked_times')
    op.drop_table('blocked_times')
    op.drop_table('blocked_dates')
    op.drop_index(op.f('ix_services_is_active'), table_name='services')
    op.drop_index(op.f('ix_services_establishment_id'), table_name='services')
    op.drop_table('services')
    op.drop_index(op.f('ix_establishments_slug'), table_name='establishments')
    op.drop_table('establishments')
    op.drop_table('plans')
