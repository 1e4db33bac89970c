"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('is_fraud', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_logged_in', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_table('tickets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('origin', sa.String(length=128), nullable=False),
        sa.Column('destination', sa.String(length=128), nullable=False),
        sa.Column('transport_type', sa.String(length=32), nullable=True),
        sa.Column('departure_at', sa.DateTime(), nullable=False),
        sa.Column('perks', sa.JSON(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('vendor_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('advertised', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('hidden', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('quantity >= 0', name='ck_tickets_quantity_non_negative'),
    )
    op.create_index('ix_tickets_origin', 'tickets', ['origin'])
    op.create_index('ix_tickets_destination', 'tickets', ['destination'])
    op.create_index('ix_tickets_vendor_email', 'tickets', ['vendor_email'])
    op.create_index('ix_tickets_status', 'tickets', ['status'])
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ticket_id', sa.Integer(), sa.ForeignKey('tickets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('origin', sa.String(length=128), nullable=False),
        sa.Column('destination', sa.String(length=128), nullable=False),
        sa.Column('departure_at', sa.DateTime(), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('vendor_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_name', sa.String(length=255), nullable=True),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('payment_status', sa.String(length=16), nullable=False, server_default='unpaid'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_bookings_ticket_id', 'bookings', ['ticket_id'])
    op.create_index('ix_bookings_vendor_email', 'bookings', ['vendor_email'])
    op.create_index('ix_bookings_user_email', 'bookings', ['user_email'])
    op.create_table('transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('booking_id', sa.Integer(), sa.ForeignKey('bookings.id', ondelete='SET NULL'), nullable=True),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('vendor_email', sa.String(length=255), nullable=True),
        sa.Column('ticket_title', sa.String(length=255), nullable=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('session_id', sa.String(length=255), nullable=False),
        sa.Column('transaction_id', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('session_id'),
    )
    op.create_index('ix_transactions_booking_id', 'transactions', ['booking_id'])
    op.create_index('ix_transactions_user_email', 'transactions', ['user_email'])
    op.create_index('ix_transactions_vendor_email', 'transactions', ['vendor_email'])
    op.create_index('ix_transactions_session_id', 'transactions', ['session_id'])

def downgrade():
    op.drop_index('ix_transactions_session_id', table_name='transactions')
    op.drop_index('ix_transactions_vendor_email', table_name='transactions')
    op.drop_index('ix_transactions_user_email', table_name='transactions')
    op.drop_index('ix_transactions_booking_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_bookings_user_email', table_name='bookings')
    op.drop_index('ix_bookings_vendor_email', table_name='bookings')
    op.drop_index('ix_bookings_ticket_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_tickets_status', table_name='tickets')
    op.drop_index('ix_tickets_vendor_email', table_name='tickets')
    op.drop_index('ix_tickets_destination', table_name='tickets')
    op.drop_index('ix_tickets_origin', table_name='tickets')
    op.drop_table('tickets')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
