
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'tables',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('location', sa.String(length=16), nullable=False, server_default='Indoor'),
        sa.Column('type', sa.String(length=40), nullable=False, server_default='Standard'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='Available'),
        sa.Column('is_joinable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_tables_status', 'tables', ['status'])

    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('table_id', sa.Integer(), sa.ForeignKey('tables.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_name', sa.String(length=120), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=32), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time_slot', sa.String(length=5), nullable=False),
        sa.Column('guest_count', sa.Integer(), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=False, server_default=''),
        sa.Column('seating_preference', sa.String(length=16), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='Confirmed'),
        sa.Column('deposit_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deposit_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_reservations_customer_email', 'reservations', ['customer_email'])
    op.create_index('ix_reservations_date', 'reservations', ['date'])

    op.create_table(
        'reservation_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reservation_id', sa.Integer(), sa.ForeignKey('reservations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('table_id', sa.Integer(), sa.ForeignKey('tables.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time_slot', sa.String(length=5), nullable=False),
        sa.Column('released', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_reservation_assignments_reservation_id', 'reservation_assignments', ['reservation_id'])
    op.create_index('ix_assignment_date_slot', 'reservation_assignments', ['date', 'time_slot'])
    op.create_index(
        'uq_assignment_table_slot', 'reservation_assignments', ['table_id', 'date', 'time_slot'],
        unique=True,
        sqlite_where=sa.text('NOT released'),
        postgresql_where=sa.text('NOT released'),
    )

    op.create_table(
        'settings',
        sa.Column('key', sa.String(length=64), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
    )

    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(length=60), nullable=False, server_default=''),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )

def downgrade():
    op.drop_table('menu_items')
    op.drop_table('settings')
    op.drop_index('uq_assignment_table_slot', table_name='reservation_assignments')
    op.drop_index('ix_assignment_date_slot', table_name='reservation_assignments')
    op.drop_index('ix_reservation_assignments_reservation_id', table_name='reservation_assignments')
    op.drop_table('reservation_assignments')
    op.drop_index('ix_reservations_date', table_name='reservations')
    op.drop_index('ix_reservations_customer_email', table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('ix_tables_status', table_name='tables')
    op.drop_table('tables')
