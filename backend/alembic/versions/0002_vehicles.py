"""vehicles

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-17 14:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'vehicles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('current_driver_id', sa.Uuid(), nullable=True),
        sa.Column('unit_number', sa.String(length=50), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('make', sa.String(length=100), nullable=True),
        sa.Column('model', sa.String(length=100), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('vin', sa.String(length=17), nullable=True),
        sa.Column('license_plate', sa.String(length=20), nullable=True),
        sa.Column('license_plate_state', sa.String(length=10), nullable=True),
        sa.Column('fuel_type', sa.String(length=50), nullable=True),
        sa.Column('current_odometer', sa.Integer(), nullable=True),
        sa.Column('registration_expiration', sa.Date(), nullable=True),
        sa.Column('insurance_expiration', sa.Date(), nullable=True),
        sa.Column('last_inspection_date', sa.Date(), nullable=True),
        sa.Column('next_inspection_due', sa.Date(), nullable=True),
        sa.Column('next_maintenance_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_vehicles_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['current_driver_id'], ['drivers.id'], name='fk_vehicles_current_driver_id_drivers',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_vehicles'),
        sa.UniqueConstraint('organization_id', 'unit_number', name='uq_vehicles_organization_id'),
    )

    with op.batch_alter_table('compliance_documents') as batch_op:
        batch_op.add_column(sa.Column('vehicle_id', sa.Uuid(), nullable=True))
        batch_op.create_foreign_key(
            'fk_compliance_documents_vehicle_id_vehicles', 'vehicles', ['vehicle_id'], ['id'],
        )

    with op.batch_alter_table('compliance_alerts') as batch_op:
        batch_op.add_column(sa.Column('vehicle_id', sa.Uuid(), nullable=True))
        batch_op.create_foreign_key(
            'fk_compliance_alerts_vehicle_id_vehicles', 'vehicles', ['vehicle_id'], ['id'],
        )


def downgrade() -> None:
    with op.batch_alter_table('compliance_alerts') as batch_op:
        batch_op.drop_constraint('fk_compliance_alerts_vehicle_id_vehicles', type_='foreignkey')
        batch_op.drop_column('vehicle_id')

    with op.batch_alter_table('compliance_documents') as batch_op:
        batch_op.drop_constraint('fk_compliance_documents_vehicle_id_vehicles', type_='foreignkey')
        batch_op.drop_column('vehicle_id')

    op.drop_table('vehicles')
