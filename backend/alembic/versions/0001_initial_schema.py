"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('dot_number', sa.String(length=50), nullable=True),
        sa.Column('mc_number', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('zip', sa.String(length=20), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('billing_email', sa.String(length=255), nullable=True),
        sa.Column('subscription_tier', sa.String(length=50), nullable=False),
        sa.Column('subscription_status', sa.String(length=50), nullable=False),
        sa.Column('max_users', sa.Integer(), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_organizations'),
        sa.UniqueConstraint('external_id', name='uq_organizations_external_id'),
        sa.UniqueConstraint('slug', name='uq_organizations_slug'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('profile_image_url', sa.String(length=1000), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('onboarding_complete', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_users_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('external_id', name='uq_users_external_id'),
    )

    op.create_table(
        'drivers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('employee_id', sa.String(length=50), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('license_number', sa.String(length=50), nullable=True),
        sa.Column('license_state', sa.String(length=10), nullable=True),
        sa.Column('license_class', sa.String(length=10), nullable=True),
        sa.Column('license_expiration', sa.Date(), nullable=True),
        sa.Column('medical_card_expiration', sa.Date(), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_drivers_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_drivers_user_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_drivers'),
        sa.UniqueConstraint('organization_id', 'employee_id', name='uq_drivers_organization_id'),
    )

    op.create_table(
        'hos_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('driver_id', sa.Uuid(), nullable=False),
        sa.Column('log_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_hos_logs_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id'], name='fk_hos_logs_driver_id_drivers'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], name='fk_hos_logs_created_by_users'),
        sa.PrimaryKeyConstraint('id', name='pk_hos_logs'),
    )
    op.create_index('ix_hos_logs_driver_id', 'hos_logs', ['driver_id'])
    op.create_index('ix_hos_logs_log_date', 'hos_logs', ['log_date'])

    op.create_table(
        'duty_status_entries',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('log_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['log_id'], ['hos_logs.id'],
            name='fk_duty_status_entries_log_id_hos_logs', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_duty_status_entries'),
    )

    op.create_table(
        'hos_violations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('driver_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('severity', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('resolved_by', sa.Uuid(), nullable=True),
        sa.Column('resolution_note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_hos_violations_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id'], name='fk_hos_violations_driver_id_drivers'),
        sa.ForeignKeyConstraint(['resolved_by'], ['users.id'], name='fk_hos_violations_resolved_by_users'),
        sa.PrimaryKeyConstraint('id', name='pk_hos_violations'),
    )
    op.create_index('ix_hos_violations_driver_id', 'hos_violations', ['driver_id'])

    op.create_table(
        'compliance_documents',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('driver_id', sa.Uuid(), nullable=True),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('document_number', sa.String(length=100), nullable=True),
        sa.Column('issuing_authority', sa.String(length=255), nullable=True),
        sa.Column('issue_date', sa.Date(), nullable=True),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_compliance_documents_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['driver_id'], ['drivers.id'], name='fk_compliance_documents_driver_id_drivers',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_compliance_documents'),
    )
    op.create_index('ix_compliance_documents_expiration_date', 'compliance_documents', ['expiration_date'])

    op.create_table(
        'compliance_alerts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('driver_id', sa.Uuid(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('severity', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('is_acknowledged', sa.Boolean(), nullable=False),
        sa.Column('acknowledged_by', sa.Uuid(), nullable=True),
        sa.Column('acknowledged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'],
            name='fk_compliance_alerts_organization_id_organizations', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['driver_id'], ['drivers.id'], name='fk_compliance_alerts_driver_id_drivers'),
        sa.ForeignKeyConstraint(
            ['acknowledged_by'], ['users.id'], name='fk_compliance_alerts_acknowledged_by_users',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_compliance_alerts'),
    )

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('entity_type', sa.String(length=100), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['organization_id'], ['organizations.id'], name='fk_audit_log_organization_id_organizations',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_audit_log_user_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_audit_log'),
    )


def downgrade() -> None:
    op.drop_table('audit_log')
    op.drop_table('compliance_alerts')
    op.drop_index('ix_compliance_documents_expiration_date', table_name='compliance_documents')
    op.drop_table('compliance_documents')
    op.drop_index('ix_hos_violations_driver_id', table_name='hos_violations')
    op.drop_table('hos_violations')
    op.drop_table('duty_status_entries')
    op.drop_index('ix_hos_logs_log_date', table_name='hos_logs')
    op.drop_index('ix_hos_logs_driver_id', table_name='hos_logs')
    op.drop_table('hos_logs')
    op.drop_table('drivers')
    op.drop_table('users')
    op.drop_table('organizations')
