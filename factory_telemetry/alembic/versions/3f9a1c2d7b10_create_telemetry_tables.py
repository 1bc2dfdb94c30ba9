"""create telemetry tables

Revision ID: 3f9a1c2d7b10
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'sensors',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('protocol', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'sensor_bindings',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('sensor_id', sa.Text(), sa.ForeignKey('sensors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('machine_id', sa.Text(), nullable=False),
        sa.Column('metric', sa.Text(), nullable=False),
        sa.Column('unit', sa.Text(), nullable=True),
        sa.Column('scale', sa.Float(), nullable=False, server_default='1'),
        sa.Column('offset_value', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_sensor_bindings_sensor', 'sensor_bindings', ['sensor_id'])
    op.create_index('idx_sensor_bindings_machine', 'sensor_bindings', ['machine_id'])

    op.create_table(
        'sensor_rules',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('machine_id', sa.Text(), nullable=False),
        sa.Column('sensor_id', sa.Text(), sa.ForeignKey('sensors.id', ondelete='SET NULL'), nullable=True),
        sa.Column('metric', sa.Text(), nullable=False),
        sa.Column('operator', sa.Text(), nullable=False),
        sa.Column('min_value', sa.Float(), nullable=True),
        sa.Column('max_value', sa.Float(), nullable=True),
        sa.Column('threshold_value', sa.Float(), nullable=True),
        sa.Column('priority', sa.Text(), nullable=False, server_default='medium'),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('cooldown_seconds', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_sensor_rules_machine', 'sensor_rules', ['machine_id'])
    op.create_index('idx_sensor_rules_sensor', 'sensor_rules', ['sensor_id'])

    op.create_table(
        'alerts',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('machine_id', sa.Text(), nullable=False),
        sa.Column('rule_id', sa.Text(), sa.ForeignKey('sensor_rules.id', ondelete='SET NULL'), nullable=True),
        sa.Column('sensor_id', sa.Text(), sa.ForeignKey('sensors.id', ondelete='SET NULL'), nullable=True),
        sa.Column('metric', sa.Text(), nullable=False),
        sa.Column('value', sa.Float(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='active'),
        sa.Column('priority', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_alerts_status', 'alerts', ['status'])
    op.create_index('idx_alerts_machine', 'alerts', ['machine_id'])

    op.create_table(
        'vision_camera_events',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('camera_id', sa.Text(), nullable=True),
        sa.Column('machine_id', sa.Text(), nullable=False),
        sa.Column('roi_id', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('frame_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("status IN ('active','inactive')", name='ck_vision_camera_events_status'),
    )
    op.create_index('idx_vision_events_machine_time', 'vision_camera_events', ['machine_id', 'created_at'])
    op.create_index('idx_vision_events_camera_time', 'vision_camera_events', ['camera_id', 'created_at'])
    op.create_index('idx_vision_events_roi_time', 'vision_camera_events', ['roi_id', 'created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('vision_camera_events')
    op.drop_table('alerts')
    op.drop_table('sensor_rules')
    op.drop_table('sensor_bindings')
    op.drop_table('sensors')
