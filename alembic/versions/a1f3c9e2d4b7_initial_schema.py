"""initial schema

Revision ID: a1f3c9e2d4b7
Revises:
Create Date: 2026-10-19 09:12:44.318502

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9e2d4b7'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Check if tables already exist (databases created by init_db)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    if 'vehicles' not in existing_tables:
        op.create_table('vehicles',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('lat', sa.Float(), nullable=False),
            sa.Column('lng', sa.Float(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('capacity', sa.Float(), nullable=False),
            sa.Column('current_load', sa.Float(), nullable=False),
            sa.Column('battery_level', sa.Float(), nullable=False),
            sa.Column('destination', sa.JSON(), nullable=True),
            sa.Column('route', sa.JSON(), nullable=False),
            sa.Column('metadata', sa.JSON(), nullable=False),
            sa.Column('last_update', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_vehicles_type'), 'vehicles', ['type'], unique=False)
        op.create_index(op.f('ix_vehicles_status'), 'vehicles', ['status'], unique=False)
        op.create_index(op.f('ix_vehicles_last_update'), 'vehicles', ['last_update'], unique=False)
        op.create_index('ix_vehicles_lat_lng', 'vehicles', ['lat', 'lng'], unique=False)

    if 'pois' not in existing_tables:
        op.create_table('pois',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('lat', sa.Float(), nullable=False),
            sa.Column('lng', sa.Float(), nullable=False),
            sa.Column('materials', sa.JSON(), nullable=False),
            sa.Column('capacity', sa.Float(), nullable=False),
            sa.Column('current_amount', sa.Float(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('metadata', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_pois_type'), 'pois', ['type'], unique=False)
        op.create_index(op.f('ix_pois_status'), 'pois', ['status'], unique=False)
        op.create_index('ix_pois_lat_lng', 'pois', ['lat', 'lng'], unique=False)

    if 'materials' not in existing_tables:
        op.create_table('materials',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('type', sa.String(), nullable=False),
            sa.Column('density', sa.Float(), nullable=False),
            sa.Column('color', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('properties', sa.JSON(), nullable=False),
            sa.Column('economic_data', sa.JSON(), nullable=False),
            sa.Column('compliance', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_materials_id'), 'materials', ['id'], unique=False)
        op.create_index(op.f('ix_materials_name'), 'materials', ['name'], unique=True)
        op.create_index(op.f('ix_materials_type'), 'materials', ['type'], unique=False)

    if 'tasks' not in existing_tables:
        op.create_table('tasks',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('original_instruction', sa.Text(), nullable=False),
            sa.Column('vehicle_id', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('priority', sa.String(), nullable=False),
            sa.Column('estimated_duration', sa.Integer(), nullable=False),
            sa.Column('actual_duration', sa.Integer(), nullable=True),
            sa.Column('decomposition_summary', sa.Text(), nullable=True),
            sa.Column('feedback', sa.Text(), nullable=True),
            sa.Column('current_step_index', sa.Integer(), nullable=False),
            sa.Column('version', sa.Integer(), nullable=False),
            sa.Column('approved_at', sa.DateTime(), nullable=True),
            sa.Column('rejected_at', sa.DateTime(), nullable=True),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('completed_at', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_tasks_vehicle_id'), 'tasks', ['vehicle_id'], unique=False)
        op.create_index(op.f('ix_tasks_status'), 'tasks', ['status'], unique=False)
        op.create_index(op.f('ix_tasks_priority'), 'tasks', ['priority'], unique=False)
        op.create_index(op.f('ix_tasks_created_at'), 'tasks', ['created_at'], unique=False)
        op.create_index('ix_tasks_status_priority', 'tasks', ['status', 'priority'], unique=False)
        op.create_index('ix_tasks_vehicle_status', 'tasks', ['vehicle_id', 'status'], unique=False)

    if 'task_steps' not in existing_tables:
        op.create_table('task_steps',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('task_id', sa.String(), nullable=False),
            sa.Column('step_number', sa.Integer(), nullable=False),
            sa.Column('action', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('estimated_duration', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('completed_at', sa.DateTime(), nullable=True),
            sa.Column('parameters', sa.JSON(), nullable=False),
            sa.Column('results', sa.JSON(), nullable=False),
            sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_task_steps_task_id'), 'task_steps', ['task_id'], unique=False)

    if 'chat_messages' not in existing_tables:
        op.create_table('chat_messages',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('vehicle_id', sa.String(), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('sender', sa.String(), nullable=False),
            sa.Column('message_type', sa.String(), nullable=False),
            sa.Column('priority', sa.String(), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.Column('is_read', sa.Boolean(), nullable=False),
            sa.Column('related_task_id', sa.String(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_chat_messages_vehicle_id'), 'chat_messages', ['vehicle_id'], unique=False)
        op.create_index(op.f('ix_chat_messages_sender'), 'chat_messages', ['sender'], unique=False)
        op.create_index(op.f('ix_chat_messages_timestamp'), 'chat_messages', ['timestamp'], unique=False)
        op.create_index(op.f('ix_chat_messages_is_read'), 'chat_messages', ['is_read'], unique=False)
        op.create_index('ix_chat_messages_vehicle_timestamp', 'chat_messages', ['vehicle_id', 'timestamp'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('chat_messages')
    op.drop_table('task_steps')
    op.drop_table('tasks')
    op.drop_table('materials')
    op.drop_table('pois')
    op.drop_table('vehicles')
