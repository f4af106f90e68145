"""initial_schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-17

Creates:
- users and sessions (local auth)
- stool_logs, meal_logs, symptom_logs
- foods and triggers (maintained by the correlation job, read-only here)
- achievements and user_achievements
- chat_messages (Dr. Poo history)

Note: After running this migration, create an admin user with:
    python -m poopal.cli create-admin --email your@email.com
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(30), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('onboarding_completed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username')
    )

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_token'), 'sessions', ['token'], unique=True)

    op.create_table(
        'stool_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('bristol_type', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(7), nullable=True),
        sa.Column('consistency', sa.String(10), nullable=True),
        sa.Column('size', sa.String(10), nullable=True),
        sa.Column('urgency', sa.Integer(), nullable=True),
        sa.Column('completeness', sa.Integer(), nullable=True),
        sa.Column('blood_present', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('mucus_present', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('undigested_food', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('logged_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('bristol_type BETWEEN 1 AND 7', name='ck_stool_logs_bristol_type')
    )
    op.create_index('idx_stool_logs_user_id', 'stool_logs', ['user_id'])
    op.create_index('idx_stool_logs_user_logged_at', 'stool_logs', ['user_id', 'logged_at'])

    op.create_table(
        'meal_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('meal_type', sa.String(10), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('ingredients', postgresql.JSONB(), nullable=True),
        sa.Column('estimated_fiber_g', sa.Float(), nullable=True),
        sa.Column('estimated_water_ml', sa.Float(), nullable=True),
        sa.Column('logged_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_meal_logs_user_id', 'meal_logs', ['user_id'])
    op.create_index('idx_meal_logs_user_logged_at', 'meal_logs', ['user_id', 'logged_at'])

    op.create_table(
        'symptom_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('symptom_type', sa.String(100), nullable=False),
        sa.Column('severity', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('logged_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_symptom_logs_user_id', 'symptom_logs', ['user_id'])
    op.create_index('idx_symptom_logs_user_logged_at', 'symptom_logs', ['user_id', 'logged_at'])

    op.create_table(
        'foods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'triggers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('food_id', sa.Integer(), nullable=False),
        sa.Column('trigger_type', sa.String(50), nullable=False),
        sa.Column('confidence_score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('occurrences', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_detected_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_confirmed', sa.Boolean(), nullable=False, server_default='false'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['food_id'], ['foods.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_triggers_user_id', 'triggers', ['user_id'])
    op.create_index('idx_triggers_user_confidence', 'triggers', ['user_id', 'confidence_score'])

    op.create_table(
        'achievements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'user_achievements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('achievement_id', sa.Integer(), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['achievement_id'], ['achievements.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'achievement_id', name='uq_user_achievement')
    )

    op.create_table(
        'chat_messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.String(10), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_chat_messages_user_id', 'chat_messages', ['user_id', 'id'])


def downgrade() -> None:
    op.drop_index('idx_chat_messages_user_id', table_name='chat_messages')
    op.drop_table('chat_messages')
    op.drop_table('user_achievements')
    op.drop_table('achievements')
    op.drop_index('idx_triggers_user_confidence', table_name='triggers')
    op.drop_index('idx_triggers_user_id', table_name='triggers')
    op.drop_table('triggers')
    op.drop_table('foods')
    op.drop_index('idx_symptom_logs_user_logged_at', table_name='symptom_logs')
    op.drop_index('idx_symptom_logs_user_id', table_name='symptom_logs')
    op.drop_table('symptom_logs')
    op.drop_index('idx_meal_logs_user_logged_at', table_name='meal_logs')
    op.drop_index('idx_meal_logs_user_id', table_name='meal_logs')
    op.drop_table('meal_logs')
    op.drop_index('idx_stool_logs_user_logged_at', table_name='stool_logs')
    op.drop_index('idx_stool_logs_user_id', table_name='stool_logs')
    op.drop_table('stool_logs')
    op.drop_index(op.f('ix_sessions_token'), table_name='sessions')
    op.drop_table('sessions')
    op.drop_table('users')
