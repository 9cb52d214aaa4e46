"""Initial migration: create users, verification codes, practice attempts and history

Revision ID: initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('display_name', sa.String(), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_active_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    # Create verification_codes table (one row per email)
    op.create_table(
        'verification_codes',
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('email')
    )
    op.create_index(op.f('ix_verification_codes_expires_at'), 'verification_codes', ['expires_at'], unique=False)

    # Create practice_attempts table
    op.create_table(
        'practice_attempts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('question', sa.String(), nullable=False),
        sa.Column('canvas', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_practice_attempts_user_id'), 'practice_attempts', ['user_id'], unique=False)

    # Create history table
    op.create_table(
        'history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('question_data', sa.JSON(), nullable=True),
        sa.Column('canvas_data', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('subject', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_history_user_id'), 'history', ['user_id'], unique=False)
    op.create_index(op.f('ix_history_status'), 'history', ['status'], unique=False)
    op.create_index(op.f('ix_history_subject'), 'history', ['subject'], unique=False)
    op.create_index(op.f('ix_history_created_at'), 'history', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_history_created_at'), table_name='history')
    op.drop_index(op.f('ix_history_subject'), table_name='history')
    op.drop_index(op.f('ix_history_status'), table_name='history')
    op.drop_index(op.f('ix_history_user_id'), table_name='history')
    op.drop_table('history')

    op.drop_index(op.f('ix_practice_attempts_user_id'), table_name='practice_attempts')
    op.drop_table('practice_attempts')

    op.drop_index(op.f('ix_verification_codes_expires_at'), table_name='verification_codes')
    op.drop_table('verification_codes')

    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
