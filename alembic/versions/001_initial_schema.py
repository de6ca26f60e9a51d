"""Initial schema - LifeOS

Revision ID: 001
Revises:
Create Date: 2026-01-14

Schema inicial: usuarios, metas, hábitos, sistemas, presupuestos,
snapshots, logros y diario.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return columns


def _owner() -> sa.Column:
    return sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False)


def upgrade() -> None:
    # users
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('currency', sa.String(3), server_default='INR', nullable=False),
        *_timestamps(),
    )

    # ============================================================
    # FINANCIAL / FITNESS GOALS
    # ============================================================
    op.create_table(
        'financial_goals',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('target_amount', sa.Float(), nullable=False),
        sa.Column('current_amount', sa.Float(), server_default='0', nullable=False),
        sa.Column('monthly_contribution', sa.Float(), server_default='0', nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('target_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(20), server_default='ON_TRACK', nullable=False),
        sa.Column('is_archived', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_paused', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_financial_goals_user_id', 'financial_goals', ['user_id'])

    op.create_table(
        'fitness_goals',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('metric_type', sa.String(30), nullable=False),
        sa.Column('start_value', sa.Float(), nullable=False),
        sa.Column('current_value', sa.Float(), nullable=False),
        sa.Column('target_value', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(20), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('target_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(20), server_default='ON_TRACK', nullable=False),
        sa.Column('is_achieved', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_fitness_goals_user_id', 'fitness_goals', ['user_id'])

    op.create_table(
        'fitness_progress',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('fitness_goal_id', sa.String(36), sa.ForeignKey('fitness_goals.id', ondelete='CASCADE'), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    # ============================================================
    # HABITS
    # ============================================================
    op.create_table(
        'habits',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('frequency', sa.String(20), nullable=False),
        sa.Column('target_count', sa.Integer(), server_default='1', nullable=False),
        sa.Column('current_streak', sa.Integer(), server_default='0', nullable=False),
        sa.Column('longest_streak', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('is_quantity', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('quantity_unit', sa.String(20), nullable=True),
        sa.Column('quantity_target', sa.Float(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_habits_user_id', 'habits', ['user_id'])

    op.create_table(
        'habit_check_ins',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('habit_id', sa.String(36), sa.ForeignKey('habits.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('completed', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('skipped', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('ix_habit_check_ins_habit_date', 'habit_check_ins', ['habit_id', 'date'])

    # ============================================================
    # LIFE SYSTEMS
    # ============================================================
    op.create_table(
        'life_systems',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('adherence_target', sa.Float(), server_default='80', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_life_systems_user_id', 'life_systems', ['user_id'])

    op.create_table(
        'system_adherence',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('system_id', sa.String(36), sa.ForeignKey('life_systems.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('adhered', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )

    # ============================================================
    # BUDGETS
    # ============================================================
    op.create_table(
        'budgets',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('income', sa.Float(), nullable=False),
        sa.Column('rollover_amount', sa.Float(), server_default='0', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_budgets_user_year_month', 'budgets', ['user_id', 'year', 'month'])

    op.create_table(
        'budget_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('budget_id', sa.String(36), sa.ForeignKey('budgets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('planned', sa.Float(), nullable=False),
        sa.Column('actual', sa.Float(), server_default='0', nullable=False),
        sa.Column('rollover', sa.Float(), server_default='0', nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # ============================================================
    # SNAPSHOTS / ACHIEVEMENTS / JOURNAL
    # ============================================================
    op.create_table(
        'progress_snapshots',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('life_score', sa.Integer(), nullable=False),
        sa.Column('finance_score', sa.Integer(), nullable=False),
        sa.Column('fitness_score', sa.Integer(), nullable=False),
        sa.Column('habits_score', sa.Integer(), nullable=False),
        sa.Column('systems_score', sa.Integer(), nullable=False),
        sa.Column('total_saved', sa.Float(), server_default='0', nullable=False),
        sa.Column('active_habits', sa.Integer(), server_default='0', nullable=False),
        sa.Column('active_goals', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('ix_progress_snapshots_user_date', 'progress_snapshots', ['user_id', 'date'])

    op.create_table(
        'achievements',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False, unique=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('icon', sa.String(20), nullable=False),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('criteria', sa.JSON(), nullable=False),
        sa.Column('points', sa.Integer(), server_default='10', nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        'user_achievements',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('achievement_id', sa.String(36), sa.ForeignKey('achievements.id'), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('notified', sa.Boolean(), server_default=sa.false(), nullable=False),
    )
    op.create_index('ix_user_achievements_user_id', 'user_achievements', ['user_id'])

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.String(36), primary_key=True),
        _owner(),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('mood', sa.Integer(), nullable=True),
        sa.Column('energy', sa.Integer(), nullable=True),
        sa.Column('gratitude', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('is_private', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('word_count', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_journal_entries_user_date', 'journal_entries', ['user_id', 'date'])


def downgrade() -> None:
    op.drop_index('ix_journal_entries_user_date', 'journal_entries')
    op.drop_table('journal_entries')
    op.drop_index('ix_user_achievements_user_id', 'user_achievements')
    op.drop_table('user_achievements')
    op.drop_table('achievements')
    op.drop_index('ix_progress_snapshots_user_date', 'progress_snapshots')
    op.drop_table('progress_snapshots')
    op.drop_table('budget_items')
    op.drop_index('ix_budgets_user_year_month', 'budgets')
    op.drop_table('budgets')
    op.drop_table('system_adherence')
    op.drop_index('ix_life_systems_user_id', 'life_systems')
    op.drop_table('life_systems')
    op.drop_index('ix_habit_check_ins_habit_date', 'habit_check_ins')
    op.drop_table('habit_check_ins')
    op.drop_index('ix_habits_user_id', 'habits')
    op.drop_table('habits')
    op.drop_table('fitness_progress')
    op.drop_index('ix_fitness_goals_user_id', 'fitness_goals')
    op.drop_table('fitness_goals')
    op.drop_index('ix_financial_goals_user_id', 'financial_goals')
    op.drop_table('financial_goals')
    op.drop_table('users')
