"""create_marketplace_tables

Creates users, jobs, applications, job_connections, feedbacks, questions and
answers, including the partial unique indexes that back the one-application-
per-job and one-active-connection-per-worker rules.

Revision ID: 3f7a9c2e1b40
Revises:
Create Date: 2026-10-18 10:12:31.482116

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f7a9c2e1b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _soft_delete():
    return sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false())


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('rating_sum', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rating_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_rating', sa.Float(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('salary', sa.Numeric(12, 2), nullable=False),
        sa.Column('has_accommodation', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('preferred_gender', sa.Enum('ANY', 'MALE', 'FEMALE', name='preferredgender'), nullable=False),
        sa.Column('work_days', sa.Integer(), nullable=False),
        sa.Column('working_days_per_week', sa.Integer(), nullable=False),
        sa.Column('shift_start_time', sa.Time(), nullable=False),
        sa.Column('shift_end_time', sa.Time(), nullable=False),
        sa.Column('working_hours_per_day', sa.Integer(), nullable=False),
        sa.Column('shift_type', sa.Enum('MORNING', 'NIGHT', name='shifttype'), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('experience', sa.String(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('PUBLISHED', 'IN_PROGRESS', 'COMPLETED', 'CLOSED', 'CANCELLED', name='jobstatus'),
            nullable=False,
        ),
        sa.Column('employer_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index('ix_jobs_id', 'jobs', ['id'])
    op.create_index('ix_jobs_title', 'jobs', ['title'])
    op.create_index('ix_jobs_status', 'jobs', ['status'])
    op.create_index('ix_jobs_employer_id', 'jobs', ['employer_id'])
    op.create_index('ix_jobs_is_deleted', 'jobs', ['is_deleted'])

    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum(
                'APPLIED', 'ACCEPTED', 'REJECTED', 'WITHDRAWN',
                'WORKER_ACCEPTED_AT_ANOTHER_JOB', 'EMPLOYER_CHOOSE_ANOTHER_WORKER', 'JOB_CLOSED',
                name='applicationstatus',
            ),
            nullable=False,
        ),
        sa.Column('status_changed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_applications_job_id', 'applications', ['job_id'])
    op.create_index('ix_applications_worker_id', 'applications', ['worker_id'])
    op.create_index('ix_applications_is_deleted', 'applications', ['is_deleted'])
    op.create_index(
        'ux_applications_job_worker', 'applications', ['job_id', 'worker_id'],
        unique=True, postgresql_where=sa.text('NOT is_deleted'),
    )

    op.create_table(
        'job_connections',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('interaction_end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'status',
            sa.Enum('ACTIVE', 'COMPLETED', 'CANCELLED_BY_WORKER', 'CANCELLED_BY_EMPLOYER', name='jobconnectionstatus'),
            nullable=False,
        ),
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('employer_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index('ix_job_connections_id', 'job_connections', ['id'])
    op.create_index('ix_job_connections_interaction_end_at', 'job_connections', ['interaction_end_at'])
    op.create_index('ix_job_connections_status', 'job_connections', ['status'])
    op.create_index('ix_job_connections_job_id', 'job_connections', ['job_id'])
    op.create_index('ix_job_connections_worker_id', 'job_connections', ['worker_id'])
    op.create_index('ix_job_connections_employer_id', 'job_connections', ['employer_id'])
    op.create_index('ix_job_connections_is_deleted', 'job_connections', ['is_deleted'])
    op.create_index(
        'ux_job_connections_active_worker', 'job_connections', ['worker_id'],
        unique=True, postgresql_where=sa.text("status = 'ACTIVE' AND NOT is_deleted"),
    )

    op.create_table(
        'feedbacks',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('message', sa.String(500), nullable=True),
        sa.Column('is_visible', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('job_connection_id', sa.Integer(), sa.ForeignKey('job_connections.id'), nullable=False),
        sa.Column('from_user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('to_user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        _soft_delete(),
        *_timestamps(),
        sa.UniqueConstraint('job_connection_id', 'from_user_id', name='ux_feedbacks_connection_from_user'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_feedbacks_rating_range'),
    )
    op.create_index('ix_feedbacks_id', 'feedbacks', ['id'])
    op.create_index('ix_feedbacks_is_visible', 'feedbacks', ['is_visible'])
    op.create_index('ix_feedbacks_job_connection_id', 'feedbacks', ['job_connection_id'])
    op.create_index('ix_feedbacks_from_user_id', 'feedbacks', ['from_user_id'])
    op.create_index('ix_feedbacks_to_user_id', 'feedbacks', ['to_user_id'])
    op.create_index('ix_feedbacks_is_deleted', 'feedbacks', ['is_deleted'])

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('job_id', sa.Integer(), sa.ForeignKey('jobs.id'), nullable=False),
        sa.Column('worker_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index('ix_questions_id', 'questions', ['id'])
    op.create_index('ix_questions_job_id', 'questions', ['job_id'])
    op.create_index('ix_questions_worker_id', 'questions', ['worker_id'])
    op.create_index('ix_questions_is_deleted', 'questions', ['is_deleted'])

    op.create_table(
        'answers',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('answer_text', sa.Text(), nullable=False),
        sa.Column('question_id', sa.Integer(), sa.ForeignKey('questions.id'), nullable=False),
        sa.Column('employer_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        _soft_delete(),
        *_timestamps(),
    )
    op.create_index('ix_answers_id', 'answers', ['id'])
    op.create_index('ix_answers_question_id', 'answers', ['question_id'])
    op.create_index('ix_answers_employer_id', 'answers', ['employer_id'])
    op.create_index('ix_answers_is_deleted', 'answers', ['is_deleted'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('answers')
    op.drop_table('questions')
    op.drop_table('feedbacks')
    op.drop_table('job_connections')
    op.drop_table('applications')
    op.drop_table('jobs')
    op.drop_table('users')

    for enum_name in ('jobconnectionstatus', 'applicationstatus', 'jobstatus', 'shifttype', 'preferredgender'):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
