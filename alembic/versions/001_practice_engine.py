"""Practice engine schema: catalog, sessions, answers, topic analytics

Revision ID: 001_practice_engine
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSON


# revision identifiers, used by Alembic.
revision = '001_practice_engine'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_type', sa.Enum('GUEST', 'REGISTERED', name='usertype'), nullable=False),
        sa.Column('display_name', sa.String(100)),
        sa.Column('avatar_url', sa.String(500)),
        sa.Column('device_id', sa.String(200), unique=True, index=True),
        sa.Column('total_questions_attempted', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_correct_answers', sa.Integer, nullable=False, server_default='0'),
        sa.Column('current_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('longest_streak', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_active_at', sa.DateTime(timezone=True)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Catalog
    op.create_table(
        'subjects',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.Text),
        sa.Column('icon_name', sa.String(50)),
        sa.Column('color_hex', sa.String(7)),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'topics',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('subject_id', UUID(as_uuid=True), sa.ForeignKey('subjects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'questions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('topic_id', UUID(as_uuid=True), sa.ForeignKey('topics.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('question_text', sa.Text, nullable=False),
        sa.Column('question_type', sa.String(30), nullable=False, server_default='mcq'),
        sa.Column('options', JSON),
        sa.Column('correct_answer', sa.Text, nullable=False),
        sa.Column('explanation', sa.Text),
        sa.Column('difficulty', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('year', sa.Integer),
        sa.Column('exam_name', sa.String(100)),
        sa.Column('marks', sa.Integer, nullable=False, server_default='1'),
        sa.Column('negative_marks', sa.Float, server_default='0'),
        sa.Column('time_recommended_seconds', sa.Integer, server_default='60'),
        sa.Column('image_url', sa.String(500)),
        sa.Column('total_attempts', sa.Integer, nullable=False, server_default='0'),
        sa.Column('correct_attempts', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'test_series',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('subject_id', UUID(as_uuid=True), sa.ForeignKey('subjects.id', ondelete='SET NULL')),
        sa.Column('total_questions', sa.Integer, nullable=False),
        sa.Column('duration_minutes', sa.Integer, nullable=False),
        sa.Column('total_marks', sa.Integer, nullable=False),
        sa.Column('passing_marks', sa.Integer),
        sa.Column('difficulty', sa.String(20), server_default='medium'),
        sa.Column('is_free', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('starts_at', sa.DateTime(timezone=True)),
        sa.Column('ends_at', sa.DateTime(timezone=True)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'test_series_questions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('test_series_id', UUID(as_uuid=True), sa.ForeignKey('test_series.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('question_id', UUID(as_uuid=True), sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_order', sa.Integer, nullable=False),
    )

    # Sessions
    op.create_table(
        'practice_sessions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('test_series_id', UUID(as_uuid=True), sa.ForeignKey('test_series.id', ondelete='SET NULL')),
        sa.Column('topic_id', UUID(as_uuid=True), sa.ForeignKey('topics.id', ondelete='SET NULL')),
        sa.Column('session_type', sa.String(20), nullable=False, server_default='practice'),
        sa.Column('total_questions', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_marks', sa.Float, server_default='0'),
        sa.Column('questions_attempted', sa.Integer, nullable=False, server_default='0'),
        sa.Column('correct_answers', sa.Integer, nullable=False, server_default='0'),
        sa.Column('wrong_answers', sa.Integer, nullable=False, server_default='0'),
        sa.Column('skipped_questions', sa.Integer, nullable=False, server_default='0'),
        sa.Column('marks_obtained', sa.Float, server_default='0'),
        sa.Column('time_taken_seconds', sa.Integer, server_default='0'),
        sa.Column('is_completed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('auto_submitted', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(timezone=True)),
    )
    op.create_table(
        'session_questions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('session_id', UUID(as_uuid=True), sa.ForeignKey('practice_sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', UUID(as_uuid=True), sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('correct_answer', sa.Text, nullable=False),
        sa.Column('explanation', sa.Text),
        sa.Column('marks', sa.Integer, nullable=False, server_default='1'),
        sa.Column('negative_marks', sa.Float, server_default='0'),
        sa.UniqueConstraint('session_id', 'question_id', name='unique_session_question'),
    )
    op.create_table(
        'user_answers',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('session_id', UUID(as_uuid=True), sa.ForeignKey('practice_sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', UUID(as_uuid=True), sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('selected_answer', sa.Text),
        sa.Column('is_correct', sa.Boolean),
        sa.Column('is_skipped', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('time_taken_seconds', sa.Integer, server_default='0'),
        sa.Column('marks_awarded', sa.Float, server_default='0'),
        sa.Column('revision', sa.Integer, nullable=False, server_default='0'),
        sa.Column('answered_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('session_id', 'question_id', name='unique_session_answer'),
    )

    # Analytics
    op.create_table(
        'topic_analytics',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('topic_id', UUID(as_uuid=True), sa.ForeignKey('topics.id', ondelete='CASCADE'), nullable=False),
        sa.Column('total_attempted', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_correct', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_wrong', sa.Integer, nullable=False, server_default='0'),
        sa.Column('total_skipped', sa.Integer, nullable=False, server_default='0'),
        sa.Column('accuracy_percent', sa.Float, server_default='0'),
        sa.Column('strength_level', sa.String(10), server_default='neutral'),
        sa.Column('last_practiced_at', sa.DateTime(timezone=True)),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'topic_id', name='unique_user_topic'),
    )


def downgrade() -> None:
    op.drop_table('topic_analytics')
    op.drop_table('user_answers')
    op.drop_table('session_questions')
    op.drop_table('practice_sessions')
    op.drop_table('test_series_questions')
    op.drop_table('test_series')
    op.drop_table('questions')
    op.drop_table('topics')
    op.drop_table('subjects')
    op.drop_table('users')
    sa.Enum(name='usertype').drop(op.get_bind(), checkfirst=True)
