"""initial routine management schema

Revision ID: 7f3b2a91c0de
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3b2a91c0de'
down_revision = None
branch_labels = None
depends_on = None

ROUTINE_KIND = sa.Enum('template', 'individual', name='routine_kind')
ORGANIZATION_MODE = sa.Enum('weekday', 'numeric', 'freeform', name='organization_mode')
TEMPLATE_STATUS = sa.Enum('active', 'draft', 'archived', name='template_status')
STUDENT_STATUS = sa.Enum('active', 'inactive', name='student_status')
SESSION_EFFORT = sa.Enum(
    'very_light', 'light', 'moderate', 'intense', 'very_intense', 'max_effort',
    name='session_effort',
)
SESSION_STATUS = sa.Enum('completed', name='session_status')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'trainers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_trainers')),
        sa.UniqueConstraint('email', name='uq_trainers_email'),
    )
    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('status', STUDENT_STATUS, server_default='active', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['trainer_id'], ['trainers.id'],
            name=op.f('fk_students_trainer_id_trainers'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_students')),
        sa.UniqueConstraint('email', name='uq_students_email'),
    )
    op.create_index('ix_students_trainer_id', 'students', ['trainer_id'], unique=False)

    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('muscle_group', sa.String(length=60), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['trainer_id'], ['trainers.id'],
            name=op.f('fk_exercises_trainer_id_trainers'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_exercises')),
    )
    op.create_index('ix_exercises_trainer_id', 'exercises', ['trainer_id'], unique=False)

    op.create_table(
        'folders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['trainer_id'], ['trainers.id'],
            name=op.f('fk_folders_trainer_id_trainers'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_folders')),
        sa.UniqueConstraint('trainer_id', 'name', name='uq_folders_trainer_name'),
    )
    op.create_index('ix_folders_trainer_position', 'folders', ['trainer_id', 'position'], unique=False)

    op.create_table(
        'routines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('kind', ROUTINE_KIND, nullable=False),
        sa.Column('organization_mode', ORGANIZATION_MODE, nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=True),
        sa.Column('expires_on', sa.Date(), nullable=True),
        sa.Column('planned_sessions', sa.Integer(), nullable=True),
        sa.Column('completed_sessions', sa.Integer(), nullable=False),
        sa.Column('folder_id', sa.Integer(), nullable=True),
        sa.Column('status', TEMPLATE_STATUS, nullable=True),
        sa.Column('position_in_folder', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "(kind = 'individual' AND student_id IS NOT NULL) "
            "OR (kind = 'template' AND student_id IS NULL)",
            name=op.f('ck_routines_kind_student'),
        ),
        sa.CheckConstraint(
            'planned_sessions IS NULL OR planned_sessions >= 0',
            name=op.f('ck_routines_planned_sessions'),
        ),
        sa.CheckConstraint('completed_sessions >= 0', name=op.f('ck_routines_completed_sessions')),
        sa.ForeignKeyConstraint(
            ['trainer_id'], ['trainers.id'],
            name=op.f('fk_routines_trainer_id_trainers'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['student_id'], ['students.id'],
            name=op.f('fk_routines_student_id_students'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['folder_id'], ['folders.id'], name=op.f('fk_routines_folder_id_folders'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_routines')),
    )
    op.create_index(
        'ix_routines_trainer_kind_folder', 'routines', ['trainer_id', 'kind', 'folder_id'], unique=False
    )
    op.create_index('ix_routines_student_id', 'routines', ['student_id'], unique=False)

    op.create_table(
        'routine_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('routine_id', sa.Integer(), nullable=False),
        sa.Column('day_label', sa.String(length=60), nullable=False),
        sa.Column('subtitle', sa.String(length=120), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['routine_id'], ['routines.id'],
            name=op.f('fk_routine_days_routine_id_routines'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_routine_days')),
    )
    op.create_index(
        'ix_routine_days_routine_position', 'routine_days', ['routine_id', 'position'], unique=False
    )

    op.create_table(
        'routine_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('day_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('sets', sa.String(length=40), nullable=True),
        sa.Column('reps', sa.String(length=40), nullable=True),
        sa.Column('load', sa.String(length=40), nullable=True),
        sa.Column('rest', sa.String(length=40), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['day_id'], ['routine_days.id'],
            name=op.f('fk_routine_entries_day_id_routine_days'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_routine_entries')),
    )
    op.create_index(
        'ix_routine_entries_day_position', 'routine_entries', ['day_id', 'position'], unique=False
    )

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('routine_id', sa.Integer(), nullable=True),
        sa.Column('day_id', sa.Integer(), nullable=False),
        sa.Column('day_label', sa.String(length=60), nullable=False),
        sa.Column('day_subtitle', sa.String(length=120), nullable=True),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', SESSION_STATUS, nullable=False),
        sa.Column('effort', SESSION_EFFORT, nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['student_id'], ['students.id'],
            name=op.f('fk_workout_sessions_student_id_students'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['trainer_id'], ['trainers.id'],
            name=op.f('fk_workout_sessions_trainer_id_trainers'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['routine_id'], ['routines.id'],
            name=op.f('fk_workout_sessions_routine_id_routines'), ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workout_sessions')),
    )
    op.create_index(
        'ix_workout_sessions_student_completed',
        'workout_sessions',
        ['student_id', 'completed_at'],
        unique=False,
    )
    op.create_index('ix_workout_sessions_routine_id', 'workout_sessions', ['routine_id'], unique=False)


def downgrade():
    op.drop_index('ix_workout_sessions_routine_id', table_name='workout_sessions')
    op.drop_index('ix_workout_sessions_student_completed', table_name='workout_sessions')
    op.drop_table('workout_sessions')
    op.drop_index('ix_routine_entries_day_position', table_name='routine_entries')
    op.drop_table('routine_entries')
    op.drop_index('ix_routine_days_routine_position', table_name='routine_days')
    op.drop_table('routine_days')
    op.drop_index('ix_routines_student_id', table_name='routines')
    op.drop_index('ix_routines_trainer_kind_folder', table_name='routines')
    op.drop_table('routines')
    op.drop_index('ix_folders_trainer_position', table_name='folders')
    op.drop_table('folders')
    op.drop_index('ix_exercises_trainer_id', table_name='exercises')
    op.drop_table('exercises')
    op.drop_index('ix_students_trainer_id', table_name='students')
    op.drop_table('students')
    op.drop_table('trainers')

    bind = op.get_bind()
    for enum in (SESSION_STATUS, SESSION_EFFORT, TEMPLATE_STATUS, ORGANIZATION_MODE, ROUTINE_KIND, STUDENT_STATUS):
        enum.drop(bind, checkfirst=True)
