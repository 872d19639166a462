"""Create academic record tables.

Revision ID: create_academic_record_tables
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_academic_record_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


SBA_LABEL_COLUMNS = [
    'physical_wellbeing',
    'mental_wellbeing',
    'creativity',
    'critical_thinking',
    'communication_skill',
    'problem_solving_ability',
    'collaboration',
    'students_talent',
    'participation_in_activities',
    'attitude_and_values',
    'presentation_skill',
    'writing_skill',
    'comprehension_skill',
]

MARK_COLUMNS = ['fa1', 'fa2', 'fa3', 'fa4', 'fa5', 'fa6', 'co_curricular', 'summative']


def table_exists(table_name: str) -> bool:
    """Check if a table exists."""
    return sa.inspect(op.get_bind()).has_table(table_name)


def _id_column() -> sa.Column:
    return sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True)


def _student_fk() -> sa.Column:
    return sa.Column(
        'student_id',
        sa.BigInteger(),
        sa.ForeignKey('students.id', ondelete='CASCADE'),
        nullable=False,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    if not table_exists('students'):
        op.create_table(
            'students',
            _id_column(),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('admission_no', sa.String(50), nullable=True),
            sa.Column('father_name', sa.String(255), nullable=True),
            sa.Column('mother_name', sa.String(255), nullable=True),
            sa.Column('gender', sa.String(20), nullable=True),
            sa.Column('category', sa.String(50), nullable=True),
            sa.Column('contact', sa.String(50), nullable=True),
            *_timestamps(),
        )
        op.create_index('ix_students_admission_no', 'students', ['admission_no'])

    if not table_exists('academic_sessions'):
        op.create_table(
            'academic_sessions',
            _id_column(),
            sa.Column('name', sa.String(50), nullable=False, unique=True),
            *_timestamps(),
        )

    if not table_exists('student_session_info'):
        op.create_table(
            'student_session_info',
            _id_column(),
            _student_fk(),
            sa.Column('session', sa.String(50), nullable=False),
            sa.Column('class_name', sa.String(50), nullable=False),
            sa.Column('section', sa.String(50), nullable=True),
            sa.Column('roll_no', sa.String(20), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint('student_id', 'session', name='uq_student_session'),
        )
        op.create_index('ix_student_session_info_student_id', 'student_session_info', ['student_id'])
        op.create_index('ix_student_session_info_session', 'student_session_info', ['session'])

    if not table_exists('marks'):
        op.create_table(
            'marks',
            _id_column(),
            _student_fk(),
            sa.Column('exam_id', sa.Integer(), nullable=False),
            sa.Column('session', sa.String(50), nullable=True),
            sa.Column('subject', sa.String(100), nullable=False),
            *[sa.Column(name, sa.DECIMAL(6, 2), nullable=True) for name in MARK_COLUMNS],
            *_timestamps(),
        )
        op.create_index('ix_marks_student_id', 'marks', ['student_id'])
        op.create_index('ix_marks_exam_id', 'marks', ['exam_id'])
        op.create_index('ix_marks_session', 'marks', ['session'])

    if not table_exists('sba_records'):
        op.create_table(
            'sba_records',
            _id_column(),
            _student_fk(),
            sa.Column('session', sa.String(50), nullable=False),
            *[sa.Column(name, sa.String(50), nullable=True) for name in SBA_LABEL_COLUMNS],
            sa.Column('disease_found', sa.String(255), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint('student_id', 'session', name='uq_sba_student_session'),
        )
        op.create_index('ix_sba_records_student_id', 'sba_records', ['student_id'])
        op.create_index('ix_sba_records_session', 'sba_records', ['session'])

    if not table_exists('detailed_formative_assessments'):
        op.create_table(
            'detailed_formative_assessments',
            _id_column(),
            _student_fk(),
            sa.Column('session', sa.String(50), nullable=False),
            sa.Column('subject', sa.String(100), nullable=False),
            sa.Column('assessment_name', sa.String(20), nullable=False),
            sa.Column('academic_proficiency', sa.String(20), nullable=True),
            sa.Column('cocurricular_ratings', sa.JSON(), nullable=True),
            sa.Column('anecdotal_date', sa.String(20), nullable=True),
            sa.Column('anecdotal_observation', sa.Text(), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint(
                'student_id', 'session', 'subject', 'assessment_name',
                name='uq_formative_student_assessment',
            ),
        )
        op.create_index(
            'ix_detailed_formative_assessments_student_id',
            'detailed_formative_assessments',
            ['student_id'],
        )
        op.create_index(
            'ix_detailed_formative_assessments_session',
            'detailed_formative_assessments',
            ['session'],
        )


def downgrade() -> None:
    op.drop_table('detailed_formative_assessments')
    op.drop_table('sba_records')
    op.drop_table('marks')
    op.drop_table('student_session_info')
    op.drop_table('academic_sessions')
    op.drop_table('students')
