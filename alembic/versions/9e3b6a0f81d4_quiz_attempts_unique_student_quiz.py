"""quiz_attempts: one attempt per student per quiz

Revision ID: 9e3b6a0f81d4
Revises: 4c7e19d2a5b1
Create Date: 2025-11-10
"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "9e3b6a0f81d4"
down_revision = "4c7e19d2a5b1"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Use batch operations for SQLite compatibility
    with op.batch_alter_table("quiz_attempts", schema=None) as batch_op:
        batch_op.create_unique_constraint(
            "uq_quiz_attempt_student_quiz", ["student_id", "quiz_id"]
        )


def downgrade() -> None:
    with op.batch_alter_table("quiz_attempts", schema=None) as batch_op:
        batch_op.drop_constraint("uq_quiz_attempt_student_quiz", type_="unique")
