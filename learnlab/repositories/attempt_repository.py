from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from learnlab.domain.grading_domain import GradeResult
from learnlab.models.quiz import Quiz, QuizAttempt, StudentAnswer


class AttemptRepository:
    """Repository for quiz attempts and the answers recorded with them"""

    def __init__(self, db: Session):
        self.db = db

    def get_for_student(self, student_id: int, quiz_id: int) -> Optional[QuizAttempt]:
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.student_id == student_id, QuizAttempt.quiz_id == quiz_id)
            .first()
        )

    def list_for_student_quiz(self, student_id: int, quiz_id: int) -> List[QuizAttempt]:
        """Get a student's attempts on a quiz, newest first"""
        return (
            self.db.query(QuizAttempt)
            .filter(QuizAttempt.student_id == student_id, QuizAttempt.quiz_id == quiz_id)
            .order_by(QuizAttempt.attempted_at.desc(), QuizAttempt.id.desc())
            .all()
        )

    def list_with_quiz_titles(self, student_id: int) -> List[Tuple[QuizAttempt, str]]:
        """Get all of a student's attempts joined with quiz titles, newest first"""
        return (
            self.db.query(QuizAttempt, Quiz.title)
            .join(Quiz, QuizAttempt.quiz_id == Quiz.id)
            .filter(QuizAttempt.student_id == student_id)
            .order_by(QuizAttempt.attempted_at.desc(), QuizAttempt.id.desc())
            .all()
        )

    def create_with_answers(
        self, student_id: int, quiz_id: int, result: GradeResult
    ) -> QuizAttempt:
        """
        Write the attempt and every graded answer in one transaction.

        The (student_id, quiz_id) unique constraint makes a concurrent second
        attempt fail here with IntegrityError.
        """
        attempt = QuizAttempt(
            student_id=student_id,
            quiz_id=quiz_id,
            score=result.score,
            total_questions=result.total_questions,
            answers=[
                StudentAnswer(
                    question_id=answer.question_id,
                    selected_option_id=answer.selected_option_id,
                    is_correct=answer.is_correct,
                )
                for answer in result.answers
            ],
        )
        try:
            self.db.add(attempt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(attempt)
        return attempt
