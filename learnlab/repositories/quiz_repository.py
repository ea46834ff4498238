from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.orm import Session, joinedload, selectinload

from learnlab.domain.question_domain import QuestionData
from learnlab.models.quiz import Option, Question, Quiz


class QuizRepository:
    """Repository for Quiz, Question and Option database operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, quiz_id: int) -> Optional[Quiz]:
        """Get a quiz with its experiment loaded (for ownership checks)"""
        return (
            self.db.query(Quiz)
            .options(joinedload(Quiz.experiment))
            .filter(Quiz.id == quiz_id)
            .first()
        )

    def get_with_questions(self, quiz_id: int) -> Optional[Quiz]:
        """Get a quiz with questions and options eagerly loaded"""
        return (
            self.db.query(Quiz)
            .options(
                joinedload(Quiz.experiment),
                selectinload(Quiz.questions).selectinload(Question.options),
            )
            .filter(Quiz.id == quiz_id)
            .first()
        )

    def list_by_experiment(self, experiment_id: int) -> List[Quiz]:
        return (
            self.db.query(Quiz)
            .filter(Quiz.experiment_id == experiment_id)
            .order_by(Quiz.id)
            .all()
        )

    def create(self, quiz_data: dict) -> Quiz:
        """Create a new quiz"""
        db_quiz = Quiz(**quiz_data)
        self.db.add(db_quiz)
        self.db.commit()
        self.db.refresh(db_quiz)
        return db_quiz

    def add_questions(self, quiz_id: int, questions: Iterable[QuestionData]) -> List[Question]:
        """
        Insert questions and their options in a single transaction.

        Either every question and option is written or, on any failure,
        nothing is.
        """
        db_questions = [
            Question(
                quiz_id=quiz_id,
                question_text=question.question_text,
                options=[
                    Option(option_text=option.text, is_correct=option.is_correct)
                    for option in question.options
                ],
            )
            for question in questions
        ]
        try:
            self.db.add_all(db_questions)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        for question in db_questions:
            self.db.refresh(question)
        return db_questions

    def question_ids(self, quiz_id: int) -> Set[int]:
        rows = self.db.query(Question.id).filter(Question.quiz_id == quiz_id).all()
        return {row[0] for row in rows}

    def get_options_by_ids(self, option_ids: Iterable[int]) -> Dict[int, Option]:
        ids = {option_id for option_id in option_ids if option_id is not None}
        if not ids:
            return {}
        options = self.db.query(Option).filter(Option.id.in_(ids)).all()
        return {option.id: option for option in options}
