from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from learnlab.core.exceptions import ValidationError
from learnlab.models.quiz import Option


@dataclass
class SubmittedAnswer:
    question_id: int
    option_id: Optional[int]


@dataclass
class GradedAnswer:
    question_id: int
    selected_option_id: Optional[int]
    is_correct: bool


@dataclass
class GradeResult:
    answers: List[GradedAnswer] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers if answer.is_correct)

    @property
    def total_questions(self) -> int:
        return len(self.answers)

    @property
    def score(self) -> float:
        return self.correct_count / self.total_questions * 100


class GradingDomain:
    """Scoring rules for quiz attempts"""

    @staticmethod
    def check_answers(answers: Sequence[SubmittedAnswer], quiz_question_ids: Set[int]) -> None:
        if not answers:
            raise ValidationError("answers must be a non-empty array")

        seen = set()
        for index, answer in enumerate(answers):
            if answer.question_id not in quiz_question_ids:
                raise ValidationError(
                    f"answers[{index}].question_id does not belong to this quiz"
                )
            if answer.question_id in seen:
                raise ValidationError(
                    f"answers[{index}] repeats question {answer.question_id}"
                )
            seen.add(answer.question_id)

    @staticmethod
    def grade(answers: Sequence[SubmittedAnswer], options: Dict[int, Option]) -> GradeResult:
        """
        Grade answers against the stored answer key.

        An answer whose option is unknown, or belongs to another question,
        counts as incorrect and stays in the denominator.
        """
        result = GradeResult()
        for answer in answers:
            option = options.get(answer.option_id) if answer.option_id is not None else None
            if option is None or option.question_id != answer.question_id:
                result.answers.append(
                    GradedAnswer(answer.question_id, selected_option_id=None, is_correct=False)
                )
                continue
            result.answers.append(
                GradedAnswer(
                    answer.question_id,
                    selected_option_id=option.id,
                    is_correct=bool(option.is_correct),
                )
            )
        return result
