import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from learnlab.core.exceptions import ParseError


class QuestionSource(str, Enum):
    """Where a question set came from; decides the option cardinality rule"""

    MANUAL = "manual"
    AI = "ai"


MIN_MANUAL_OPTIONS = 2
AI_OPTION_COUNT = 4


@dataclass
class OptionData:
    """Domain entity for a validated option"""

    text: str
    is_correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "is_correct": self.is_correct}


@dataclass
class QuestionData:
    """Domain entity for a validated question with its options"""

    question_text: str
    options: List[OptionData]


@dataclass
class QuestionSetValidation:
    """Outcome of validating a question set: either all valid or an itemized report"""

    questions: List[QuestionData] = field(default_factory=list)
    invalid: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.invalid


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class QuestionDomain:
    """Validation and sanitization rules for authored and generated questions"""

    @staticmethod
    def validate_question(item: Any, source: QuestionSource) -> List[str]:
        """
        Return every rule the item violates (empty list when valid).

        Checks are collected rather than short-circuited so the caller gets
        the full list for each item.
        """
        errors: List[str] = []
        if not _is_object(item):
            errors.append("question must be an object")
            item = {}

        question_text = item.get("question") or item.get("question_text")
        if not _is_text(question_text):
            errors.append("question text must be a non-empty string")

        options = item.get("options")
        if source == QuestionSource.AI:
            if not isinstance(options, list) or len(options) != AI_OPTION_COUNT:
                errors.append(f"options must be an array of exactly {AI_OPTION_COUNT} items")
        elif not isinstance(options, list) or len(options) < MIN_MANUAL_OPTIONS:
            errors.append(
                f"options must be an array with at least {MIN_MANUAL_OPTIONS} items"
            )

        correct_count = 0
        if isinstance(options, list):
            for index, option in enumerate(options):
                if not _is_object(option):
                    errors.append(f"options[{index}] must be an object")
                    continue
                if not _is_text(option.get("text")):
                    errors.append(f"options[{index}].text must be a non-empty string")
                is_correct = option.get("is_correct")
                # JSON booleans only; 1, "true" etc. are not repaired
                if not isinstance(is_correct, bool):
                    errors.append(f"options[{index}].is_correct must be a boolean")
                elif is_correct:
                    correct_count += 1

        if correct_count != 1:
            errors.append("exactly one option must have is_correct=true")

        return errors

    @staticmethod
    def sanitize_question(item: Dict[str, Any]) -> QuestionData:
        """Trim a question that already passed validate_question"""
        question_text = item.get("question") or item.get("question_text")
        return QuestionData(
            question_text=question_text.strip(),
            options=[
                OptionData(text=option["text"].strip(), is_correct=option["is_correct"])
                for option in item["options"]
            ],
        )

    @staticmethod
    def validate_question_set(items: Any, source: QuestionSource) -> QuestionSetValidation:
        result = QuestionSetValidation()
        if not isinstance(items, list):
            return result

        for index, item in enumerate(items):
            errors = QuestionDomain.validate_question(item, source)
            if errors:
                result.invalid.append({"index": index, "errors": errors})
            elif result.is_valid:
                result.questions.append(QuestionDomain.sanitize_question(item))

        if not result.is_valid:
            result.questions = []
        return result

    @staticmethod
    def extract_json_array(content: Any) -> List[Any]:
        """
        Parse a model reply as a JSON array.

        Models often wrap the array in prose or code fences, so the text
        between the first '[' and the last ']' is parsed when both exist.
        """
        text = content.strip() if isinstance(content, str) else ""
        start = text.find("[")
        end = text.rfind("]")
        if start != -1 and end != -1 and end > start:
            text = text[start : end + 1]

        try:
            parsed = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ParseError("Failed to parse AI response") from e

        if not isinstance(parsed, list) or not parsed:
            raise ParseError("Invalid AI response format: expected a non-empty JSON array")
        return parsed
