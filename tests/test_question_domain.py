import pytest

from learnlab.core.exceptions import ParseError
from learnlab.domain.question_domain import QuestionDomain, QuestionSource


def _question(text="What does litmus paper detect?", options=None):
    if options is None:
        options = [
            {"text": "Acidity", "is_correct": True},
            {"text": "Temperature", "is_correct": False},
        ]
    return {"question": text, "options": options}


def _ai_question():
    return _question(
        options=[
            {"text": "Acidity", "is_correct": True},
            {"text": "Temperature", "is_correct": False},
            {"text": "Pressure", "is_correct": False},
            {"text": "Mass", "is_correct": False},
        ]
    )


class TestValidateQuestion:
    def test_valid_manual_question(self):
        assert QuestionDomain.validate_question(_question(), QuestionSource.MANUAL) == []

    def test_question_text_key_is_accepted(self):
        item = {"question_text": "Q?", "options": _question()["options"]}
        assert QuestionDomain.validate_question(item, QuestionSource.MANUAL) == []

    def test_non_object(self):
        errors = QuestionDomain.validate_question("nope", QuestionSource.MANUAL)
        assert "question must be an object" in errors

    def test_blank_text(self):
        errors = QuestionDomain.validate_question(_question(text="   "), QuestionSource.MANUAL)
        assert errors == ["question text must be a non-empty string"]

    def test_manual_needs_two_options(self):
        item = _question(options=[{"text": "Only", "is_correct": True}])
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        assert errors == ["options must be an array with at least 2 items"]

    def test_manual_allows_more_than_four_options(self):
        options = [{"text": f"Option {i}", "is_correct": i == 0} for i in range(6)]
        assert QuestionDomain.validate_question(_question(options=options), QuestionSource.MANUAL) == []

    def test_ai_needs_exactly_four_options(self):
        errors = QuestionDomain.validate_question(_question(), QuestionSource.AI)
        assert errors == ["options must be an array of exactly 4 items"]
        assert QuestionDomain.validate_question(_ai_question(), QuestionSource.AI) == []

    def test_two_correct_options(self):
        item = _question(
            options=[
                {"text": "A", "is_correct": True},
                {"text": "B", "is_correct": True},
            ]
        )
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        assert errors == ["exactly one option must have is_correct=true"]

    def test_no_correct_option(self):
        item = _question(
            options=[
                {"text": "A", "is_correct": False},
                {"text": "B", "is_correct": False},
            ]
        )
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        assert errors == ["exactly one option must have is_correct=true"]

    def test_is_correct_must_be_a_real_boolean(self):
        item = _question(
            options=[
                {"text": "A", "is_correct": "true"},
                {"text": "B", "is_correct": 0},
            ]
        )
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        assert "options[0].is_correct must be a boolean" in errors
        assert "options[1].is_correct must be a boolean" in errors

    def test_all_violations_are_reported(self):
        item = {"question": "", "options": [{"text": "", "is_correct": False}, "x"]}
        errors = QuestionDomain.validate_question(item, QuestionSource.MANUAL)
        assert errors == [
            "question text must be a non-empty string",
            "options[0].text must be a non-empty string",
            "options[1] must be an object",
            "exactly one option must have is_correct=true",
        ]


class TestValidateQuestionSet:
    def test_valid_set_is_sanitized(self):
        item = _question(
            text="  What does litmus paper detect?  ",
            options=[
                {"text": " Acidity ", "is_correct": True},
                {"text": "Temperature", "is_correct": False},
            ],
        )
        result = QuestionDomain.validate_question_set([item], QuestionSource.MANUAL)

        assert result.is_valid
        assert result.questions[0].question_text == "What does litmus paper detect?"
        assert result.questions[0].options[0].to_dict() == {"text": "Acidity", "is_correct": True}

    def test_invalid_items_are_itemized_and_nothing_is_kept(self):
        items = [_question(), _question(text=""), _question(), {"options": []}]
        result = QuestionDomain.validate_question_set(items, QuestionSource.MANUAL)

        assert not result.is_valid
        assert result.questions == []
        assert [entry["index"] for entry in result.invalid] == [1, 3]
        assert result.invalid[0]["errors"] == ["question text must be a non-empty string"]


class TestExtractJsonArray:
    def test_plain_array(self):
        assert QuestionDomain.extract_json_array('[{"a": 1}]') == [{"a": 1}]

    def test_array_wrapped_in_prose_and_fences(self):
        reply = 'Here you go:\n```json\n[{"question": "Q?"}]\n```\nGood luck!'
        assert QuestionDomain.extract_json_array(reply) == [{"question": "Q?"}]

    @pytest.mark.parametrize("reply", ["not json at all", "[1, 2", None])
    def test_unparseable(self, reply):
        with pytest.raises(ParseError, match="Failed to parse AI response"):
            QuestionDomain.extract_json_array(reply)

    @pytest.mark.parametrize("reply", ["[]", '{"questions": 1}'])
    def test_not_a_non_empty_array(self, reply):
        with pytest.raises(ParseError, match="expected a non-empty JSON array"):
            QuestionDomain.extract_json_array(reply)
