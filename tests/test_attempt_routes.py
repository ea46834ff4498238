#!/usr/bin/env python3
"""
Pytest tests for quiz submission
Tests grading, the one-attempt rule and the attempts listing
"""

from unittest.mock import patch

import pytest

from learnlab.models.quiz import QuizAttempt, StudentAnswer
from learnlab.repositories.attempt_repository import AttemptRepository


class TestSubmitQuiz:
    @pytest.fixture(autouse=True)
    def setup_attempts(self, client, db, make_user, make_experiment, make_quiz, auth_headers):
        self.client = client
        self.db = db
        self.faculty = make_user("faculty")
        self.student = make_user("student")
        self.other_student = make_user("student")
        experiment = make_experiment(self.faculty)
        self.quiz = make_quiz(
            experiment,
            questions=[
                ("What does litmus paper detect?", [("Acidity", True), ("Mass", False)]),
                ("Colour of phenolphthalein in base?", [("Pink", True), ("Clear", False)]),
            ],
        )
        self.other_quiz = make_quiz(
            experiment, title="Other", questions=[("Unrelated?", [("Yes", True), ("No", False)])]
        )
        self.questions = self.quiz.questions
        self.headers = auth_headers(self.student)
        self.other_headers = auth_headers(self.other_student)
        self.faculty_headers = auth_headers(self.faculty)
        self.url = f"/api/quizzes/{self.quiz.id}/submit"

    def answer(self, question_index, option_index):
        question = self.questions[question_index]
        return {"question_id": question.id, "option_id": question.options[option_index].id}

    def test_single_correct_answer_scores_100(self):
        response = self.client.post(
            self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers
        )

        assert response.status_code == 200
        assert response.json() == {"score": 100.0, "correctCount": 1, "totalQuestions": 1}

    def test_answers_are_recorded(self):
        self.client.post(
            self.url,
            json={"answers": [self.answer(0, 0), self.answer(1, 1)]},
            headers=self.headers,
        )

        attempt = self.db.query(QuizAttempt).filter_by(student_id=self.student.id).one()
        assert attempt.score == 50.0
        assert attempt.total_questions == 2
        answers = self.db.query(StudentAnswer).filter_by(attempt_id=attempt.id).all()
        assert sorted(answer.is_correct for answer in answers) == [False, True]

    def test_second_attempt_is_rejected(self):
        first = self.client.post(
            self.url, json={"answers": [self.answer(0, 1)]}, headers=self.headers
        )
        second = self.client.post(
            self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers
        )

        assert first.status_code == 200
        assert second.status_code == 409
        assert second.json() == {"error": "Quiz already attempted"}
        attempts = self.db.query(QuizAttempt).filter_by(student_id=self.student.id).all()
        assert len(attempts) == 1
        assert attempts[0].score == 0.0

    def test_other_students_are_not_blocked(self):
        self.client.post(self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers)
        response = self.client.post(
            self.url, json={"answers": [self.answer(0, 1)]}, headers=self.other_headers
        )

        assert response.status_code == 200
        assert response.json()["score"] == 0.0

    def test_resubmission_with_bad_answers_still_conflicts(self):
        self.client.post(self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers)
        foreign = self.other_quiz.questions[0]

        response = self.client.post(
            self.url,
            json={"answers": [{"question_id": foreign.id, "option_id": foreign.options[0].id}]},
            headers=self.headers,
        )

        assert response.status_code == 409
        assert response.json() == {"error": "Quiz already attempted"}

    def test_unique_constraint_rejects_racing_duplicate(self):
        self.client.post(self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers)

        # The pre-check misses the first attempt, as it would under a race
        with patch.object(AttemptRepository, "get_for_student", return_value=None):
            response = self.client.post(
                self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers
            )

        assert response.status_code == 409
        assert response.json() == {"error": "Quiz already attempted"}
        assert self.db.query(QuizAttempt).count() == 1

    def test_empty_answers(self):
        response = self.client.post(self.url, json={"answers": []}, headers=self.headers)

        assert response.status_code == 400
        assert response.json() == {"error": "answers must be a non-empty array"}
        assert self.db.query(QuizAttempt).count() == 0

    def test_missing_answers_field(self):
        response = self.client.post(self.url, json={}, headers=self.headers)
        assert response.status_code == 400

    def test_unknown_option_counts_as_incorrect(self):
        response = self.client.post(
            self.url,
            json={
                "answers": [
                    {"question_id": self.questions[0].id, "option_id": 99999},
                    self.answer(1, 0),
                ]
            },
            headers=self.headers,
        )

        assert response.status_code == 200
        assert response.json() == {"score": 50.0, "correctCount": 1, "totalQuestions": 2}
        wrong = self.db.query(StudentAnswer).filter_by(question_id=self.questions[0].id).one()
        assert wrong.selected_option_id is None
        assert wrong.is_correct is False

    def test_option_from_another_question_counts_as_incorrect(self):
        correct_option_of_q2 = self.questions[1].options[0].id
        response = self.client.post(
            self.url,
            json={"answers": [{"question_id": self.questions[0].id, "option_id": correct_option_of_q2}]},
            headers=self.headers,
        )

        assert response.json()["correctCount"] == 0

    def test_question_from_another_quiz(self):
        foreign = self.other_quiz.questions[0]
        response = self.client.post(
            self.url,
            json={"answers": [{"question_id": foreign.id, "option_id": foreign.options[0].id}]},
            headers=self.headers,
        )

        assert response.status_code == 400
        assert "does not belong to this quiz" in response.json()["error"]

    def test_repeated_question(self):
        response = self.client.post(
            self.url,
            json={"answers": [self.answer(0, 0), self.answer(0, 1)]},
            headers=self.headers,
        )
        assert response.status_code == 400
        assert self.db.query(QuizAttempt).count() == 0

    def test_unknown_quiz(self):
        response = self.client.post(
            "/api/quizzes/9999/submit", json={"answers": [self.answer(0, 0)]}, headers=self.headers
        )
        assert response.status_code == 404

    def test_faculty_cannot_submit(self):
        response = self.client.post(
            self.url, json={"answers": [self.answer(0, 0)]}, headers=self.faculty_headers
        )
        assert response.status_code == 403

    def test_attempts_listing(self):
        empty = self.client.get(f"/api/quizzes/{self.quiz.id}/attempts", headers=self.headers)
        assert empty.json() == {"attempts": []}

        self.client.post(self.url, json={"answers": [self.answer(0, 0)]}, headers=self.headers)
        response = self.client.get(f"/api/quizzes/{self.quiz.id}/attempts", headers=self.headers)

        assert response.status_code == 200
        attempts = response.json()["attempts"]
        assert len(attempts) == 1
        assert attempts[0]["score"] == 100.0
        assert attempts[0]["total_questions"] == 1
