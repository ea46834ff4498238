#!/usr/bin/env python3
"""
Pytest tests for bulk student import
Tests the JSON and CSV roster endpoints and the upload history
"""

import pytest

from learnlab.core.exceptions import ValidationError
from learnlab.models.bulk_upload import BulkUpload
from learnlab.models.user import PasswordReset, User
from learnlab.services.provisioning import StudentProvisioner


class TestBulkUpload:
    @pytest.fixture(autouse=True)
    def setup_upload(self, client, db, make_user, auth_headers):
        self.client = client
        self.db = db
        self.faculty = make_user("faculty")
        self.existing = make_user("student", email="taken@school.edu")
        self.headers = auth_headers(self.faculty)
        self.student_headers = auth_headers(self.existing)

    def test_duplicate_row_fails_alone(self):
        rows = [
            {"name": "Ada Lovelace", "email": "ada@school.edu"},
            {"name": "Someone", "email": "taken@school.edu"},
            {"name": "Alan Turing", "email": "alan@school.edu", "password": "LongEnough1"},
        ]
        response = self.client.post(
            "/api/bulk-upload/students",
            json={"students": rows, "filename": "roster.csv"},
            headers=self.headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["successful"] == 2
        assert data["failed"] == 1
        assert data["errors"] == ["Email taken@school.edu already exists"]
        assert [invite["email"] for invite in data["invites"]] == [
            "ada@school.edu",
            "alan@school.edu",
        ]

        created = self.db.query(User).filter(User.email.in_(["ada@school.edu", "alan@school.edu"]))
        assert all(user.role == "student" and user.require_password_change for user in created)

    def test_reset_tokens_are_stored_hashed_and_not_returned(self):
        response = self.client.post(
            "/api/bulk-upload/students",
            json={"students": [{"name": "Ada", "email": "ada@school.edu"}]},
            headers=self.headers,
        )

        invite = response.json()["invites"][0]
        assert "token" not in invite
        reset = self.db.query(PasswordReset).filter_by(user_id=invite["user_id"]).one()
        assert len(reset.token) == 64
        assert reset.used is False

    def test_missing_fields_are_reported_per_row(self):
        rows = [
            {"name": "", "email": "blank-name@school.edu"},
            {"name": "No Email"},
            {"name": "Grace Hopper", "email": "grace@school.edu"},
        ]
        response = self.client.post(
            "/api/bulk-upload/students", json={"students": rows}, headers=self.headers
        )

        data = response.json()
        assert data["successful"] == 1
        assert data["failed"] == 2
        assert data["errors"] == ["Row skipped: Missing name or email"] * 2

    def test_malformed_entries_fail_individually(self):
        rows = [
            {"name": "Ada Lovelace", "email": "ada@school.edu"},
            {"name": "Bad Email", "email": 12345},
            None,
            {"name": "Alan Turing", "email": "alan@school.edu", "password": 42},
        ]
        response = self.client.post(
            "/api/bulk-upload/students", json={"students": rows}, headers=self.headers
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["total"], data["successful"], data["failed"]) == (4, 2, 2)
        assert data["errors"] == ["Row skipped: Missing name or email"] * 2
        assert self.db.query(User).filter_by(email="alan@school.edu").count() == 1

    def test_errors_are_capped_at_ten(self):
        rows = [{"name": f"Student {i}"} for i in range(12)]
        response = self.client.post(
            "/api/bulk-upload/students", json={"students": rows}, headers=self.headers
        )

        data = response.json()
        assert data["failed"] == 12
        assert len(data["errors"]) == 10

    @pytest.mark.parametrize("body", [{}, {"students": []}])
    def test_students_required(self, body):
        response = self.client.post("/api/bulk-upload/students", json=body, headers=self.headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Students array required"}

    def test_audit_row_and_history(self):
        self.client.post(
            "/api/bulk-upload/students",
            json={
                "students": [
                    {"name": "Ada", "email": "ada@school.edu"},
                    {"name": "Dup", "email": "taken@school.edu"},
                ],
                "filename": "period-3.csv",
            },
            headers=self.headers,
        )

        upload = self.db.query(BulkUpload).one()
        assert upload.faculty_id == self.faculty.id
        assert (upload.total_students, upload.successful_uploads, upload.failed_uploads) == (2, 1, 1)

        response = self.client.get("/api/bulk-upload/history", headers=self.headers)
        assert response.status_code == 200
        history = response.json()
        assert len(history) == 1
        assert history[0]["filename"] == "period-3.csv"
        assert history[0]["status"] == "completed"

    def test_csv_upload(self):
        csv_text = (
            "\ufeffName,Email,Password\n"
            "Ada Lovelace,ada@school.edu,\n"
            "Dup,taken@school.edu,\n"
            ",missing@school.edu,\n"
        )
        response = self.client.post(
            "/api/bulk-upload/students/csv?filename=class.csv",
            content=csv_text.encode("utf-8"),
            headers={**self.headers, "Content-Type": "text/csv"},
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["total"], data["successful"], data["failed"]) == (3, 1, 2)
        assert self.db.query(BulkUpload).one().filename == "class.csv"

    def test_csv_without_required_columns(self):
        response = self.client.post(
            "/api/bulk-upload/students/csv",
            content=b"first,last\nAda,Lovelace\n",
            headers={**self.headers, "Content-Type": "text/csv"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "CSV must have columns: name, email"}

    def test_students_cannot_upload(self):
        response = self.client.post(
            "/api/bulk-upload/students",
            json={"students": [{"name": "Ada", "email": "ada@school.edu"}]},
            headers=self.student_headers,
        )
        assert response.status_code == 403


class TestStudentProvisioner:
    def test_short_supplied_password_is_replaced(self, db):
        provisioned = StudentProvisioner(db).provision("Ada", "ada@school.edu", "short")

        assert provisioned.raw_token
        assert provisioned.user.require_password_change is True
        assert provisioned.user.password != "short"

    def test_duplicate_email(self, db, make_user):
        make_user("student", email="ada@school.edu")

        with pytest.raises(ValidationError, match="Email ada@school.edu already exists"):
            StudentProvisioner(db).provision("Ada", "ada@school.edu")
