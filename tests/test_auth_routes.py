#!/usr/bin/env python3
"""
Pytest tests for authentication
Tests signup, login, the current-user endpoint and password reset tokens
"""

from datetime import datetime, timedelta, timezone

import pytest

from learnlab.core.security import create_access_token, hash_reset_token
from learnlab.models.user import PasswordReset, User
from learnlab.services.provisioning import StudentProvisioner


class TestSignupAndLogin:
    @pytest.fixture(autouse=True)
    def setup_client(self, client, db):
        self.client = client
        self.db = db

    def signup(self, **overrides):
        payload = {
            "email": "ada@school.edu",
            "password": "Password123!",
            "name": "Ada Lovelace",
            "role": "student",
        }
        payload.update(overrides)
        return self.client.post("/api/auth/signup", json=payload)

    def test_signup_returns_user_and_token(self):
        response = self.signup()

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "ada@school.edu"
        assert data["user"]["role"] == "student"
        assert "password" not in data["user"]
        assert data["token"]

    def test_signup_duplicate_email(self):
        self.signup()
        response = self.signup(name="Someone Else")

        assert response.status_code == 400
        assert response.json() == {"error": "Email already exists"}

    def test_signup_cannot_create_admin(self):
        response = self.signup(role="admin")

        assert response.status_code == 400
        assert self.db.query(User).count() == 0

    def test_signup_rejects_bad_email(self):
        response = self.signup(email="not-an-email")
        assert response.status_code == 400

    def test_login(self):
        self.signup()
        response = self.client.post(
            "/api/auth/login", json={"email": "ada@school.edu", "password": "Password123!"}
        )

        assert response.status_code == 200
        token = response.json()["token"]
        me = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["name"] == "Ada Lovelace"

    @pytest.mark.parametrize(
        "email,password",
        [("ada@school.edu", "wrong-password"), ("nobody@school.edu", "Password123!")],
    )
    def test_login_failure_is_uniform(self, email, password):
        self.signup()
        response = self.client.post("/api/auth/login", json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}


class TestCurrentUser:
    @pytest.fixture(autouse=True)
    def setup_client(self, client, db, make_user):
        self.client = client
        self.db = db
        self.user = make_user("faculty")

    def test_me_without_token(self):
        response = self.client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}

    def test_expired_token(self):
        token = create_access_token(self.user, expires_minutes=-1)
        response = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    def test_token_of_deleted_user(self):
        token = create_access_token(self.user)
        self.db.delete(self.user)
        self.db.commit()

        response = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


class TestResetPassword:
    @pytest.fixture(autouse=True)
    def setup_invite(self, client, db):
        self.client = client
        self.db = db
        provisioned = StudentProvisioner(db).provision("Ada Lovelace", "ada@school.edu")
        self.user_id = provisioned.user.id
        self.token = provisioned.raw_token

    def reset(self, token=None, new_password="NewPassword1"):
        return self.client.post(
            "/api/auth/reset-password",
            json={"token": token or self.token, "new_password": new_password},
        )

    def test_only_the_digest_is_stored(self):
        reset = self.db.query(PasswordReset).filter_by(user_id=self.user_id).one()

        assert reset.token != self.token
        assert reset.token == hash_reset_token(self.token)

    def test_reset_then_login(self):
        response = self.reset()

        assert response.status_code == 200
        assert response.json() == {"message": "Password updated"}

        login = self.client.post(
            "/api/auth/login", json={"email": "ada@school.edu", "password": "NewPassword1"}
        )
        assert login.status_code == 200
        assert login.json()["user"]["require_password_change"] is False

    def test_token_is_single_use(self):
        assert self.reset().status_code == 200

        response = self.reset(new_password="AnotherPassword2")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired token"}

    def test_expired_token(self):
        reset = self.db.query(PasswordReset).filter_by(user_id=self.user_id).one()
        reset.expires_at = datetime.now(timezone.utc) - timedelta(hours=1)
        self.db.commit()

        response = self.reset()
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired token"}

    def test_unknown_token(self):
        response = self.reset(token="0" * 64)
        assert response.status_code == 400

    def test_short_password(self):
        response = self.reset(new_password="short")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid token or password too short"}
        reset = self.db.query(PasswordReset).filter_by(user_id=self.user_id).one()
        assert reset.used is False
