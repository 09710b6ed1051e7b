"""
Tests for login, logout, profile access and the password reset flow.
"""

from datetime import datetime, timedelta
from unittest.mock import patch

from council_portal.services.auth_service import hash_reset_token
from council_portal.utils.hash import verify_password
from council_portal.utils.jwt_handler import create_access_token, decode_access_token


def _reset_token_from(response) -> str:
    return response.json()["resetUrl"].rsplit("/", 1)[-1]


class TestLogin:
    """Credential checks and the auth cookie."""

    def test_login_sets_cookie_for_user(self, client, make_user):
        user = make_user()

        response = client.post("/api/users/login", json={"email": "member@example.com", "password": "member-pass"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["user"] == {"id": str(user.id), "fullname": "Anita Rao", "email": "member@example.com"}
        assert decode_access_token(response.cookies["token"])["sub"] == str(user.id)

    def test_cookie_attributes(self, client, make_user):
        make_user()

        response = client.post("/api/users/login", json={"email": "member@example.com", "password": "member-pass"})

        attributes = [part.strip().lower() for part in response.headers["set-cookie"].split(";")[1:]]
        assert "httponly" in attributes
        assert "samesite=strict" in attributes
        assert "max-age=604800" in attributes
        # Secure is only set in production
        assert "secure" not in attributes

    def test_login_email_is_case_insensitive(self, client, make_user):
        make_user()

        response = client.post("/api/users/login", json={"email": "Member@Example.com", "password": "member-pass"})

        assert response.status_code == 200

    def test_wrong_password_and_unknown_email_look_the_same(self, client, make_user):
        make_user()

        wrong_password = client.post("/api/users/login", json={"email": "member@example.com", "password": "nope-nope"})
        unknown_email = client.post("/api/users/login", json={"email": "ghost@example.com", "password": "member-pass"})

        assert wrong_password.status_code == 400
        assert unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["detail"] == {
            "error": "INVALID_CREDENTIALS",
            "message": "Invalid email or password.",
        }
        assert "token" not in wrong_password.cookies

    def test_missing_fields(self, client, db_session):
        response = client.post("/api/users/login", json={"email": "member@example.com"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_FIELD"


class TestLogoutAndProfile:

    def test_logout_clears_cookie(self, client, make_user):
        make_user()
        client.post("/api/users/login", json={"email": "member@example.com", "password": "member-pass"})

        response = client.post("/api/users/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}
        assert "token=" in response.headers["set-cookie"]
        assert client.get("/api/users/profile").status_code == 401

    def test_logout_without_session_is_idempotent(self, client, db_session):
        first = client.post("/api/users/logout")
        second = client.post("/api/users/logout")

        assert first.status_code == 200
        assert second.status_code == 200

    def test_profile_via_cookie(self, client, make_user):
        user = make_user()
        client.post("/api/users/login", json={"email": "member@example.com", "password": "member-pass"})

        response = client.get("/api/users/profile")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == str(user.id)
        assert data["dob"] == "1990-01-15"
        assert "password_hash" not in data
        assert "reset_password_token" not in data
        assert "reset_password_expires" not in data

    def test_profile_via_bearer_header(self, client, make_user, auth_headers):
        user = make_user()

        response = client.get("/api/users/profile", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "member@example.com"

    def test_profile_without_credentials(self, client, db_session):
        response = client.get("/api/users/profile")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "NOT_AUTHENTICATED"

    def test_profile_with_garbage_token(self, client, db_session):
        response = client.get("/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_profile_for_deleted_user(self, client, make_user, db_session):
        user = make_user()
        token = create_access_token(user.id)
        db_session.delete(user)
        db_session.commit()

        response = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestPasswordReset:
    """Forgot password issues a single-use, time-limited token."""

    def test_forgot_password_stores_hashed_token(self, client, make_user, db_session, mock_reset_email):
        user = make_user()

        response = client.post("/api/users/forgot-password", json={"email": "member@example.com"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Reset password email sent."
        assert body["resetUrl"].startswith("http://testserver/api/users/reset-password/")

        token = _reset_token_from(response)
        assert len(token) == 40
        db_session.refresh(user)
        assert user.reset_password_token == hash_reset_token(token)
        assert user.reset_password_token != token
        assert user.reset_password_expires > datetime.utcnow() + timedelta(minutes=14)

        mock_reset_email.assert_awaited_once()
        assert mock_reset_email.await_args.kwargs["reset_url"] == body["resetUrl"]
        assert mock_reset_email.await_args.kwargs["expires_minutes"] == 15

    def test_forgot_password_unknown_email(self, client, db_session, mock_reset_email):
        response = client.post("/api/users/forgot-password", json={"email": "ghost@example.com"})

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "NOT_FOUND"
        mock_reset_email.assert_not_awaited()

    def test_email_failure_clears_pending_token(self, client, make_user, db_session, mock_reset_email):
        user = make_user()
        mock_reset_email.return_value = False

        response = client.post("/api/users/forgot-password", json={"email": "member@example.com"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "NOTIFICATION_FAILURE"
        db_session.refresh(user)
        assert user.reset_password_token is None
        assert user.reset_password_expires is None

    def test_reset_password_is_single_use(self, client, make_user, db_session):
        user = make_user()
        token = _reset_token_from(
            client.post("/api/users/forgot-password", json={"email": "member@example.com"})
        )

        response = client.post(f"/api/users/reset-password/{token}", json={"password": "brand-new-pass"})

        assert response.status_code == 200
        assert response.json()["message"] == "Password updated successfully."
        assert decode_access_token(response.json()["token"])["sub"] == str(user.id)
        db_session.refresh(user)
        assert verify_password("brand-new-pass", user.password_hash)
        assert user.reset_password_token is None

        reused = client.post(f"/api/users/reset-password/{token}", json={"password": "another-pass"})
        assert reused.status_code == 400
        assert reused.json()["detail"]["message"] == "Invalid or expired token."

        login = client.post("/api/users/login", json={"email": "member@example.com", "password": "brand-new-pass"})
        assert login.status_code == 200

    def test_reset_token_expires_after_fifteen_minutes(self, client, make_user, db_session):
        user = make_user()
        token = _reset_token_from(
            client.post("/api/users/forgot-password", json={"email": "member@example.com"})
        )
        later = datetime.utcnow() + timedelta(minutes=15, seconds=1)

        with patch("council_portal.services.auth_service._utcnow", return_value=later):
            response = client.post(f"/api/users/reset-password/{token}", json={"password": "brand-new-pass"})

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "error": "INVALID_OR_EXPIRED_TOKEN",
            "message": "Invalid or expired token.",
        }
        db_session.refresh(user)
        assert verify_password("member-pass", user.password_hash)

    def test_unknown_reset_token(self, client, db_session):
        response = client.post("/api/users/reset-password/deadbeef", json={"password": "brand-new-pass"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_OR_EXPIRED_TOKEN"

    def test_weak_new_password_keeps_token(self, client, make_user, db_session):
        user = make_user()
        token = _reset_token_from(
            client.post("/api/users/forgot-password", json={"email": "member@example.com"})
        )

        response = client.post(f"/api/users/reset-password/{token}", json={"password": "short"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "WEAK_CREDENTIAL"
        db_session.refresh(user)
        assert user.reset_password_token == hash_reset_token(token)


class TestMalformedRequests:
    """Missing or non-JSON bodies get the same 400 shape as service validation."""

    def test_login_without_body(self, client, db_session):
        response = client.post("/api/users/login")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_FIELD"

    def test_form_encoded_login(self, client, make_user):
        make_user()

        response = client.post("/api/users/login", data={"email": "member@example.com", "password": "member-pass"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_FIELD"
        assert "token" not in response.cookies

    def test_forgot_password_without_body(self, client, db_session, mock_reset_email):
        response = client.post("/api/users/forgot-password")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_FIELD"
        mock_reset_email.assert_not_awaited()

    def test_reset_password_without_body(self, client, db_session):
        response = client.post("/api/users/reset-password/deadbeef")

        assert response.status_code == 400
        assert set(response.json()["detail"]) == {"error", "message"}
