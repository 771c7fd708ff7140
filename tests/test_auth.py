"""
Tests for registration, sign-in and token handling.
"""
from datetime import timedelta
from unittest import mock

import jwt
import pytest
from django.db.models import QuerySet
from django.test import RequestFactory
from django.utils import timezone

from blog_api import auth
from blog_api.conf import blog_settings
from blog_api.exceptions import AuthenticationError, ConflictError, ValidationError
from blog_api.models import User


@pytest.fixture
def signup_data():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": "s3cret-pass",
        "confirmPassword": "s3cret-pass",
        "agreeToTerms": True,
    }


def decode(token):
    return jwt.decode(token, blog_settings.JWT_SECRET, algorithms=["HS256"])


class TestRegister:
    """Tests for auth.register()."""

    def test_creates_publisher_with_hashed_password(self, db, signup_data):
        token, user = auth.register(signup_data)

        assert user.pk is not None
        assert user.role == User.PUBLISHER
        assert user.agreed_to_terms
        assert user.password != "s3cret-pass"
        assert user.check_password("s3cret-pass")
        assert decode(token)["userId"] == user.pk

    @pytest.mark.parametrize(
        "field",
        ["firstName", "lastName", "username", "email", "password", "confirmPassword"],
    )
    def test_missing_field(self, db, signup_data, field):
        signup_data[field] = ""
        with pytest.raises(ValidationError):
            auth.register(signup_data)
        assert not User.objects.exists()

    def test_password_mismatch_creates_nothing(self, db, signup_data):
        signup_data["confirmPassword"] = "something-else"
        with pytest.raises(ValidationError, match="Passwords do not match"):
            auth.register(signup_data)
        assert not User.objects.exists()

    def test_terms_required(self, db, signup_data):
        signup_data["agreeToTerms"] = False
        with pytest.raises(ValidationError):
            auth.register(signup_data)

    def test_duplicate_email(self, db, signup_data, user):
        signup_data["email"] = user.email
        with pytest.raises(ConflictError):
            auth.register(signup_data)

    def test_duplicate_username(self, db, signup_data, user):
        signup_data["username"] = user.username
        with pytest.raises(ConflictError):
            auth.register(signup_data)

    def test_unique_index_catches_race(self, db, signup_data, user):
        """A writer that slips past the pre-check still gets ConflictError."""
        signup_data["email"] = user.email
        with mock.patch.object(QuerySet, "exists", return_value=False):
            with pytest.raises(ConflictError):
                auth.register(signup_data)
        assert User.objects.filter(email=user.email).count() == 1


class TestLogin:
    """Tests for auth.login()."""

    def test_login_with_username(self, db, user):
        token, logged_in = auth.login("testuser", "testpass123")
        assert logged_in == user
        assert decode(token)["email"] == user.email

    def test_login_with_email(self, db, user):
        _, logged_in = auth.login(user.email, "testpass123")
        assert logged_in == user

    def test_wrong_password_and_unknown_user_look_the_same(self, db, user):
        with pytest.raises(AuthenticationError) as wrong_password:
            auth.login("testuser", "nope")
        with pytest.raises(AuthenticationError) as unknown_user:
            auth.login("nobody", "testpass123")
        assert wrong_password.value.message == unknown_user.value.message

    def test_missing_inputs(self, db):
        with pytest.raises(ValidationError):
            auth.login("", "")

    def test_remember_me_extends_lifetime(self, db, user):
        short, _ = auth.login("testuser", "testpass123")
        long, _ = auth.login("testuser", "testpass123", remember_me=True)

        short_life = decode(short)["exp"] - decode(short)["iat"]
        long_life = decode(long)["exp"] - decode(long)["iat"]
        assert short_life == 7 * 24 * 3600
        assert long_life == 30 * 24 * 3600


class TestTokens:
    """Tests for token issue and resolution."""

    def test_payload_is_minimal(self, db, user):
        payload = decode(auth.issue_token(user))
        assert set(payload) == {"userId", "email", "iat", "exp"}

    def test_resolve_round_trip(self, db, user):
        assert auth.resolve_token(auth.issue_token(user)) == user

    def test_role_comes_from_database(self, db, user):
        token = auth.issue_token(user)
        User.objects.filter(pk=user.pk).update(role=User.ADMIN)
        assert auth.resolve_token(token).role == User.ADMIN

    def test_bad_signature(self, db, user):
        token = jwt.encode({"userId": user.pk, "exp": timezone.now() + timedelta(days=1)},
                           "other-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            auth.resolve_token(token)

    def test_expired(self, db, user):
        token = jwt.encode(
            {"userId": user.pk, "exp": timezone.now() - timedelta(seconds=5)},
            blog_settings.JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            auth.resolve_token(token)

    def test_deleted_user(self, db, user):
        token = auth.issue_token(user)
        user.delete()
        with pytest.raises(AuthenticationError):
            auth.resolve_token(token)

    def test_garbage(self, db):
        with pytest.raises(AuthenticationError):
            auth.resolve_token("not-a-token")

    def test_authenticate_request(self, db, user):
        factory = RequestFactory()
        request = factory.get("/", HTTP_AUTHORIZATION=f"Bearer {auth.issue_token(user)}")
        assert auth.authenticate_request(request) == user

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "Token xyz"])
    def test_authenticate_request_bad_header(self, db, header):
        factory = RequestFactory()
        extra = {"HTTP_AUTHORIZATION": header} if header is not None else {}
        with pytest.raises(AuthenticationError):
            auth.authenticate_request(factory.get("/", **extra))


class TestStaffAccounts:
    """Tests for admin-created accounts."""

    def test_child_admin_uses_email_as_username(self, db):
        user = auth.create_child_admin({
            "firstName": "Kid",
            "lastName": "Admin",
            "email": "kid@example.com",
            "password": "pw",
        })
        assert user.role == User.CHILD_ADMIN
        assert user.username == "kid@example.com"

    def test_staff_account_email_optional(self, db):
        first = auth.create_staff_account({
            "firstName": "Ed",
            "lastName": "Itor",
            "username": "editor1",
            "password": "pw",
            "confirmPassword": "pw",
            "role": "editor",
        })
        second = auth.create_staff_account({
            "firstName": "Pub",
            "lastName": "Lisher",
            "username": "publisher1",
            "password": "pw",
            "confirmPassword": "pw",
            "role": "publisher",
        })
        assert first.email is None and second.email is None
        assert first.agreed_to_terms

    def test_staff_account_rejects_admin_role(self, db):
        with pytest.raises(ValidationError, match="Invalid role"):
            auth.create_staff_account({
                "firstName": "Sneaky",
                "lastName": "User",
                "username": "sneaky",
                "password": "pw",
                "confirmPassword": "pw",
                "role": "admin",
            })

    def test_public_user_view(self, db, user):
        view = auth.public_user_view(user, include_created=True)
        assert view["id"] == user.pk
        assert view["role"] == User.PUBLISHER
        assert "createdAt" in view
        assert "password" not in view


class TestTextInput:
    """Account fields must be strings that fit their columns."""

    def test_numeric_password_rejected(self, db, signup_data):
        signup_data["password"] = signup_data["confirmPassword"] = 12345
        with pytest.raises(ValidationError, match="password must be a string"):
            auth.register(signup_data)
        assert not User.objects.exists()

    @pytest.mark.parametrize("field", ["firstName", "username", "email"])
    def test_non_string_field_rejected(self, db, signup_data, field):
        signup_data[field] = ["not", "a", "string"]
        with pytest.raises(ValidationError):
            auth.register(signup_data)

    def test_overlong_username_rejected(self, db, signup_data):
        signup_data["username"] = "u" * 151
        with pytest.raises(ValidationError, match="at most 150"):
            auth.register(signup_data)

    @pytest.mark.parametrize("login_id, password", [("testuser", 12345), (["testuser"], "testpass123")])
    def test_login_non_string(self, db, user, login_id, password):
        with pytest.raises(ValidationError):
            auth.login(login_id, password)

    def test_child_admin_email_too_long_for_username(self, db):
        with pytest.raises(ValidationError, match="username"):
            auth.create_child_admin({
                "firstName": "Kid",
                "lastName": "Admin",
                "email": "a" * 150 + "@example.com",
                "password": "pw",
            })
        assert not User.objects.exists()

    def test_staff_email_must_be_string(self, db):
        with pytest.raises(ValidationError):
            auth.create_staff_account({
                "firstName": "Ed",
                "lastName": "Itor",
                "username": "editor1",
                "email": 5,
                "password": "pw",
                "confirmPassword": "pw",
                "role": "editor",
            })
