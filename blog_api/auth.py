"""
Account registration, sign-in and bearer-token handling.

Tokens are HS256 JWTs carrying only the user id and email. The role is never
read from the token; resolve_token() always loads the account again.
"""
import logging
from datetime import timedelta

import jwt
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from .conf import blog_settings
from .exceptions import AuthenticationError, ConflictError, ValidationError
from .models import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username/email or password"
DUPLICATE_ACCOUNT = "User already exists with this email or username"

# Request keys stored on User, checked against the column length
ACCOUNT_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "username": "username",
    "email": "email",
}


def issue_token(user, remember_me=False):
    """Return a signed token for `user`, valid for 7 days or 30 with remember_me."""
    days = (
        blog_settings.REMEMBER_ME_LIFETIME_DAYS
        if remember_me
        else blog_settings.TOKEN_LIFETIME_DAYS
    )
    now = timezone.now()
    payload = {
        "userId": user.pk,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(days=days),
    }
    return jwt.encode(
        payload,
        blog_settings.JWT_SECRET,
        algorithm=blog_settings.JWT_ALGORITHM,
    )


def resolve_token(token):
    """
    Return the active user a token was issued to.

    Raises AuthenticationError for a bad signature, an expired or malformed
    token, or an account that no longer exists. The caller is never told
    which of these happened.
    """
    try:
        payload = jwt.decode(
            token,
            blog_settings.JWT_SECRET,
            algorithms=[blog_settings.JWT_ALGORITHM],
            options={"require": ["exp", "userId"]},
        )
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")

    user = User.objects.filter(pk=payload["userId"], is_active=True).first()
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user


def authenticate_request(request):
    """Resolve the `Authorization: Bearer <token>` header to a user."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("No token, authorization denied")
    return resolve_token(token.strip())


def public_user_view(user, include_created=False):
    """Return the fields of an account that are safe to send back."""
    data = {
        "id": user.pk,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
        "role": user.role,
    }
    if include_created:
        data["createdAt"] = user.date_joined.isoformat()
    return data


def _require(data, fields, message):
    if any(not data.get(field) for field in fields):
        raise ValidationError(message)
    _check_text(data, fields)


def _check_text(data, fields):
    """Reject values that are not strings or do not fit their column."""
    for field in fields:
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        if field in ACCOUNT_FIELDS:
            max_length = User._meta.get_field(ACCOUNT_FIELDS[field]).max_length
            if len(value) > max_length:
                raise ValidationError(f"{field} must be at most {max_length} characters")


def _check_passwords_match(data):
    if data.get("password") != data.get("confirmPassword"):
        raise ValidationError("Passwords do not match")


def _create_account(username, email, password, **extra):
    """
    Persist a new account with a hashed password.

    The lookup first is only advisory; the unique indexes on username and
    email decide when two writers race.
    """
    lookup = Q(username=username)
    if email:
        lookup |= Q(email=email)
    if User.objects.filter(lookup).exists():
        raise ConflictError(DUPLICATE_ACCOUNT)

    user = User(username=username, email=email or None, **extra)
    user.set_password(password)
    try:
        with transaction.atomic():
            user.save()
    except IntegrityError:
        raise ConflictError(DUPLICATE_ACCOUNT)

    logger.info("Created %s account %s", user.role, user.pk)
    return user


def register(data):
    """
    Sign up a new account with the default role.

    Returns (token, user).
    """
    _require(
        data,
        ["firstName", "lastName", "username", "email", "password", "confirmPassword"],
        "All fields are required",
    )
    _check_passwords_match(data)
    if not data.get("agreeToTerms"):
        raise ValidationError("You must agree to the terms and conditions")

    user = _create_account(
        data["username"],
        data["email"],
        data["password"],
        first_name=data["firstName"],
        last_name=data["lastName"],
        role=blog_settings.DEFAULT_ROLE,
        agreed_to_terms=True,
    )
    return issue_token(user), user


def login(login_id, password, remember_me=False):
    """
    Sign in with a username or email.

    Returns (token, user).
    """
    if not login_id or not password:
        raise ValidationError("Username/email and password are required")
    if not isinstance(login_id, str) or not isinstance(password, str):
        raise ValidationError("Username/email and password must be strings")

    user = User.objects.filter(
        Q(username=login_id) | Q(email=login_id),
        is_active=True,
    ).first()
    if user is None or not user.check_password(password):
        logger.warning("Rejected sign-in attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)

    return issue_token(user, remember_me=bool(remember_me)), user


def create_child_admin(data):
    """Create a child admin account. Username defaults to the email address."""
    _require(data, ["firstName", "lastName", "email", "password"], "Required fields missing")
    username = data.get("username") or data["email"]
    _check_text({"username": username}, ["username"])

    return _create_account(
        username,
        data["email"],
        data["password"],
        first_name=data["firstName"],
        last_name=data["lastName"],
        role=User.CHILD_ADMIN,
        agreed_to_terms=bool(data.get("agreeToTerms")),
    )


def create_staff_account(data):
    """Create a publisher or editor account. Email is optional."""
    _require(
        data,
        ["firstName", "lastName", "username", "password", "confirmPassword", "role"],
        "First name, last name, username, password, confirm password, and role are required",
    )
    _check_text(data, ["email"])
    _check_passwords_match(data)
    if data["role"] not in blog_settings.STAFF_ROLES:
        raise ValidationError("Invalid role")

    return _create_account(
        data["username"],
        data.get("email"),
        data["password"],
        first_name=data["firstName"],
        last_name=data["lastName"],
        role=data["role"],
        agreed_to_terms=True,
    )
