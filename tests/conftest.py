"""
Shared fixtures for blog-api tests.
"""
import pytest
from django.test import Client

from blog_api.auth import issue_token
from blog_api.models import Category, Post, Tag, User


def _make_user(username, role=User.PUBLISHER, password="testpass123", **extra):
    user = User(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        first_name=extra.pop("first_name", username.capitalize()),
        last_name=extra.pop("last_name", "Tester"),
        role=role,
        **extra,
    )
    user.set_password(password)
    user.save()
    return user


@pytest.fixture
def user(db):
    """A publisher account."""
    return _make_user("testuser")


@pytest.fixture
def other_user(db):
    return _make_user("other")


@pytest.fixture
def admin_user(db):
    return _make_user("boss", role=User.ADMIN)


@pytest.fixture
def category(db, user):
    return Category.objects.create(
        name="Air Filters",
        slug="air-filters",
        created_by=user,
    )


@pytest.fixture
def tag(db, user):
    return Tag.objects.create(name="HEPA", slug="hepa", created_by=user)


@pytest.fixture
def post(db, user, category):
    """A draft post owned by `user`."""
    return Post.objects.create(
        title="Test Post",
        slug="test-post",
        author="Jane Writer",
        content="This is a test post body.",
        category=category,
        created_by=user,
    )


@pytest.fixture
def api_client():
    return Client()


@pytest.fixture
def make_user(db):
    """Factory for extra accounts."""
    return _make_user


@pytest.fixture
def auth_header():
    """Return Authorization header kwargs for the Django test client."""

    def _header(user):
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(user)}"}

    return _header
