"""
Tests for the Django admin registration.
"""
import pytest
from django.contrib import admin

from blog_api.models import Category, Post, Tag, User


@pytest.fixture
def admin_client(db, client):
    superuser = User.objects.create_superuser(
        username="root", email="root@example.com", password="rootpass"
    )
    client.force_login(superuser)
    return client


@pytest.mark.parametrize("model", [User, Category, Tag, Post])
def test_models_registered(model):
    assert admin.site.is_registered(model)


@pytest.mark.parametrize("name", ["user", "category", "tag", "post"])
def test_changelists_render(admin_client, post, tag, name):
    response = admin_client.get(f"/admin/blog_api/{name}/")
    assert response.status_code == 200


def test_publish_action_sets_timestamp(admin_client, post):
    response = admin_client.post(
        "/admin/blog_api/post/",
        {"action": "publish_posts", "_selected_action": [post.pk]},
    )
    assert response.status_code == 302

    post.refresh_from_db()
    assert post.status == Post.PUBLISHED
    assert post.published_at is not None


def test_unpublish_action_keeps_timestamp(admin_client, post):
    post.publish()
    first = post.published_at

    admin_client.post(
        "/admin/blog_api/post/",
        {"action": "unpublish_posts", "_selected_action": [post.pk]},
    )

    post.refresh_from_db()
    assert post.status == Post.DRAFT
    assert post.published_at == first


def test_user_changelist_shows_display_name(admin_client, user):
    response = admin_client.get("/admin/blog_api/user/")
    assert "Testuser Tester" in response.content.decode()
