"""
Models for blog-api.

All models are importable from blog_api.models:

    from blog_api.models import User, Post, Category, Tag
"""
from .accounts import User
from .posts import Category, Tag, Post

__all__ = [
    # Accounts
    "User",
    # Posts
    "Category",
    "Tag",
    "Post",
]
