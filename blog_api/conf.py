"""
Configuration settings for blog-api.

Override these in your Django settings.py:

    BLOG_API = {
        'JWT_SECRET': 'change-me',
        'TOKEN_LIFETIME_DAYS': 7,
        'POSTS_PER_PAGE': 10,
        ...
    }

JWT_SECRET falls back to Django's SECRET_KEY when it is not set.
"""
from django.conf import settings

DEFAULTS = {
    # Tokens
    "JWT_SECRET": None,
    "JWT_ALGORITHM": "HS256",
    "TOKEN_LIFETIME_DAYS": 7,
    "REMEMBER_ME_LIFETIME_DAYS": 30,

    # Accounts
    "DEFAULT_ROLE": "publisher",
    "STAFF_ROLES": ["publisher", "editor"],

    # Posts
    "POSTS_PER_PAGE": 10,
    "EXCERPT_LENGTH": 150,

    # Uploads
    "UPLOAD_PATH": "blog/uploads/",
    "MAX_UPLOAD_SIZE_MB": 5,
    "ALLOWED_IMAGE_EXTENSIONS": [".jpg", ".jpeg", ".png"],
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png"],
}


class BlogApiSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_api.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_api setting: {name}")

        user_settings = getattr(settings, "BLOG_API", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def JWT_SECRET(self):
        """Return the token signing secret, defaulting to SECRET_KEY."""
        user_settings = getattr(settings, "BLOG_API", {})
        return user_settings.get("JWT_SECRET") or settings.SECRET_KEY


blog_settings = BlogApiSettings()
