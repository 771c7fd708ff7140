"""
Slug and excerpt derivation shared by posts, categories and tags.
"""
import re

from .conf import blog_settings

_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_HTML_TAG = re.compile(r"<[^>]*>")


def slugify_title(text):
    """
    Derive a URL slug from a title or name.

    "New HEPA Filter Launch!" -> "new-hepa-filter-launch"

    Returns None when nothing usable is left, so the post simply has no slug.
    """
    if not text:
        return None
    slug = _DISALLOWED.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    slug = slug.strip("- ")
    return slug or None


def make_excerpt(content, length=None):
    """Return tag-stripped content cut to `length` characters plus an ellipsis."""
    if length is None:
        length = blog_settings.EXCERPT_LENGTH
    plain = _HTML_TAG.sub("", content or "")
    return plain[:length].strip() + "..."
