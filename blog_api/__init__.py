"""
blog-api - A JSON content API for blogs built on Django.

Features:
- Posts with categories, tags, cover image and image galleries
- Draft/published lifecycle with a one-time publish timestamp
- Automatic slugs and excerpts
- JWT bearer-token authentication with "remember me" lifetimes
- Role-based administration (admin, child admin, publisher, editor)
- Filtered, searchable, paginated post listings
"""

__version__ = "0.1.0"
