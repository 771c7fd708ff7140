"""
JSON projections for API responses.

Related objects are rendered as small {id, name} style records joined in at
read time; querysets should select_related/prefetch_related them first.
"""


def _isoformat(value):
    return value.isoformat() if value else None


def creator_to_dict(user):
    if user is None:
        return None
    return {
        "id": user.pk,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
    }


def term_to_dict(term):
    """Full record for a category or tag."""
    return {
        "id": term.pk,
        "name": term.name,
        "slug": term.slug,
        "description": term.description,
        "createdBy": term.created_by_id,
        "createdAt": _isoformat(term.created_at),
        "updatedAt": _isoformat(term.updated_at),
    }


def post_to_dict(post):
    return {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "author": post.author,
        "content": post.content,
        "excerpt": post.excerpt,
        "category": {"id": post.category.pk, "name": post.category.name},
        "tags": [{"id": tag.pk, "name": tag.name} for tag in post.tags.all()],
        "featuredImage": post.featured_image,
        "images": list(post.images or []),
        "status": post.status,
        "views": post.views,
        "createdBy": creator_to_dict(post.created_by),
        "publishedAt": _isoformat(post.published_at),
        "createdAt": _isoformat(post.created_at),
        "updatedAt": _isoformat(post.updated_at),
    }
