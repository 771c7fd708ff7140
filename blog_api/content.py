"""
Write path for posts, categories and tags.

Derived fields are applied here before each save:
- slug, whenever the title (or term name) changes
- excerpt, when content changes and no excerpt exists yet
- published_at, the first time a post becomes published
"""
import json
import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from . import permissions
from .exceptions import ConflictError, ValidationError
from .models import Category, Post, Tag
from .queries import parse_id
from .text import make_excerpt, slugify_title

logger = logging.getLogger(__name__)

# Plain text fields a post update may change; request keys match field names
POST_TEXT_FIELDS = ("title", "author", "content", "excerpt")


def parse_list(value, field):
    """
    Accept a list or a JSON-encoded list.

    Returns None (treated as "not supplied") when a string cannot be parsed.
    """
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            logger.warning("Ignoring unparseable %s value %r", field, value)
            return None
        if isinstance(parsed, list):
            return parsed
    logger.warning("Ignoring non-list %s value %r", field, value)
    return None


def _clean_text(model, data, key, field=None):
    """
    Return `data[key]` after checking it is a string that fits `field`.

    Missing keys come back as None.
    """
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    max_length = model._meta.get_field(field or key).max_length
    if max_length and len(value) > max_length:
        raise ValidationError(f"{key} must be at most {max_length} characters")
    return value


def _resolve_category(category_id):
    category = None
    pk = parse_id(category_id)
    if pk is not None:
        category = Category.objects.filter(pk=pk).first()
    if category is None:
        raise ValidationError("Category does not exist")
    return category


def _resolve_tags(tag_ids):
    ids = {parse_id(tag_id) for tag_id in tag_ids}
    if None in ids:
        raise ValidationError("One or more tags do not exist")
    tags = list(Tag.objects.filter(pk__in=ids))
    if len(tags) != len(ids):
        raise ValidationError("One or more tags do not exist")
    return tags


def _check_status(status):
    if status not in (Post.DRAFT, Post.PUBLISHED):
        raise ValidationError("Status must be 'draft' or 'published'")


def _apply_derived_fields(post, changed):
    if "title" in changed:
        post.slug = slugify_title(post.title)
    if "content" in changed and not post.excerpt:
        post.excerpt = make_excerpt(post.content)
    if post.is_published and post.published_at is None:
        post.published_at = timezone.now()


def _save(instance, tags=None):
    try:
        with transaction.atomic():
            instance.save()
            if tags is not None:
                instance.tags.set(tags)
    except IntegrityError:
        raise ConflictError(
            f"A {instance._meta.verbose_name} with the same name or slug already exists"
        )


def create_post(actor, data):
    """Create a post owned by `actor`."""
    permissions.authorize(actor, permissions.CREATE, Post)

    title, author, text = (_clean_text(Post, data, key) for key in ("title", "author", "content"))
    if not (title and author and text and data.get("category")):
        raise ValidationError("Title, author, content, and category are required")
    excerpt = _clean_text(Post, data, "excerpt")
    featured_image = _clean_text(Post, data, "featuredImage", "featured_image")

    status = data.get("status") or Post.DRAFT
    _check_status(status)

    category = _resolve_category(data["category"])
    tag_ids = parse_list(data.get("tags"), "tags")
    tags = _resolve_tags(tag_ids) if tag_ids else []
    images = parse_list(data.get("images"), "images") or []

    post = Post(
        title=title,
        author=author,
        content=text,
        excerpt=excerpt or "",
        category=category,
        featured_image=featured_image or "",
        images=images,
        status=status,
        created_by=actor,
    )
    _apply_derived_fields(post, changed={"title", "content"})
    _save(post, tags)
    return post


def update_post(actor, post, data):
    """
    Apply a partial update to `post`.

    Only keys present in `data` are considered. Empty text values are
    ignored rather than clearing the field.
    """
    permissions.authorize(actor, permissions.UPDATE, post, changes=data.keys())

    changed = set()
    for field in POST_TEXT_FIELDS:
        value = _clean_text(Post, data, field)
        if value and value != getattr(post, field):
            setattr(post, field, value)
            changed.add(field)

    if data.get("category"):
        post.category = _resolve_category(data["category"])

    tags = None
    if "tags" in data:
        tag_ids = parse_list(data["tags"], "tags")
        if tag_ids is not None:
            tags = _resolve_tags(tag_ids)

    if "images" in data:
        images = parse_list(data["images"], "images")
        if images is not None:
            post.images = images

    featured_image = _clean_text(Post, data, "featuredImage", "featured_image")
    if featured_image is not None:
        post.featured_image = featured_image

    status = data.get("status")
    if status and status != post.status:
        _check_status(status)
        post.status = status

    _apply_derived_fields(post, changed)
    _save(post, tags)
    return post


def delete_post(actor, post):
    permissions.authorize(actor, permissions.DELETE, post)
    post_id = post.pk
    post.delete()
    logger.info("Post %s deleted by user %s", post_id, actor.pk)


def create_term(model, actor, data):
    """Create a Category or Tag."""
    permissions.authorize(actor, permissions.CREATE, model)

    name = _clean_text(model, data, "name")
    if not name:
        raise ValidationError(f"{model._meta.verbose_name.capitalize()} name is required")
    if model.objects.filter(name=name).exists():
        raise ConflictError(f"{model._meta.verbose_name.capitalize()} already exists")

    term = model(
        name=name,
        slug=slugify_title(name),
        description=_clean_text(model, data, "description") or "",
        created_by=actor,
    )
    _save(term)
    return term


def update_term(actor, term, data):
    permissions.authorize(actor, permissions.UPDATE, term, changes=data.keys())

    model = type(term)
    name = _clean_text(model, data, "name")
    if name and name != term.name:
        term.name = name
        term.slug = slugify_title(name)
    description = _clean_text(model, data, "description")
    if description is not None:
        term.description = description

    _save(term)
    return term


def delete_term(actor, term):
    """Delete a Category or Tag. Categories still used by posts are kept."""
    permissions.authorize(actor, permissions.DELETE, term)
    term_id = term.pk
    try:
        term.delete()
    except ProtectedError:
        raise ConflictError(
            f"{term._meta.verbose_name.capitalize()} is still used by one or more posts"
        )
    logger.info("%s %s deleted by user %s", type(term).__name__, term_id, actor.pk)
