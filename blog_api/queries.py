"""
Filtered, paginated reads over posts, taxonomy and staff accounts.
"""
from dataclasses import dataclass
from typing import List, Optional

from django.core.paginator import EmptyPage, Paginator
from django.db.models import Count, Q

from .conf import blog_settings
from .exceptions import NotFoundError
from .models import Post, User

# Largest value a BigAutoField primary key can hold
MAX_ID = 2 ** 63 - 1


def coerce_positive_int(value, default):
    """
    Read a page number or page size from user input.

    Anything that is not a positive integer falls back to `default`; bad
    paging parameters never cause an error.
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def parse_id(value):
    """Return `value` as a primary key, or None if it cannot be one."""
    value = str(value)
    if not value.isascii() or not value.isdigit():
        return None
    number = int(value)
    return number if number <= MAX_ID else None


@dataclass
class PostFilter:
    """Optional, independently combinable post filters."""

    status: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def from_params(cls, params):
        return cls(
            status=params.get("status") or None,
            category=params.get("category") or None,
            tag=params.get("tag") or None,
            search=params.get("search") or None,
        )

    def apply(self, queryset):
        if self.status:
            queryset = queryset.filter(status=self.status)
        if self.category:
            category_id = parse_id(self.category)
            if category_id is None:
                return queryset.none()
            queryset = queryset.filter(category_id=category_id)
        if self.tag:
            tag_id = parse_id(self.tag)
            if tag_id is None:
                return queryset.none()
            queryset = queryset.filter(tags__id=tag_id)
        if self.search:
            queryset = queryset.filter(
                Q(title__icontains=self.search)
                | Q(content__icontains=self.search)
                | Q(excerpt__icontains=self.search)
            )
        return queryset


@dataclass
class PostPage:
    items: List[Post]
    total: int
    page: int
    pages: int

    def pagination(self):
        return {"current": self.page, "pages": self.pages, "total": self.total}


def post_queryset():
    """Posts with category, tags and creator ready for serialization."""
    return Post.objects.select_related("category", "created_by").prefetch_related("tags")


def list_posts(filters=None, page=1, page_size=None):
    """
    Return one page of posts matching `filters`, newest first.

    A page past the end comes back empty rather than raising. With no
    matches there are zero pages.
    """
    if page_size is None:
        page_size = blog_settings.POSTS_PER_PAGE
    filters = filters or PostFilter()

    queryset = filters.apply(post_queryset()).order_by("-created_at", "-pk")
    paginator = Paginator(queryset, page_size, allow_empty_first_page=False)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    return PostPage(items=items, total=paginator.count, page=page, pages=paginator.num_pages)


def get_post(pk):
    post_id = parse_id(pk)
    post = post_queryset().filter(pk=post_id).first() if post_id is not None else None
    if post is None:
        raise NotFoundError("Blog not found")
    return post


def record_view(post):
    post.increment_views()
    return post


def list_terms(model):
    """All categories or tags, alphabetically."""
    return model.objects.order_by("name")


def get_term(model, pk):
    term_id = parse_id(pk)
    term = model.objects.filter(pk=term_id).first() if term_id is not None else None
    if term is None:
        raise NotFoundError(f"{model._meta.verbose_name.capitalize()} not found")
    return term


def staff_with_counts(roles):
    """
    Accounts with the given roles, annotated with their post counts.

    Each user gets `total_posts`, `published_posts` and `draft_posts`.
    """
    return (
        User.objects.filter(role__in=roles)
        .annotate(
            total_posts=Count("blog_posts"),
            published_posts=Count("blog_posts", filter=Q(blog_posts__status=Post.PUBLISHED)),
            draft_posts=Count("blog_posts", filter=Q(blog_posts__status=Post.DRAFT)),
        )
        .order_by("date_joined", "pk")
    )
