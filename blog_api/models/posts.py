"""
Post, Category, and Tag models for blog-api.

Slugs, excerpts and the publish timestamp are derived by the write path in
blog_api.content, not by save() hooks.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone


class Term(models.Model):
    """
    Common fields for categories and tags.
    """

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True, null=True, blank=True)
    description = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def post_count(self):
        """Return count of published posts using this term."""
        return self.posts.filter(status=Post.PUBLISHED).count()


class Category(Term):
    """
    Category for organizing posts. Every post has exactly one.
    """

    class Meta(Term.Meta):
        verbose_name_plural = "Categories"


class Tag(Term):
    """
    Flat tag for posts.

    Tags are non-hierarchical and can be applied to multiple posts.
    """


class Post(models.Model):
    """
    Blog post / article.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    STATUS_CHOICES = [
        (DRAFT, "Draft"),
        (PUBLISHED, "Published"),
    ]

    # Content
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, null=True, blank=True)
    author = models.CharField(
        max_length=255,
        help_text="Byline shown to readers, independent of the owning account",
    )
    content = models.TextField()
    excerpt = models.TextField(
        blank=True,
        help_text="Optional manual excerpt. Auto-generated if blank.",
    )

    # Media
    featured_image = models.CharField(max_length=500, blank=True)
    images = models.JSONField(default=list, blank=True)

    # Taxonomy
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="posts",
    )
    tags = models.ManyToManyField(Tag, related_name="posts", blank=True)

    # Status
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=DRAFT,
        db_index=True,
    )
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When post was first published",
    )

    # Owner
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_posts",
    )

    # Engagement stats
    views = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="blog_api_post_status_idx"),
            models.Index(fields=["created_by", "-created_at"], name="blog_api_post_owner_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_published(self):
        return self.status == self.PUBLISHED

    def publish(self):
        """Publish the post, keeping the first publish time if it has one."""
        self.status = self.PUBLISHED
        if self.published_at is None:
            self.published_at = timezone.now()
        self.save(update_fields=["status", "published_at", "updated_at"])

    def increment_views(self):
        """Increment view count atomically."""
        Post.objects.filter(pk=self.pk).update(views=models.F("views") + 1)
        self.refresh_from_db(fields=["views"])
