"""
Django admin configuration for blog_api.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Category, Post, Tag, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "display_name", "email", "role", "is_active"]
    list_filter = ["role", "is_active", "is_staff"]
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Blog", {"fields": ("role", "agreed_to_terms")}),
    )


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "post_count", "created_by", "created_at"]
    search_fields = ["name", "slug", "description"]
    readonly_fields = ["slug", "created_at", "updated_at"]
    raw_id_fields = ["created_by"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "post_count", "created_by", "created_at"]
    search_fields = ["name", "slug"]
    readonly_fields = ["slug", "created_at", "updated_at"]
    raw_id_fields = ["created_by"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "status",
        "category",
        "created_by",
        "views",
        "created_at",
    ]
    list_filter = ["status", "category", "tags", "created_at"]
    search_fields = ["title", "content", "excerpt", "author"]
    raw_id_fields = ["created_by", "category"]
    filter_horizontal = ["tags"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "slug",
        "views",
        "published_at",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "author", "content", "excerpt", "created_by")
        }),
        ("Taxonomy", {
            "fields": ("category", "tags")
        }),
        ("Media", {
            "fields": ("featured_image", "images")
        }),
        ("Status", {
            "fields": ("status", "published_at")
        }),
        ("Metadata", {
            "fields": ("views", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "unpublish_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        count = 0
        for post in queryset.exclude(status=Post.PUBLISHED):
            post.publish()
            count += 1
        self.message_user(request, f"{count} posts published.")

    @admin.action(description="Move selected posts to draft")
    def unpublish_posts(self, request, queryset):
        count = queryset.update(status=Post.DRAFT)
        self.message_user(request, f"{count} posts moved to draft.")
