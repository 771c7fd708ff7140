"""
User account model for blog-api.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Account that can sign in and own posts.

    Email is optional for accounts created by an administrator, so blank
    emails are stored as NULL and only real addresses are held unique.
    """

    ADMIN = "admin"
    CHILD_ADMIN = "childadmin"
    PUBLISHER = "publisher"
    EDITOR = "editor"

    ROLE_CHOICES = [
        (ADMIN, "Admin"),
        (CHILD_ADMIN, "Child admin"),
        (PUBLISHER, "Publisher"),
        (EDITOR, "Editor"),
    ]

    email = models.EmailField("email address", unique=True, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=PUBLISHER)
    agreed_to_terms = models.BooleanField(default=False)

    def save(self, *args, **kwargs):
        if not self.email:
            self.email = None
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == self.ADMIN

    @property
    def display_name(self):
        full_name = self.get_full_name()
        return full_name or self.username
