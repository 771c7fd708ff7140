"""
URL configuration for blog-api.

Include in your project urls.py:

    path('api/', include('blog_api.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_api"

urlpatterns = [
    # Accounts
    path("signup", views.SignupView.as_view(), name="signup"),
    path("signin", views.SigninView.as_view(), name="signin"),
    path("user", views.CurrentUserView.as_view(), name="current_user"),
    path("user/profile", views.ProfileView.as_view(), name="profile"),

    # Staff administration
    path("admins", views.ChildAdminListView.as_view(), name="admin_list"),
    path("users", views.StaffListView.as_view(), name="staff_list"),

    # Posts
    path("blogs", views.PostListView.as_view(), name="post_list"),
    path("blogs/upload-image", views.ImageUploadView.as_view(), name="image_upload"),
    path("blogs/<int:pk>", views.PostDetailView.as_view(), name="post_detail"),

    # Categories and tags
    path("categories", views.CategoryListView.as_view(), name="category_list"),
    path("categories/<int:pk>", views.CategoryDetailView.as_view(), name="category_detail"),
    path("tags", views.TagListView.as_view(), name="tag_list"),
    path("tags/<int:pk>", views.TagDetailView.as_view(), name="tag_detail"),
]
