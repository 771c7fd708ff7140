"""
JSON views for blog-api.
"""
import json
import logging

from django.core.files.storage import default_storage
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from . import auth, content, permissions, queries
from .conf import blog_settings
from .exceptions import ApiError, ServerError, ValidationError
from .models import Category, Tag, User
from .serializers import post_to_dict, term_to_dict
from .uploads import store_image

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class ApiView(View):
    """
    Base view that turns every failure into a structured JSON error.

    Clients authenticate with a bearer token, so CSRF protection is off.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except ApiError as exc:
            return JsonResponse(exc.as_dict(), status=exc.status_code)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            error = ServerError()
            return JsonResponse(error.as_dict(), status=error.status_code)

    def get_actor(self):
        """Return the authenticated user or raise AuthenticationError."""
        return auth.authenticate_request(self.request)

    def get_json(self):
        """Return the request body as a dict."""
        if not self.request.body:
            return {}
        try:
            data = json.loads(self.request.body)
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data


# Accounts


class SignupView(ApiView):
    """Public sign-up; new accounts get the default role."""

    def post(self, request):
        token, user = auth.register(self.get_json())
        return JsonResponse(
            {
                "message": "User created successfully",
                "token": token,
                "user": auth.public_user_view(user),
            },
            status=201,
        )


class SigninView(ApiView):
    def post(self, request):
        data = self.get_json()
        token, user = auth.login(
            data.get("loginId"),
            data.get("password"),
            remember_me=data.get("rememberMe", False),
        )
        return JsonResponse({
            "message": "Login successful",
            "token": token,
            "user": auth.public_user_view(user),
        })


class CurrentUserView(ApiView):
    def get(self, request):
        return JsonResponse({"user": auth.public_user_view(self.get_actor())})


class ProfileView(ApiView):
    def get(self, request):
        user = self.get_actor()
        return JsonResponse({"user": auth.public_user_view(user, include_created=True)})


class ChildAdminListView(ApiView):
    """List child admins with their post counts, or create one. Admin only."""

    def get(self, request):
        permissions.authorize(self.get_actor(), permissions.MANAGE_STAFF)
        results = [
            {
                "id": user.pk,
                "firstName": user.first_name,
                "lastName": user.last_name,
                "email": user.email,
                "createdAt": user.date_joined.isoformat(),
                "counts": {
                    "total": user.total_posts,
                    "published": user.published_posts,
                    "draft": user.draft_posts,
                },
            }
            for user in queries.staff_with_counts([User.CHILD_ADMIN])
        ]
        return JsonResponse(results, safe=False)

    def post(self, request):
        permissions.authorize(self.get_actor(), permissions.MANAGE_STAFF)
        user = auth.create_child_admin(self.get_json())
        return JsonResponse(
            {
                "message": "Child admin created",
                "user": auth.public_user_view(user, include_created=True),
            },
            status=201,
        )


class StaffListView(ApiView):
    """List publishers and editors with their post counts, or create one. Admin only."""

    def get(self, request):
        permissions.authorize(self.get_actor(), permissions.MANAGE_STAFF)
        results = []
        for user in queries.staff_with_counts(blog_settings.STAFF_ROLES):
            data = auth.public_user_view(user, include_created=True)
            data["username"] = user.username
            data["publishedCount"] = user.published_posts
            data["draftCount"] = user.draft_posts
            results.append(data)
        return JsonResponse(results, safe=False)

    def post(self, request):
        permissions.authorize(self.get_actor(), permissions.MANAGE_STAFF)
        user = auth.create_staff_account(self.get_json())
        return JsonResponse(
            {
                "message": "Child admin created successfully",
                "user": auth.public_user_view(user),
            },
            status=201,
        )


# Posts


class PostListView(ApiView):
    """List posts with filtering and pagination, or create a post."""

    def get(self, request):
        params = request.GET
        page = queries.list_posts(
            queries.PostFilter.from_params(params),
            page=queries.coerce_positive_int(params.get("page"), 1),
            page_size=queries.coerce_positive_int(
                params.get("limit"), blog_settings.POSTS_PER_PAGE
            ),
        )
        return JsonResponse({
            "blogs": [post_to_dict(post) for post in page.items],
            "pagination": page.pagination(),
        })

    def post(self, request):
        post = content.create_post(self.get_actor(), self.get_json())
        return JsonResponse(post_to_dict(queries.get_post(post.pk)), status=201)


class PostDetailView(ApiView):
    """Fetch, update or delete a single post."""

    def get(self, request, pk):
        post = queries.record_view(queries.get_post(pk))
        return JsonResponse(post_to_dict(post))

    def put(self, request, pk):
        actor = self.get_actor()
        post = queries.get_post(pk)
        content.update_post(actor, post, self.get_json())
        return JsonResponse(post_to_dict(queries.get_post(pk)))

    def delete(self, request, pk):
        actor = self.get_actor()
        content.delete_post(actor, queries.get_post(pk))
        return JsonResponse({"message": "Blog deleted successfully"})


class ImageUploadView(ApiView):
    """Accept a single jpg/png image and return where it can be fetched."""

    def post(self, request):
        self.get_actor()
        path = store_image(request.FILES.get("image"))
        return JsonResponse(
            {
                "url": request.build_absolute_uri(default_storage.url(path)),
                "path": path,
            },
            status=201,
        )


# Categories and tags


class TermListView(ApiView):
    model = None

    def get(self, request):
        terms = queries.list_terms(self.model)
        return JsonResponse([term_to_dict(term) for term in terms], safe=False)

    def post(self, request):
        term = content.create_term(self.model, self.get_actor(), self.get_json())
        return JsonResponse(term_to_dict(term), status=201)


class TermDetailView(ApiView):
    model = None

    def get(self, request, pk):
        return JsonResponse(term_to_dict(queries.get_term(self.model, pk)))

    def put(self, request, pk):
        actor = self.get_actor()
        term = content.update_term(actor, queries.get_term(self.model, pk), self.get_json())
        return JsonResponse(term_to_dict(term))

    def delete(self, request, pk):
        actor = self.get_actor()
        content.delete_term(actor, queries.get_term(self.model, pk))
        name = self.model._meta.verbose_name.capitalize()
        return JsonResponse({"message": f"{name} deleted successfully"})


class CategoryListView(TermListView):
    model = Category


class CategoryDetailView(TermDetailView):
    model = Category


class TagListView(TermListView):
    model = Tag


class TagDetailView(TermDetailView):
    model = Tag
