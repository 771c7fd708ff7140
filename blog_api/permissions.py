"""
Role and ownership rules for every write the API accepts.

All permission decisions go through can_perform(); views call authorize()
so the rules live in one place.
"""
from .exceptions import AuthorizationError
from .models import Post

CREATE = "create"
UPDATE = "update"
DELETE = "delete"
MANAGE_STAFF = "manage_staff"

# The only fields an owner without the admin role may change on a post.
OWNER_EDITABLE_FIELDS = frozenset({"status"})


def can_perform(actor, action, resource=None, changes=None):
    """
    Decide whether `actor` may perform `action` on `resource`.

    Args:
        actor: the authenticated User, or None for anonymous requests
        action: one of CREATE, UPDATE, DELETE, MANAGE_STAFF
        resource: the Post, Category or Tag being acted on (or its class
            for CREATE)
        changes: for UPDATE, the keys of the submitted payload

    Returns:
        True to allow, False to deny
    """
    if actor is None or not actor.is_authenticated:
        return False

    if actor.is_admin:
        return True

    if action == CREATE:
        return True

    if action == UPDATE:
        if isinstance(resource, Post):
            if resource.created_by_id != actor.pk:
                return False
            return set(changes or ()) == OWNER_EDITABLE_FIELDS
        # Categories and tags have no owner restriction on edit
        return True

    # DELETE and MANAGE_STAFF need the admin role
    return False


def authorize(actor, action, resource=None, changes=None):
    """Raise AuthorizationError unless can_perform() allows the action."""
    if not can_perform(actor, action, resource, changes):
        raise AuthorizationError("Access denied")
