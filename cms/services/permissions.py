"""Role-based authorization predicates.

Every function here is pure: it looks only at the principal's role and id and
never touches storage.
"""

from typing import Protocol

from cms.models.enums import Role


class Principal(Protocol):
    id: int
    role: Role


def has_role(user: Principal, required: Role | str) -> bool:
    """True iff the user's role ranks at or above the required role."""
    return Role(user.role).rank >= Role(required).rank


def can_access_admin(user: Principal) -> bool:
    return Role(user.role) in (Role.ADMIN, Role.EDITOR, Role.AUTHOR)


def can_manage_users(user: Principal) -> bool:
    return Role(user.role) == Role.ADMIN


def can_manage_categories(user: Principal) -> bool:
    """Categories and tags are managed by editors and admins."""
    return Role(user.role) in (Role.ADMIN, Role.EDITOR)


def can_edit_post(user: Principal, post_author_id: int) -> bool:
    """Admins can edit any post, others only their own."""
    return Role(user.role) == Role.ADMIN or user.id == post_author_id


def can_delete_post(user: Principal, post_author_id: int) -> bool:
    return Role(user.role) == Role.ADMIN or user.id == post_author_id
