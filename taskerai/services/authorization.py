"""
Authorization predicates over the role hierarchy.

Every function here is pure: it answers "may a caller holding role R do A"
without touching the database. Callers are expected to have parsed raw role
strings with ``parse_role`` first.
"""

from typing import Iterable, List, TypeVar

from taskerai.models.user import UserRole, rank

USER_MANAGER_ROLES = frozenset({UserRole.OWNER, UserRole.CO_OWNER, UserRole.MANAGER})

T = TypeVar("T")


def can_manage_users(role: UserRole) -> bool:
    """Listing, creating and editing accounts, and sending invites."""
    return role in USER_MANAGER_ROLES


def can_promote_users(role: UserRole) -> bool:
    """Approving or denying signups and changing roles."""
    return role == UserRole.OWNER


def can_promote_to(acting_role: UserRole, target_role: UserRole) -> bool:
    """
    Whether ``acting_role`` may hand out ``target_role``.
    Nobody can promote to OWNER, so a second owner never appears this way.
    """
    if acting_role != UserRole.OWNER:
        return False
    return target_role != UserRole.OWNER


def can_create_with_role(acting_role: UserRole, target_role: UserRole) -> bool:
    """Whether a user manager may create an account that starts at ``target_role``."""
    if not can_manage_users(acting_role):
        return False
    if target_role == UserRole.OWNER:
        return False
    if target_role == UserRole.CO_OWNER:
        return acting_role == UserRole.OWNER
    return True


def can_assign_task(role: UserRole, assignee_id: int, acting_user_id: int) -> bool:
    """An EMPLOYEE may only assign work to themself; higher roles to anyone visible."""
    if role == UserRole.EMPLOYEE:
        return assignee_id == acting_user_id
    return True


def get_role_hierarchy_level(role: UserRole) -> int:
    return rank(role)


def filter_assignable(acting_role: UserRole, users: Iterable[T]) -> List[T]:
    """
    Keep the users whose role ranks at or below ``acting_role``.

    Args:
        acting_role: Role of the user who will assign the work
        users: Candidates exposing a ``role`` attribute

    Returns:
        The candidates in their original order
    """
    ceiling = get_role_hierarchy_level(acting_role)
    return [u for u in users if get_role_hierarchy_level(u.role) <= ceiling]  # type: ignore[attr-defined]
