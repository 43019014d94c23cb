"""
Permission guard.

Checks a resolved workspace role against the permissions an action needs.
The role must come from ``app.features.members.services.resolve_role``,
never from request input or a cached value.
"""
from collections.abc import Iterable

from app.core.errors import ForbiddenError
from app.features.permissions.registry import Permission, RoleName, permissions_for
from app.utils import get_logger


log = get_logger(__name__)


def has_permission(role: RoleName | str, required_one_of: Iterable[Permission]) -> bool:
    """True if ``role`` grants at least one of ``required_one_of``."""
    return not permissions_for(role).isdisjoint(required_one_of)


def require_permission(role: RoleName | str, required_one_of: Iterable[Permission]) -> None:
    """
    Allow the action if ``role`` grants any of ``required_one_of``.

    Usage:
        role = await resolve_role(db, user_id, workspace_id)
        require_permission(role, [Permission.CREATE_PROJECT])

    Raises:
        ForbiddenError: if the role grants none of the permissions
    """
    required = frozenset(required_one_of)
    if not has_permission(role, required):
        log.debug("Role %s denied, requires one of %s", RoleName(role).value, sorted(p.value for p in required))
        raise ForbiddenError()
