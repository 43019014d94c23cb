"""
Static role to permission mapping.

Built once at import time and never mutated, so it can be read from any
request without locking.
"""
import enum
from types import MappingProxyType
from typing import Mapping


class RoleName(str, enum.Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Permission(str, enum.Enum):
    CREATE_WORKSPACE = "CREATE_WORKSPACE"
    DELETE_WORKSPACE = "DELETE_WORKSPACE"
    EDIT_WORKSPACE = "EDIT_WORKSPACE"
    MANAGE_WORKSPACE_SETTINGS = "MANAGE_WORKSPACE_SETTINGS"

    ADD_MEMBER = "ADD_MEMBER"
    CHANGE_MEMBER_ROLE = "CHANGE_MEMBER_ROLE"
    REMOVE_MEMBER = "REMOVE_MEMBER"

    CREATE_PROJECT = "CREATE_PROJECT"
    EDIT_PROJECT = "EDIT_PROJECT"
    DELETE_PROJECT = "DELETE_PROJECT"

    CREATE_TASK = "CREATE_TASK"
    EDIT_TASK = "EDIT_TASK"
    DELETE_TASK = "DELETE_TASK"

    VIEW_ONLY = "VIEW_ONLY"


ROLE_PERMISSIONS: Mapping[RoleName, frozenset[Permission]] = MappingProxyType({
    # Owner holds every permission
    RoleName.OWNER: frozenset(Permission),
    RoleName.ADMIN: frozenset({
        Permission.ADD_MEMBER,
        Permission.CREATE_PROJECT,
        Permission.EDIT_PROJECT,
        Permission.DELETE_PROJECT,
        Permission.CREATE_TASK,
        Permission.EDIT_TASK,
        Permission.DELETE_TASK,
        Permission.MANAGE_WORKSPACE_SETTINGS,
        Permission.VIEW_ONLY,
    }),
    RoleName.MEMBER: frozenset({
        Permission.VIEW_ONLY,
        Permission.CREATE_TASK,
        Permission.EDIT_TASK,
    }),
})


def permissions_for(role: RoleName | str) -> frozenset[Permission]:
    """
    Return the constant permission set for ``role``.

    Raises:
        ValueError: if ``role`` is not one of the defined role names
    """
    return ROLE_PERMISSIONS[RoleName(role)]
