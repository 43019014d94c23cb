"""
Membership resolution and the invite/join flow.

``resolve_role`` is the tenant-isolation chokepoint: every workspace-scoped
operation calls it before reading or mutating anything in the workspace.
"""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import atomic
from app.core.errors import (
    AlreadyMemberError,
    NotAMemberError,
    NotFoundError,
    WorkspaceNotFoundError,
)
from app.features.members.models import Member
from app.features.permissions.models import Role
from app.features.permissions.registry import RoleName
from app.features.permissions.services import get_role
from app.features.users.models import User
from app.features.workspaces.models import Workspace
from app.utils import get_logger


log = get_logger(__name__)


async def get_workspace_or_404(db: AsyncSession, workspace_id: str) -> Workspace:
    workspace = await db.scalar(select(Workspace).where(Workspace.id == workspace_id))
    if workspace is None:
        raise WorkspaceNotFoundError()
    return workspace


async def resolve_role(db: AsyncSession, user_id: str, workspace_id: str) -> RoleName:
    """
    Return the role the user holds in the workspace.

    Raises:
        WorkspaceNotFoundError: if the workspace does not exist
        NotAMemberError: if the user has no membership in it
    """
    await get_workspace_or_404(db, workspace_id)

    role_name = await db.scalar(
        select(Role.name)
        .join(Member, Member.role_id == Role.id)
        .where(Member.user_id == user_id, Member.workspace_id == workspace_id)
    )
    if role_name is None:
        log.debug("User %s is not a member of workspace %s", user_id, workspace_id)
        raise NotAMemberError()

    return RoleName(role_name)


async def is_member(db: AsyncSession, user_id: str, workspace_id: str) -> bool:
    member_id = await db.scalar(
        select(Member.id).where(Member.user_id == user_id, Member.workspace_id == workspace_id)
    )
    return member_id is not None


async def get_member(db: AsyncSession, user_id: str, workspace_id: str) -> Member:
    member = await db.scalar(
        select(Member).where(Member.user_id == user_id, Member.workspace_id == workspace_id)
    )
    if member is None:
        raise NotFoundError("Member not found in the workspace")
    return member


async def join_workspace(db: AsyncSession, user_id: str, invite_code: str) -> Member:
    """
    Redeem an invite code into a MEMBER membership.

    Joining twice is rejected rather than treated as success.

    Raises:
        NotFoundError: if no workspace has this invite code
        AlreadyMemberError: if the user already belongs to the workspace
        RoleNotFoundError: if the MEMBER role was never seeded
    """
    workspace = await db.scalar(select(Workspace).where(Workspace.invite_code == invite_code))
    if workspace is None:
        raise NotFoundError("Invalid invite code or workspace not found")

    if await is_member(db, user_id, workspace.id):
        raise AlreadyMemberError()

    try:
        async with atomic(db):
            role = await get_role(db, RoleName.MEMBER)
            user = await db.get(User, user_id)
            member = Member(
                user_id=user_id, workspace_id=workspace.id, role_id=role.id, role=role, user=user
            )
            db.add(member)
            await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent join for the same pair
        raise AlreadyMemberError() from None

    log.info("User %s joined workspace %s", user_id, workspace.id)
    return member
