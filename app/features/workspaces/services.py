"""
Workspace lifecycle operations.

Creation and deletion touch several tables and run inside ``atomic`` so no
partial state is ever committed.
"""
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import atomic
from app.core.errors import ConflictError, ForbiddenError, NotFoundError
from app.features.members.models import Member
from app.features.members.services import get_member, get_workspace_or_404, resolve_role
from app.features.permissions.models import Role
from app.features.permissions.registry import Permission, RoleName
from app.features.permissions.dependencies import require_permission
from app.features.permissions.services import get_role, list_roles
from app.features.projects.models import Project
from app.features.tasks.models import Task
from app.features.tasks.analytics import count_task_analytics
from app.features.users.models import User
from app.features.workspaces.models import Workspace, generate_invite_code
from app.features.workspaces.schemas import Analytics, WorkspaceCreate, WorkspaceUpdate
from app.utils import get_logger


log = get_logger(__name__)

DEFAULT_WORKSPACE_NAME = "My Workspace"
INVITE_CODE_ATTEMPTS = 5


async def unique_invite_code(db: AsyncSession) -> str:
    """
    Draw invite codes until one is unused.

    Raises:
        ConflictError: if every attempt collides
    """
    for _ in range(INVITE_CODE_ATTEMPTS):
        code = generate_invite_code()
        taken = await db.scalar(select(Workspace.id).where(Workspace.invite_code == code))
        if taken is None:
            return code
    raise ConflictError("Could not generate a unique invite code", "INVITE_CODE_COLLISION")


async def provision_workspace(
    db: AsyncSession,
    user: User,
    name: str,
    description: str | None = None,
) -> Workspace:
    """
    Create a workspace owned by ``user`` with an OWNER membership and make it
    the user's current workspace.

    Writes are flushed but not committed; callers wrap this in ``atomic``.
    """
    workspace = Workspace(
        name=name,
        description=description,
        owner_id=user.id,
        invite_code=await unique_invite_code(db),
    )
    db.add(workspace)
    await db.flush()

    owner_role = await get_role(db, RoleName.OWNER)
    db.add(Member(
        user_id=user.id, workspace_id=workspace.id, role_id=owner_role.id, role=owner_role, user=user
    ))

    user.current_workspace_id = workspace.id
    await db.flush()
    return workspace


async def create_workspace(db: AsyncSession, user_id: str, data: WorkspaceCreate) -> Workspace:
    user = await db.scalar(select(User).where(User.id == user_id))
    if user is None:
        raise NotFoundError("User not found")

    async with atomic(db):
        workspace = await provision_workspace(db, user, data.name, data.description)

    log.info("User %s created workspace %s", user_id, workspace.id)
    return workspace


async def get_user_workspaces(db: AsyncSession, user_id: str) -> list[Workspace]:
    """All workspaces the user is a member of, oldest membership first."""
    result = await db.execute(
        select(Workspace)
        .join(Member, Member.workspace_id == Workspace.id)
        .where(Member.user_id == user_id)
        .order_by(Member.joined_at)
    )
    return list(result.scalars().all())


async def list_members(db: AsyncSession, workspace_id: str) -> list[Member]:
    result = await db.execute(
        select(Member).where(Member.workspace_id == workspace_id).order_by(Member.joined_at)
    )
    return list(result.scalars().all())


async def get_workspace_with_members(
    db: AsyncSession, user_id: str, workspace_id: str
) -> tuple[Workspace, list[Member]]:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    workspace = await get_workspace_or_404(db, workspace_id)
    return workspace, await list_members(db, workspace_id)


async def get_workspace_members(
    db: AsyncSession, user_id: str, workspace_id: str
) -> tuple[list[Member], list[Role]]:
    """Members of the workspace together with the roles they can be given."""
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    return await list_members(db, workspace_id), await list_roles(db)


async def get_workspace_analytics(db: AsyncSession, user_id: str, workspace_id: str) -> Analytics:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.VIEW_ONLY])

    return await count_task_analytics(db, Task.workspace_id == workspace_id)


async def change_member_role(
    db: AsyncSession,
    user_id: str,
    workspace_id: str,
    member_user_id: str,
    role_name: RoleName,
) -> Member:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.CHANGE_MEMBER_ROLE])

    async with atomic(db):
        new_role = await get_role(db, role_name)
        member = await get_member(db, member_user_id, workspace_id)
        member.role_id = new_role.id
        member.role = new_role

    log.info("Member %s of workspace %s is now %s", member_user_id, workspace_id, role_name.value)
    return member


async def update_workspace(
    db: AsyncSession, user_id: str, workspace_id: str, data: WorkspaceUpdate
) -> Workspace:
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.EDIT_WORKSPACE])

    workspace = await get_workspace_or_404(db, workspace_id)
    async with atomic(db):
        if data.name:
            workspace.name = data.name
        if data.description:
            workspace.description = data.description
    return workspace


async def reset_invite_code(db: AsyncSession, user_id: str, workspace_id: str) -> Workspace:
    """Issue a new invite code. The old code is invalid as soon as this commits."""
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.MANAGE_WORKSPACE_SETTINGS, Permission.ADD_MEMBER])

    workspace = await get_workspace_or_404(db, workspace_id)
    async with atomic(db):
        workspace.invite_code = await unique_invite_code(db)

    log.info("Invite code of workspace %s regenerated", workspace_id)
    return workspace


async def switch_current_workspace(db: AsyncSession, user_id: str, workspace_id: str) -> User:
    """Point the user's current workspace at one they are a member of."""
    await resolve_role(db, user_id, workspace_id)

    user = await db.scalar(select(User).where(User.id == user_id))
    if user is None:
        raise NotFoundError("User not found")

    async with atomic(db):
        user.current_workspace_id = workspace_id
    return user


async def repoint_current_workspace(db: AsyncSession, workspace_id: str) -> None:
    """
    Move every user whose current workspace is ``workspace_id`` to another
    membership of theirs, or clear the pointer when none is left.

    Must run after the workspace's memberships are deleted.
    """
    result = await db.execute(select(User).where(User.current_workspace_id == workspace_id))
    for user in result.scalars().all():
        user.current_workspace_id = await db.scalar(
            select(Member.workspace_id)
            .where(Member.user_id == user.id, Member.workspace_id != workspace_id)
            .order_by(Member.joined_at)
            .limit(1)
        )
    await db.flush()


async def delete_workspace(db: AsyncSession, user_id: str, workspace_id: str) -> str | None:
    """
    Delete a workspace with all of its tasks, projects and memberships.

    Only the owner may delete, whatever their role grants. Deletes run child
    before parent and are no-ops for rows already gone, so a failed attempt
    can simply be retried.

    Returns:
        The acting user's current workspace id after the deletion

    Raises:
        ForbiddenError: if the role lacks DELETE_WORKSPACE or the user is not the owner
    """
    role = await resolve_role(db, user_id, workspace_id)
    require_permission(role, [Permission.DELETE_WORKSPACE])

    async with atomic(db):
        workspace = await get_workspace_or_404(db, workspace_id)
        if workspace.owner_id != user_id:
            raise ForbiddenError("You are not authorized to delete this workspace")

        await db.execute(delete(Task).where(Task.workspace_id == workspace_id))
        await db.execute(delete(Project).where(Project.workspace_id == workspace_id))
        await db.execute(delete(Member).where(Member.workspace_id == workspace_id))

        await repoint_current_workspace(db, workspace_id)

        await db.delete(workspace)
        await db.flush()

        current_workspace_id = await db.scalar(select(User.current_workspace_id).where(User.id == user_id))

    log.info("User %s deleted workspace %s", user_id, workspace_id)
    return current_workspace_id
