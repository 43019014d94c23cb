import pytest
from sqlalchemy import func, select

from app.core.errors import (
    AlreadyMemberError,
    ForbiddenError,
    NotAMemberError,
    NotFoundError,
    RoleNotFoundError,
    WorkspaceNotFoundError,
)
from app.features.auth.services import register_user
from app.features.members.models import Member
from app.features.members import services as member_services
from app.features.members.services import is_member, join_workspace, resolve_role
from app.features.permissions.registry import RoleName
from app.features.workspaces.models import Workspace
from app.features.workspaces.services import change_member_role, get_workspace_members, reset_invite_code


pytestmark = pytest.mark.anyio


async def _invite_code(db, workspace_id):
    return await db.scalar(select(Workspace.invite_code).where(Workspace.id == workspace_id))


async def _member_count(db, workspace_id):
    return await db.scalar(select(func.count(Member.id)).where(Member.workspace_id == workspace_id))


class TestResolveRole:
    async def test_creator_is_owner(self, db, register):
        alice = await register("alice@example.com")
        assert await resolve_role(db, alice.user.id, alice.workspace_id) == RoleName.OWNER

    async def test_joined_user_is_member(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")

        await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        assert await resolve_role(db, bob.user.id, alice.workspace_id) == RoleName.MEMBER

    async def test_role_change_is_seen_immediately(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        await change_member_role(db, alice.user.id, alice.workspace_id, bob.user.id, RoleName.ADMIN)

        assert await resolve_role(db, bob.user.id, alice.workspace_id) == RoleName.ADMIN

    async def test_non_member_is_rejected(self, db, register):
        alice = await register("alice@example.com")
        mallory = await register("mallory@example.com")

        with pytest.raises(NotAMemberError):
            await resolve_role(db, mallory.user.id, alice.workspace_id)

    async def test_not_a_member_is_forbidden_kind(self, db, register):
        alice = await register("alice@example.com")
        mallory = await register("mallory@example.com")

        with pytest.raises(ForbiddenError):
            await resolve_role(db, mallory.user.id, alice.workspace_id)

    async def test_unknown_workspace(self, db, register):
        alice = await register("alice@example.com")

        with pytest.raises(WorkspaceNotFoundError):
            await resolve_role(db, alice.user.id, "01HZZZZZZZZZZZZZZZZZZZZZZZ")


class TestJoinWorkspace:
    async def test_join_creates_member_record(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")

        member = await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        assert member.workspace_id == alice.workspace_id
        assert member.role.name == RoleName.MEMBER
        assert member.joined_at is not None
        assert await is_member(db, bob.user.id, alice.workspace_id)

    async def test_double_join_is_rejected_and_leaves_one_record(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        code = await _invite_code(db, alice.workspace_id)

        await join_workspace(db, bob.user.id, code)
        with pytest.raises(AlreadyMemberError):
            await join_workspace(db, bob.user.id, code)

        count = await db.scalar(
            select(func.count(Member.id)).where(
                Member.user_id == bob.user.id, Member.workspace_id == alice.workspace_id
            )
        )
        assert count == 1

    async def test_constraint_violation_reads_as_already_member(self, db, register, monkeypatch):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        code = await _invite_code(db, alice.workspace_id)
        await join_workspace(db, bob.user.id, code)
        bob_id = bob.user.id

        async def never_member(*args, **kwargs):
            return False

        # Simulates a concurrent join that passed the membership check
        monkeypatch.setattr(member_services, "is_member", never_member)

        with pytest.raises(AlreadyMemberError) as exc_info:
            await join_workspace(db, bob_id, code)

        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__
        assert await _member_count(db, alice.workspace_id) == 2

    async def test_owner_cannot_join_own_workspace(self, db, register):
        alice = await register("alice@example.com")

        with pytest.raises(AlreadyMemberError):
            await join_workspace(db, alice.user.id, await _invite_code(db, alice.workspace_id))

    async def test_unknown_invite_code(self, db, register):
        bob = await register("bob@example.com")

        with pytest.raises(NotFoundError):
            await join_workspace(db, bob.user.id, "deadbeef")

    async def test_reset_invalidates_old_code(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        old_code = await _invite_code(db, alice.workspace_id)

        workspace = await reset_invite_code(db, alice.user.id, alice.workspace_id)

        assert workspace.invite_code != old_code
        assert len(workspace.invite_code) == 8
        with pytest.raises(NotFoundError):
            await join_workspace(db, bob.user.id, old_code)
        await join_workspace(db, bob.user.id, workspace.invite_code)

    async def test_member_cannot_reset_invite_code(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        with pytest.raises(ForbiddenError):
            await reset_invite_code(db, bob.user.id, alice.workspace_id)

    async def test_missing_member_role(self, db_without_member_role):
        db = db_without_member_role
        alice = await register_user(db, "alice@example.com", "Alice", "secret")
        bob = await register_user(db, "bob@example.com", "Bob", "secret")

        with pytest.raises(RoleNotFoundError):
            await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        assert await _member_count(db, alice.workspace_id) == 1


class TestMemberManagement:
    async def test_members_listed_with_roles(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        await join_workspace(db, bob.user.id, await _invite_code(db, alice.workspace_id))

        members, roles = await get_workspace_members(db, bob.user.id, alice.workspace_id)

        assert {m.user_id for m in members} == {alice.user.id, bob.user.id}
        assert {r.name for r in roles} == set(RoleName)

    async def test_admin_cannot_change_roles(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        carol = await register("carol@example.com")
        code = await _invite_code(db, alice.workspace_id)
        await join_workspace(db, bob.user.id, code)
        await join_workspace(db, carol.user.id, code)
        await change_member_role(db, alice.user.id, alice.workspace_id, bob.user.id, RoleName.ADMIN)

        with pytest.raises(ForbiddenError):
            await change_member_role(db, bob.user.id, alice.workspace_id, carol.user.id, RoleName.ADMIN)

    async def test_change_role_of_non_member(self, db, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")

        with pytest.raises(NotFoundError):
            await change_member_role(db, alice.user.id, alice.workspace_id, bob.user.id, RoleName.ADMIN)
