from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.core.database.base import utcnow
from app.core.errors import ForbiddenError, InvalidReferenceError, NotFoundError
from app.core.pagination import PageParams
from app.features.members.services import join_workspace
from app.features.projects.schemas import ProjectCreate
from app.features.projects.services import create_project, get_project_analytics, list_projects
from app.features.tasks.models import TaskPriority, TaskStatus
from app.features.tasks.schemas import TaskCreate, TaskFilters, TaskUpdate
from app.features.tasks.services import create_task, delete_task, get_task, list_tasks, update_task
from app.features.workspaces.models import Workspace
from app.features.workspaces.services import get_workspace_analytics


pytestmark = pytest.mark.anyio


@pytest.fixture
async def team(db, register):
    """Alice owns a workspace with one project; Bob joined it as MEMBER."""
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    code = await db.scalar(select(Workspace.invite_code).where(Workspace.id == alice.workspace_id))
    await join_workspace(db, bob.user.id, code)
    project = await create_project(db, alice.user.id, alice.workspace_id, ProjectCreate(name="Launch"))
    return alice, bob, project


class TestCreateTask:
    async def test_defaults(self, db, team):
        alice, _, project = team

        task = await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan"))

        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM
        assert task.assigned_to_id is None
        assert task.created_by_id == alice.user.id
        assert len(task.task_code) == len("task-") + 3

    async def test_member_may_create_tasks(self, db, team):
        alice, bob, project = team

        task = await create_task(
            db, bob.user.id, alice.workspace_id, project.id, TaskCreate(title="Mine", assigned_to=bob.user.id)
        )

        assert task.assigned_to_id == bob.user.id

    async def test_member_may_not_create_projects(self, db, team):
        alice, bob, _ = team

        with pytest.raises(ForbiddenError):
            await create_project(db, bob.user.id, alice.workspace_id, ProjectCreate(name="Nope"))

    async def test_assignee_must_be_member(self, db, team, register):
        alice, _, project = team
        outsider = await register("outsider@example.com")

        with pytest.raises(InvalidReferenceError):
            await create_task(
                db,
                alice.user.id,
                alice.workspace_id,
                project.id,
                TaskCreate(title="Plan", assigned_to=outsider.user.id),
            )

    async def test_blank_assignee_is_rejected(self, db, team):
        alice, _, project = team

        with pytest.raises(InvalidReferenceError):
            await create_task(
                db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan", assigned_to="")
            )

    async def test_project_must_belong_to_workspace(self, db, team):
        _, bob, project = team

        # Bob owns his own workspace but the project lives in Alice's
        with pytest.raises(NotFoundError):
            await create_task(db, bob.user.id, bob.workspace_id, project.id, TaskCreate(title="Plan"))

    async def test_outsider_cannot_create(self, db, team, register):
        alice, _, project = team
        outsider = await register("outsider@example.com")

        with pytest.raises(ForbiddenError):
            await create_task(db, outsider.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan"))


class TestUpdateTask:
    async def test_partial_update(self, db, team):
        alice, bob, project = team
        task = await create_task(
            db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan", assigned_to=bob.user.id)
        )

        updated = await update_task(
            db, bob.user.id, alice.workspace_id, project.id, task.id, TaskUpdate(status=TaskStatus.IN_PROGRESS)
        )

        assert updated.status == TaskStatus.IN_PROGRESS
        assert updated.title == "Plan"
        assert updated.assigned_to_id == bob.user.id

    async def test_explicit_null_unassigns(self, db, team):
        alice, bob, project = team
        task = await create_task(
            db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan", assigned_to=bob.user.id)
        )

        updated = await update_task(
            db, alice.user.id, alice.workspace_id, project.id, task.id, TaskUpdate(assigned_to=None)
        )

        assert updated.assigned_to_id is None

    async def test_reassign_to_non_member(self, db, team, register):
        alice, _, project = team
        outsider = await register("outsider@example.com")
        task = await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan"))

        with pytest.raises(InvalidReferenceError):
            await update_task(
                db, alice.user.id, alice.workspace_id, project.id, task.id, TaskUpdate(assigned_to=outsider.user.id)
            )

    async def test_blank_reassignment_is_rejected(self, db, team):
        alice, bob, project = team
        task = await create_task(
            db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan", assigned_to=bob.user.id)
        )
        task_id, bob_id = task.id, bob.user.id

        with pytest.raises(InvalidReferenceError):
            await update_task(
                db, alice.user.id, alice.workspace_id, project.id, task_id, TaskUpdate(assigned_to="")
            )

        stored = await get_task(db, alice.user.id, alice.workspace_id, project.id, task_id)
        assert stored.assigned_to_id == bob_id

    async def test_task_must_belong_to_project(self, db, team):
        alice, _, project = team
        other = await create_project(db, alice.user.id, alice.workspace_id, ProjectCreate(name="Other"))
        task = await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan"))

        with pytest.raises(NotFoundError):
            await get_task(db, alice.user.id, alice.workspace_id, other.id, task.id)


class TestListTasks:
    async def _seed(self, db, alice, bob, project):
        yesterday = utcnow() - timedelta(days=1)
        await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(
            title="Write launch plan", priority=TaskPriority.HIGH, assigned_to=bob.user.id, due_date=yesterday,
        ))
        await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(
            title="Book venue", status=TaskStatus.DONE, due_date=yesterday,
        ))
        await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(
            title="Send invites", status=TaskStatus.BACKLOG, priority=TaskPriority.LOW,
        ))

    async def test_filters(self, db, team):
        alice, bob, project = team
        await self._seed(db, alice, bob, project)
        page = PageParams()

        async def titles(**kwargs):
            tasks, _ = await list_tasks(db, bob.user.id, alice.workspace_id, TaskFilters(**kwargs), page)
            return {task.title for task in tasks}

        assert len(await titles()) == 3
        assert await titles(status=[TaskStatus.DONE, TaskStatus.BACKLOG]) == {"Book venue", "Send invites"}
        assert await titles(priority=[TaskPriority.HIGH]) == {"Write launch plan"}
        assert await titles(assigned_to=[bob.user.id]) == {"Write launch plan"}
        assert await titles(keyword="LAUNCH") == {"Write launch plan"}
        yesterday = (utcnow() - timedelta(days=1)).date()
        assert await titles(due_date=yesterday) == {"Write launch plan", "Book venue"}
        assert await titles(due_date=date(2000, 1, 1)) == set()

    async def test_pagination(self, db, team):
        alice, bob, project = team
        await self._seed(db, alice, bob, project)

        tasks, pagination = await list_tasks(
            db, alice.user.id, alice.workspace_id, TaskFilters(), PageParams(page_size=2, page_number=2)
        )

        assert len(tasks) == 1
        assert pagination.total_count == 3
        assert pagination.total_pages == 2
        assert pagination.skip == 2

    async def test_analytics(self, db, team):
        alice, bob, project = team
        await self._seed(db, alice, bob, project)

        workspace_stats = await get_workspace_analytics(db, bob.user.id, alice.workspace_id)
        project_stats = await get_project_analytics(db, bob.user.id, alice.workspace_id, project.id)

        assert workspace_stats.total_tasks == 3
        assert workspace_stats.overdue_tasks == 1
        assert workspace_stats.completed_tasks == 1
        assert project_stats == workspace_stats


class TestDeleteTask:
    async def test_admin_and_owner_only(self, db, team):
        alice, bob, project = team
        task = await create_task(db, alice.user.id, alice.workspace_id, project.id, TaskCreate(title="Plan"))

        with pytest.raises(ForbiddenError):
            await delete_task(db, bob.user.id, alice.workspace_id, task.id)

        task_id = task.id
        await delete_task(db, alice.user.id, alice.workspace_id, task_id)
        with pytest.raises(NotFoundError):
            await get_task(db, alice.user.id, alice.workspace_id, project.id, task_id)


async def test_projects_listed_newest_first(db, team):
    alice, _, project = team
    newer = await create_project(db, alice.user.id, alice.workspace_id, ProjectCreate(name="Newer"))

    projects, pagination = await list_projects(db, alice.user.id, alice.workspace_id, PageParams())

    assert [p.id for p in projects] == [newer.id, project.id]
    assert pagination.total_count == 2
