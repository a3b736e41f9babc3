"""Projects — create/edit/delete orchestration and joined reads.

Invariants:
    - Project row and technology set commit or roll back together
    - Only the creator edits or deletes; creator_id never changes
    - Reads fold joined rows: a project without technologies has []
"""

import pytest

from codify.core.errors import NotFoundError, StorageFailure, UnauthorizedActorError
from codify.models.favorites import ProjectFavorite
from codify.models.project import Project
from codify.models.project_technology import ProjectTechnology
from codify.services.favorites import FavoriteRelationships
from codify.services.projects import (
    create_project, delete_project, edit_project, get_project,
    list_projects_with_technologies, list_technologies,
)


@pytest.fixture
async def project_id(manager, seed):
    async with manager.transaction() as db:
        return await create_project(db, 1, "Alpha", "first", [10, 11])


# ─── create ──────────────────────────────────────────────────────

async def test_create_inserts_row_and_technologies(manager, project_id, count_rows):
    assert await count_rows(Project, Project.id == project_id) == 1
    assert await count_rows(
        ProjectTechnology, ProjectTechnology.project_id == project_id,
    ) == 2


async def test_create_with_unknown_creator_is_not_found(manager, seed, count_rows):
    with pytest.raises(NotFoundError):
        async with manager.transaction() as db:
            await create_project(db, 999, "Ghost", None, [10])
    assert await count_rows(Project) == 0


async def test_create_with_unknown_technology_leaves_no_project(
    manager, seed, count_rows,
):
    with pytest.raises(NotFoundError):
        async with manager.transaction() as db:
            await create_project(db, 1, "Alpha", None, [10, 404])
    assert await count_rows(Project) == 0
    assert await count_rows(ProjectTechnology) == 0


# ─── edit ────────────────────────────────────────────────────────

async def test_edit_updates_row_and_replaces_technologies(manager, project_id):
    async with manager.transaction() as db:
        await edit_project(db, project_id, 1, "Alpha v2", "second", [12])

    async with manager.session() as db:
        view = await get_project(db, project_id)
    assert view.name == "Alpha v2"
    assert view.description == "second"
    assert view.creator_id == 1
    assert [t.id for t in view.technologies] == [12]


async def test_edit_by_non_creator_is_rejected(manager, project_id):
    with pytest.raises(UnauthorizedActorError):
        async with manager.transaction() as db:
            await edit_project(db, project_id, 2, "Hijack", None, [])

    async with manager.session() as db:
        view = await get_project(db, project_id)
    assert view.name == "Alpha"
    assert [t.id for t in view.technologies] == [10, 11]


async def test_edit_missing_project_is_not_found(manager, seed):
    with pytest.raises(NotFoundError):
        async with manager.transaction() as db:
            await edit_project(db, 404, 1, "Nope", None, [])


async def test_edit_failing_midway_changes_nothing(manager, project_id):
    # name=None violates NOT NULL at flush time, after the guards passed
    with pytest.raises(StorageFailure):
        async with manager.transaction() as db:
            await edit_project(db, project_id, 1, None, "second", [12])

    async with manager.session() as db:
        view = await get_project(db, project_id)
    assert view.name == "Alpha"
    assert view.description == "first"
    assert [t.id for t in view.technologies] == [10, 11]


async def test_edit_with_unknown_technology_keeps_old_row(manager, project_id):
    with pytest.raises(NotFoundError):
        async with manager.transaction() as db:
            await edit_project(db, project_id, 1, "Alpha v2", None, [404])

    async with manager.session() as db:
        view = await get_project(db, project_id)
    assert view.name == "Alpha"


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_removes_project_associations_and_favorites(
    manager, project_id, count_rows,
):
    async with manager.transaction() as db:
        await FavoriteRelationships(db).add_project_favorite(2, project_id)

    async with manager.transaction() as db:
        await delete_project(db, project_id, 1)

    assert await count_rows(Project) == 0
    assert await count_rows(ProjectTechnology) == 0
    assert await count_rows(ProjectFavorite) == 0


async def test_delete_by_non_creator_is_rejected(manager, project_id, count_rows):
    with pytest.raises(UnauthorizedActorError):
        async with manager.transaction() as db:
            await delete_project(db, project_id, 2)
    assert await count_rows(Project) == 1


async def test_delete_missing_project_is_not_found(manager, seed):
    with pytest.raises(NotFoundError):
        async with manager.transaction() as db:
            await delete_project(db, 404, 1)


# ─── reads ───────────────────────────────────────────────────────

async def test_list_projects_folds_technologies(manager, project_id):
    async with manager.transaction() as db:
        bare = await create_project(db, 2, "Bare", None, [])

    async with manager.session() as db:
        views = await list_projects_with_technologies(db)

    assert [v.id for v in views] == [project_id, bare]
    assert [t.name for t in views[0].technologies] == ["Python", "SQL"]
    assert views[0].creator_name == "Ada"
    assert views[0].creator_email_digest is not None
    assert views[1].technologies == []


async def test_list_projects_filters_by_owner(manager, project_id):
    async with manager.transaction() as db:
        await create_project(db, 2, "Other", None, [12])

    async with manager.session() as db:
        mine = await list_projects_with_technologies(db, owner_id=1)
        nobody = await list_projects_with_technologies(db, owner_id=3)

    assert [v.id for v in mine] == [project_id]
    assert nobody == []


async def test_get_missing_project_is_not_found(manager, seed):
    async with manager.session() as db:
        with pytest.raises(NotFoundError):
            await get_project(db, 404)


async def test_list_technologies_returns_catalog(manager, seed):
    async with manager.session() as db:
        technologies = await list_technologies(db)
    assert [(t.id, t.name) for t in technologies] == [
        (10, "Python"), (11, "SQL"), (12, "Rust"),
    ]
