"""Unit tests for GroupService."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from shared_kernel.middleware.subsite_context import NO_SUBSITE, SubsiteContext
from subsites.application.access import GroupAccessEvaluator
from subsites.application.lifecycle import GroupLifecycleHooks
from subsites.application.observability import GroupServiceProbe
from subsites.application.services import GroupService
from subsites.application.value_objects import AccessOptions, AccessOptionsMode
from subsites.domain.aggregates import Group
from subsites.domain.value_objects import GroupId
from subsites.ports.exceptions import GroupNotFoundError, UnauthorizedError
from subsites.ports.repositories import IGroupRepository


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_group_repository():
    """Create mock group repository."""
    repository = create_autospec(IGroupRepository, instance=True)

    async def assign_id(group):
        if group.id is None:
            group.id = GroupId(value=42)

    repository.save.side_effect = assign_id
    return repository


@pytest.fixture
def mock_access():
    """Create mock access evaluator."""
    access = create_autospec(GroupAccessEvaluator, instance=True)
    access.can_edit.return_value = True
    access.assignable_subsites.return_value = {5: "Shop", 7: "Blog"}
    return access


@pytest.fixture
def mock_probe():
    """Create mock group service probe."""
    return create_autospec(GroupServiceProbe, instance=True)


def _service(
    mock_session,
    mock_group_repository,
    mock_access,
    mock_probe,
    context: SubsiteContext = NO_SUBSITE,
) -> GroupService:
    return GroupService(
        session=mock_session,
        group_repository=mock_group_repository,
        access_evaluator=mock_access,
        lifecycle=GroupLifecycleHooks(
            context_provider=lambda: context, probe=MagicMock()
        ),
        context_provider=lambda: context,
        probe=mock_probe,
    )


@pytest.fixture
def group_service(mock_session, mock_group_repository, mock_access, mock_probe):
    """Create GroupService outside any subsite."""
    return _service(mock_session, mock_group_repository, mock_access, mock_probe)


def _shop_group() -> Group:
    return Group(
        id=GroupId(value=3),
        title="Shop editors",
        access_all_subsites=False,
        subsite_ids={5},
    )


class TestCreateGroup:
    """Tests for create_group."""

    @pytest.mark.asyncio
    async def test_outside_subsite_creates_global_group(
        self, group_service, mock_group_repository, mock_session, mock_probe
    ):
        """Without an active subsite the group is global and saved once."""
        group = await group_service.create_group(
            title="Editors", access_all_subsites=False
        )

        assert group.id == GroupId(value=42)
        assert group.access_all_subsites is True
        assert mock_group_repository.save.await_count == 1
        mock_session.begin.assert_called_once()
        mock_probe.group_created.assert_called_once_with(
            group_id=42,
            title="Editors",
            access_all_subsites=True,
            subsite_id=None,
        )
        mock_group_repository.add_subsite.assert_not_called()

    @pytest.mark.asyncio
    async def test_inside_subsite_links_creating_subsite(
        self, mock_session, mock_group_repository, mock_access, mock_probe
    ):
        """A group created in a subsite is linked to it after the insert."""
        service = _service(
            mock_session,
            mock_group_repository,
            mock_access,
            mock_probe,
            context=SubsiteContext(subsite_id=5),
        )

        group = await service.create_group(title="Shop editors")

        assert group.subsite_ids == {5}
        assert group.access_all_subsites is True
        assert mock_group_repository.save.await_count == 1
        mock_group_repository.add_subsite.assert_awaited_once_with(
            GroupId(value=42), 5
        )

    @pytest.mark.asyncio
    async def test_invalid_title_raises_before_transaction(
        self, group_service, mock_session
    ):
        """Blank titles are rejected up front."""
        with pytest.raises(ValueError):
            await group_service.create_group(title=" ")

        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_failure_is_reported_and_raised(
        self, group_service, mock_group_repository, mock_probe
    ):
        """Persistence errors propagate after being recorded."""
        mock_group_repository.save.side_effect = RuntimeError("db down")

        with pytest.raises(RuntimeError):
            await group_service.create_group(title="Editors")

        mock_probe.group_creation_failed.assert_called_once_with(
            title="Editors", error="db down"
        )


class TestReads:
    """Tests for list, count and get."""

    @pytest.mark.asyncio
    async def test_list_and_count_use_visible_groups(
        self, group_service, mock_group_repository
    ):
        """Listing and counting delegate to the scoped repository reads."""
        mock_group_repository.list_visible.return_value = [_shop_group()]
        mock_group_repository.count_visible.return_value = 1

        assert await group_service.list_groups() == [_shop_group()]
        assert await group_service.count_groups() == 1

    @pytest.mark.asyncio
    async def test_get_missing_group_raises(
        self, group_service, mock_group_repository
    ):
        """Unknown IDs raise GroupNotFoundError."""
        mock_group_repository.get_by_id.return_value = None

        with pytest.raises(GroupNotFoundError):
            await group_service.get_group(GroupId(value=9))


class TestUpdateAccess:
    """Tests for update_access."""

    @pytest.mark.asyncio
    async def test_links_assignable_subsites(
        self, group_service, mock_group_repository, mock_probe
    ):
        """The group is restricted to the requested subsites and saved."""
        mock_group_repository.get_by_id.return_value = _shop_group()

        group = await group_service.update_access(
            user_id="alice",
            group_id=GroupId(value=3),
            access_all_subsites=False,
            subsite_ids=[5, 7],
        )

        assert group.subsite_ids == {5, 7}
        assert group.access_all_subsites is False
        mock_group_repository.save.assert_awaited_once_with(group)
        mock_probe.group_access_updated.assert_called_once_with(
            group_id=3,
            user_id="alice",
            access_all_subsites=False,
            subsite_ids=[5, 7],
        )

    @pytest.mark.asyncio
    async def test_caller_who_cannot_edit_is_rejected(
        self, group_service, mock_group_repository, mock_access
    ):
        """Editing requires a shared subsite."""
        mock_group_repository.get_by_id.return_value = _shop_group()
        mock_access.can_edit.return_value = False

        with pytest.raises(UnauthorizedError):
            await group_service.update_access(
                "alice", GroupId(value=3), False, [5]
            )

        mock_group_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_unassignable_subsite_is_rejected(
        self, group_service, mock_group_repository, mock_probe
    ):
        """Subsites outside the caller's reach cannot be linked."""
        mock_group_repository.get_by_id.return_value = _shop_group()

        with pytest.raises(UnauthorizedError):
            await group_service.update_access(
                "alice", GroupId(value=3), False, [5, 11]
            )

        mock_probe.subsite_assignment_denied.assert_called_once_with(3, "alice", [11])
        mock_group_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_granting_global_needs_main_site(
        self, group_service, mock_group_repository, mock_probe
    ):
        """Global access can only be granted with the main-site permission."""
        mock_group_repository.get_by_id.return_value = _shop_group()

        with pytest.raises(UnauthorizedError):
            await group_service.update_access("alice", GroupId(value=3), True, [5])

        mock_probe.subsite_assignment_denied.assert_called_once_with(3, "alice", [0])

    @pytest.mark.asyncio
    async def test_granting_global_with_main_site(
        self, group_service, mock_group_repository, mock_access
    ):
        """Callers holding the permission on the main site can grant it."""
        mock_group_repository.get_by_id.return_value = _shop_group()
        mock_access.assignable_subsites.return_value = {0: "Main site", 5: "Shop"}

        group = await group_service.update_access(
            "alice", GroupId(value=3), True, [5]
        )

        assert group.access_all_subsites is True
        assert group.subsite_ids == {5}

    @pytest.mark.asyncio
    async def test_revoking_global_needs_main_site(
        self, group_service, mock_group_repository, mock_probe
    ):
        """A subsite editor cannot take global access away from a group."""
        group = Group(
            id=GroupId(value=3),
            title="Shop editors",
            access_all_subsites=True,
            subsite_ids={5},
        )
        mock_group_repository.get_by_id.return_value = group

        with pytest.raises(UnauthorizedError):
            await group_service.update_access("bob", GroupId(value=3), False, [5])

        assert group.access_all_subsites is True
        mock_probe.subsite_assignment_denied.assert_called_once_with(3, "bob", [0])
        mock_group_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_revoking_global_with_main_site(
        self, group_service, mock_group_repository, mock_access
    ):
        """Main-site administrators can restrict a global group."""
        mock_group_repository.get_by_id.return_value = Group(
            id=GroupId(value=3),
            title="Shop editors",
            access_all_subsites=True,
            subsite_ids={5},
        )
        mock_access.assignable_subsites.return_value = {0: "Main site", 5: "Shop"}

        group = await group_service.update_access(
            "alice", GroupId(value=3), False, [5]
        )

        assert group.access_all_subsites is False
        assert group.subsite_ids == {5}

    @pytest.mark.asyncio
    async def test_missing_group_raises(self, group_service, mock_group_repository):
        """Updating an unknown group raises GroupNotFoundError."""
        mock_group_repository.get_by_id.return_value = None

        with pytest.raises(GroupNotFoundError):
            await group_service.update_access("alice", GroupId(value=3), False, [])


class TestAccessOptions:
    """Tests for access_options."""

    @pytest.mark.asyncio
    async def test_delegates_to_evaluator(
        self, group_service, mock_group_repository, mock_access
    ):
        """Options are computed for the loaded group."""
        group = _shop_group()
        options = AccessOptions(
            mode=AccessOptionsMode.READONLY, can_grant_global=False
        )
        mock_group_repository.get_by_id.return_value = group
        mock_access.access_options.return_value = options

        assert await group_service.access_options("alice", GroupId(value=3)) is options
        mock_access.access_options.assert_awaited_once_with("alice", group)


class TestDeleteGroup:
    """Tests for delete_group."""

    @pytest.mark.asyncio
    async def test_deletes_editable_group(
        self, group_service, mock_group_repository, mock_probe
    ):
        """Editors can delete the group."""
        mock_group_repository.get_by_id.return_value = _shop_group()

        await group_service.delete_group("alice", GroupId(value=3))

        mock_group_repository.delete.assert_awaited_once_with(GroupId(value=3))
        mock_probe.group_deleted.assert_called_once_with(3, "alice")

    @pytest.mark.asyncio
    async def test_rejects_caller_who_cannot_edit(
        self, group_service, mock_group_repository, mock_access
    ):
        """Deleting requires edit rights."""
        mock_group_repository.get_by_id.return_value = _shop_group()
        mock_access.can_edit.return_value = False

        with pytest.raises(UnauthorizedError):
            await group_service.delete_group("alice", GroupId(value=3))

        mock_group_repository.delete.assert_not_called()
