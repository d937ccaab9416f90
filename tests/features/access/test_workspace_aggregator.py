"""Tests for AccessibleWorkspaceAggregator."""

import pytest

from neo_authz.config.constants import WorkspaceRole
from neo_authz.core.value_objects import UserId, WorkspaceId
from neo_authz.features.access import AccessibleWorkspaceAggregator


class TestAccessibleWorkspaceAggregator:
    """Test the workspace set shown in cross-tenant views."""

    @pytest.fixture
    def aggregator(self, registry):
        return AccessibleWorkspaceAggregator(registry)

    @pytest.mark.asyncio
    async def test_owner_sees_main_and_sub_workspaces(self, aggregator, hierarchy, owner_id, main_id):
        main, sub = hierarchy

        result = await aggregator.get_user_accessible_workspaces(owner_id)

        assert result.main_workspaces == [main]
        assert result.sub_workspaces_by_parent == {main_id.value: [sub]}
        assert result.all_workspace_ids() == ["main-1", "sub-1"]

    @pytest.mark.asyncio
    async def test_owner_without_children_gets_empty_list(self, aggregator, registry, hierarchy):
        solo_owner = UserId("solo")
        solo = await registry.create_main_workspace("Solo", solo_owner, workspace_id=WorkspaceId("solo-ws"))

        result = await aggregator.get_user_accessible_workspaces(solo_owner)

        assert result.main_workspaces == [solo]
        assert result.sub_workspaces_by_parent == {"solo-ws": []}

    @pytest.mark.asyncio
    async def test_main_member_is_not_widened(self, aggregator, hierarchy, member_id, admin_id):
        main, _ = hierarchy

        for user_id in (member_id, admin_id):
            result = await aggregator.get_user_accessible_workspaces(user_id)
            assert result.main_workspaces == [main]
            assert result.sub_workspaces_by_parent == {}

    @pytest.mark.asyncio
    async def test_sub_only_member_sees_nothing(self, aggregator, registry, hierarchy, sub_id):
        """Membership in a sub-workspace alone does not surface any workspace."""
        sub_member = UserId("sub-member")
        await registry.add_membership(sub_member, sub_id, WorkspaceRole.MEMBER)

        result = await aggregator.get_user_accessible_workspaces(sub_member)

        assert result.main_workspaces == []
        assert result.sub_workspaces_by_parent == {}
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_outsider_sees_nothing(self, aggregator, hierarchy, outsider_id):
        result = await aggregator.get_user_accessible_workspaces(outsider_id)

        assert result.is_empty
        assert result.to_dict() == {"main_workspaces": [], "sub_workspaces_by_parent": {}}

    @pytest.mark.asyncio
    async def test_owner_and_member_across_tenants(self, aggregator, registry, hierarchy, owner_id):
        other_owner = UserId("other-owner")
        other = await registry.create_main_workspace("Other", other_owner, workspace_id=WorkspaceId("other-ws"))
        await registry.add_membership(owner_id, other.id, WorkspaceRole.MEMBER)

        result = await aggregator.get_user_accessible_workspaces(owner_id)

        assert [w.id.value for w in result.main_workspaces] == ["main-1", "other-ws"]
        assert list(result.sub_workspaces_by_parent) == ["main-1"]
