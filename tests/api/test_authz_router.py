"""Tests for the authorization API router."""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from neo_authz import AuthzSettings, UserId, WorkspaceId, WorkspaceRole, create_memory_engine
from neo_authz.api import authz_router, get_authorization_engine


OWNER = UserId("owner-1")
ADMIN = UserId("admin-1")
MEMBER = UserId("member-1")
MAIN = WorkspaceId("main-1")
SUB = WorkspaceId("sub-1")


@pytest_asyncio.fixture
async def engine():
    engine = create_memory_engine(AuthzSettings(_env_file=None, redis_url=None, super_admin_ids=[]))
    await engine.memberships.create_main_workspace("Acme", OWNER, workspace_id=MAIN)
    await engine.memberships.add_membership(ADMIN, MAIN, WorkspaceRole.ADMIN)
    await engine.memberships.add_membership(MEMBER, MAIN, WorkspaceRole.MEMBER)
    await engine.memberships.create_sub_workspace(MAIN, "Acme Labs", OWNER, workspace_id=SUB)
    return engine


@pytest_asyncio.fixture
async def client(engine):
    app = FastAPI()
    app.include_router(authz_router)
    app.dependency_overrides[get_authorization_engine] = lambda: engine

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


def permissions_url(user_id, workspace_id):
    return f"/authz/users/{user_id}/workspaces/{workspace_id}/permissions"


class TestCheckEndpoint:
    """Test POST /authz/check."""

    @pytest.mark.asyncio
    async def test_member_view_allowed(self, client):
        response = await client.post("/authz/check", json={
            "user_id": "member-1",
            "workspace_id": "main-1",
            "permission_id": "costCenters.view",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["allowed"] is True
        assert body["reason"] == "role-default"
        assert body["role"] == "member"

    @pytest.mark.asyncio
    async def test_member_delete_denied_with_explicit_role(self, client):
        response = await client.post("/authz/check", json={
            "user_id": "member-1",
            "workspace_id": "main-1",
            "permission_id": "costCenters.delete",
            "role": "member",
        })

        assert response.status_code == 200
        assert response.json()["allowed"] is False

    @pytest.mark.asyncio
    async def test_unknown_permission_is_denied_not_error(self, client):
        response = await client.post("/authz/check", json={
            "user_id": "owner-1",
            "workspace_id": "main-1",
            "permission_id": "costCenters.levitate",
        })

        assert response.status_code == 200
        assert response.json()["reason"] == "invalid-permission"

    @pytest.mark.asyncio
    async def test_explicit_only_check(self, client):
        response = await client.post("/authz/check", json={
            "user_id": "owner-1",
            "workspace_id": "main-1",
            "permission_id": "costCenters.view",
            "use_fallback": False,
        })

        assert response.json() == {
            "allowed": False,
            "reason": "no-grant",
            "permission_id": "costCenters.view",
            "role": None,
        }

    @pytest.mark.asyncio
    async def test_invalid_role_is_rejected(self, client):
        response = await client.post("/authz/check", json={
            "user_id": "member-1",
            "workspace_id": "main-1",
            "permission_id": "costCenters.view",
            "role": "guest",
        })

        assert response.status_code == 422


class TestPermissionsEndpoints:
    """Test GET and PUT of permission maps."""

    @pytest.mark.asyncio
    async def test_owner_updates_member(self, client):
        response = await client.put(permissions_url("member-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {"costCenters.edit": True, "costCenters.view": False},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["updated"] == 2
        assert body["permissions"]["costCenters.edit"]["granted"] is True
        assert body["permissions"]["costCenters.edit"]["granted_by"] == "owner-1"

        effective = (await client.get(permissions_url("member-1", "main-1"))).json()
        assert effective["source"] == "direct"
        assert effective["granted_count"] == 1

    @pytest.mark.asyncio
    async def test_per_entry_updates(self, client):
        response = await client.put(permissions_url("member-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {
                "costCenters.edit": {"granted": True, "granted_by": "admin-1", "expires_at": "2099-01-01T00:00:00Z"},
                "costCenters.delete": {"granted": True, "expires_at": "2000-01-01T00:00:00Z"},
                "users.view": True,
            },
        })

        assert response.status_code == 200
        permissions = response.json()["permissions"]
        assert permissions["costCenters.edit"]["granted_by"] == "admin-1"
        assert permissions["costCenters.edit"]["expires_at"].startswith("2099-01-01")
        assert permissions["costCenters.edit"]["is_expired"] is False
        assert permissions["costCenters.delete"]["granted_by"] == "owner-1"
        assert permissions["costCenters.delete"]["is_expired"] is True
        assert permissions["users.view"]["expires_at"] is None

        effective = (await client.get(permissions_url("member-1", "main-1"))).json()
        assert effective["granted_count"] == 2

    @pytest.mark.asyncio
    async def test_non_member_target_is_not_found(self, client):
        response = await client.put(permissions_url("outsider-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {"users.view": True},
        })

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "MembershipNotFoundError"

    @pytest.mark.asyncio
    async def test_sub_workspace_falls_back_to_parent_map(self, client):
        await client.put(permissions_url("admin-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {"projects.view": True},
        })

        response = await client.get(permissions_url("admin-1", "sub-1"))

        body = response.json()
        assert body["source"] == "inherited"
        assert body["inherited_from"] == "main-1"
        assert list(body["permissions"]) == ["projects.view"]

    @pytest.mark.asyncio
    async def test_no_grants(self, client):
        body = (await client.get(permissions_url("member-1", "main-1"))).json()

        assert body["source"] == "none"
        assert body["permissions"] == {}
        assert body["granted_count"] == 0

    @pytest.mark.asyncio
    async def test_member_cannot_update(self, client):
        response = await client.put(permissions_url("member-1", "main-1"), json={
            "acting_user_id": "member-1",
            "permissions": {"costCenters.delete": True},
        })

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "PermissionDeniedError"

    @pytest.mark.asyncio
    async def test_admin_cannot_update_owner(self, client):
        response = await client.put(permissions_url("owner-1", "main-1"), json={
            "acting_user_id": "admin-1",
            "permissions": {"costCenters.delete": False},
        })

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_permission_is_rejected(self, client):
        response = await client.put(permissions_url("member-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {"costCenters.levitate": True},
        })

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "InvalidPermissionIdError"

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, client):
        response = await client.put(permissions_url("member-1", "main-1"), json={
            "acting_user_id": "owner-1",
            "permissions": {},
        })

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, client):
        response = await client.put(permissions_url("member-1", "missing"), json={
            "acting_user_id": "owner-1",
            "permissions": {"users.view": True},
        })

        assert response.status_code == 404


class TestMigrationEndpoint:
    """Test POST /authz/migrations."""

    @pytest.mark.asyncio
    async def test_owner_migrates_workspace(self, client):
        response = await client.post("/authz/migrations", json={
            "acting_user_id": "owner-1",
            "scope": "workspace",
            "workspace_id": "main-1",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["success_count"] == 3
        assert body["errors"] == []
        assert {d["status"] for d in body["details"]} == {"Success"}

    @pytest.mark.asyncio
    async def test_owner_migrates_everything(self, client):
        response = await client.post("/authz/migrations", json={"acting_user_id": "owner-1", "scope": "all"})

        assert response.status_code == 200
        assert response.json()["success_count"] == 5

    @pytest.mark.asyncio
    async def test_admin_cannot_migrate(self, client):
        response = await client.post("/authz/migrations", json={
            "acting_user_id": "admin-1",
            "workspace_id": "main-1",
        })

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_non_owner_cannot_migrate_everything(self, client):
        response = await client.post("/authz/migrations", json={"acting_user_id": "member-1", "scope": "all"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_workspace_scope_requires_workspace_id(self, client):
        response = await client.post("/authz/migrations", json={"acting_user_id": "owner-1"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_workspace(self, client):
        response = await client.post("/authz/migrations", json={
            "acting_user_id": "owner-1",
            "workspace_id": "missing",
        })

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "WorkspaceNotFoundError"


class TestDiscoveryEndpoints:
    """Test accessible workspaces and catalog listing."""

    @pytest.mark.asyncio
    async def test_owner_accessible_workspaces(self, client):
        response = await client.get("/authz/users/owner-1/accessible-workspaces")

        body = response.json()
        assert [w["id"] for w in body["main_workspaces"]] == ["main-1"]
        assert [w["id"] for w in body["sub_workspaces_by_parent"]["main-1"]] == ["sub-1"]
        assert body["sub_workspaces_by_parent"]["main-1"][0]["kind"] == "sub"

    @pytest.mark.asyncio
    async def test_member_accessible_workspaces(self, client):
        body = (await client.get("/authz/users/member-1/accessible-workspaces")).json()

        assert [w["id"] for w in body["main_workspaces"]] == ["main-1"]
        assert body["sub_workspaces_by_parent"] == {}

    @pytest.mark.asyncio
    async def test_catalog(self, client):
        response = await client.get("/authz/catalog")

        assert response.status_code == 200
        categories = {c["name"]: c for c in response.json()}
        cost_centers = {p["id"] for p in categories["costCenters"]["permissions"]}
        assert "costCenters.delete" in cost_centers
        assert categories["costCenters"]["feature"] == "financial-management"


class TestDependencyPlaceholder:
    """Test the unconfigured engine dependency."""

    def test_placeholder_raises(self):
        with pytest.raises(NotImplementedError):
            get_authorization_engine()
