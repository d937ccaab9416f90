"""Tests for permission entities: ids, catalog, grants and decisions."""

from datetime import timedelta

import pytest

from neo_authz.config.constants import PermissionSource, ReasonCode
from neo_authz.core.exceptions import InvalidPermissionIdError
from neo_authz.core.value_objects import UserId, WorkspaceId
from neo_authz.features.permissions import (
    EffectivePermissions,
    PermissionCatalog,
    PermissionDecision,
    PermissionGrant,
    PermissionId,
    count_granted,
    get_permission_catalog,
)
from neo_authz.utils.datetime import utc_now


def make_grant(permission_id="costCenters.view", granted=True, expires_at=None):
    return PermissionGrant(
        user_id=UserId("user-1"),
        workspace_id=WorkspaceId("ws-1"),
        permission_id=PermissionId(permission_id),
        granted=granted,
        granted_by=UserId("owner-1"),
        expires_at=expires_at,
    )


class TestPermissionId:
    """Test permission id validation."""

    def test_valid_id_exposes_category_and_action(self):
        permission_id = PermissionId("costCenters.delete")

        assert permission_id.category == "costCenters"
        assert permission_id.action == "delete"
        assert str(permission_id) == "costCenters.delete"

    @pytest.mark.parametrize("value", ["costCenters", "a.b.c", ".view", "users.", "", None])
    def test_malformed_ids_are_rejected(self, value):
        with pytest.raises(InvalidPermissionIdError):
            PermissionId(value)

    def test_ids_are_hashable_value_objects(self):
        assert PermissionId("users.view") == PermissionId("users.view")
        assert len({PermissionId("users.view"), PermissionId("users.view")}) == 1


class TestPermissionCatalog:
    """Test the closed permission catalog."""

    @pytest.fixture
    def catalog(self):
        return get_permission_catalog()

    def test_global_catalog_is_singleton(self, catalog):
        assert get_permission_catalog() is catalog

    def test_cost_center_permissions_are_catalogued(self, catalog):
        ids = {d.id.value for d in catalog.get_permissions_by_category("costCenters")}

        assert {"costCenters.view", "costCenters.create", "costCenters.edit", "costCenters.delete"} <= ids

    def test_parse_accepts_known_ids(self, catalog):
        assert catalog.parse("costCenters.view") == PermissionId("costCenters.view")
        assert catalog.parse(PermissionId("users.edit")).value == "users.edit"

    def test_parse_rejects_unknown_ids(self, catalog):
        with pytest.raises(InvalidPermissionIdError) as exc_info:
            catalog.parse("costCenters.fly")

        assert exc_info.value.details == {"permission_id": "costCenters.fly"}

    def test_is_known(self, catalog):
        assert catalog.is_known("invoices.send")
        assert not catalog.is_known("invoices.teleport")
        assert not catalog.is_known("not-an-id")
        assert "users.view" in catalog

    def test_categories_preserve_registration_order(self, catalog):
        names = [category.name for category in catalog.list_categories()]

        assert names[0] == "users"
        assert "costCenters" in names
        assert len(names) == len(set(names))
        assert sum(len(c.permissions) for c in catalog.list_categories()) == len(catalog)

    def test_delete_actions_are_dangerous(self, catalog):
        dangerous = {d.id.value for d in catalog.get_dangerous_permissions()}

        assert "costCenters.delete" in dangerous
        assert "costCenters.view" not in dangerous

    def test_permissions_by_feature(self, catalog):
        financial = catalog.get_permissions_by_feature("financial-management")

        assert {d.category for d in financial} >= {"costCenters", "budgets", "financial"}

    def test_custom_definitions(self, catalog):
        custom = PermissionCatalog(catalog.get_permissions_by_category("users"))

        assert custom.is_known("users.view")
        assert not custom.is_known("costCenters.view")

    def test_definition_to_dict(self, catalog):
        data = catalog.get("costCenters.delete").to_dict()

        assert data["id"] == "costCenters.delete"
        assert data["category"] == "costCenters"
        assert data["action"] == "delete"
        assert data["is_dangerous"] is True


class TestPermissionGrant:
    """Test explicit grant expiry and serialization."""

    def test_grant_without_expiry_never_expires(self):
        grant = make_grant()

        assert not grant.is_expired()
        assert grant.is_effective()

    def test_grant_past_expiry_is_not_effective(self):
        grant = make_grant(expires_at=utc_now() - timedelta(days=1))

        assert grant.is_expired()
        assert not grant.is_effective()
        assert grant.granted is True

    def test_denial_is_never_effective(self):
        assert not make_grant(granted=False).is_effective()

    def test_expiry_is_evaluated_against_given_time(self):
        expires_at = utc_now() + timedelta(hours=1)
        grant = make_grant(expires_at=expires_at)

        assert not grant.is_expired(expires_at - timedelta(seconds=1))
        assert grant.is_expired(expires_at)

    def test_dict_round_trip_keeps_expiry(self):
        grant = make_grant(expires_at=utc_now() + timedelta(days=3))

        restored = PermissionGrant.from_dict(grant.to_dict())

        assert restored == grant
        assert restored.key == ("user-1", "ws-1", "costCenters.view")

    def test_count_granted_skips_denied_and_expired(self):
        permissions = {
            "costCenters.view": make_grant("costCenters.view"),
            "costCenters.edit": make_grant("costCenters.edit", granted=False),
            "costCenters.create": make_grant("costCenters.create", expires_at=utc_now() - timedelta(days=1)),
        }

        assert count_granted(permissions) == 1
        assert count_granted(None) == 0


class TestDecisions:
    """Test decision and effective permission value objects."""

    def test_decision_truthiness_follows_allowed(self):
        assert PermissionDecision(True, ReasonCode.ROLE_DEFAULT, "users.view")
        assert not PermissionDecision(False, ReasonCode.NO_GRANT, "users.view")

    def test_empty_effective_permissions(self):
        effective = EffectivePermissions(UserId("user-1"), WorkspaceId("ws-1"))

        assert effective.source == PermissionSource.NONE
        assert effective.granted_count() == 0
