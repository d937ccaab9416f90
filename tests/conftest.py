"""Pytest configuration and fixtures for neo-authz tests."""

import pytest
import pytest_asyncio

from neo_authz.config.constants import WorkspaceRole
from neo_authz.core.value_objects import UserId, WorkspaceId
from neo_authz.features.migration import MigrationEngine
from neo_authz.features.permissions import (
    AuthorizationResolver,
    MemoryPermissionGrantRepository,
    RoleDefaults,
    StaticPrincipalDirectory,
)
from neo_authz.features.workspaces import (
    MembershipRegistry,
    MemoryMembershipRepository,
    MemoryWorkspaceRepository,
    WorkspaceGraph,
)
from neo_authz.infrastructure.retry import BackoffType, RetryPolicy


SUPER_ADMIN = "root"


@pytest.fixture
def owner_id():
    return UserId("owner-1")


@pytest.fixture
def admin_id():
    return UserId("admin-1")


@pytest.fixture
def member_id():
    return UserId("member-1")


@pytest.fixture
def outsider_id():
    return UserId("outsider-1")


@pytest.fixture
def super_admin_id():
    return UserId(SUPER_ADMIN)


@pytest.fixture
def main_id():
    return WorkspaceId("main-1")


@pytest.fixture
def sub_id():
    return WorkspaceId("sub-1")


@pytest.fixture
def workspace_repository():
    return MemoryWorkspaceRepository()


@pytest.fixture
def membership_repository():
    return MemoryMembershipRepository()


@pytest.fixture
def grant_repository():
    return MemoryPermissionGrantRepository()


@pytest.fixture
def principal_directory():
    return StaticPrincipalDirectory([SUPER_ADMIN])


@pytest.fixture
def fast_retry():
    """Retry policy without delays."""
    return RetryPolicy(
        max_retries=2,
        backoff_type=BackoffType.FIXED,
        initial_delay_ms=0,
        max_delay_ms=0,
        jitter=False,
    )


@pytest.fixture
def role_defaults():
    return RoleDefaults()


@pytest.fixture
def graph(workspace_repository, membership_repository):
    return WorkspaceGraph(workspace_repository, membership_repository)


@pytest.fixture
def registry(membership_repository, graph, principal_directory):
    return MembershipRegistry(membership_repository, graph, principal_directory=principal_directory)


@pytest.fixture
def resolver(grant_repository, registry, principal_directory, fast_retry):
    return AuthorizationResolver(
        grant_repository,
        registry,
        principal_directory=principal_directory,
        retry_policy=fast_retry,
    )


@pytest.fixture
def migration_engine(registry, grant_repository, principal_directory, fast_retry):
    return MigrationEngine(
        registry,
        grant_repository,
        principal_directory=principal_directory,
        retry_policy=fast_retry,
        concurrency=2,
    )


@pytest_asyncio.fixture
async def hierarchy(registry, owner_id, admin_id, member_id, main_id, sub_id):
    """Main workspace with owner, admin and member, plus one sub-workspace.
    
    The admin holds an inherited admin membership in the sub-workspace; the
    owner is the sub-workspace's direct owner.
    """
    main = await registry.create_main_workspace("Acme", owner_id, workspace_id=main_id)
    await registry.add_membership(admin_id, main_id, WorkspaceRole.ADMIN)
    await registry.add_membership(member_id, main_id, WorkspaceRole.MEMBER)
    sub = await registry.create_sub_workspace(main_id, "Acme Labs", owner_id, workspace_id=sub_id)
    return main, sub
