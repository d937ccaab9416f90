"""DDL for the authorization tables.

The schema name is validated by AuthzSettings before interpolation.
"""

from typing import List


def get_schema_statements(schema: str) -> List[str]:
    """Statements creating the schema and its tables if missing."""
    return [
        f"CREATE SCHEMA IF NOT EXISTS {schema}",
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.workspaces (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            kind TEXT NOT NULL CHECK (kind IN ('main', 'sub')),
            owner_id TEXT NOT NULL,
            parent_workspace_id TEXT REFERENCES {schema}.workspaces(id),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CHECK ((kind = 'sub') = (parent_workspace_id IS NOT NULL))
        )
        """,
        f"CREATE INDEX IF NOT EXISTS idx_workspaces_parent ON {schema}.workspaces(parent_workspace_id)",
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.memberships (
            user_id TEXT NOT NULL,
            workspace_id TEXT NOT NULL REFERENCES {schema}.workspaces(id),
            role TEXT NOT NULL CHECK (role IN ('owner', 'admin', 'member')),
            scope TEXT NOT NULL CHECK (scope IN ('direct', 'inherited')),
            effective_role TEXT NOT NULL CHECK (effective_role IN ('owner', 'admin', 'member')),
            inherited_from TEXT REFERENCES {schema}.workspaces(id),
            joined_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_id, workspace_id)
        )
        """,
        f"CREATE INDEX IF NOT EXISTS idx_memberships_workspace ON {schema}.memberships(workspace_id)",
        f"""
        CREATE TABLE IF NOT EXISTS {schema}.permission_grants (
            user_id TEXT NOT NULL,
            workspace_id TEXT NOT NULL,
            permission_id TEXT NOT NULL,
            granted BOOLEAN NOT NULL,
            granted_by TEXT,
            granted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            expires_at TIMESTAMPTZ,
            PRIMARY KEY (user_id, workspace_id, permission_id)
        )
        """,
    ]
