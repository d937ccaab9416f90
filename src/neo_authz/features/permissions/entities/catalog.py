"""Closed catalog of permission definitions.

Every permission id the engine accepts is registered here. Ids outside the
catalog are rejected at API boundaries and resolve to "denied" inside the
resolver.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ....core.exceptions import InvalidPermissionIdError
from .permission import PermissionCategory, PermissionDefinition, PermissionId


DANGEROUS_ACTIONS = frozenset({"delete", "restore", "backup", "permissions"})


def _define(
    category: str,
    feature: str,
    actions: Iterable[Tuple[str, str, str]],
) -> List[PermissionDefinition]:
    """Build definitions for one category from (action, name, description) rows."""
    return [
        PermissionDefinition(
            id=PermissionId(f"{category}.{action}"),
            name=name,
            description=description,
            feature=feature,
            is_dangerous=action in DANGEROUS_ACTIONS,
        )
        for action, name, description in actions
    ]


SYSTEM_PERMISSIONS: List[PermissionDefinition] = [
    # User Management
    *_define("users", "user-management", [
        ("view", "View Users", "View user list and profiles"),
        ("create", "Create Users", "Create new users"),
        ("edit", "Edit Users", "Edit user profiles and settings"),
        ("delete", "Delete Users", "Remove users from the workspace"),
        ("invite", "Invite Users", "Send workspace invitations"),
        ("permissions", "Manage Permissions", "Grant and revoke user permissions"),
    ]),
    
    # Workspace Management
    *_define("workspaces", "workspace-management", [
        ("view", "View Workspaces", "View workspace details"),
        ("create", "Create Workspaces", "Create sub-workspaces"),
        ("edit", "Edit Workspaces", "Edit workspace settings"),
        ("delete", "Delete Workspaces", "Delete sub-workspaces"),
    ]),
    
    # Project & Task Management
    *_define("projects", "project-management", [
        ("view", "View Projects", "View projects"),
        ("create", "Create Projects", "Create new projects"),
        ("edit", "Edit Projects", "Edit project details"),
        ("delete", "Delete Projects", "Delete projects"),
        ("assign", "Assign Projects", "Assign projects to users"),
    ]),
    *_define("tasks", "project-management", [
        ("view", "View Tasks", "View tasks"),
        ("create", "Create Tasks", "Create new tasks"),
        ("edit", "Edit Tasks", "Edit task details"),
        ("delete", "Delete Tasks", "Delete tasks"),
        ("assign", "Assign Tasks", "Assign tasks to users"),
        ("complete", "Complete Tasks", "Mark tasks as complete"),
    ]),
    
    # Team Management
    *_define("teams", "team-management", [
        ("view", "View Teams", "View teams"),
        ("create", "Create Teams", "Create new teams"),
        ("edit", "Edit Teams", "Edit team details"),
        ("delete", "Delete Teams", "Delete teams"),
        ("members", "Manage Team Members", "Add and remove team members"),
    ]),
    
    # Organization Structure
    *_define("departments", "organization-management", [
        ("view", "View Departments", "View departments"),
        ("create", "Create Departments", "Create new departments"),
        ("edit", "Edit Departments", "Edit department details"),
        ("delete", "Delete Departments", "Delete departments"),
        ("members", "Manage Department Members", "Add and remove department members"),
    ]),
    *_define("branches", "organization-management", [
        ("view", "View Branches", "View branches"),
        ("create", "Create Branches", "Create new branches"),
        ("edit", "Edit Branches", "Edit branch details"),
        ("delete", "Delete Branches", "Delete branches"),
    ]),
    *_define("regions", "organization-management", [
        ("view", "View Regions", "View regions"),
        ("create", "Create Regions", "Create new regions"),
        ("edit", "Edit Regions", "Edit region details"),
        ("delete", "Delete Regions", "Delete regions"),
    ]),
    
    # Content Management
    *_define("folders", "content-management", [
        ("view", "View Folders", "View folders and files"),
        ("create", "Create Folders", "Create new folders"),
        ("edit", "Edit Folders", "Edit folder details"),
        ("delete", "Delete Folders", "Delete folders"),
        ("assign", "Assign Folders", "Assign folders to users"),
    ]),
    
    # Reporting
    *_define("reports", "reporting", [
        ("view", "View Reports", "View reports"),
        ("create", "Create Reports", "Create new reports"),
        ("edit", "Edit Reports", "Edit reports"),
        ("delete", "Delete Reports", "Delete reports"),
        ("approve", "Approve Reports", "Approve submitted reports"),
        ("export", "Export Reports", "Export reports"),
    ]),
    *_define("analytics", "reporting", [
        ("view", "View Analytics", "View analytics dashboards"),
        ("export", "Export Analytics", "Export analytics data"),
    ]),
    
    # Communication
    *_define("calendar", "communication", [
        ("view", "View Calendar", "View calendar events"),
        ("create", "Create Events", "Create calendar events"),
        ("edit", "Edit Events", "Edit calendar events"),
        ("delete", "Delete Events", "Delete calendar events"),
    ]),
    
    # System
    *_define("settings", "system", [
        ("view", "View Settings", "View workspace settings"),
        ("edit", "Edit Settings", "Edit workspace settings"),
    ]),
    *_define("support", "system", [
        ("view", "View Support Tickets", "View support tickets"),
        ("create", "Create Support Tickets", "Open support tickets"),
        ("edit", "Edit Support Tickets", "Edit support tickets"),
        ("resolve", "Resolve Support Tickets", "Resolve support tickets"),
    ]),
    *_define("database", "system", [
        ("view", "View Database", "View database status"),
        ("backup", "Backup Database", "Create database backups"),
        ("restore", "Restore Database", "Restore database backups"),
    ]),
    *_define("ai", "system", [
        ("view", "View AI Features", "Use AI assistance features"),
        ("configure", "Configure AI", "Configure AI features"),
    ]),
    
    # Financial Management
    *_define("expenses", "financial-management", [
        ("view", "View Expenses", "View expenses"),
        ("create", "Create Expenses", "Submit new expenses"),
        ("edit", "Edit Expenses", "Edit expenses"),
        ("delete", "Delete Expenses", "Delete expenses"),
        ("approve", "Approve Expenses", "Approve submitted expenses"),
        ("reject", "Reject Expenses", "Reject submitted expenses"),
        ("export", "Export Expenses", "Export expense data"),
        ("analytics", "Expense Analytics", "View expense analytics"),
        ("categories", "Manage Expense Categories", "Manage expense categories"),
    ]),
    *_define("budgets", "financial-management", [
        ("view", "View Budgets", "View budgets"),
        ("create", "Create Budgets", "Create new budgets"),
        ("edit", "Edit Budgets", "Edit budgets"),
        ("delete", "Delete Budgets", "Delete budgets"),
        ("assign", "Assign Budgets", "Assign budgets to cost centers"),
        ("analytics", "Budget Analytics", "View budget analytics"),
        ("export", "Export Budgets", "Export budget data"),
    ]),
    *_define("invoices", "financial-management", [
        ("view", "View Invoices", "View invoices"),
        ("create", "Create Invoices", "Create new invoices"),
        ("edit", "Edit Invoices", "Edit invoices"),
        ("delete", "Delete Invoices", "Delete invoices"),
        ("send", "Send Invoices", "Send invoices to clients"),
        ("export", "Export Invoices", "Export invoice data"),
        ("analytics", "Invoice Analytics", "View invoice analytics"),
    ]),
    *_define("costCenters", "financial-management", [
        ("view", "View Cost Centers", "View cost centers"),
        ("create", "Create Cost Centers", "Create new cost centers"),
        ("edit", "Edit Cost Centers", "Edit cost centers"),
        ("delete", "Delete Cost Centers", "Delete cost centers"),
        ("assign", "Assign Cost Centers", "Assign users and budgets to cost centers"),
        ("analytics", "Cost Center Analytics", "View cost center analytics"),
        ("export", "Export Cost Centers", "Export cost center data"),
    ]),
    *_define("financial", "financial-management", [
        ("overview", "Financial Overview", "View the financial overview"),
        ("analytics", "Financial Analytics", "View financial analytics"),
        ("settings", "Financial Settings", "Manage financial settings"),
        ("currency", "Currency Settings", "Manage currency settings"),
    ]),
]


class PermissionCatalog:
    """Registry of every permission the engine knows about."""
    
    def __init__(self, definitions: Optional[Iterable[PermissionDefinition]] = None):
        self._permissions: Dict[str, PermissionDefinition] = {}
        for definition in definitions if definitions is not None else SYSTEM_PERMISSIONS:
            self._permissions[definition.id.value] = definition
    
    def __contains__(self, permission_id) -> bool:
        return str(permission_id) in self._permissions
    
    def __len__(self) -> int:
        return len(self._permissions)
    
    def parse(self, value) -> PermissionId:
        """Parse and validate a permission id against the catalog.
        
        Raises:
            InvalidPermissionIdError: If the id is malformed or unknown
        """
        permission_id = value if isinstance(value, PermissionId) else PermissionId(value)
        if permission_id.value not in self._permissions:
            raise InvalidPermissionIdError(
                f"Unknown permission id: {permission_id.value}",
                details={"permission_id": permission_id.value},
            )
        return permission_id
    
    def is_known(self, value) -> bool:
        """Check whether a value is a well-formed, catalogued permission id."""
        try:
            self.parse(value)
        except InvalidPermissionIdError:
            return False
        return True
    
    def get(self, permission_id) -> Optional[PermissionDefinition]:
        return self._permissions.get(str(permission_id))
    
    def all_ids(self) -> List[PermissionId]:
        """All catalogued ids in registration order."""
        return [definition.id for definition in self._permissions.values()]
    
    def list_categories(self) -> List[PermissionCategory]:
        """Group definitions by category, preserving registration order."""
        grouped: Dict[str, List[PermissionDefinition]] = {}
        for definition in self._permissions.values():
            grouped.setdefault(definition.category, []).append(definition)
        return [
            PermissionCategory(name=name, feature=items[0].feature, permissions=tuple(items))
            for name, items in grouped.items()
        ]
    
    def get_permissions_by_category(self, category: str) -> List[PermissionDefinition]:
        return [d for d in self._permissions.values() if d.category == category]
    
    def get_permissions_by_feature(self, feature: str) -> List[PermissionDefinition]:
        return [d for d in self._permissions.values() if d.feature == feature]
    
    def get_dangerous_permissions(self) -> List[PermissionDefinition]:
        return [d for d in self._permissions.values() if d.is_dangerous]


# Global catalog instance
_permission_catalog: Optional[PermissionCatalog] = None


def get_permission_catalog() -> PermissionCatalog:
    """Get the global permission catalog instance."""
    global _permission_catalog
    if _permission_catalog is None:
        _permission_catalog = PermissionCatalog()
    return _permission_catalog
