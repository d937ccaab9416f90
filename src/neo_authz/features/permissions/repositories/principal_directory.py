"""Principal directory backed by a static set of super-admin ids."""

from typing import Iterable

from ....core.value_objects import UserId


class StaticPrincipalDirectory:
    """Super-admin flags from configuration (AUTHZ_SUPER_ADMIN_IDS)."""
    
    def __init__(self, super_admin_ids: Iterable[str] = ()):
        self._super_admin_ids = frozenset(super_admin_ids)
    
    async def is_super_admin(self, user_id: UserId) -> bool:
        return user_id.value in self._super_admin_ids
