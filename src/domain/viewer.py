"""
Viewer

Read-only, per-request capability object handed to data-access code so it can
scope queries to what the current operator may see. Built once from decoded
operator metadata and never mutated.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from src.domain.entities.enums import DataScope


class Viewer(Protocol):
    def user_id(self) -> int: ...

    def tenant(self) -> Tuple[int, bool]: ...

    def is_system_admin(self) -> bool: ...

    def is_tenant_admin(self) -> bool: ...

    def is_admin(self) -> bool: ...

    def is_platform_context(self) -> bool: ...

    def is_tenant_context(self) -> bool: ...

    def get_data_scope(self) -> Optional[DataScope]: ...

    def get_org_unit_id(self) -> int: ...


@dataclass(frozen=True)
class UserViewer:
    """Viewer for an authenticated operator."""

    uid: int
    tid: int
    ouid: int
    is_platform_admin: bool
    data_scope: Optional[DataScope]

    def user_id(self) -> int:
        return self.uid

    def tenant(self) -> Tuple[int, bool]:
        return self.tid, self.tid > 0

    def is_system_admin(self) -> bool:
        return self.is_platform_admin and self.tid == 0

    def is_tenant_admin(self) -> bool:
        # Tenant admins normally sit on the root unit with subtree visibility
        return self.tid > 0 and self.data_scope == DataScope.UNIT_AND_CHILD

    def is_admin(self) -> bool:
        return self.is_system_admin() or self.is_tenant_admin()

    def is_platform_context(self) -> bool:
        return self.tid == 0

    def is_tenant_context(self) -> bool:
        return self.tid > 0

    def get_data_scope(self) -> Optional[DataScope]:
        return self.data_scope

    def get_org_unit_id(self) -> int:
        return self.ouid


@dataclass(frozen=True)
class AnonymousViewer:
    """Viewer for requests without operator metadata: sees nothing."""

    def user_id(self) -> int:
        return 0

    def tenant(self) -> Tuple[int, bool]:
        return 0, False

    def is_system_admin(self) -> bool:
        return False

    def is_tenant_admin(self) -> bool:
        return False

    def is_admin(self) -> bool:
        return False

    def is_platform_context(self) -> bool:
        return False

    def is_tenant_context(self) -> bool:
        return False

    def get_data_scope(self) -> Optional[DataScope]:
        return None

    def get_org_unit_id(self) -> int:
        return 0
