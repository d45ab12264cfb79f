"""Convenience API for gigvora-access: 3-line quickstart.

Example
-------
::

    from gigvora_access import AccessControl
    access = AccessControl()
    print(access.check(["freelancer"], "calendar:view"))

"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from gigvora_access.matrix.schema import PermissionMatrix
from gigvora_access.registry.registry import PermissionRegistry

if TYPE_CHECKING:
    from gigvora_access.audit.logger import AuditLogger
    from gigvora_access.registry.state import AuthorizationState


class AccessControl:
    """Zero-config authorization checks over the Gigvora permission matrix.

    Parameters
    ----------
    matrix:
        Optional matrix to use.  The packaged matrix is used when omitted.
    audit_logger:
        Optional :class:`AuditLogger`; when given, every :meth:`check` is
        recorded.
    """

    def __init__(
        self,
        matrix: PermissionMatrix | None = None,
        audit_logger: "AuditLogger | None" = None,
    ) -> None:
        self._registry = PermissionRegistry(matrix if matrix is not None else PermissionMatrix.default())
        self._audit = audit_logger

    def resolve(
        self,
        memberships: Iterable[str] | str | None,
        explicit_permissions: Iterable[str] | str | None = (),
    ) -> "AuthorizationState":
        """Resolve memberships and grants; see :meth:`PermissionRegistry.resolve`."""
        return self._registry.resolve(memberships, explicit_permissions)

    def check(
        self,
        memberships: Iterable[str] | str | None,
        permission: str,
        explicit_permissions: Iterable[str] | str | None = (),
        actor_id: str | None = None,
    ) -> bool:
        """Return True if the actor holds *permission*.

        Unknown permissions are denied.  When an audit logger is attached
        the decision is recorded with its sources.
        """
        state = self.resolve(memberships, explicit_permissions)
        if self._audit is not None:
            return self._audit.log_decision(permission, state, actor_id=actor_id)
        return state.has(permission)

    def explain(self, permission: str) -> dict[str, object] | None:
        """Describe *permission*: implications, escalation and granting memberships.

        Returns ``None`` for unknown permissions.
        """
        return self._registry.describe(permission)

    @property
    def registry(self) -> PermissionRegistry:
        """The underlying PermissionRegistry."""
        return self._registry

    def __repr__(self) -> str:
        return f"AccessControl(permissions={len(self._registry.list_permissions())})"
