"""Authorization audit trail."""
from __future__ import annotations

from gigvora_access.audit.logger import AUTHORIZATION_EVENT, AuditLogger

__all__ = ["AUTHORIZATION_EVENT", "AuditLogger"]
