"""JSON HTTP API over the permission registry."""
from __future__ import annotations

from gigvora_access.service.api import AccessApi
from gigvora_access.service.server import AccessServer

__all__ = ["AccessApi", "AccessServer"]
