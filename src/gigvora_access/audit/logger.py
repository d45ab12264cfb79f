"""Append-only JSONL audit trail for authorization decisions.

Every record is one JSON object per line carrying a UTC ISO-8601
timestamp, a session identifier and the event fields supplied by the
caller.  Writes and reads are serialised with a ``threading.Lock`` so a
single logger can be shared by the HTTP server threads.

Example
-------
>>> from pathlib import Path
>>> audit = AuditLogger(Path("/tmp/gigvora_access_audit.jsonl"))
>>> audit.log_decision(
...     actor_id="user-17",
...     permission="escrow:release",
...     state=get_registry().resolve(["workspace_admin"]),
... )
>>> audit.query({"permission": "escrow:release"})[0]["allowed"]
True
"""
from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from gigvora_access.registry.state import AuthorizationState

AUTHORIZATION_EVENT = "authorization_check"


class AuditLogger:
    """Append-only JSONL audit logger.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` audit file.  Parent directories are created
        on first write.
    session_id:
        Identifier stamped on every record; a random UUID when omitted.
    """

    def __init__(
        self,
        log_path: Path,
        session_id: str | None = None,
    ) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, entry: dict[str, object]) -> None:
        """Append an event record.

        ``timestamp`` and ``session_id`` are added automatically; caller
        fields with the same names take precedence.
        """
        record: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            **entry,
        }
        self._write(record)

    def log_decision(
        self,
        permission: str,
        state: "AuthorizationState",
        actor_id: str | None = None,
        **extra: object,
    ) -> bool:
        """Record whether *state* holds *permission* and return the answer."""
        allowed = state.has(permission)
        self.log(
            {
                "event": AUTHORIZATION_EVENT,
                "actor_id": actor_id,
                "permission": permission,
                "allowed": allowed,
                "memberships": sorted(state.memberships),
                "sources": sorted(state.sources_for(permission)),
                "grant_all": state.grant_all,
                **extra,
            }
        )
        return allowed

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in write order; empty when the file is absent."""
        return list(self._iter_records())

    def query(self, filters: dict[str, object]) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every filter value."""
        return [
            record
            for record in self._iter_records()
            if all(record.get(k) == v for k, v in filters.items())
        ]

    def count(self) -> int:
        """Return the total number of audit records."""
        return sum(1 for _ in self._iter_records())

    def last_n(self, n: int) -> list[dict[str, object]]:
        """Return the ``n`` most recent records."""
        if n <= 0:
            return []
        all_records = list(self._iter_records())
        return all_records[-n:]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, record: dict[str, object]) -> None:
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

    def _iter_records(self) -> Iterator[dict[str, object]]:
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue  # Skip malformed lines.

    @property
    def log_path(self) -> Path:
        """The filesystem path of the audit log file."""
        return self._log_path

    @property
    def session_id(self) -> str:
        """The session identifier stamped on every record."""
        return self._session_id
