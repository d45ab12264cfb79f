#!/usr/bin/env python3
"""Example: Quickstart: gigvora-access

Minimal working example: resolve memberships into permissions, see which
membership granted each one, and audit a decision.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install gigvora-access
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import gigvora_access as access


def main() -> None:
    print(f"gigvora-access version: {access.__version__}")

    # Step 1: Build the registry from the packaged matrix
    registry = access.get_registry()
    print(f"Registry ready: {len(registry.list_permissions())} permissions, "
          f"{len(registry.list_memberships())} memberships")

    # Step 2: Resolve a few actors
    actors = [
        (["mentor"], []),
        (["company"], ["escrow:release"]),
        (["volunteer", "unknown_role"], []),
        (["super_admin"], []),
    ]

    print("\nResolution:")
    for memberships, grants in actors:
        state = registry.resolve(memberships, grants)
        flag = " (grant all)" if state.grant_all else ""
        print(f"  {memberships} + {grants}: {len(state.permissions)} permissions{flag}")
        if state.has("calendar:view"):
            print(f"    calendar:view via {sorted(state.sources_for('calendar:view'))}")
        if state.ignored:
            print(f"    ignored: {sorted(state.ignored)}")

    # Step 3: Audit a decision
    with tempfile.TemporaryDirectory() as tmp:
        audit = access.AuditLogger(Path(tmp) / "audit.jsonl")
        checker = access.AccessControl(audit_logger=audit)
        checker.check(["workspace_admin"], "escrow:release", actor_id="user-17")
        checker.check(["user"], "escrow:release", actor_id="user-18")

        print(f"\nAudit log: {audit.count()} entries")
        for entry in audit.read_all():
            verdict = "ALLOW" if entry["allowed"] else "DENY"
            print(f"  [{verdict}] {entry['actor_id']} {entry['permission']} sources={entry['sources']}")


if __name__ == "__main__":
    main()
