#!/usr/bin/env python3
"""Example: Request guard and route visibility

Shows how role headers are turned into guard decisions, and which web
routes a membership may open.

Usage:
    python examples/02_request_guard.py

Requirements:
    pip install gigvora-access
"""
from __future__ import annotations

from gigvora_access import RequestGuard, RouteAccess, get_registry


def main() -> None:
    registry = get_registry()

    # Step 1: Guard requests the way the calendar connector does
    guard = RequestGuard(registry, api_key="local-dev-key")
    requests = [
        ("view", {"x-api-key": "local-dev-key", "x-roles": "freelancer"}),
        ("view", {"x-api-key": "local-dev-key", "x-roles": "volunteer"}),
        ("manage", {"x-api-key": "local-dev-key", "x-roles": "company"}),
        ("manage", {"x-api-key": "local-dev-key", "x-roles": "company", "x-user-id": "42"}),
        ("view", {"x-roles": "admin"}),
    ]

    print("Guard decisions:")
    for action, headers in requests:
        decision = guard.authorize(headers, action=action)
        reason = decision.message or "ok"
        print(f"  {action:<6} roles={headers.get('x-roles')!r:<14} -> {decision.status_code} {reason}")

    # Step 2: Route visibility per membership
    routes = RouteAccess(registry)
    for membership in ("mentor", "agency_admin", "volunteer"):
        state = registry.resolve([membership])
        visible = [r.absolute_path for r in routes.accessible_routes(state) if r.persona not in ("public",)]
        print(f"\n{membership}: {len(visible)} non-public routes")
        for path in visible[:6]:
            print(f"  {path}")


if __name__ == "__main__":
    main()
