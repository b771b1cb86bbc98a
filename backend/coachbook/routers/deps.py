"""Request-scoped dependencies shared by the routers."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException

from coachbook.core.config import get_settings

ROLES = ("user", "coach", "admin", "staff", "semi_admin")


@dataclass(frozen=True)
class Actor:
    """Identity resolved by the upstream auth layer."""

    id: str
    role: str


def get_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str = Header(default="user"),
) -> Actor:
    if not x_actor_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        actor_id = str(UUID(x_actor_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid actor id")
    role = x_actor_role.strip().lower()
    if role not in ROLES:
        raise HTTPException(status_code=403, detail=f"Unknown role {x_actor_role!r}")
    return Actor(id=actor_id, role=role)


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role not in get_settings().admin_roles_set():
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor
