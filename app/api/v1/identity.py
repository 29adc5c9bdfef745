from fastapi import Header, HTTPException

from app.domain.entities.actor import Actor, Role


def get_actor(
    x_actor_id: str | None = Header(None),
    x_actor_role: str | None = Header(None),
) -> Actor:
    """Caller identity as supplied by the upstream identity provider."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=401, detail="Missing actor identity")
    try:
        role = Role(x_actor_role.strip().upper())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role '{x_actor_role}'")
    return Actor(id=x_actor_id.strip(), role=role)


def get_optional_actor(
    x_actor_id: str | None = Header(None),
    x_actor_role: str | None = Header(None),
) -> Actor | None:
    if not x_actor_id or not x_actor_role:
        return None
    return get_actor(x_actor_id, x_actor_role)
