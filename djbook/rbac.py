from fastapi import HTTPException, status


def require_role(payload: dict, allowed_roles: list[str]):
    token_roles = payload.get("roles")

    if not isinstance(token_roles, list) or not token_roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Roles missing in token",
        )

    allowed = {r.lower() for r in allowed_roles}
    roles = {r.lower() for r in token_roles}

    if roles.isdisjoint(allowed):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access forbidden for this role",
        )


def require_dj_profile(payload: dict) -> str:
    """The caller's DJ profile id; DJ tokens always carry one."""
    require_role(payload, ["dj"])
    dj_id = payload.get("dj_profile_id")
    if not dj_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No DJ profile linked to this account",
        )
    return dj_id
