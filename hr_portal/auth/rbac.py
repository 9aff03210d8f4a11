from fastapi import Depends, HTTPException, status

from hr_portal.auth.dependencies import get_current_actor
from hr_portal.auth.schemas import ActorContext
from hr_portal.core.enums import Role


def require_roles(*roles: Role):
    """
    Dependency factory restricting an endpoint to the given roles.

    Example:
        Depends(require_roles(Role.ADMIN, Role.RH))
    """

    async def _checker(actor: ActorContext = Depends(get_current_actor)) -> ActorContext:
        if actor.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return actor

    return _checker
