"""Request actor: who is calling, as asserted by the upstream auth layer."""

from dataclasses import dataclass

from fastapi import Header

from marketplace.order.status import ActorRole, normalize_role
from marketplace.shared.errors import AccessDenied


@dataclass(frozen=True)
class Actor:
    id: str
    role: ActorRole

    def require(self, *roles: ActorRole) -> "Actor":
        if self.role not in roles:
            raise AccessDenied(f"{self.role.value.title()} is not allowed to perform this action")
        return self


async def current_actor(
    x_actor_id: str = Header(...),
    x_actor_role: str = Header(...),
) -> Actor:
    return Actor(id=x_actor_id, role=normalize_role(x_actor_role))
