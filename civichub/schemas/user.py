"""Acting-user context passed into services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from civichub.models.enums import Role


class Actor(BaseModel):
    """Identity and role of whoever performs an operation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    email: str
    role: str = Role.citizen.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin.value
