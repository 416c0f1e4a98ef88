import datetime as dt

from pydantic import BaseModel

from app.models.user import Role


class UserOut(BaseModel):
    """Public view of a user record. Never carries the password hash."""

    id: int
    username: str
    email: str
    role: Role
    created_at: dt.datetime | None = None

    model_config = {"from_attributes": True}


class CurrentUser(UserOut):
    """Identity resolved by the authentication gate for the current request."""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
