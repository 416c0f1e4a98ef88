import logging
from pathlib import Path

from fastapi import Depends, Request
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import Role
from app.schemas.user import CurrentUser
from app.security import InvalidSessionToken, decode_session_token
from app.services.users import UserStore

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


class LoginRequired(Exception):
    """Request must be sent to the login page; ``clear_token`` drops the stale cookie."""

    def __init__(self, clear_token: bool = False):
        super().__init__()
        self.clear_token = clear_token


class AccessDenied(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _resolve_user(request: Request, db: Session) -> CurrentUser | None:
    """Turn the token cookie into a live user.

    Returns None when no cookie is present and raises LoginRequired(clear_token=True)
    when the cookie is present but unusable.
    """
    token = request.cookies.get(get_settings().TOKEN_COOKIE_NAME)
    if not token:
        return None

    try:
        claims = decode_session_token(token)
    except InvalidSessionToken as exc:
        logger.warning("Rejected session token on %s: %s", request.url.path, exc)
        raise LoginRequired(clear_token=True)

    user = UserStore(db).find_by_id(claims["sub"])
    if user is None:
        logger.warning("Session token for missing user %d", claims["sub"])
        raise LoginRequired(clear_token=True)

    current = CurrentUser.model_validate(user)
    request.state.user = current
    return current


def require_login(request: Request, db: Session = Depends(get_db)) -> CurrentUser:
    user = _resolve_user(request, db)
    if user is None:
        raise LoginRequired()
    return user


def optional_user(request: Request, db: Session = Depends(get_db)) -> CurrentUser | None:
    try:
        return _resolve_user(request, db)
    except LoginRequired:
        return None


def check_role(*allowed_roles: Role):
    """Dependency factory: the authenticated user's role must be one of ``allowed_roles``."""
    allowed = frozenset(allowed_roles)

    def _check(user: CurrentUser = Depends(require_login)) -> CurrentUser:
        if user is None:
            raise AccessDenied(401, "Access denied: you must be logged in.")
        if user.role not in allowed:
            required = " or ".join(sorted(r.value for r in allowed))
            raise AccessDenied(
                403,
                f"Access denied: this action requires role {required}; "
                f"your role is {user.role.value}.",
            )
        return user

    return _check


require_admin = check_role(Role.ADMIN)


def check_ownership(store_cls, id_param: str = "id"):
    """Dependency factory: the user must own the resource named by ``id_param`` or be an admin.

    ``store_cls`` is built from the request's DB session and must provide
    ``find_by_id(int)``; the resource it returns must expose ``owner_id``.
    The fetched resource is returned and also kept on ``request.state.resource``.
    """

    def _check(
        request: Request,
        user: CurrentUser = Depends(require_login),
        db: Session = Depends(get_db),
    ):
        try:
            resource_id = int(request.path_params[id_param])
        except (KeyError, TypeError, ValueError):
            raise AccessDenied(404, "Resource not found.")

        resource = store_cls(db).find_by_id(resource_id)
        if resource is None:
            raise AccessDenied(404, "Resource not found.")

        if user.role != Role.ADMIN and resource.owner_id != user.id:
            raise AccessDenied(403, "Access denied: you can only modify your own content.")

        request.state.resource = resource
        return resource

    return _check
