import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import AccessDenied, require_admin, templates
from app.models.user import Role
from app.schemas.user import UserOut
from app.services.users import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_class=HTMLResponse)
def list_users(
    request: Request,
    success: str = "",
    user=Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = [UserOut.model_validate(u) for u in UserStore(db).list_all()]
    return templates.TemplateResponse(
        request,
        "admin/users.html",
        {
            "user": user,
            "users": users,
            "roles": list(Role),
            "success": success,
        },
    )


@router.post("/users/role")
def change_user_role(
    user_id: str = Form(""),
    new_role: str = Form(""),
    user=Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        role = Role(new_role)
    except ValueError:
        raise AccessDenied(400, "Invalid role.")
    try:
        target_id = int(user_id)
    except ValueError:
        raise AccessDenied(400, "Invalid user id.")

    if target_id == user.id:
        raise AccessDenied(403, "You cannot change your own role.")

    users = UserStore(db)
    target = users.find_by_id(target_id)
    if target is None:
        raise AccessDenied(404, "User not found.")

    users.set_role(target, role)
    logger.info("Admin %d set role of user %d to %s", user.id, target_id, role.value)
    return RedirectResponse("/admin/users?success=Role updated successfully", status_code=303)


@router.post("/users/{user_id}/delete")
def delete_user(
    user_id: int,
    user=Depends(require_admin),
    db: Session = Depends(get_db),
):
    if user_id == user.id:
        raise AccessDenied(403, "You cannot delete your own account.")

    users = UserStore(db)
    target = users.find_by_id(user_id)
    if target is None:
        raise AccessDenied(404, "User not found.")

    removed = users.delete_with_posts(target)
    logger.info("Admin %d deleted user %d with %d post(s)", user.id, user_id, removed)
    return RedirectResponse("/admin/users?success=User deleted successfully", status_code=303)
