import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.deps import optional_user, require_login, templates
from app.models.user import Role
from app.security import (
    PASSWORD_MIN_LEN,
    create_session_token,
    hash_password,
    token_max_age,
    verify_password,
)
from app.services.posts import PostStore
from app.services.users import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _register_error(request: Request, message: str, username: str = "", email: str = ""):
    return templates.TemplateResponse(
        request,
        "register.html",
        {
            "user": None,
            "error": message,
            "username": username,
            "email": email,
        },
        status_code=400,
    )


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request, user=Depends(optional_user)):
    if user:
        return RedirectResponse("/auth/dashboard", status_code=303)
    return templates.TemplateResponse(request, "register.html", {"user": None})


@router.post("/register")
def register(
    request: Request,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    db: Session = Depends(get_db),
):
    username = username.strip()
    email = email.strip().lower()

    if not (username and email and password and confirm_password):
        return _register_error(request, "All fields are required.", username, email)
    if password != confirm_password:
        return _register_error(request, "Passwords do not match.", username, email)
    if len(password) < PASSWORD_MIN_LEN:
        return _register_error(
            request,
            f"Password must be at least {PASSWORD_MIN_LEN} characters long.",
            username,
            email,
        )

    users = UserStore(db)
    if users.email_exists(email):
        return _register_error(request, "This email is already registered.", username)

    try:
        user = users.create(username, email, hash_password(password), role=Role.AUTHOR)
    except IntegrityError:
        # another registration claimed the email between the check and the insert
        db.rollback()
        return _register_error(request, "This email is already registered.", username)
    logger.info("Registered user %d (%s)", user.id, user.username)
    return RedirectResponse("/auth/login?registered=1", status_code=303)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, registered: int = 0, user=Depends(optional_user)):
    if user:
        return RedirectResponse("/auth/dashboard", status_code=303)
    return templates.TemplateResponse(
        request,
        "login.html",
        {"user": None, "registered": bool(registered)},
    )


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    email = email.strip().lower()
    if not email or not password:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"user": None, "error": "Email and password are required."},
            status_code=400,
        )

    user = UserStore(db).find_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        return templates.TemplateResponse(
            request,
            "login.html",
            {"user": None, "error": "Invalid email or password", "email": email},
            status_code=401,
        )

    settings = get_settings()
    response = RedirectResponse("/auth/dashboard", status_code=303)
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        create_session_token(user.id, user.username),
        max_age=token_max_age(),
        httponly=True,
        samesite="strict",
    )
    logger.info("User %d logged in", user.id)
    return response


@router.post("/logout")
def logout():
    response = RedirectResponse("/", status_code=303)
    response.delete_cookie(get_settings().TOKEN_COOKIE_NAME, httponly=True, samesite="strict")
    return response


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, user=Depends(require_login), db: Session = Depends(get_db)):
    posts = PostStore(db).find_all(author_id=user.id)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"user": user, "posts": posts},
    )
