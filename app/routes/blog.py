import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.database import get_db
from app.deps import (
    AccessDenied,
    LoginRequired,
    check_ownership,
    check_role,
    optional_user,
    require_login,
    templates,
)
from app.models.post import PostStatus
from app.models.user import Role
from app.schemas.post import PostCreate, PostUpdate
from app.services.posts import PostStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["blog"])

require_writer = check_role(Role.AUTHOR, Role.ADMIN)
require_post_owner = check_ownership(PostStore, "post_id")

STATUS_ERROR = "Status must be draft or published."


@router.get("/", response_class=HTMLResponse)
def list_posts(request: Request, user=Depends(optional_user), db: Session = Depends(get_db)):
    posts = PostStore(db).find_all(status=PostStatus.PUBLISHED)
    return templates.TemplateResponse(
        request,
        "blog/index.html",
        {"user": user, "posts": posts, "title": "All Blog Posts"},
    )


@router.get("/my-posts", response_class=HTMLResponse)
def my_posts(request: Request, user=Depends(require_login), db: Session = Depends(get_db)):
    posts = PostStore(db).find_all(author_id=user.id)
    return templates.TemplateResponse(
        request,
        "blog/my_posts.html",
        {"user": user, "posts": posts},
    )


@router.get("/post/{post_id}", response_class=HTMLResponse)
def show_post(
    request: Request,
    post_id: int,
    user=Depends(optional_user),
    db: Session = Depends(get_db),
):
    post = PostStore(db).find_by_id(post_id)
    if not post:
        raise AccessDenied(404, "Post not found.")

    if post.is_draft:
        if user is None:
            raise LoginRequired()
        if post.author_id != user.id and user.role != Role.ADMIN:
            raise AccessDenied(403, "Access denied: this draft is private.")

    return templates.TemplateResponse(
        request,
        "blog/show.html",
        {"user": user, "post": post},
    )


@router.get("/create", response_class=HTMLResponse)
def create_form(request: Request, user=Depends(require_writer)):
    return templates.TemplateResponse(request, "blog/create.html", {"user": user})


@router.post("/create")
def create_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    status: str = Form(""),
    user=Depends(require_writer),
    db: Session = Depends(get_db),
):
    def _error(message: str):
        return templates.TemplateResponse(
            request,
            "blog/create.html",
            {"user": user, "error": message, "title": title, "content": content},
            status_code=400,
        )

    if not title.strip() or not content.strip():
        return _error("Title and content are required.")
    try:
        data = PostCreate(title=title.strip(), content=content, status=status or PostStatus.DRAFT)
    except ValidationError:
        return _error(STATUS_ERROR)

    # authorship always comes from the session, never from the form
    post = PostStore(db).create(data.title, data.content, user.id, data.status)
    logger.info("User %d created post %d (%s)", user.id, post.id, post.status.value)
    return RedirectResponse("/blog/my-posts", status_code=303)


@router.get("/{post_id}/edit", response_class=HTMLResponse)
def edit_form(
    request: Request,
    post_id: int,
    post=Depends(require_post_owner),
    user=Depends(require_login),
):
    return templates.TemplateResponse(
        request,
        "blog/edit.html",
        {"user": user, "post": post},
    )


@router.post("/{post_id}/edit")
def update_post(
    request: Request,
    post_id: int,
    title: str = Form(""),
    content: str = Form(""),
    status: str = Form(""),
    post=Depends(require_post_owner),
    user=Depends(require_login),
    db: Session = Depends(get_db),
):
    try:
        changes = PostUpdate(
            title=title.strip() or None,
            content=content or None,
            status=status or None,
        ).changes()
    except ValidationError:
        return templates.TemplateResponse(
            request,
            "blog/edit.html",
            {"user": user, "post": post, "error": STATUS_ERROR},
            status_code=400,
        )

    if PostStore(db).update(post, changes):
        logger.info("User %d updated post %d", user.id, post.id)
    return RedirectResponse("/blog/my-posts", status_code=303)


@router.post("/{post_id}/delete")
def delete_post(
    post_id: int,
    post=Depends(require_post_owner),
    user=Depends(require_login),
    db: Session = Depends(get_db),
):
    PostStore(db).delete(post)
    logger.info("User %d deleted post %d", user.id, post_id)
    return RedirectResponse("/blog/my-posts", status_code=303)


@router.post("/{post_id}/publish")
def publish_post(
    post_id: int,
    post=Depends(require_post_owner),
    user=Depends(require_login),
    db: Session = Depends(get_db),
):
    PostStore(db).publish(post)
    logger.info("User %d published post %d", user.id, post_id)
    return RedirectResponse("/blog/my-posts", status_code=303)
