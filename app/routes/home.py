from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from app.deps import optional_user, templates

router = APIRouter(tags=["home"])


@router.get("/", response_class=HTMLResponse)
def index(request: Request, user=Depends(optional_user)):
    return templates.TemplateResponse(request, "index.html", {"user": user})
