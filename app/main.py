import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import RedirectResponse

from app.config import get_settings
from app.deps import AccessDenied, LoginRequired, templates

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from app.database import Base, engine
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


def _error_page(request: Request, status_code: int, message: str):
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "user": getattr(request.state, "user", None),
            "status_code": status_code,
            "message": message,
        },
        status_code=status_code,
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

    static_dir = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    # Register routes
    from app.routes.home import router as home_router
    from app.routes.auth import router as auth_router
    from app.routes.blog import router as blog_router
    from app.routes.admin import router as admin_router

    app.include_router(home_router)
    app.include_router(auth_router, prefix="/auth")
    app.include_router(blog_router, prefix="/blog")
    app.include_router(admin_router, prefix="/admin")

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        response = RedirectResponse("/auth/login", status_code=303)
        if exc.clear_token:
            response.delete_cookie(settings.TOKEN_COOKIE_NAME, httponly=True, samesite="strict")
        return response

    @app.exception_handler(AccessDenied)
    async def access_denied_handler(request: Request, exc: AccessDenied):
        return _error_page(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Page not found." if exc.status_code == 404 else str(exc.detail)
        return _error_page(request, exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_page(request, 400, "Invalid request.")

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
        )
        return _error_page(request, 500, "Something went wrong. Please try again later.")

    templates.env.globals["app_title"] = settings.APP_TITLE

    return app


app = create_app()
