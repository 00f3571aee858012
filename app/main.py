"""FastAPI application entrypoint. No business logic; only wiring, middleware, and error rendering."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import auth, pages
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.gate import SessionGateMiddleware
from app.core.logging_config import setup_logging
from app.core.security import get_token_service
from app.services.credentials import LoginFailure

setup_logging(settings.LOG_LEVEL)

LOGIN_PATH = f"{settings.API_PREFIX}/auth/login"

app = FastAPI(
    title="Helpdesk API",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Starlette runs the last-added middleware first: the gate sits inside CORS.
app.add_middleware(
    SessionGateMiddleware,
    token_service=get_token_service(),
    cookie_name=settings.SESSION_COOKIE_NAME,
    protected_prefixes=settings.PROTECTED_PATH_PREFIXES,
    public_prefixes=settings.PUBLIC_PATH_PREFIXES,
    redirect_path=settings.LOGIN_PATH,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": <message>}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Any login body that fails validation counts as incomplete credentials.
    Other routes keep FastAPI's 422 response.
    """
    if request.url.path == LOGIN_PATH:
        return JSONResponse(
            status_code=400,
            content={"error": LoginFailure.INCOMPLETE_CREDENTIALS.message},
        )
    return await request_validation_exception_handler(request, exc)


app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(pages.router, tags=["pages"])
