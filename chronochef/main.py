import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chronochef.core.config import get_settings
from chronochef.core.database import SessionLocal, init_db
from chronochef.core.exceptions import ChronoChefError, DuplicateKeyError, ValidationError
from chronochef.core.logging import configure_logging
from chronochef.routers import auth, recipes
from chronochef.schemas.base import errors_from_pydantic
from chronochef.services.auth import AuthService

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    with SessionLocal() as db:
        purged = AuthService(db).purge_expired_sessions()
    if purged:
        logger.info("Purged %d expired session(s)", purged)
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(recipes.router)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = ValidationError(errors_from_pydantic(exc.errors()))
    return await validation_error_handler(request, errors)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.public_message, "errors": exc.to_list()},
    )


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_error_handler(request: Request, exc: DuplicateKeyError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.public_message,
            "errors": [{"field": exc.field, "reason": f"This {exc.field} is already registered"}],
        },
    )


@app.exception_handler(ChronoChefError)
async def chronochef_error_handler(request: Request, exc: ChronoChefError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("%s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.public_message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "An unexpected error occurred"})


@app.get("/health")
def health_check():
    return {"status": "ok"}
