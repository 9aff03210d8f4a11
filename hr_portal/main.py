import logging
from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

import hr_portal.core.models  # noqa: F401  registers every table on Base.metadata
from hr_portal.api.v1.absence_justifications.router import router as absence_justifications_router
from hr_portal.api.v1.auth.router import router as auth_router
from hr_portal.api.v1.career_paths.router import router as career_paths_router
from hr_portal.api.v1.complaints.router import router as complaints_router
from hr_portal.api.v1.dashboard.router import router as dashboard_router
from hr_portal.api.v1.employees.router import router as employees_router
from hr_portal.api.v1.leave_requests.router import router as leave_requests_router
from hr_portal.core.config import settings
from hr_portal.core.logging import configure_logging

logger = logging.getLogger(__name__)


def _field_errors(exc: Union[RequestValidationError, PydanticValidationError]) -> dict:
    errors: dict = {}
    for err in exc.errors():
        # Drop the location prefix ("body", "query", ...) so keys are plain field names
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.setdefault(".".join(loc) or "__root__", []).append(err.get("msg", "Invalid value"))
    return errors


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = {"status": "error"}
    if isinstance(exc.detail, dict):
        body["message"] = exc.detail.get("message", "Error")
        if exc.detail.get("errors"):
            body["errors"] = exc.detail["errors"]
    else:
        body["message"] = exc.detail
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    # Also covers DTOs built inside an endpoint from form fields
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": "Validation failed", "errors": _field_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "Internal server error"},
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="HR Portal")

    # CORS: allow the frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(employees_router)
    app.include_router(leave_requests_router)
    app.include_router(absence_justifications_router)
    app.include_router(complaints_router)
    app.include_router(career_paths_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
