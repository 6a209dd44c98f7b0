# dooriq/api/exceptions/handlers.py
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dooriq.logging_config import app_logger
from dooriq.schema.base import error_response
from dooriq.services.grading.chains import AIGradingError


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=error_response(
            "Invalid request",
            422,
            details=jsonable_encoder(exc.errors()),
        ),
    )


async def ai_grading_exception_handler(request: Request, exc: AIGradingError):
    app_logger.error(f"AI grading failed for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=error_response(str(exc), status.HTTP_502_BAD_GATEWAY),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AIGradingError, ai_grading_exception_handler)
