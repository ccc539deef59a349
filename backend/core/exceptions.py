"""Domain errors raised by the sock services and their HTTP mapping."""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.logging import get_logger

logger = get_logger(__name__)


class SockError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NoSuchSockError(SockError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No such socks in stock"


class IllegalAmountError(SockError):
    default_detail = "Not enough socks in stock"


class InvalidSortError(SockError):
    default_detail = "Unsupported sort field"


class InvalidOperationError(SockError):
    default_detail = "Unsupported comparison operation"


class EmptyFileError(SockError):
    default_detail = "File is empty"


class WrongFormatError(SockError):
    default_detail = "Wrong file format"


class WrongHeadersError(SockError):
    default_detail = "File has wrong headers"


class FileReadError(SockError):
    default_detail = "Error while reading file"


class DuplicateSockError(SockError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Socks with this color and cotton percentage already exist"


async def sock_error_handler(request: Request, exc: SockError) -> JSONResponse:
    logger.warning("{} {} rejected with {}: {}", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("{} {} invalid input: {}", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("{} {} failed", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SockError, sock_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
