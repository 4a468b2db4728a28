from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging_config import get_logger

logger = get_logger("customer_api.errors")


class CustomerAccountError(Exception):
    """Base class for failures reported to the client as 400 {"message": ...}."""

    default_message = "Something went wrong!"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(CustomerAccountError):
    default_message = "This email address is already in use!"


class AuthError(CustomerAccountError):
    default_message = "Invalid credentials!"


class VerificationError(CustomerAccountError):
    default_message = "OPT verification failed!"


class GenericError(CustomerAccountError):
    pass


async def customer_account_error_handler(request: Request, exc: CustomerAccountError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": exc.message},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected %s %s: %d field error(s)", request.method, request.url.path, len(exc.errors()))
    # rejected values stay server side; they may hold a password
    errors = [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(errors),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Called from the innermost http middleware so the 500 still gets headers and an access log line."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(CustomerAccountError, customer_account_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
