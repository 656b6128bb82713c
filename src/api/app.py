"""FastAPI application wiring for Kred."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api import routes
from src.core.exceptions import (
    CredibilityError,
    GameError,
    GameStateError,
    IllegalMoveError,
    InsufficientFundsError,
    InvalidRequestError,
    NotYourTurnError,
    RepositoryError,
)

logger = logging.getLogger(__name__)

# Most specific first
ERROR_STATUS: list[tuple[type[GameError], int]] = [
    (RepositoryError, status.HTTP_404_NOT_FOUND),
    (NotYourTurnError, status.HTTP_409_CONFLICT),
    (GameStateError, status.HTTP_409_CONFLICT),
    (CredibilityError, status.HTTP_403_FORBIDDEN),
    (InsufficientFundsError, status.HTTP_402_PAYMENT_REQUIRED),
    (IllegalMoveError, status.HTTP_400_BAD_REQUEST),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
]


def status_code_for(error: GameError) -> int:
    return next(
        (code for error_type, code in ERROR_STATUS if isinstance(error, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )


async def game_error_handler(request: Request, error: Exception) -> JSONResponse:
    """Every GameError is the client's fault: report it as a 4xx with the reason"""
    code = status_code_for(error) if isinstance(error, GameError) else status.HTTP_400_BAD_REQUEST
    logger.debug("Request to %s refused (%s): %s", request.url.path, code, error)
    return JSONResponse(status_code=code, content={"detail": str(error)})


def create_app() -> FastAPI:
    """Instantiate the FastAPI application with routing and error translation."""
    app = FastAPI(title="Kred API", version="0.1.0")
    app.add_exception_handler(GameError, game_error_handler)
    app.include_router(routes.router)
    return app


app = create_app()
