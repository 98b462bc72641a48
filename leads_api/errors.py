"""Request-level errors rendered as {"error": ..., "details": ...} bodies."""

from fastapi import Request
from fastapi.responses import JSONResponse


class IntakeError(Exception):
    def __init__(self, status_code: int, error: str, details: str | None = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details


async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    content = {"error": exc.error}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
