"""FastAPI adapter for the usage gate."""

from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from studysync.gating.usage import GateUser, UsageGate, UsageLimitExceeded
from studysync.models.subscription import ResourceKind


class AuthenticationRequired(Exception):
    """No authenticated user was attached to a gated request."""

    status_code = 401


def require_usage_capacity(
    gate: UsageGate,
    resource: ResourceKind,
    get_current_user: Callable[..., GateUser | None],
) -> Callable[..., GateUser]:
    """
    Build a route dependency that runs the usage gate before the handler.

    Usage:
        @app.post("/quizzes", dependencies=[Depends(require_usage_capacity(gate, ResourceKind.QUIZZES, current_user))])
    """

    def dependency(user: GateUser | None = Depends(get_current_user)) -> GateUser:
        if user is None:
            raise AuthenticationRequired()
        gate.check(user, resource)
        return user

    return dependency


def install_usage_gate(app: FastAPI) -> None:
    """Register handlers rendering gate rejections as {error: ...} JSON bodies."""

    @app.exception_handler(UsageLimitExceeded)
    async def usage_limit_exceeded(request: Request, exc: UsageLimitExceeded) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.payload)

    @app.exception_handler(AuthenticationRequired)
    async def authentication_required(
        request: Request, exc: AuthenticationRequired
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content={"error": "Authentication required"}
        )
