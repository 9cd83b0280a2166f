"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from budgetly.api.v1 import session, income, rules, categories, expenses, savings, dashboard
from budgetly.application.errors import LedgerValidationError, NotAuthenticatedError
from budgetly.config import get_settings
from budgetly.infrastructure.db.session import check_db_connection
from budgetly.infrastructure.store import RecordNotFoundError, StoreUnavailableError

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every unhandled exception with its traceback"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LedgerValidationError)
    async def validation_error(request: Request, exc: LedgerValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated(request: Request, exc: NotAuthenticatedError):
        return JSONResponse(status_code=401, content={"detail": str(exc) or "Not authenticated"})

    @app.exception_handler(RecordNotFoundError)
    async def not_found(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Not found"})

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.warning("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Failed, please try again"})


def create_app() -> FastAPI:
    """
    Application factory - builds and configures the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    app = FastAPI(
        title="Budgetly",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY
    )

    _register_error_handlers(app)

    app.include_router(session.router)
    app.include_router(income.router)
    app.include_router(rules.router)
    app.include_router(categories.router)
    app.include_router(expenses.router)
    app.include_router(savings.router)
    app.include_router(dashboard.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (checks the database for the sql backend)"""
        if get_settings().STORE_BACKEND != "memory":
            check_db_connection()
        return "ok"

    return app


# Application instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    # Local run: http://127.0.0.1:8000/docs
    uvicorn.run(
        "budgetly.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
