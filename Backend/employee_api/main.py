# main.py
import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_api.config import Settings
from employee_api.database import create_db_engine, create_session_factory, ensure_database, init_db
from employee_api.errors import EmployeeServiceError, ErrorKind
from employee_api.routers import employee_router
from employee_api.utils import error_resp

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn.error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        os.makedirs(settings.upload_dir, exist_ok=True)
        # Schema must be verified before serving; errors here abort startup.
        ensure_database(settings)
        engine = create_db_engine(settings)
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        logger.info("Connected to database; employee service ready")
        yield
        engine.dispose()

    app = FastAPI(title="Employee API", version="1.0.0", description="Employee records API", lifespan=lifespan)
    app.state.settings = settings

    # CORS middleware (admin page origins only)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.include_router(employee_router.router)

    # Serve uploaded images statically so frontend can fetch them;
    # the directory itself is created at startup
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    # Exception handlers to return uniform error shape
    def _details(exc: Exception) -> Optional[str]:
        return str(exc) if settings.is_development else None

    @app.exception_handler(EmployeeServiceError)
    async def service_error_handler(request: Request, exc: EmployeeServiceError):
        if exc.status_code >= 500:
            logger.error("Error in %s %s: %s", request.method, request.url.path, exc.details)
        details = exc.details if settings.is_development else None
        return error_resp(exc.message, exc.status_code, exc.kind.value, details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_resp("Endpoint not found", 404, ErrorKind.NOT_FOUND.value)
        msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return error_resp(msg or "Error", exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_resp("Invalid request", 400, ErrorKind.INVALID_FIELD.value, _details(exc))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return error_resp("Internal server error", 500, ErrorKind.STORE_ERROR.value, _details(exc))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run("employee_api.main:app", host=settings.host, port=settings.port)
