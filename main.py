from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from typing import Optional
import logging
import time

from config import AppConfig, DEFAULT_JWT_SECRET
from db import Base, make_engine, make_session_factory
from errors import InventoryError, UnexpectedError, ValidationError
from routers import API_ROUTERS, UI_ROUTERS

import orm  # noqa: F401  registers the tables on Base.metadata

logger = logging.getLogger("app")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
    return f"{field}: {msg}" if field else msg


# -----------------------
# Exception handlers
# -----------------------
async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(p) for p in e.get("loc", ())), "message": str(e.get("msg", ""))}
        for e in exc.errors()
    ]
    err = ValidationError(_validation_message(exc), details=details)
    return JSONResponse(status_code=err.status_code, content=err.to_body())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    err = UnexpectedError("Internal server error")
    return JSONResponse(status_code=err.status_code, content=err.to_body())


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Assemble a ready-to-serve application from ``config`` (environment when omitted)."""
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)
    if config.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET not set, using the development secret")

    engine = make_engine(config.database_url)
    Base.metadata.create_all(bind=engine)

    app = FastAPI(title="Laptop Lifecycle Management API")
    app.state.config = config
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.templates = Jinja2Templates(directory=str(config.resolved_templates_dir()))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        elapsed_ms = int((time.time() - start) * 1000)
        logger.info(
            "method=%s path=%s status=%s elapsed_ms=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/")
    def root():
        return {"message": "API is running", "docs": "/docs", "ui": "/ui/laptops"}

    for router in API_ROUTERS:
        app.include_router(router, prefix="/api")
    for router in UI_ROUTERS:
        app.include_router(router)

    return app


if __name__ == "__main__":
    import uvicorn

    config = AppConfig.from_env()
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
