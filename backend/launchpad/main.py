import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import Settings, make_pool
from .middleware import UploadSizeLimitMiddleware
from .routers.coins import router as coins_router
from .routers.deploy import router as deploy_router
from .routers.upload import router as upload_router
from .routers.users import router as users_router
from .services import DeploymentPipeline, SimulatedDeployer, SimulatedPoster, SyntheticContentStore
from .storage import MemStore, PgStore, RecordStore

logger = logging.getLogger("launchpad")

UPLOAD_PATH = "/api/upload"
# boundary lines and part headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def _error_body(detail: object) -> dict:
    if isinstance(detail, dict):
        return dict(detail)
    return {"message": detail}


def _validation_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


def _with_request_id(request: Request, response: JSONResponse) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers["x-request-id"] = request_id
    return response


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Build the API around ``store``; without one, pick it from ``settings.database_url``."""
    settings = settings or Settings()

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logger.setLevel(settings.log_level.upper())

    pool = None
    if store is None:
        if settings.database_url:
            pool = make_pool(settings.database_url)
            store = PgStore(pool)
        else:
            store = MemStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if pool is not None:
            pool.open()
            store.ensure_schema()
        logger.info("startup store=%s", store.kind)
        try:
            yield
        finally:
            if pool is not None:
                pool.close()

    app = FastAPI(title="Boss Coin Launchpad API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.content_store = SyntheticContentStore(settings.ipfs_gateway_url)
    app.state.pipeline = DeploymentPipeline(
        store,
        SimulatedDeployer(settings.deploy_delay_seconds),
        SimulatedPoster(settings.warpcast_compose_url),
    )

    allow_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5000",
    ]
    if settings.frontend_url:
        allow_origins.append(settings.frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        UploadSizeLimitMiddleware,
        max_bytes=settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES,
        path=UPLOAD_PATH,
    )

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["x-request-id"] = request_id
        logger.info(
            "request method=%s path=%s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = JSONResponse(status_code=exc.status_code, content=_error_body(exc.detail))
        return _with_request_id(request, response)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        payload = {"message": "Invalid input data", "errors": _validation_errors(exc)}
        return _with_request_id(request, JSONResponse(status_code=400, content=payload))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled error method=%s path=%s request_id=%s",
            request.method,
            request.url.path,
            getattr(request.state, "request_id", None),
        )
        payload = {"message": "Internal server error", "error": str(exc)}
        return _with_request_id(request, JSONResponse(status_code=500, content=payload))

    @app.get("/health")
    def health():
        return {"ok": True, "store": store.kind}

    app.include_router(upload_router)
    app.include_router(deploy_router)
    app.include_router(coins_router)
    app.include_router(users_router)
    return app


app = create_app()
