import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from conferencing.base import ConferencingClient
from config import Settings, settings as default_settings
from errors import RouterError
from models import ErrorResponse
from server.router import SessionRouter
from sessions.store import InMemorySessionStore, SessionStore
from utils.io_utils import load_index_page
from utils.logging_utils import get_logger
from utils.metrics import format_metrics_line, get_metrics_logger

logger = get_logger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _build_client(settings: Settings) -> ConferencingClient:
    if settings.debug:
        from conferencing.local_client import LocalConferencingClient

        logger.warning("DEBUG is set; using the local conferencing client instead of Chime.")
        return LocalConferencingClient()

    from conferencing.chime_client import ChimeClient

    return ChimeClient(endpoint_url=settings.chime_endpoint, region_name=settings.control_region)


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message).model_dump()
    logger.debug("Responding %s %s", status_code, body)
    return JSONResponse(status_code=status_code, content=body)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[ConferencingClient] = None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    settings = settings if settings is not None else default_settings
    index_page = load_index_page(settings.dist_dir, settings.app_variant)
    router = SessionRouter(
        client=client if client is not None else _build_client(settings),
        store=store if store is not None else InMemorySessionStore(ttl_seconds=settings.meeting_ttl_seconds),
    )
    metrics_logger = get_metrics_logger(
        settings.log_dir, settings.metrics_label, settings.metrics_log_retention_days
    )

    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.router = router
    app.add_middleware(GZipMiddleware, minimum_size=500)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_line = f"{request.method} {request.url.path}"
        if request.url.query:
            request_line += f"?{request.url.query}"
        logger.info("%s BEGIN", request_line)
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error for %s", request_line)
            response = _error_response(400, str(exc))
        latency_ms = int((time.monotonic() - start) * 1000)
        logger.info("%s END", request_line)
        metrics_logger.info(
            format_metrics_line(
                latency_ms,
                request.method,
                response.status_code,
                request.url.path,
                request.query_params.get("title"),
                settings.metrics_label,
            )
        )
        return response

    @app.exception_handler(RouterError)
    async def handle_router_error(request: Request, exc: RouterError):
        logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind.value, exc)
        return _error_response(exc.status_code, exc.message)

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse(content=index_page)

    @app.post("/join", status_code=201)
    async def join(title: Optional[str] = None, name: Optional[str] = None, region: Optional[str] = None):
        result = await router.join(title, name, region)
        body = result.model_dump(by_alias=True)
        logger.debug("Responding 201 %s", body)
        return JSONResponse(status_code=201, content=body)

    @app.post("/end")
    async def end(title: Optional[str] = None):
        await router.end(title)
        return JSONResponse(status_code=200, content={})

    @app.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def not_found(path: str):
        return PlainTextResponse("404 Not Found", status_code=404)

    return app
