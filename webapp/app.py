"""FastAPI content gateway: article and page routes behind uniform envelopes."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import GatewaySettings, get_settings
from content.service import ContentService
from core import RequestContext, error_envelope, success_envelope
from utils.exceptions import ErrorCode, GatewayError, bad_request, not_found
from utils.logger import configure_logging
from webapp.runtime import get_content_service


logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"
REQUEST_ID_HEADER = "x-request-id"
CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=60"


def resolve_cors_origins(settings: GatewaySettings) -> List[str]:
    """Configured allowlist wins; otherwise every origin outside production, none in production."""
    origins = settings.cors_origin_list
    if origins:
        return origins
    return [] if settings.is_production else ["*"]


def _request_context(request: Request) -> RequestContext:
    return getattr(request.state, "context", None) or RequestContext()


def _error_response(request: Request, error: GatewayError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error_envelope(error, _request_context(request)))


def _cache_headers(response: Response, *tags: str) -> None:
    response.headers["Cache-Control"] = CACHE_CONTROL
    response.headers["Cache-Tag"] = ",".join(tags)


def _require_slug(slug: str) -> str:
    text = str(slug or "").strip()
    if not text:
        raise bad_request("Slug must not be blank.", field="slug")
    return text


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.gateway.log_level)
    # Production misconfiguration raises here, before any request is served
    service = get_content_service()
    logger.info(f"Content gateway ready (environment={settings.gateway.environment}, provider={service.provider_name})")
    yield


def create_app(settings: Optional[GatewaySettings] = None) -> FastAPI:
    gateway_settings = settings or get_settings().gateway
    app = FastAPI(title="Content Gateway", version="v1", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolve_cors_origins(gateway_settings),
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER, REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        correlation_id = (request.headers.get(CORRELATION_HEADER) or "").strip() or str(uuid4())
        context = RequestContext.from_values(correlation_id, str(uuid4()))
        request.state.context = context

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[CORRELATION_HEADER] = context.correlation_id
        response.headers[REQUEST_ID_HEADER] = context.request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms, correlation_id={context.correlation_id})"
        )
        return response

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        issues = [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
        return _error_response(request, bad_request("Request validation failed.", issues=issues))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            code = ErrorCode.NOT_FOUND
            message = "Route not found."
        elif exc.status_code >= 500:
            code = ErrorCode.INTERNAL_ERROR
            message = "Internal server error."
        else:
            code = ErrorCode.BAD_REQUEST
            message = str(exc.detail or "Bad request.")
        error = GatewayError(message, code=code, status_code=exc.status_code, details={"path": request.url.path})
        return _error_response(request, error)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        error = GatewayError("Internal server error.", code=ErrorCode.INTERNAL_ERROR, status_code=500)
        response = _error_response(request, error)
        context = _request_context(request)
        response.headers[CORRELATION_HEADER] = context.correlation_id
        response.headers[REQUEST_ID_HEADER] = context.request_id
        return response

    @app.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse(url="/v1/health", status_code=308)

    @app.get("/v1/health")
    async def health(request: Request) -> Dict[str, Any]:
        return success_envelope({"status": "ok"}, _request_context(request))

    @app.get("/v1/content/articles")
    async def list_articles(
        request: Request,
        response: Response,
        service: ContentService = Depends(get_content_service),
    ) -> Dict[str, Any]:
        articles = await service.get_articles()
        _cache_headers(response, "articles")
        return success_envelope(
            [article.to_wire() for article in articles],
            _request_context(request),
            provider=service.provider_name,
            count=len(articles),
        )

    @app.get("/v1/content/articles/{slug}")
    async def get_article(
        slug: str,
        request: Request,
        response: Response,
        service: ContentService = Depends(get_content_service),
    ) -> Dict[str, Any]:
        slug = _require_slug(slug)
        article = await service.get_article_by_slug(slug)
        if article is None:
            raise not_found("article", slug)
        _cache_headers(response, "articles", f"article:{slug}")
        return success_envelope(article.to_wire(), _request_context(request), provider=service.provider_name)

    @app.get("/v1/content/pages")
    async def list_pages(
        request: Request,
        response: Response,
        service: ContentService = Depends(get_content_service),
    ) -> Dict[str, Any]:
        pages = await service.get_pages()
        _cache_headers(response, "pages")
        return success_envelope(
            [page.to_wire() for page in pages],
            _request_context(request),
            provider=service.provider_name,
            count=len(pages),
        )

    @app.get("/v1/content/pages/{slug}")
    async def get_page(
        slug: str,
        request: Request,
        response: Response,
        service: ContentService = Depends(get_content_service),
    ) -> Dict[str, Any]:
        slug = _require_slug(slug)
        page = await service.get_page_by_slug(slug)
        if page is None:
            raise not_found("page", slug)
        _cache_headers(response, "pages", f"page:{slug}")
        return success_envelope(page.to_wire(), _request_context(request), provider=service.provider_name)

    return app


app = create_app()
