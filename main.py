"""
Main API module for the Catalog Platform.

Responsibilities:
    - Expose REST endpoints to list, search, create, update and delete products
    - Expose /auth endpoints to register users and issue bearer tokens
    - Guard every write route with a bearer-token check
    - Render every error as JSON `{"message": ...}` with the mapped status

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Stores (memory or postgres), token service and manager are built per app
      and injected; nothing is shared through module-level state.
    - CatalogManager owns validation, query construction and record shaping;
      routes only translate HTTP in and out.
"""

import logging
import time
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.config import AuthConfig
from auth.dependencies import BearerGuard
from auth.router import build_auth_router
from auth.service import AuthService, TokenService
from catalog_platform.config import load_settings
from catalog_platform.errors import CatalogError
from catalog_platform.manager.catalog_manager import CatalogManager
from catalog_platform.storage.storage_factory import Stores, get_stores

log = logging.getLogger("catalog")


def _configure_logging(level_name: str) -> None:
    # basic console logging unless the host (uvicorn, pytest) already set it up
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level_name, logging.INFO),
            format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        )
    logging.getLogger("catalog").setLevel(getattr(logging, level_name, logging.INFO))


def _error_response(status_code: int, message: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def create_app(
    app_settings=None,
    stores: Optional[Stores] = None,
    auth_config: Optional[AuthConfig] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        app_settings: Settings object; defaults to a fresh read of the environment.
        stores (Stores, optional): Catalog + credential stores; defaults to the
            backend selected by CATALOG_STORAGE_BACKEND.
        auth_config (AuthConfig, optional): Token settings; defaults to settings.

    Returns:
        FastAPI: A fully configured application instance with its own stores.
    """
    cfg = app_settings or load_settings()
    _configure_logging(cfg.LOG_LEVEL)

    app = FastAPI(
        title="Catalog Platform",
        description="Product catalog CRUD service with bearer-token protected writes",
        docs_url="/docs",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials="*" not in cfg.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    stores = stores or get_stores(cfg.STORAGE_BACKEND, dsn=cfg.DB_DSN or None)
    tokens = TokenService(auth_config or AuthConfig.from_settings(cfg))
    auth_service = AuthService(store=stores.credentials, tokens=tokens)
    manager = CatalogManager(storage=stores.catalog, default_limit=cfg.DEFAULT_PAGE_LIMIT)
    require_token = BearerGuard(tokens)

    app.state.stores = stores
    app.state.tokens = tokens
    app.state.manager = manager

    log.info("Catalog storage backend: %s", stores.backend)

    # ----------------------------------------------------------------
    # Middleware & error handlers
    # ----------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        log.info(
            "%s %s -> %d (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            log.warning("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        log.warning("%s %s rejected (400): %s", request.method, request.url.path, message)
        return _error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error")

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok", "storage": stores.backend}

    app.include_router(build_auth_router(auth_service))

    @app.get("/products")
    def list_products(
        page: Optional[str] = Query(None, description="1-based page number (default 1)."),
        limit: Optional[str] = Query(None, description="Page size (default 10)."),
        name: Optional[str] = Query(None, description="Case-insensitive name substring."),
        min_price: Optional[str] = Query(None, alias="minPrice"),
        max_price: Optional[str] = Query(None, alias="maxPrice"),
    ) -> Dict[str, Any]:
        """
        List products with optional name search, price range and pagination.

        Returns:
            dict: `{totalProducts, page, limit, totalPages, data}`.
        """
        return manager.list({
            "page": page,
            "limit": limit,
            "name": name,
            "minPrice": min_price,
            "maxPrice": max_price,
        })

    @app.get("/products/{product_id}")
    def get_product(product_id: str) -> Dict[str, Any]:
        return manager.get_by_id(product_id)

    @app.post("/products", status_code=201, dependencies=[Depends(require_token)])
    def create_product(payload: Any = Body(None)) -> Dict[str, Any]:
        return manager.create(payload)

    @app.put("/products/{product_id}", dependencies=[Depends(require_token)])
    def update_product(product_id: str, payload: Any = Body(None)) -> Dict[str, Any]:
        """Partial update: fields left out of the body keep their current values."""
        return manager.update_by_id(product_id, payload if payload is not None else {})

    @app.delete("/products/{product_id}", status_code=204, dependencies=[Depends(require_token)])
    def delete_product(product_id: str) -> Response:
        manager.delete_by_id(product_id)
        return Response(status_code=204)

    @app.delete("/products", status_code=204, dependencies=[Depends(require_token)])
    def delete_products(payload: Any = Body(None)) -> Response:
        """Bulk delete. Body: `{"ids": [...]}`; one malformed id rejects the whole batch."""
        ids = payload.get("ids") if isinstance(payload, dict) else None
        manager.delete_many(ids)
        return Response(status_code=204)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, log_config=None)
