from __future__ import annotations

import json
import re
import uuid
from typing import Any

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from menu_api.core.config import settings
from menu_api.core.errors import MenuItemNotFound, MenuValidationFailed
from menu_api.core.logging import configure_logging, request_id_ctx
from menu_api.core.sentry import init_sentry
from menu_api.menu import (
    DeletedItemResponse,
    MenuItem,
    MenuStore,
    ValidationFailedResponse,
)

configure_logging(settings.log_level)
init_sentry()
logger = structlog.get_logger(__name__)

app = FastAPI(title=settings.app_name)
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.state.menu_store = MenuStore.seeded()

ITEM_ID_RE = re.compile(r"[0-9]+")

ENDPOINTS = {
    "GET /api/menu": "Retrieve all menu items",
    "GET /api/menu/:id": "Retrieve a specific menu item",
    "POST /api/menu": "Add a new menu item",
    "PUT /api/menu/:id": "Update an existing menu item",
    "DELETE /api/menu/:id": "Remove a menu item",
}


def get_store(request: Request) -> MenuStore:
    return request.app.state.menu_store


def _parse_item_id(raw: str) -> int:
    if not ITEM_ID_RE.fullmatch(raw):
        raise MenuItemNotFound(None)
    return int(raw)


def _decode_body(body: bytes) -> Any:
    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        return body.decode("utf-8", errors="replace")


async def _read_candidate(request: Request) -> dict[str, Any]:
    body = await request.body()
    if not body:
        return {}
    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        logger.warning("request_body_not_json", path=request.url.path)
        return {}
    if not isinstance(payload, dict):
        logger.warning("request_body_not_object", path=request.url.path)
        return {}
    return payload


@app.middleware("http")
async def log_requests(request: Request, call_next):
    log_fields: dict[str, Any] = {"method": request.method, "path": request.url.path}
    if settings.log_request_bodies and request.method in ("POST", "PUT"):
        body = await request.body()
        if body:
            log_fields["body"] = _decode_body(body)

        async def receive() -> dict[str, object]:
            return {"type": "http.request", "body": body, "more_body": False}

        request._receive = receive  # type: ignore[attr-defined]

    logger.info("request_received", **log_fields)
    response = await call_next(request)
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
    )
    return response


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request_id_token = request_id_ctx.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(request_id_token)

    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(MenuItemNotFound)
async def menu_item_not_found_handler(request: Request, exc: MenuItemNotFound):
    logger.warning("menu_item_not_found", path=request.url.path, item_id=exc.item_id)
    return JSONResponse(status_code=404, content={"message": "Menu item not found"})


@app.exception_handler(MenuValidationFailed)
async def menu_validation_handler(request: Request, exc: MenuValidationFailed):
    logger.warning(
        "menu_validation_failed",
        path=request.url.path,
        fields=[violation.field for violation in exc.violations],
    )
    body = ValidationFailedResponse(message="Validation failed", errors=exc.violations)
    return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limit_exceeded", path=request.url.path)
    return JSONResponse(
        status_code=429,
        content={"message": "Rate limit exceeded. Please slow down."},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", path=request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


@app.get("/")
async def index() -> dict[str, Any]:
    return {"message": "Menu API Server", "endpoints": ENDPOINTS}


@app.get("/health")
async def health() -> dict[str, str]:
    logger.info("health_check")
    return {"status": "ok"}


@app.get("/api/menu", response_model=list[MenuItem])
async def list_menu_items(store: MenuStore = Depends(get_store)) -> list[MenuItem]:
    return store.list_items()


@app.get("/api/menu/{item_id}", response_model=MenuItem)
async def get_menu_item(item_id: str, store: MenuStore = Depends(get_store)) -> MenuItem:
    return store.get(_parse_item_id(item_id))


@app.post("/api/menu", response_model=MenuItem, status_code=201)
@limiter.limit(settings.menu_rate_limit)
async def create_menu_item(
    request: Request, store: MenuStore = Depends(get_store)
) -> MenuItem:
    candidate = await _read_candidate(request)
    return store.insert(candidate)


@app.put("/api/menu/{item_id}", response_model=MenuItem)
@limiter.limit(settings.menu_rate_limit)
async def update_menu_item(
    item_id: str, request: Request, store: MenuStore = Depends(get_store)
) -> MenuItem:
    # The body is checked before the id so a bad payload is a 400 even for unknown ids.
    payload = store.validate(await _read_candidate(request))
    return store.update(_parse_item_id(item_id), payload)


@app.delete("/api/menu/{item_id}", response_model=DeletedItemResponse)
@limiter.limit(settings.menu_rate_limit)
async def delete_menu_item(
    item_id: str, request: Request, store: MenuStore = Depends(get_store)
) -> DeletedItemResponse:
    item = store.delete(_parse_item_id(item_id))
    return DeletedItemResponse(message="Menu item deleted", item=item)


@app.on_event("startup")
async def startup() -> None:
    logger.info("service_started", items=len(app.state.menu_store))
