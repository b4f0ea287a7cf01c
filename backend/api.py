"""
REST and WebSocket surface of the dashboard backend.

Routes:
  GET  /api/health
  GET  /api/servers/{top,fastest-growing,most-downloaded,most-reviewed,search}
  GET  /api/servers/{id}
  GET  /api/analytics/{overview,categories,trending}
  WS   /ws   (send {"type": "subscribe"} to receive live updates)
"""
from __future__ import annotations
import asyncio
import json
import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.common import API_VERSION, now_iso
from backend.broadcast import Channel, Subscription
from backend.collector import SOURCE_SYNTHETIC, DataCollector
from backend.config import Settings
from backend.models import MCP
from backend.queries import Page, Queries

KIND_PATTERN = "^(mcp|api)$"
SUBSCRIBE = ("subscribe", "subscribe-to-updates")
UNSUBSCRIBE = ("unsubscribe", "unsubscribe-from-updates")

def envelope(request: Request, data: Any, page: Optional[Page] = None, **meta: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "success": True,
        "data": data,
        "meta": {
            "timestamp": now_iso(),
            "version": API_VERSION,
            "request_id": request.headers.get("x-request-id", "unknown"),
            **meta,
        },
    }
    if page is not None:
        body["pagination"] = page.pagination()
    return jsonable_encoder(body)

def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    return {"success": False, "message": message, "data": None, **extra}

def queries_of(request: Request) -> Queries:
    return request.app.state.queries

def source_of(request: Request, kind: str) -> str:
    return request.app.state.collector.mcp_source if kind == MCP else SOURCE_SYNTHETIC

def ranking_response(request: Request, kind: str, fetch) -> Dict[str, Any]:
    try:
        page = fetch()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(request, [e.asdict() for e in page.items], page, type=kind, source=source_of(request, kind))


# --- servers ---------------------------------------------------------------

servers = APIRouter(prefix="/api/servers", tags=["servers"])

@servers.get("/top")
def top_servers(
    request: Request,
    kind: str = Query(MCP, alias="type", pattern=KIND_PATTERN),
    sort_by: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    q = queries_of(request)
    return ranking_response(request, kind, lambda: q.top(
        kind, sort_by, page=page, limit=limit, category=category, search=search))

@servers.get("/fastest-growing")
def fastest_growing(
    request: Request,
    kind: str = Query(MCP, alias="type", pattern=KIND_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    q = queries_of(request)
    return ranking_response(request, kind, lambda: q.fastest_growing(
        kind, page=page, limit=limit, category=category, search=search))

@servers.get("/most-downloaded")
def most_downloaded(
    request: Request,
    kind: str = Query(MCP, alias="type", pattern=KIND_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    q = queries_of(request)
    return ranking_response(request, kind, lambda: q.most_downloaded(
        kind, page=page, limit=limit, category=category, search=search))

@servers.get("/most-reviewed")
def most_reviewed(
    request: Request,
    kind: str = Query(MCP, alias="type", pattern=KIND_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = None,
):
    q = queries_of(request)
    return ranking_response(request, kind, lambda: q.most_reviewed(
        kind, page=page, limit=limit, category=category, search=search))

@servers.get("/search")
def search_servers(
    request: Request,
    search: Optional[str] = None,
    kind: str = Query(MCP, alias="type", pattern=KIND_PATTERN),
    sort_by: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    category: Optional[str] = None,
):
    q = queries_of(request)
    return ranking_response(request, kind, lambda: q.search(
        search or "", kind, sort_by, page=page, limit=limit, category=category))

@servers.get("/{server_id}")
def server_detail(request: Request, server_id: str):
    entity = queries_of(request).get_entity(server_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Server not found")
    return envelope(request, entity.asdict(), type=entity.kind)


# --- analytics -------------------------------------------------------------

analytics = APIRouter(prefix="/api/analytics", tags=["analytics"])

@analytics.get("/overview")
def analytics_overview(request: Request):
    return envelope(request, queries_of(request).analytics())

@analytics.get("/categories")
def analytics_categories(request: Request):
    return envelope(request, queries_of(request).analytics()["top_categories"])

@analytics.get("/trending")
def analytics_trending(request: Request):
    data = queries_of(request).analytics()
    return envelope(request, {"growth": data["growth"], "overview": data["overview"]})


# --- health ----------------------------------------------------------------

health = APIRouter(prefix="/api/health", tags=["health"])

@health.get("")
def health_check(request: Request):
    state = request.app.state
    return envelope(request, {
        "status": "healthy",
        "uptime": round(time.monotonic() - state.started, 3),
        "timestamp": now_iso(),
        "environment": state.settings.environment,
        "version": API_VERSION,
        "subscribers": state.channel.subscriber_count,
    })


# --- live updates ----------------------------------------------------------

async def _forward(websocket: WebSocket, sub: Subscription) -> None:
    async for message in sub:
        await websocket.send_json(message.model_dump(mode="json"))

def _action(raw: str) -> Optional[str]:
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return raw.strip()
    if isinstance(msg, dict):
        return msg.get("type") or msg.get("event")
    return msg if isinstance(msg, str) else None

async def live_updates(websocket: WebSocket) -> None:
    channel: Channel = websocket.app.state.channel
    await websocket.accept()
    logging.info(f"Client connected: {websocket.client}")
    sub: Optional[Subscription] = None
    forward: Optional[asyncio.Task] = None
    try:
        while True:
            action = _action(await websocket.receive_text())
            if action in SUBSCRIBE and sub is None:
                sub = channel.subscribe()
                await websocket.send_json({"event": "subscribed"})
                forward = asyncio.create_task(_forward(websocket, sub))
            elif action in UNSUBSCRIBE and sub is not None:
                forward.cancel()
                channel.unsubscribe(sub)
                sub, forward = None, None
                await websocket.send_json({"event": "unsubscribed"})
    except WebSocketDisconnect:
        logging.info(f"Client disconnected: {websocket.client}")
    finally:
        if forward is not None:
            forward.cancel()
        if sub is not None:
            channel.unsubscribe(sub)


# --- app factory -----------------------------------------------------------

def create_app(settings: Optional[Settings] = None, collector: Optional[DataCollector] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    collector = collector or DataCollector(settings)
    channel = Channel()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await collector.start(channel)
        logging.info("MCP Dashboard API is live!")
        yield
        await collector.stop()

    app = FastAPI(title="MCP Server Trends API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.collector = collector
    app.state.channel = channel
    app.state.queries = Queries(collector)
    app.state.started = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health)
    app.include_router(servers)
    app.include_router(analytics)
    app.add_api_websocket_route("/ws", live_updates)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Not Found - {request.url.path}"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_body(message))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())[1:])}: {err.get('msg')}" for err in exc.errors()
        )
        return JSONResponse(status_code=400, content=error_body(f"Invalid query parameters: {problems}"))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logging.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        extra = {} if settings.is_production else {"stack": traceback.format_exception(exc)}
        return JSONResponse(status_code=500, content=error_body("Internal server error", **extra))

    return app
