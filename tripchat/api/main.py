"""FastAPI 主应用：行程创建与多轮对话"""

from __future__ import annotations

import logging
import os
import threading

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Path, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from tripchat.api.schemas import (
    TRIP_ID_PATTERN,
    ChatRequest,
    ChatResponse,
    CreateTripRequest,
    CreateTripResponse,
    HealthResponse,
    HistoryResponse,
    MessageItemResponse,
    TripDefinitionResponse,
    TripListResponse,
    TripSummaryItemResponse,
)
from tripchat.application.chat_turn import chat_turn
from tripchat.application.context import AppContext, make_app_context
from tripchat.application.create_trip import create_trip
from tripchat.infrastructure.llm_factory import resolve_llm_provider
from tripchat.infrastructure.redact import redact_sensitive
from tripchat.services.history_service import (
    NO_MESSAGES_YET,
    get_trip_definition,
    list_trip_messages,
    list_trips,
)
from tripchat.shared.exceptions import TripChatError, TripNotFoundError, ValidationError

_api_logger = logging.getLogger("tripchat.api")

load_dotenv()  # 自动加载 .env 文件

app = FastAPI(
    title="tripchat",
    version="1.0.0",
    docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """注入安全响应头"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ── 上下文缓存（进程内单例） ────────────────
_ctx: AppContext | None = None
_ctx_lock = threading.Lock()


def get_ctx() -> AppContext:
    global _ctx
    if _ctx is None:
        with _ctx_lock:
            if _ctx is None:
                _ctx = make_app_context()
    return _ctx


def _safe_log_exception(context: str, exc: Exception) -> None:
    """脱敏后记录异常日志"""
    _api_logger.error("%s: %s", context, redact_sensitive(str(exc)))


@app.exception_handler(ValidationError)
async def _validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(TripNotFoundError)
async def _trip_not_found_handler(_request: Request, exc: TripNotFoundError) -> JSONResponse:
    _safe_log_exception("trip actor has no state", exc)
    return JSONResponse(status_code=404, content={"detail": "trip not initialized"})


@app.exception_handler(TripChatError)
async def _server_error_handler(request: Request, exc: TripChatError) -> JSONResponse:
    _safe_log_exception(f"{request.method} {request.url.path} failed", exc)
    return JSONResponse(status_code=500, content={"detail": "internal error"})


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@app.get("/diagnostics")
def diagnostics(ctx: AppContext = Depends(get_ctx)):
    """内部诊断接口：显示存储后端与生成后端（生产环境应加鉴权）"""
    return {
        "actors": {"backend": ctx.actors.backend, "active": ctx.actors.active_count},
        "log_store": {"backend": getattr(ctx.log_repo, "backend", "unknown")},
        "generation": {
            "backend": getattr(ctx.generation, "backend", "unknown"),
            "llm_provider": resolve_llm_provider(),
        },
        "chat_policy": ctx.chat_policy.model_dump(mode="json"),
    }


@app.post("/input", response_model=CreateTripResponse, status_code=201)
def create_trip_endpoint(req: CreateTripRequest, ctx: AppContext = Depends(get_ctx)):
    """创建行程：生成初始计划并返回行程地址"""
    result = create_trip(ctx, req.destination, req.days)
    location = f"/trip/{result.trip_id}"
    return JSONResponse(
        status_code=201,
        content=CreateTripResponse(trip_id=result.trip_id, location=location).model_dump(),
        headers={"Location": location},
    )


@app.get("/trip/{trip_id}", response_model=TripDefinitionResponse)
def read_trip(
    trip_id: str = Path(min_length=1, max_length=64, pattern=TRIP_ID_PATTERN),
    ctx: AppContext = Depends(get_ctx),
):
    definition = get_trip_definition(ctx=ctx, trip_id=trip_id)
    if definition is None:
        return JSONResponse(status_code=404, content={"detail": "trip not initialized"})
    return TripDefinitionResponse(trip_id=trip_id, **definition.model_dump())


@app.post("/trip/{trip_id}", response_model=ChatResponse)
def chat(
    req: ChatRequest,
    trip_id: str = Path(min_length=1, max_length=64, pattern=TRIP_ID_PATTERN),
    ctx: AppContext = Depends(get_ctx),
):
    """多轮对话：针对已创建的行程继续对话"""
    result = chat_turn(ctx, trip_id, req.message)
    return ChatResponse(trip_id=trip_id, reply=result.reply)


@app.get("/chat/{trip_id}", response_model=HistoryResponse)
def history(
    trip_id: str = Path(min_length=1, max_length=64, pattern=TRIP_ID_PATTERN),
    ctx: AppContext = Depends(get_ctx),
):
    messages = list_trip_messages(ctx=ctx, trip_id=trip_id)
    if not messages:
        return HistoryResponse(trip_id=trip_id, status="empty", detail=NO_MESSAGES_YET)
    return HistoryResponse(
        trip_id=trip_id,
        status="ok",
        messages=[
            MessageItemResponse(message=item.content, role=item.role.value, created_at=item.created_at)
            for item in messages
        ],
    )


@app.get("/trips", response_model=TripListResponse)
def trips(limit: int = Query(default=20, ge=1, le=100), ctx: AppContext = Depends(get_ctx)):
    items = list_trips(ctx=ctx, limit=limit)
    return TripListResponse(items=[TripSummaryItemResponse(**item.model_dump()) for item in items])
