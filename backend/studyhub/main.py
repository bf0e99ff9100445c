from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import asyncio
import logging
import os
import time

from studyhub.api.career import router as career_router
from studyhub.api.mindmap import router as mindmap_router
from studyhub.auth import get_user_id_async
from studyhub.db.supabase import supabase
from studyhub.system_metrics import get_metrics_snapshot
from core.config import MINDMAP_RADIUS_STEP, QA_MODE

app = FastAPI(title="StudyHub Career & Mind Map API")
logger = logging.getLogger("studyhub.main")


def _get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

RATE_LIMIT_ENABLED = str(os.getenv("RATE_LIMIT_ENABLED", "true")).strip().lower() in {"1", "true", "yes", "on"}
RATE_LIMIT_WINDOW_SEC = max(10, int(os.getenv("RATE_LIMIT_WINDOW_SEC", "60")))
RATE_LIMIT_MAX_REQUESTS = max(20, int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "300")))
RATE_LIMIT_MAX_BUCKETS = max(100, int(os.getenv("RATE_LIMIT_MAX_BUCKETS", "10000")))
TRUST_PROXY_HEADERS = str(os.getenv("TRUST_PROXY_HEADERS", "false")).strip().lower() in {"1", "true", "yes", "on"}
_rate_limit_lock = asyncio.Lock()
_rate_limit_buckets: dict[str, dict[str, float]] = {}
_rate_limit_last_sweep = 0.0


def _request_identity(request: Request) -> str:
    if TRUST_PROXY_HEADERS:
        forwarded_for = str(request.headers.get("x-forwarded-for") or "").strip()
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return str(request.client.host)
    return "unknown"


def _sweep_expired_buckets(now_ts: float) -> None:
    global _rate_limit_last_sweep
    if now_ts - _rate_limit_last_sweep < RATE_LIMIT_WINDOW_SEC and len(_rate_limit_buckets) < RATE_LIMIT_MAX_BUCKETS:
        return
    _rate_limit_last_sweep = now_ts
    expired = [
        key
        for key, value in _rate_limit_buckets.items()
        if now_ts - float((value or {}).get("window_start") or 0.0) >= RATE_LIMIT_WINDOW_SEC
    ]
    for key in expired:
        _rate_limit_buckets.pop(key, None)

    overflow = len(_rate_limit_buckets) - RATE_LIMIT_MAX_BUCKETS + 1
    if overflow > 0:
        oldest = sorted(_rate_limit_buckets, key=lambda key: float(_rate_limit_buckets[key].get("window_start") or 0.0))
        for key in oldest[:overflow]:
            _rate_limit_buckets.pop(key, None)


async def _is_rate_limited(identity: str, now_ts: float) -> tuple[bool, int]:
    async with _rate_limit_lock:
        _sweep_expired_buckets(now_ts)
        bucket = _rate_limit_buckets.get(identity)
        if bucket is None:
            _rate_limit_buckets[identity] = {
                "window_start": now_ts,
                "count": 1,
            }
            return False, 0

        window_start = float(bucket.get("window_start") or now_ts)
        elapsed = now_ts - window_start
        if elapsed >= RATE_LIMIT_WINDOW_SEC:
            bucket["window_start"] = now_ts
            bucket["count"] = 1
            return False, 0

        count = int(bucket.get("count") or 0)
        if count >= RATE_LIMIT_MAX_REQUESTS:
            retry_after = max(1, int(RATE_LIMIT_WINDOW_SEC - elapsed))
            return True, retry_after

        bucket["count"] = count + 1
        return False, 0


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not RATE_LIMIT_ENABLED:
        return await call_next(request)

    path = request.url.path
    if request.method == "OPTIONS" or path.startswith("/docs") or path.startswith("/openapi.json"):
        return await call_next(request)

    identity = _request_identity(request)
    blocked, retry_after = await _is_rate_limited(identity, time.time())
    if blocked:
        return JSONResponse(
            status_code=429,
            content={
                "detail": "Rate limit exceeded",
                "retry_after_sec": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )

    return await call_next(request)


@app.on_event("startup")
async def startup_banner():
    if QA_MODE:
        logger.info("[SYSTEM] QA_MODE ENABLED")
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info("[SYSTEM] persistence=%s radius_step=%s", "supabase" if supabase else "disabled", MINDMAP_RADIUS_STEP)


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "backend"}


@app.get("/api/system/metrics")
async def system_metrics_route(request: Request):
    await get_user_id_async(request)
    return get_metrics_snapshot(extra={
        "persistence_enabled": supabase is not None,
    })


app.include_router(career_router)
app.include_router(mindmap_router)
