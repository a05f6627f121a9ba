import asyncio
import json
import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from hooklog.core.config import get_settings
from hooklog.core.logs import (
    EventLog,
    configure_logging,
    get_event_log,
    install_process_hooks,
)
from hooklog.middleware.body_size import BodySizeLimitMiddleware
from hooklog.services.dispatcher import InvalidWebhookFormat, process_batch

STARTED_AT = time.monotonic()

settings = get_settings()

app = FastAPI(
    title="Webhook Logger",
    description="Receives platform webhooks and logs a readable summary of each event",
    version="1.0.0",
)

app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)

logger = logging.getLogger("hooklog.main")

router = APIRouter()


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.on_event("startup")
async def startup():
    configure_logging(settings)
    install_process_hooks(asyncio.get_running_loop())
    logger.info(f"Webhook logger listening on port {settings.port}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Webhook logger shutting down")


# ---------- health ----------
@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": _now_iso(),
        "uptime": time.monotonic() - STARTED_AT,
    }


# ---------- webhook ----------
@router.post("/webhook")
async def receive_webhook(request: Request, log: EventLog = Depends(get_event_log)):
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "application/json":
        return _error("Content-Type must be application/json")

    raw = await request.body()
    if not raw.strip():
        return _error("Request body is required")

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error("Invalid JSON payload")

    try:
        if isinstance(payload, list):
            log.info(f"Received webhook with {len(payload)} event(s)")
        processed = process_batch(payload, log)
    except InvalidWebhookFormat:
        log.warning("Rejected webhook: payload is not an array of events")
        return _error("Invalid webhook data format")
    except Exception:
        logger.error("Failed to process webhook", exc_info=True)
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return {"status": "success", "processed": processed, "timestamp": _now_iso()}


app.include_router(router)
# Variant deployments address the same endpoints under /test
app.include_router(router, prefix="/test", include_in_schema=False)


def run():
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
