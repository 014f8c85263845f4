from __future__ import annotations

import datetime as _dt
import json
import time
import uuid
from typing import Any, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from .config import Settings, load_settings
from .facade import SheetAccessFacade
from .host import HostSpreadsheet
from .logging_config import get_logger
from .memory import InMemorySpreadsheet
from .sheets_client import ServiceAccountSheetsClient
from .spreadsheet import GoogleSpreadsheet

logger = get_logger(__name__)

app = FastAPI(title="Sheet Access API")

# * Lazy initialization - only create when a request needs them
_settings: Optional[Settings] = None
_sheets_client: Optional[ServiceAccountSheetsClient] = None
_memory_spreadsheet: Optional[InMemorySpreadsheet] = None


# * ============================================================================
# * Dependencies
# * ============================================================================

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _get_sheets_client(settings: Settings) -> Optional[ServiceAccountSheetsClient]:
    """
    Create the Sheets API client once and reuse it.

    Returns None when no usable service account is configured so callers can
    answer 503 instead of crashing.
    """
    global _sheets_client

    if _sheets_client is not None:
        return _sheets_client

    try:
        _sheets_client = ServiceAccountSheetsClient(settings.credentials_path)
        logger.info("Initialized ServiceAccountSheetsClient")
        return _sheets_client
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"Unable to initialize Google Sheets client: {exc}", exc_info=True)
        return None


def _get_memory_spreadsheet(settings: Settings) -> InMemorySpreadsheet:
    global _memory_spreadsheet
    if _memory_spreadsheet is None:
        _memory_spreadsheet = InMemorySpreadsheet({settings.entry_sheet_name: []})
        logger.info("Using in-memory spreadsheet backend")
    return _memory_spreadsheet


def get_active_spreadsheet(settings: Settings = Depends(get_settings)) -> HostSpreadsheet:
    """Build the spreadsheet handle for one request."""
    if settings.backend == "memory":
        return _get_memory_spreadsheet(settings)

    if not settings.spreadsheet_id:
        logger.error("503 Service Unavailable: DEFAULT_SPREADSHEET_URL is not set")
        raise HTTPException(status_code=503, detail="No spreadsheet is configured on this deployment.")

    client = _get_sheets_client(settings)
    if client is None:
        raise HTTPException(status_code=503, detail="Google Sheets credentials are not available.")

    return GoogleSpreadsheet(client, settings.spreadsheet_id)


# * ============================================================================
# * Request/Response Logging Middleware
# * ============================================================================

@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """
    Log every request and response with a short request id and timing.
    """
    request_id = str(uuid.uuid4())[:8]
    start_time = time.time()
    method = request.method
    path = request.url.path

    logger.info(
        f"→ {method} {path}",
        extra={"request_id": request_id, "method": method, "endpoint": path},
    )

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"✗ {method} {path} - Exception ({duration_ms}ms)",
            exc_info=True,
            extra={
                "request_id": request_id,
                "method": method,
                "endpoint": path,
                "duration_ms": duration_ms,
            }
        )
        # Re-raise to let FastAPI handle it
        raise

    duration_ms = int((time.time() - start_time) * 1000)
    status_code = response.status_code
    log_level = logger.info if status_code < 400 else logger.error
    log_level(
        f"← {method} {path} - {status_code} ({duration_ms}ms)",
        extra={
            "request_id": request_id,
            "method": method,
            "endpoint": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
        }
    )
    return response


# * ============================================================================
# * Root & Health Check Endpoints
# * ============================================================================

@app.get("/")
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Sheet Access API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "post": "POST /exec",
            "get": "GET /exec",
            "health": "GET /health",
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
    }


# * ============================================================================
# * Entry Points
# * ============================================================================

async def post_payload(request: Request) -> Tuple[str, Any]:
    """Return the raw posted body and its JSON decoding.

    An empty body is not JSON, so it fails like any other malformed payload.
    """
    payload = (await request.body()).decode("utf-8")
    return payload, json.loads(payload)


async def get_payload(request: Request) -> Any:
    """Return the JSON decoding of an optional GET body (None without one)."""
    payload = (await request.body()).decode("utf-8")
    if not payload.strip():
        return None
    return json.loads(payload)


def _read_entry_cell(spreadsheet: HostSpreadsheet, settings: Settings) -> str:
    facade = SheetAccessFacade(spreadsheet)
    value = facade.get_cell_value(settings.entry_sheet_name, settings.entry_cell)
    logger.info(
        f"{settings.entry_sheet_name}!{settings.entry_cell} = {value!r}",
        extra={"sheet_name": settings.entry_sheet_name, "position": settings.entry_cell},
    )
    return value


# Plain def: the facade makes blocking Sheets API calls, so FastAPI runs
# these handlers in its threadpool. The body is read by async dependencies.
@app.post("/exec", response_class=PlainTextResponse)
def do_post(
    body: Tuple[str, Any] = Depends(post_payload),
    spreadsheet: HostSpreadsheet = Depends(get_active_spreadsheet),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """Echo the raw posted payload after reading the entry cell."""
    payload, data = body
    logger.info("Received data", extra={"extra": data})
    _read_entry_cell(spreadsheet, settings)
    return PlainTextResponse(f"Received payload: {payload}")


@app.get("/exec", response_class=PlainTextResponse)
def do_get(
    data: Any = Depends(get_payload),
    spreadsheet: HostSpreadsheet = Depends(get_active_spreadsheet),
    settings: Settings = Depends(get_settings),
) -> PlainTextResponse:
    """Answer with the entry cell's value."""
    logger.info("Received data", extra={"extra": data})
    value = _read_entry_cell(spreadsheet, settings)
    return PlainTextResponse(f"Received payload: {value}")
