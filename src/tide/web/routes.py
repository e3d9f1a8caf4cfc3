# src/tide/web/routes.py
from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from tide.canon import TideError, WorldDetailsService, coerce_world_id
from tide.canon.commands import parse_command
from tide.core.logging import get_logger
from tide.core.logs import EventType, Priority, get_event_logger

logger = get_logger(__name__)
event_logger = get_event_logger()

# Create the router
router = APIRouter()


def _service(request: Request) -> WorldDetailsService:
    return request.app.state.service


def _ok(data: Any = None) -> dict[str, Any]:
    if data is None:
        return {"ok": True}
    return {"ok": True, "data": data}


def _fail(exc: Exception, context: str) -> JSONResponse:
    """Log ``exc`` with its traceback and turn it into an error body."""
    if isinstance(exc, TideError):
        status, message = exc.status_code, str(exc)
    else:
        status, message = 500, "Internal server error"
    event_logger.log_error_handling_start(
        error_type=type(exc).__name__,
        error_msg=str(exc),
        context=context,
        metadata={"status": status},
    )
    logger.error(f"Error in {context}: {exc}", exc_info=exc)
    return JSONResponse({"ok": False, "error": message}, status_code=status)


async def _json_body(request: Request) -> dict[str, Any]:
    """Return the request body as a dict; anything else counts as ``{}``."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.get("/api/world-details")
async def get_world_details(
    request: Request,
    world_id: str | None = Query(default=None),
    worldId: str | None = Query(default=None),  # noqa: N803
):
    """Return the full aggregate for one world."""
    try:
        wid = coerce_world_id(world_id or worldId)
        aggregate = await _service(request).read(wid)
        return _ok(aggregate.model_dump(mode="json"))
    except Exception as exc:
        return _fail(exc, "get_world_details")


@router.post("/api/world-details")
async def post_world_details(request: Request):
    """Apply one write command and return the refreshed aggregate."""
    try:
        body = await _json_body(request)
        wid = coerce_world_id(body.get("world_id") or body.get("worldId"))
        command = parse_command(body)
        event_logger.log(
            EventType.REQUEST,
            f"POST world-details {command.op}",
            Priority.NORMAL,
            metadata={"world_id": wid, "operation": command.op},
        )
        aggregate = await _service(request).apply(wid, command)
        return _ok(aggregate.model_dump(mode="json"))
    except Exception as exc:
        return _fail(exc, "post_world_details")


@router.delete("/api/world-details")
async def delete_world_details(
    request: Request,
    world_id: str | None = Query(default=None),
    worldId: str | None = Query(default=None),  # noqa: N803
):
    """Delete a world with its details, collections and catalog links."""
    try:
        wid = coerce_world_id(world_id or worldId)
        await _service(request).delete(wid)
        return _ok()
    except Exception as exc:
        return _fail(exc, "delete_world_details")


@router.get("/api/catalogs/{catalog}")
async def list_catalog(request: Request, catalog: str):
    """List every race or creature that worlds can enable."""
    try:
        entries = await _service(request).list_catalog(catalog)
        return _ok([entry.model_dump() for entry in entries])
    except Exception as exc:
        return _fail(exc, "list_catalog")
