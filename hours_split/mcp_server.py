"""hours-split MCP server.

Exposes one in-process split session as tools: set the total, resize the
roster, edit members (typed hours or a start/end time range), read the
current shares, and export them as CSV, JSON or XLSX.
"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Any
from uuid import uuid4

from mcp.server.fastmcp import FastMCP

from split_core.io import render_xlsx, write_csv, write_json
from split_core.roster import RosterManager

from .config import export_root, load_env, runtime_config

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json", "xlsx")

mcp = FastMCP(
    "hours-split",
    host=os.getenv("HOST", "127.0.0.1"),
    port=int(os.getenv("PORT", "8000")),
    instructions=(
        "Splits a total amount of money between members in proportion to "
        "the hours each one worked. Hours are typed directly or derived "
        "from a start/end time of day (ranges crossing midnight are "
        "supported). Every tool returns the full current split."
    ),
)

_ENV_FILE: str | None = None
_MANAGER: RosterManager | None = None


def _config():
    load_env(_ENV_FILE or os.getenv("HOURS_SPLIT_ENV_FILE"))
    return runtime_config()


def _manager() -> RosterManager:
    global _MANAGER
    if _MANAGER is None:
        _MANAGER = RosterManager(size=_config().default_members)
    return _MANAGER


# -- Reading --

@mcp.tool()
def get_snapshot() -> dict[str, Any]:
    """Return the total and every member with their computed share."""
    return _manager().snapshot().as_dict()


# -- Session state --

@mcp.tool()
def set_total(total: float | None = None) -> dict[str, Any]:
    """Set the amount to split (omit to reset it to 0)."""
    return _manager().set_total(total).as_dict()


@mcp.tool()
def resize_roster(count: int) -> dict[str, Any]:
    """Grow or shrink the roster to `count` members.

    New members start empty. Shrinking drops members from the end and
    their data is lost. Negative counts are ignored.
    """
    return _manager().resize(count).as_dict()


@mcp.tool()
def reset_session(members: int | None = None) -> dict[str, Any]:
    """Discard the current split and start over with an empty roster."""
    global _MANAGER
    size = _config().default_members if members is None else members
    _MANAGER = RosterManager(size=size)
    logger.info("Session reset with %d members", len(_MANAGER))
    return _MANAGER.snapshot().as_dict()


# -- Member edits --

@mcp.tool()
def patch_member(
    member_id: str,
    name: str | None = None,
    hours: float | None = None,
) -> dict[str, Any]:
    """Rename a member and/or type their hours directly.

    Omitted fields are left as they are. Typing hours clears any time
    range previously set for the member. Unknown ids are ignored.
    """
    fields: dict[str, Any] = {}
    if name is not None:
        fields["name"] = name
    if hours is not None:
        fields["hours"] = hours
    return _manager().patch_member(member_id, **fields).as_dict()


@mcp.tool()
def set_member_time_range(member_id: str, start: str, end: str) -> dict[str, Any]:
    """Derive a member's hours from a HH:MM start and end time.

    An end earlier than the start is treated as crossing midnight
    (23:00 -> 01:00 is 2 hours). Equal times count as 0 hours.
    """
    return _manager().set_time_range(member_id, start, end).as_dict()


@mcp.tool()
def clear_member_time_range(member_id: str) -> dict[str, Any]:
    """Remove a member's time range and reset their hours to 0."""
    return _manager().clear_time_range(member_id).as_dict()


# -- Export --

@mcp.tool()
def export_snapshot(fmt: str = "csv", name: str | None = None) -> dict[str, Any]:
    """Write the current split to the export directory as csv, json or xlsx.

    Returns the written file path.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt!r}. Choose from {EXPORT_FORMATS}")
    stem = name or f"split-{uuid4().hex[:12]}"
    target = export_root(_config()) / f"{stem}.{fmt}"
    snapshot = _manager().snapshot()
    if fmt == "csv":
        path = write_csv(snapshot, target)
    elif fmt == "json":
        path = write_json(snapshot, target)
    else:
        path = render_xlsx(snapshot, target)
    return {"format": fmt, "path": str(path), "members": len(snapshot.members)}


# -- Server entrypoints --

async def _run_http() -> None:
    import uvicorn
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.responses import JSONResponse, PlainTextResponse
    from starlette.routing import Route

    api_key = os.getenv("MCP_API_KEY")

    class BearerAuth(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            if request.url.path == "/health":
                return await call_next(request)
            auth = request.headers.get("authorization", "")
            if not auth.startswith("Bearer ") or auth[7:] != api_key:
                return JSONResponse({"error": "unauthorized"}, status_code=401)
            return await call_next(request)

    starlette_app = mcp.streamable_http_app()

    if api_key:
        starlette_app.add_middleware(BearerAuth)

    starlette_app.routes.append(
        Route("/health", lambda r: PlainTextResponse("ok"))
    )

    config = uvicorn.Config(
        starlette_app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level="info",
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    global _ENV_FILE

    parser = argparse.ArgumentParser(description="Run the hours-split MCP server")
    parser.add_argument("--env-file", default=None, help="Path to .env file")
    parser.add_argument(
        "--transport",
        default=None,
        choices=["stdio", "sse", "streamable-http"],
        help="MCP transport (default: streamable-http when PORT is set, else stdio)",
    )
    args = parser.parse_args()
    _ENV_FILE = args.env_file

    transport = args.transport
    if transport is None:
        transport = "streamable-http" if os.getenv("PORT") else "stdio"

    if transport == "streamable-http":
        import anyio
        anyio.run(_run_http)
    else:
        mcp.run(transport=transport)


if __name__ == "__main__":
    main()
