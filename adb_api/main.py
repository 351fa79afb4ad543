from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from .catalog import KEY_EVENTS
from .commands import build_catalog
from .config import settings
from .device import create_client
from .logging_utils import setup_logger
from .models import CommandInfo, ResolveResult, ToolDefinition, ToolResult
from .resolver import CommandResolver
from .security import require_api_key
from .tools import DeviceTools


SERVICE_NAME = "adb-api"
VERSION = "1.0.0"

logger = setup_logger("adb_api", settings.log_level)

app = FastAPI(title="ADB Device Control API", version=VERSION)

origins = (
    [o.strip() for o in settings.cors_origins.split(",")]
    if getattr(settings, "cors_origins", None)
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

COMMANDS_FILE: Optional[Path] = Path(settings.commands_file) if settings.commands_file else None
CATALOG = build_catalog(COMMANDS_FILE)
RESOLVER = CommandResolver(catalog=CATALOG)
TOOLS = DeviceTools(device=create_client(), resolver=RESOLVER, logger=logger)


@app.get("/health")
def health(response: Response):
    response.headers["Cache-Control"] = "no-store"
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "time": datetime.now().astimezone().isoformat()
    }


@app.get("/tools", dependencies=[Depends(require_api_key)], response_model=list[ToolDefinition])
def list_tools():
    return TOOLS.definitions()


@app.post("/tools/{name}", dependencies=[Depends(require_api_key)], response_model=ToolResult)
def call_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(default=None)):
    if not TOOLS.has_tool(name):
        raise HTTPException(404, detail=f"Unknown tool: {name}")
    return TOOLS.call(name, arguments or {})


@app.get("/resolve", dependencies=[Depends(require_api_key)], response_model=ResolveResult)
def resolve(q: str = Query(..., description="Free-text action, e.g. 'go home'")):
    """Dry run: show which catalog entry ``q`` maps to without touching the device."""
    return RESOLVER.explain(q)


@app.get("/commands", dependencies=[Depends(require_api_key)], response_model=list[CommandInfo])
def commands():
    return [
        CommandInfo(phrase=phrase, name=d.name, description=d.description, command=d.command)
        for phrase, d in CATALOG.items()
    ]


@app.get("/keys", dependencies=[Depends(require_api_key)])
def keys():
    return {"keys": dict(KEY_EVENTS)}
