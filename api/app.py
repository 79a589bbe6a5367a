"""HTTP API entrypoint for driving the castle from agents and web UIs."""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import logfire
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AliasChoices, BaseModel, Field

from infra.logger import configure_logging, get_logger
from infra.settings import load_settings
from runtime.logfire_config import configure_logfire
from runtime.session import CastleSession

# Configure observability before the session is created.
configure_logfire()

log = get_logger(__name__)
session: CastleSession | None = None


def get_session() -> CastleSession:
    """Return the running session, creating it from the environment on first use."""
    global session
    if session is None:
        settings = load_settings()
        configure_logging(settings.log_level, json=settings.log_json, logfile=settings.log_file)
        session = CastleSession.from_settings(settings)
    return session


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    global session
    if session is not None:
        session.close()
        session = None


app = FastAPI(title="Castle Economy", lifespan=lifespan)

# Allow browser-based dashboards (served from file:// or other origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ActionRequest(BaseModel):
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)
    requested_by: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("requested_by", "requestedBy")
    )
    command_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("command_id", "commandId")
    )


@app.get("/state")
def state():
    return get_session().state().to_dict()


@app.post("/actions")
def enqueue(request: ActionRequest):
    result = get_session().enqueue(request.model_dump())
    if not result.accepted:
        raise HTTPException(400, result.reason)
    return result.to_dict()


@app.get("/actions")
def pending():
    return {"pending": [item.to_dict() for item in get_session().engine.pending_actions()]}


@app.post("/tick")
def tick():
    current = get_session()
    with logfire.span("castle tick {turn}", turn=current.turn + 1):
        result = current.advance()
    return {
        "success": True,
        "turn": result.turn,
        "applied": [action.to_dict() for action in result.applied],
        "rejected": [rejection.to_dict() for rejection in result.rejected],
        "events": current.last_events,
        "state": result.state.to_dict(),
    }


@app.post("/autotick/start")
def autotick_start():
    started = get_session().start_autotick()
    return {"success": True, "started": started, "message": "Auto-tick started" if started else "Auto-tick already running"}


@app.post("/autotick/stop")
def autotick_stop():
    stopped = get_session().stop_autotick()
    return {"success": True, "stopped": stopped, "message": "Auto-tick stopped" if stopped else "Auto-tick was not running"}


@app.get("/autotick/status")
def autotick_status():
    current = get_session()
    return {"enabled": current.autotick_running, "interval": current.ticker.interval}


@app.get("/health")
def health():
    return {"status": "ok", "turn": get_session().turn}
