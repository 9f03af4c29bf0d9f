# api_main.py
# FastAPI service for the raid emulator
# - Import endpoint fed by the host log-import feed
# - Fight list / info for the picker
# - Replay start/stop/status; notifications go to the timeline webhook

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from combatlog.lang import UnknownLanguageError
from combatlog.models import Fight
from combatlog.player import PlayerBusyError
from combatlog.selftest import run_marker_selftest
from combatlog.summary import fight_info, fight_label
from config import Settings
from session import EmulatorSession, FightNotFoundError
from timeline_webhook import TimelineWebhookClient

logger = logging.getLogger("raidemulator")


# ---------- models ----------
class ImportLogLines(BaseModel):
    lines: List[str]


class ReplayStart(BaseModel):
    key: Optional[int] = None


# ---------- utils ----------
def _fight_entry(fight: Fight) -> Dict[str, Any]:
    return {
        "key": fight.key,
        "zone_name": fight.zone_name,
        "label": fight_label(fight),
        "start_time": fight.start_date.strftime("%H:%M:%S"),
        "duration_ms": fight.duration_ms,
        "line_count": len(fight.logs),
    }


def _session(request: Request) -> EmulatorSession:
    return request.app.state.session


def create_app(settings: Optional[Settings] = None, session: Optional[EmulatorSession] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.marker_selftest_enabled:
            run_marker_selftest()

        sess = session
        if sess is None:
            try:
                sess = EmulatorSession(
                    language=settings.language,
                    tick_interval_seconds=settings.tick_interval_seconds,
                )
            except UnknownLanguageError as e:
                raise RuntimeError(f"Invalid EMULATOR_LANGUAGE: {e}") from e

        forwarder: Optional[TimelineWebhookClient] = None
        if settings.timeline_posting_enabled and settings.timeline_webhook_url:
            forwarder = TimelineWebhookClient(settings.timeline_webhook_url, env=settings.environment)
            forwarder.start()
            sess.add_listener(forwarder)
            logger.info("Forwarding replay notifications to timeline webhook")

        app.state.session = sess
        try:
            yield
        finally:
            sess.stop()
            if forwarder is not None:
                await forwarder.aclose()

    app = FastAPI(title="Raid Emulator API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- routes ----------
    @app.get("/")
    async def root():
        return {"service": "raid-emulator-api", "env": settings.environment, "ok": True}

    @app.get("/healthz")
    async def healthz():
        return {"ok": True, "env": settings.environment}

    @app.post("/import/log-lines")
    @app.post("/api/import/log-lines")
    async def import_log_lines(request: Request, payload: ImportLogLines = Body(...)):
        sess = _session(request)
        added = sess.import_lines(payload.lines)
        return {
            "ok": True,
            "added": [_fight_entry(f) for f in added],
            "fight_count": len(sess.fights()),
        }

    @app.get("/fights")
    async def list_fights(request: Request):
        return {"fights": [_fight_entry(f) for f in _session(request).fights()]}

    @app.get("/fights/{key}")
    async def get_fight(request: Request, key: int):
        try:
            fight = _session(request).get_fight(key)
        except FightNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        entry = _fight_entry(fight)
        entry["info"] = fight_info(fight)
        return entry

    @app.post("/fights/{key}/select")
    async def select_fight(request: Request, key: int):
        try:
            fight = _session(request).select(key)
        except FightNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {"ok": True, "key": fight.key, "info": fight_info(fight)}

    @app.post("/replay/start")
    async def replay_start(request: Request, payload: ReplayStart = Body(...)):
        sess = _session(request)
        try:
            fight = await sess.start(payload.key)
        except FightNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except PlayerBusyError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except Exception as e:
            logger.exception("Replay start failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return {"ok": True, "key": fight.key, "status": sess.status()}

    @app.post("/replay/stop")
    async def replay_stop(request: Request):
        sess = _session(request)
        sess.stop()
        return {"ok": True, "status": sess.status()}

    @app.get("/replay/status")
    async def replay_status(request: Request):
        return _session(request).status()

    return app


app = create_app()


# ---------- uvicorn entry ----------
if __name__ == "__main__":
    import uvicorn

    _settings = app.state.settings
    logging.basicConfig(level=_settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("api_main:app", host="0.0.0.0", port=_settings.port, reload=False)
