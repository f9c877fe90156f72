"""
FastAPI Backend for the Outreach Planner

Receives Linkt webhooks, triggers the outreach pipeline, and serves the
stored signals, outreach content and landing pages to the listing UI.
"""

from typing import Any, Dict, List
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger
from pydantic import BaseModel

from outreach_planner.core.orchestrator import OutreachOrchestrator, build_orchestrator
from outreach_planner.core.signal import PipelineInput
from outreach_planner.models.base import init_db
from outreach_planner.storage.signal_store import SignalStore

AGENT_NAME = "outreach-planner"

app = FastAPI(
    title="Outreach Planner API",
    description="Turns Linkt business signals into outreach content and landing pages",
    version="0.1.0"
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Response models
class SignalListResponse(BaseModel):
    signals: List[Dict[str, Any]]
    total: int


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    agent: str


@lru_cache()
def get_signal_store() -> SignalStore:
    init_db()
    return SignalStore()


@lru_cache()
def get_orchestrator() -> OutreachOrchestrator:
    return build_orchestrator(store=get_signal_store())


def _not_found(message: str = "Signal not found") -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": message})


async def run_pipeline_in_background(orchestrator: OutreachOrchestrator, payload: Dict[str, Any]):
    """Detached webhook processing; outcomes are only visible in the store"""
    try:
        result = await orchestrator.run(PipelineInput(webhook=payload))
        logger.info(f"Webhook processing finished: {result.message}")
    except Exception as e:
        logger.error(f"Webhook processing failed: {e}")


@app.post("/webhook/linkt")
async def linkt_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    orchestrator: OutreachOrchestrator = Depends(get_orchestrator),
):
    """Acknowledge a Linkt webhook immediately and process it afterwards"""
    data = await request.json()
    body = data if isinstance(data, dict) else {}
    resources = (body.get("data") or {}).get("resources") or {}
    signal_ids = resources.get("signals_created") or []

    logger.info(f"Received Linkt webhook with {len(signal_ids)} signal IDs")

    background_tasks.add_task(run_pipeline_in_background, orchestrator, data)

    return {"received": True, "processing": True, "signalIds": signal_ids}


@app.post("/webhook/linkt-sync")
async def linkt_webhook_sync(
    request: Request,
    orchestrator: OutreachOrchestrator = Depends(get_orchestrator),
):
    """Process a Linkt webhook (or an inline {"signal": ...} body) before responding"""
    data = await request.json()
    payload = {"webhook": data} if isinstance(data, dict) and data.get("event_type") else data

    logger.info(f"Received Linkt sync webhook (inline signal: {'signal' in (data or {})})")

    try:
        result = await orchestrator.run(payload)
        return {"received": True, "result": result.model_dump(by_alias=True, exclude_none=True)}
    except Exception as e:
        logger.error(f"Webhook sync processing failed: {e}")
        return JSONResponse(status_code=500, content={"received": False, "error": str(e)})


@app.get("/signals", response_model=SignalListResponse)
def list_signals(store: SignalStore = Depends(get_signal_store)):
    """All stored signals, newest first"""
    signals = [stored.to_record() for stored in store.list_signals()]
    return SignalListResponse(signals=signals, total=len(signals))


@app.get("/signals/{signal_id}")
def get_signal(signal_id: str, store: SignalStore = Depends(get_signal_store)):
    stored = store.get(signal_id)
    if stored is None:
        return _not_found()
    return stored.to_record()


@app.post("/signals/{signal_id}/regenerate")
async def regenerate_signal(
    signal_id: str,
    store: SignalStore = Depends(get_signal_store),
    orchestrator: OutreachOrchestrator = Depends(get_orchestrator),
):
    """Re-run the pipeline for a stored signal, replacing its record"""
    stored = store.get(signal_id)
    if stored is None:
        return _not_found()

    result = await orchestrator.run(
        PipelineInput(
            signal=stored.signal,
            entities=stored.entities or [],
            linkt_signal=stored.linkt_signal,
        )
    )
    return result.model_dump(by_alias=True, exclude_none=True)


@app.delete("/signals/{signal_id}")
def delete_signal(signal_id: str, store: SignalStore = Depends(get_signal_store)):
    store.delete(signal_id)
    return {"success": True, "message": "Signal deleted"}


@app.get("/landing/{signal_id}")
def get_landing_page(signal_id: str, store: SignalStore = Depends(get_signal_store)):
    stored = store.get(signal_id)
    if stored is None:
        return _not_found()

    if not stored.landing_page_html:
        return _not_found("Landing page not available for this signal")

    return HTMLResponse(content=stored.landing_page_html)


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        agent=AGENT_NAME,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
