"""Collector batch upload route."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from chronos.api.deps import get_event_store, require_collector
from chronos.auth.tokens import CollectorClaims
from chronos.ingest.batch import BatchShapeError, extract_entries, ingest_batch
from chronos.store.events import EventStore

logger = logging.getLogger(__name__)

router = APIRouter()


class SyncResponse(BaseModel):
    message: str
    saved: int
    total: int


@router.post("", response_model=SyncResponse)
async def sync_logs(
    request: Request,
    claims: CollectorClaims = Depends(require_collector),
    store: EventStore = Depends(get_event_store),
):
    """
    Accept a batch of activity entries from the desktop collector.
    Bad entries are skipped; the response only reports counts.

    The body is read only after the token has been accepted.
    """
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Logs must be an array")

    try:
        entries = extract_entries(body)
    except BatchShapeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    result = await run_in_threadpool(ingest_batch, store, claims.user_id, entries)
    return SyncResponse(
        message="Logs synced successfully",
        saved=result.saved,
        total=result.total,
    )
