"""
Batch ingestion for collector uploads.

Flow for one /sync body:
  1. Check the body shape: `logs` must be a list, else BatchShapeError.
  2. For each entry in order, try EventStore.create() with the token's user id.
  3. A failing entry is logged and skipped. Entries already saved stay saved;
     there is no batch transaction and nothing is rolled back.
  4. Report saved vs. total. Skip reasons stay server-side.

Retried uploads are stored again: there is no deduplication.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from chronos.store.events import EventStore

logger = logging.getLogger(__name__)


class BatchShapeError(ValueError):
    """The request body is not {"logs": [...]}."""


@dataclass
class BatchResult:
    saved: int = 0
    total: int = 0
    skipped: List[Tuple[int, str]] = field(default_factory=list)  # (index, reason)


def extract_entries(body: Any) -> List[Any]:
    """
    Raises:
        BatchShapeError: body is not an object or `logs` is not a list.
    """
    if not isinstance(body, dict):
        raise BatchShapeError("Logs must be an array")
    logs = body.get("logs")
    if not isinstance(logs, list):
        raise BatchShapeError("Logs must be an array")
    return logs


def ingest_batch(store: EventStore, owner_user_id: int, entries: List[Any]) -> BatchResult:
    """Persist each entry independently, strictly in list order."""
    result = BatchResult(total=len(entries))

    for index, entry in enumerate(entries):
        try:
            if not isinstance(entry, dict):
                raise TypeError(f"entry is {type(entry).__name__}, not an object")
            store.create(
                owner_user_id,
                entry.get("timestamp"),
                entry.get("type"),
                entry.get("data"),
            )
        except (ValidationError, TypeError) as exc:
            reason = _short_reason(exc)
            logger.warning("Skipping log entry %d for user %s: %s", index, owner_user_id, reason)
            result.skipped.append((index, reason))
            continue
        except SQLAlchemyError as exc:
            reason = f"storage error: {type(exc).__name__}"
            logger.warning("Skipping log entry %d for user %s: %s", index, owner_user_id, reason)
            result.skipped.append((index, reason))
            continue
        except Exception as exc:
            reason = f"unexpected error: {type(exc).__name__}"
            logger.exception("Skipping log entry %d for user %s: %s", index, owner_user_id, reason)
            result.skipped.append((index, reason))
            continue
        result.saved += 1

    logger.info(
        "Ingested batch for user %s: %d/%d saved",
        owner_user_id, result.saved, result.total,
    )
    return result


def _short_reason(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    return str(exc)
