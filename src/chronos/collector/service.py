"""
CollectorService: one sync pass from the local activity log to the server.

Flow:
  1. Read complete lines appended since the acknowledged offset.
  2. Parse them into entries (non-event lines are dropped).
  3. POST the entries as one batch.
  4. On success, persist the new offset. On failure, keep the old one so the
     next pass re-sends the same lines. Entries the server already stored
     before the failure are stored again: duplicates are accepted.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from chronos.collector.activity_log import ActivityLog, parse_log_lines
from chronos.collector.client import SyncClient

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "sync_state.json"
LOG_FILE_NAME = "activity_log.txt"


@dataclass
class SyncPassResult:
    sent: int = 0
    saved: int = 0


class CollectorService:
    def __init__(self, log: ActivityLog, client: SyncClient, state_path: Path):
        self.log = log
        self.client = client
        self.state_path = Path(state_path)

    def load_offset(self) -> int:
        if not self.state_path.exists():
            return 0
        try:
            state = json.loads(self.state_path.read_text())
        except json.JSONDecodeError:
            logger.warning("Corrupt sync state at %s; starting from the beginning", self.state_path)
            return 0
        return int(state.get("offset", 0))

    def save_offset(self, offset: int) -> None:
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps({"offset": offset}))

    async def sync_once(self) -> SyncPassResult:
        """
        Upload everything logged since the last successful pass.

        Raises:
            SyncError: upload failed; the offset is left unchanged.
        """
        offset = self.load_offset()
        lines, new_offset = self.log.read_from(offset)
        entries = parse_log_lines(lines)

        if not entries:
            if new_offset != offset:
                self.save_offset(new_offset)
            logger.debug("No new log entries to sync")
            return SyncPassResult()

        response = await self.client.push(entries)
        self.save_offset(new_offset)

        saved = int(response.get("saved", 0))
        logger.info("Synced %d log entries to server (%d saved)", len(entries), saved)
        return SyncPassResult(sent=len(entries), saved=saved)
