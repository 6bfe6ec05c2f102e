"""
Local activity log kept by the desktop collector.

Observers append one line per event; the sync pass later parses the lines
back into upload entries. Line format (times are UTC):

    2025-09-02 13:02:55 - Active window: 'Inbox - Mail' (proc: outlook.exe)
    2025-09-02 13:03:10 - Browser (Firefox) visit: 2025-09-02 13:03:08 | Docs | https://example.com/
    2025-09-02 13:04:00 - Input: keyboard

Any other line (diagnostics) is ignored by the parser.
"""
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR = " - "

_WINDOW_RE = re.compile(r"^Active window: '(?P<title>.*)' \(proc: (?P<proc>[^()]*)\)$")
_BROWSER_RE = re.compile(
    r"^Browser \((?P<browser>[^)]+)\) visit: (?P<visited>[^|]+?) \| (?P<title>.*) \| (?P<url>\S+)$"
)
_INPUT_RE = re.compile(r"^Input: (?P<kind>keyboard|mouse)$")


class ActivityLog:
    """Append-only text log at `path`."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def append(self, message: str, now: Optional[datetime] = None) -> None:
        stamp = (now or datetime.utcnow()).strftime(TIMESTAMP_FORMAT)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(f"{stamp}{SEPARATOR}{message}\n")

    def record_window(self, title: str, process_name: str, now: Optional[datetime] = None) -> None:
        self.append(f"Active window: '{title}' (proc: {process_name})", now=now)

    def record_browser_visit(
        self,
        browser_name: str,
        title: str,
        url: str,
        visited_at: datetime,
        now: Optional[datetime] = None,
    ) -> None:
        visited = visited_at.strftime(TIMESTAMP_FORMAT)
        self.append(f"Browser ({browser_name}) visit: {visited} | {title} | {url}", now=now)

    def record_input(self, kind: str, now: Optional[datetime] = None) -> None:
        if kind not in ("keyboard", "mouse"):
            raise ValueError(f"Unknown input kind {kind!r}")
        self.append(f"Input: {kind}", now=now)

    def read_from(self, offset: int) -> Tuple[List[str], int]:
        """
        Return complete lines written after byte `offset`, plus the new offset.

        A trailing partial line (writer mid-append) is left for the next read.
        If the file shrank below `offset` it is read from the start.
        """
        if not self.path.exists():
            return [], 0
        size = self.path.stat().st_size
        if offset > size:
            offset = 0
        with self.path.open("rb") as fh:
            fh.seek(offset)
            chunk = fh.read()
        end = chunk.rfind(b"\n")
        if end == -1:
            return [], offset
        complete = chunk[: end + 1]
        lines = complete.decode("utf-8", errors="replace").splitlines()
        return lines, offset + len(complete)


def parse_log_line(line: str) -> Optional[Dict[str, Any]]:
    """Turn one log line into a sync entry dict, or None if it isn't an event."""
    stamp, sep, content = line.strip().partition(SEPARATOR)
    if not sep:
        return None
    try:
        logged_at = datetime.strptime(stamp.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        return None
    content = content.strip()

    m = _WINDOW_RE.match(content)
    if m:
        return {
            "timestamp": logged_at.isoformat(),
            "type": "window",
            "data": {"windowTitle": m.group("title"), "processName": m.group("proc")},
        }

    m = _BROWSER_RE.match(content)
    if m:
        try:
            visited_at = datetime.strptime(m.group("visited").strip(), TIMESTAMP_FORMAT)
        except ValueError:
            visited_at = logged_at
        return {
            "timestamp": visited_at.isoformat(),
            "type": "browser",
            "data": {
                "url": m.group("url"),
                "browserTitle": m.group("title").strip(),
                "browserName": m.group("browser"),
            },
        }

    m = _INPUT_RE.match(content)
    if m:
        return {"timestamp": logged_at.isoformat(), "type": m.group("kind"), "data": {}}

    return None


def parse_log_lines(lines: List[str]) -> List[Dict[str, Any]]:
    entries = []
    for line in lines:
        entry = parse_log_line(line)
        if entry is not None:
            entries.append(entry)
    return entries
