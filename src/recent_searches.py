# ABOUTME: Persistent, capped list of recent weather searches (most recent first).
# ABOUTME: Stored as a JSON array on disk; unreadable or corrupt files load as an empty list.

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_RECENT_SEARCHES = 5


class RecentSearchStore:
    """Most-recent-first, duplicate-free list of city names, capped at MAX_RECENT_SEARCHES."""

    def __init__(self, path: Path, limit: int = MAX_RECENT_SEARCHES):
        self.path = Path(path)
        self.limit = limit

    def load(self) -> list[str]:
        """Return the persisted list, or an empty list if none exists or it cannot be parsed."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Could not read recent searches from %s: %r", self.path, e)
            return []

        try:
            entries = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring corrupt recent searches file %s", self.path)
            return []
        if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
            logger.warning("Ignoring malformed recent searches in %s", self.path)
            return []
        return entries[: self.limit]

    def record(self, entry: str) -> list[str]:
        """Move entry to the front (inserting it if new), drop the oldest beyond the cap, and persist."""
        updated = [entry] + [e for e in self.load() if e != entry]
        updated = updated[: self.limit]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(updated), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not persist recent searches to %s: %r", self.path, e)
        return updated
