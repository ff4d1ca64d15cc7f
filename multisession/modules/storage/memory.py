import time
from typing import Dict, Optional, Tuple

from .base import BaseStore


class InMemoryStore(BaseStore):
    """Process-local store; data is lost on restart and not shared between workers."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # session_id -> (payload, expires_at)
        self._data: Dict[str, Tuple[str, float]] = {}

    async def _load(self, session_id: str) -> Optional[str]:
        entry = self._data.get(session_id)
        if entry is None:
            return None
        payload, expires_at = entry
        if expires_at <= time.time():
            del self._data[session_id]
            return None
        return payload

    async def _write(self, session_id: str, payload: str, ttl: int) -> None:
        self._data[session_id] = (payload, time.time() + ttl)

    async def _delete(self, session_id: str) -> None:
        self._data.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """
        Drop expired entries.

        Returns:
            Number of sessions cleaned up
        """
        now = time.time()
        expired = [sid for sid, (_, expires_at) in self._data.items() if expires_at <= now]
        for session_id in expired:
            del self._data[session_id]
        return len(expired)

    def __len__(self) -> int:
        return len(self._data)
