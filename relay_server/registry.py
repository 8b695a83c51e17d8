"""
Registry of connected client sessions.

All membership changes and broadcasts go through one lock so a broadcast
always sees a complete membership set.
"""

import asyncio
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Registry:
    """
    Concurrency-safe set of active sessions.

    Sessions are keyed by their session_id. Callers never iterate the
    members directly; they use add, remove, broadcast and count.
    """

    def __init__(self):
        self._sessions: Dict[int, "ClientSession"] = {}
        # created on first use so it binds to the loop that runs the server
        self._lock = None

    @property
    def lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def add(self, session) -> int:
        """Register a session and return the membership count."""
        async with self.lock:
            self._sessions[session.session_id] = session
            return len(self._sessions)

    async def remove(self, session) -> Optional[int]:
        """
        Unregister a session.

        Returns the membership count after removal, or None if the session
        was not registered. Removing twice is a no-op.
        """
        async with self.lock:
            if self._sessions.pop(session.session_id, None) is None:
                return None
            return len(self._sessions)

    async def count(self) -> int:
        async with self.lock:
            return len(self._sessions)

    async def broadcast(self, message: str, exclude=None) -> int:
        """
        Send message to every registered session except exclude.

        A failed send is logged and skipped, the remaining recipients still
        get the message. Returns the number of successful deliveries.
        """
        delivered = 0
        async with self.lock:
            for session in list(self._sessions.values()):
                if session is exclude:
                    continue
                try:
                    await session.send(message)
                    delivered += 1
                except (ConnectionResetError, BrokenPipeError, ConnectionAbortedError, OSError) as e:
                    logger.error(f"Error@{session.format_addr()} in broadcast(): {e}")
                except Exception as e:
                    logger.error(f"Unexpected error@{session.format_addr()} in broadcast(): {type(e).__name__}: {e}")
        logger.debug(f"broadcast(): {message!r} delivered to {delivered} client(s)")
        return delivered
