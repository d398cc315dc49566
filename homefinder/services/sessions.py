"""
In-memory session registry.

Maps a session id to the SearchOrchestrator holding that conversation. State
is lost when the process restarts; a conversation lives exactly as long as its
orchestrator.
"""

import uuid
from collections import OrderedDict

import httpx
import structlog

from homefinder.config import RepliersConfig, SessionConfig
from homefinder.services.repliers import create_http_client
from homefinder.services.search_orchestrator import SearchOrchestrator

logger = structlog.get_logger(__name__)


class SessionRegistry:
    """Owns one orchestrator per conversation and the HTTP client they share.

    Bounded: once ``max_sessions`` conversations are open, the least recently
    used idle one is dropped to make room. A session whose search is still
    running is never evicted; if every session is busy the limit is exceeded.
    """

    def __init__(
        self,
        repliers_config: RepliersConfig | None = None,
        session_config: SessionConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.repliers_config = repliers_config or RepliersConfig()
        self.session_config = session_config or SessionConfig()
        self._client = client or create_http_client(self.repliers_config)
        self._sessions: OrderedDict[str, SearchOrchestrator] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, api_key: str | None) -> tuple[str, SearchOrchestrator]:
        """Open a new conversation and return its id and orchestrator."""
        while len(self._sessions) >= self.session_config.max_sessions:
            # Oldest first, skipping conversations with a search in flight
            evicted_id = next(
                (sid for sid, o in self._sessions.items() if not o.loading), None
            )
            if evicted_id is None:
                logger.warning("session_limit_exceeded", open_sessions=len(self._sessions))
                break
            self._sessions.pop(evicted_id).reset()
            logger.info("session_evicted", session_id=evicted_id)

        session_id = str(uuid.uuid4())
        orchestrator = SearchOrchestrator(
            api_key, repliers_config=self.repliers_config, client=self._client
        )
        self._sessions[session_id] = orchestrator
        logger.info("session_created", session_id=session_id, open_sessions=len(self._sessions))
        return session_id, orchestrator

    def get(self, session_id: str) -> SearchOrchestrator | None:
        orchestrator = self._sessions.get(session_id)
        if orchestrator is not None:
            self._sessions.move_to_end(session_id)
        return orchestrator

    async def delete(self, session_id: str) -> bool:
        """Close a conversation. Returns False when the id is unknown."""
        orchestrator = self._sessions.pop(session_id, None)
        if orchestrator is None:
            return False
        # Shared client: closing the orchestrator only drops its conversation
        await orchestrator.close()
        logger.info("session_deleted", session_id=session_id)
        return True

    async def close(self) -> None:
        """Drop every conversation and close the shared HTTP client."""
        for orchestrator in self._sessions.values():
            orchestrator.reset()
        self._sessions.clear()
        await self._client.aclose()
