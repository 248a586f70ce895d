"""Assessment session management service."""

from app.config.catalogs import CatalogRegistry, get_catalog_registry
from app.config.settings import settings
from app.services.assessment_session import AssessmentSession
from app.utils.errors import SessionNotFoundError
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class SessionService:
    """Service for managing in-memory assessment sessions.

    Sessions are discarded on delete or process exit; nothing is persisted.
    Once max_sessions are held, creating another evicts the oldest.
    """

    def __init__(
        self,
        registry: Optional[CatalogRegistry] = None,
        advance_delay: Optional[float] = None,
        max_sessions: Optional[int] = None,
    ):
        self.registry = registry or get_catalog_registry()
        self.advance_delay = (
            settings.advance_delay_seconds if advance_delay is None else advance_delay
        )
        self.max_sessions = max(
            settings.max_sessions if max_sessions is None else max_sessions, 1
        )
        self._sessions: Dict[str, AssessmentSession] = {}

    def create_session(self, catalog_id: Optional[str] = None) -> AssessmentSession:
        """
        Create a new assessment session.

        Args:
            catalog_id: Catalog to walk (defaults to settings.default_catalog_id)

        Returns:
            Created AssessmentSession

        Raises:
            CatalogNotFoundError: Unknown catalog id
        """
        catalog = self.registry.get(catalog_id or settings.default_catalog_id)
        while len(self._sessions) >= self.max_sessions:
            self._evict_oldest()
        session = AssessmentSession(catalog, advance_delay=self.advance_delay)
        self._sessions[session.session_id] = session

        logger.info(
            f"Created session {session.session_id} with catalog '{catalog.id}'"
        )
        return session

    def get_session(self, session_id: str) -> AssessmentSession:
        """
        Get a session by ID.

        Raises:
            SessionNotFoundError: Unknown session id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete_session(self, session_id: str) -> None:
        """
        Discard a session, cancelling any pending advance.

        Raises:
            SessionNotFoundError: Unknown session id
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.close()
        logger.info(f"Deleted session {session_id}")

    def _evict_oldest(self) -> None:
        oldest = min(self._sessions.values(), key=lambda s: s.created_at)
        del self._sessions[oldest.session_id]
        oldest.close()
        logger.warning(
            f"Session limit {self.max_sessions} reached; evicted {oldest.session_id}"
        )

    def list_session_ids(self) -> List[str]:
        return list(self._sessions)

    def clear(self) -> None:
        """Discard every session."""
        for session in self._sessions.values():
            session.close()
        count = len(self._sessions)
        self._sessions.clear()
        if count:
            logger.info(f"Discarded {count} active sessions")


# Global service instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get or create SessionService instance."""
    global _session_service
    if _session_service is None:
        _session_service = SessionService()
    return _session_service
