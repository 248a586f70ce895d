"""FastAPI dependencies for catalog and session access.

Routers receive services through these functions so tests can swap them
with ``app.dependency_overrides``.
"""

from fastapi import Depends, HTTPException, status
from app.config.catalogs import CatalogRegistry, get_catalog_registry
from app.services.assessment_session import AssessmentSession
from app.services.session_service import SessionService, get_session_service
from app.utils.errors import SessionNotFoundError
import logging

logger = logging.getLogger(__name__)


def get_registry() -> CatalogRegistry:
    """Return the catalog registry."""
    return get_catalog_registry()


def get_sessions() -> SessionService:
    """Return the session service."""
    return get_session_service()


def get_assessment_session(
    session_id: str, sessions: SessionService = Depends(get_sessions)
) -> AssessmentSession:
    """Resolve the ``session_id`` path parameter to a live session.

    Raises:
        HTTP 404 – if no such session exists
    """
    try:
        return sessions.get_session(session_id)
    except SessionNotFoundError:
        logger.warning("Unknown session requested: %s", session_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
