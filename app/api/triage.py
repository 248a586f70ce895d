"""Symptom triage API endpoints.

Drives the guided questionnaire: start a session, answer the displayed
question, navigate back and forth, then read the scored result and the
handoff targets for chat and the vet finder.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.api.dependencies import get_assessment_session, get_registry, get_sessions
from app.config.catalogs import CatalogRegistry
from app.config.settings import settings
from app.models.catalog import TriageCatalog
from app.models.messages import (
    AnswerRequest,
    CatalogListResponse,
    NavigationTarget,
    ResponsesSummary,
    SessionStateResponse,
    StartSessionRequest,
)
from app.models.session import AssessmentResult
from app.services.assessment_session import AssessmentSession
from app.services.handoff_service import chat_handoff, vet_finder_handoff
from app.services.scoring import (
    build_assessment_result,
    compute_score,
    summarize_responses,
)
from app.services.session_service import SessionService
from app.utils.errors import (
    CatalogNotFoundError,
    IncompleteSessionError,
    InvalidOptionError,
    InvalidTransitionError,
    OutOfRangeError,
    SessionNotFoundError,
    TriageError,
)
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/triage", tags=["Triage"])


def _to_http_exception(error: TriageError) -> HTTPException:
    """Translate an engine error into an HTTP error."""
    if isinstance(error, InvalidOptionError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, (InvalidTransitionError, IncompleteSessionError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, (CatalogNotFoundError, OutOfRangeError)):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_400_BAD_REQUEST
    logger.warning(f"Rejected triage request: {error}")
    return HTTPException(status_code=code, detail=str(error))


def _session_state(session: AssessmentSession) -> SessionStateResponse:
    catalog = session.catalog
    return SessionStateResponse(
        session_id=session.session_id,
        catalog_id=catalog.id,
        created_at=session.created_at,
        phase=session.phase,
        step_index=session.step_index,
        total_steps=catalog.category_count(),
        progress_percent=session.progress_percent,
        current_category=session.current_category,
        answers=[
            session.answers[category.id]
            for category in catalog.categories
            if category.id in session.answers
        ],
        partial_score=compute_score(session, allow_partial=True),
        pending_advance=session.has_pending_advance,
        can_go_back=session.can_go_back,
        can_go_forward=session.can_go_forward,
    )


@router.get("/catalogs", response_model=CatalogListResponse)
async def list_catalogs(registry: CatalogRegistry = Depends(get_registry)):
    """List registered triage catalogs."""
    return CatalogListResponse(
        default_catalog_id=settings.default_catalog_id, catalogs=registry.ids()
    )


@router.get("/catalogs/{catalog_id}", response_model=TriageCatalog)
async def get_catalog(catalog_id: str, registry: CatalogRegistry = Depends(get_registry)):
    """Return a full catalog: questions, options, severities and bands."""
    try:
        return registry.get(catalog_id)
    except CatalogNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Catalog not found: {e.args[0]}",
        )


@router.post(
    "/sessions",
    response_model=SessionStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session(
    request: Optional[StartSessionRequest] = None,
    sessions: SessionService = Depends(get_sessions),
):
    """
    Start a new assessment.

    Returns the session snapshot positioned on the first question.
    """
    catalog_id = request.catalog_id if request else None
    try:
        session = sessions.create_session(catalog_id)
    except CatalogNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Catalog not found: {e.args[0]}",
        )
    return _session_state(session)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
async def get_session_state(
    session: AssessmentSession = Depends(get_assessment_session),
):
    """Current snapshot of a session."""
    return _session_state(session)


@router.post("/sessions/{session_id}/answers", response_model=SessionStateResponse)
async def select_answer(
    request: AnswerRequest,
    session: AssessmentSession = Depends(get_assessment_session),
):
    """
    Answer the displayed question.

    The move to the next question happens after the configured advance
    delay; ``pending_advance`` is true until it fires.
    """
    try:
        session.select_answer(request.category_id, request.option_id)
    except TriageError as e:
        raise _to_http_exception(e)
    return _session_state(session)


@router.post("/sessions/{session_id}/back", response_model=SessionStateResponse)
async def go_back(session: AssessmentSession = Depends(get_assessment_session)):
    """Return to the previous question; ignored on the first one."""
    try:
        session.go_back()
    except TriageError as e:
        raise _to_http_exception(e)
    return _session_state(session)


@router.post("/sessions/{session_id}/forward", response_model=SessionStateResponse)
async def go_forward(session: AssessmentSession = Depends(get_assessment_session)):
    """Advance past an already answered question."""
    try:
        session.go_forward()
    except TriageError as e:
        raise _to_http_exception(e)
    return _session_state(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionStateResponse)
async def reset_session(session: AssessmentSession = Depends(get_assessment_session)):
    """Start over with no answers."""
    session.reset()
    return _session_state(session)


@router.get("/sessions/{session_id}/responses", response_model=ResponsesSummary)
async def get_responses(session: AssessmentSession = Depends(get_assessment_session)):
    """Answers so far in catalog order; unanswered categories are marked."""
    return ResponsesSummary(
        session_id=session.session_id, responses=summarize_responses(session)
    )


@router.get("/sessions/{session_id}/result", response_model=AssessmentResult)
async def get_result(session: AssessmentSession = Depends(get_assessment_session)):
    """
    Scored result of a completed assessment.

    Returns 409 while questions remain, so a partial score is never shown
    as final.
    """
    try:
        return build_assessment_result(session)
    except TriageError as e:
        raise _to_http_exception(e)


@router.get("/sessions/{session_id}/handoff/chat", response_model=NavigationTarget)
async def get_chat_handoff(
    session: AssessmentSession = Depends(get_assessment_session),
):
    """Navigation target for discussing the assessment in chat."""
    try:
        return chat_handoff(session)
    except TriageError as e:
        raise _to_http_exception(e)


@router.get(
    "/sessions/{session_id}/handoff/vet-finder", response_model=NavigationTarget
)
async def get_vet_finder_handoff(
    session: AssessmentSession = Depends(get_assessment_session),
):
    """Navigation target for finding a vet; only offered for urgent results."""
    try:
        return vet_finder_handoff(session)
    except TriageError as e:
        raise _to_http_exception(e)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str, sessions: SessionService = Depends(get_sessions)
):
    """Discard a session. Returns 204 No Content on success."""
    try:
        sessions.delete_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
