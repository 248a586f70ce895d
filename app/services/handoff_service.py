"""Handoff of completed assessments to the chat and vet-finder collaborators.

The chat collaborator receives the assessment findings as structured
context, the same way image analyses forward theirs. The vet finder is a
plain trigger offered only at or above the catalog's escalation band.
"""

from app.config.settings import settings
from app.models.messages import NavigationTarget
from app.models.session import TriageChatContext
from app.models.triage import HandoffTarget
from app.services.assessment_session import AssessmentSession
from app.services.scoring import build_assessment_result
from app.utils.errors import InvalidTransitionError
import logging

logger = logging.getLogger(__name__)


def build_chat_context(session: AssessmentSession) -> TriageChatContext:
    """
    Collect a completed session's findings for the chat collaborator.

    Raises:
        IncompleteSessionError: Session not completed
    """
    result = build_assessment_result(session)
    return TriageChatContext(
        catalog_id=result.catalog_id,
        score=result.score,
        risk_level=result.band.id,
        risk_title=result.band.title,
        action=result.band.action,
        responses=[r for r in result.responses if r.option_id is not None],
    )


def render_chat_context(context: TriageChatContext) -> str:
    """Render chat context as a prompt section."""
    parts = ["Symptom Check Context:"]
    parts.append(f"Risk level: {context.risk_title or context.risk_level}")
    parts.append(f"Score: {context.score}")
    if context.action:
        parts.append(f"Recommended action: {context.action}")
    for response in context.responses:
        parts.append(f"- {response.category_label}: {response.option_label}")
    return "\n".join(parts)


def chat_handoff(session: AssessmentSession) -> NavigationTarget:
    """
    Navigation target for "discuss with the assistant".

    Context is attached when the session is completed and
    settings.chat_handoff_include_assessment is enabled.
    """
    if not settings.chat_handoff_include_assessment or not session.is_completed:
        return NavigationTarget(target=HandoffTarget.CHAT, route=settings.chat_route)

    context = build_chat_context(session)
    logger.info(
        f"Forwarding session {session.session_id} to chat "
        f"(risk={context.risk_level}, score={context.score})"
    )
    return NavigationTarget(
        target=HandoffTarget.CHAT,
        route=settings.chat_route,
        state={
            "triageContext": context.model_dump(),
            "prompt_context": render_chat_context(context),
        },
    )


def vet_finder_handoff(session: AssessmentSession) -> NavigationTarget:
    """
    Navigation target for the vet finder.

    Raises:
        IncompleteSessionError: Session not completed
        InvalidTransitionError: Result ranks below the escalation band
    """
    result = build_assessment_result(session)
    if not result.requires_vet_referral:
        raise InvalidTransitionError(
            f"Vet finder is offered from '{session.catalog.escalation_band_id}' "
            f"upwards; session {session.session_id} is '{result.band.id}'"
        )
    logger.info(
        f"Offering vet finder for session {session.session_id} ({result.band.id})"
    )
    return NavigationTarget(
        target=HandoffTarget.VET_FINDER, route=settings.vet_finder_route
    )
