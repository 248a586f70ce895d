"""Scoring and risk classification for assessment sessions.

All functions here are pure: the same session state always yields the same
score, band and result.
"""

from typing import List
from app.models.catalog import RiskBand
from app.models.session import AssessmentResult, CategoryResponse
from app.services.assessment_session import AssessmentSession
from app.utils.errors import IncompleteSessionError


def compute_score(session: AssessmentSession, allow_partial: bool = False) -> int:
    """
    Sum the severities of all recorded answers.

    Args:
        session: Session to score
        allow_partial: Score an unfinished session over the categories
            answered so far (progress display only, never a final result)

    Raises:
        IncompleteSessionError: Session not completed and allow_partial is False
    """
    if not session.is_completed and not allow_partial:
        raise IncompleteSessionError(
            f"Session {session.session_id} is not completed "
            f"(step {session.step_index + 1} of {session.catalog.category_count()})"
        )
    return sum(answer.severity for answer in session.answers.values())


def compute_risk_band(session: AssessmentSession) -> RiskBand:
    """Classify a completed session's score with its catalog's band table."""
    return session.catalog.classify(compute_score(session))


def summarize_responses(session: AssessmentSession) -> List[CategoryResponse]:
    """Per-category answer summary in catalog order."""
    responses = []
    for category in session.catalog.categories:
        answer = session.answer_for(category.id)
        option = category.get_option(answer.option_id) if answer else None
        if option is None:
            responses.append(
                CategoryResponse(category_id=category.id, category_label=category.label)
            )
            continue
        responses.append(
            CategoryResponse(
                category_id=category.id,
                category_label=category.label,
                option_id=option.id,
                option_label=option.label,
                severity=option.severity,
            )
        )
    return responses


def build_assessment_result(session: AssessmentSession) -> AssessmentResult:
    """
    Build the result shown on the results screen.

    Raises:
        IncompleteSessionError: Session not completed
    """
    catalog = session.catalog
    score = compute_score(session)
    band = catalog.classify(score)

    return AssessmentResult(
        catalog_id=catalog.id,
        score=score,
        max_score=catalog.max_score(),
        band=band,
        responses=summarize_responses(session),
        requires_vet_referral=catalog.requires_escalation(band),
        disclaimer=catalog.disclaimer,
    )
