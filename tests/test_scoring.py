"""
Scoring and classification tests.

End-to-end scenarios against the reference dog catalog, determinism of
repeated scoring, and refusal to score unfinished sessions.
"""

import pytest

from app.services.assessment_session import AssessmentSession
from app.services.scoring import (
    build_assessment_result,
    compute_risk_band,
    compute_score,
    summarize_responses,
)
from app.utils.errors import IncompleteSessionError
from triage_helpers import answer_all


@pytest.fixture
def session(dog_catalog) -> AssessmentSession:
    return AssessmentSession(dog_catalog)


@pytest.mark.parametrize(
    "severities,score,band",
    [
        ([0, 1, 0, 1, 0], 2, "low"),
        ([1, 3, 3, 2, 1], 10, "urgent"),
        ([4, 5, 5, 4, 4], 22, "emergency"),
        ([0, 0, 0, 0, 0], 0, "low"),
        ([3, 0, 0, 0, 0], 3, "low"),
        ([3, 1, 0, 0, 0], 4, "moderate"),
        ([3, 3, 1, 0, 0], 7, "moderate"),
        ([3, 3, 1, 1, 0], 8, "urgent"),
        ([4, 5, 3, 0, 0], 12, "urgent"),
        ([4, 5, 3, 1, 0], 13, "emergency"),
    ],
)
def test_end_to_end(session, severities, score, band):
    answer_all(session, severities)
    assert compute_score(session) == score
    assert compute_risk_band(session).id == band


def test_scoring_is_deterministic(session):
    answer_all(session, [1, 3, 3, 2, 1])
    scores = {compute_score(session) for _ in range(5)}
    bands = {compute_risk_band(session).id for _ in range(5)}
    assert scores == {10}
    assert bands == {"urgent"}
    assert build_assessment_result(session) == build_assessment_result(session)


def test_replay_gives_same_result(dog_catalog):
    results = []
    for _ in range(3):
        session = AssessmentSession(dog_catalog)
        answer_all(session, [4, 5, 5, 4, 4])
        results.append((compute_score(session), compute_risk_band(session).id))
    assert results == [(22, "emergency")] * 3


def test_back_navigation_reanswer_counts_latest_only(session):
    session.select_answer("eating", "normal")
    session.select_answer("energy", "lethargic")  # severity 3
    session.go_back()
    session.select_answer("energy", "normal")  # severity 0
    answer_all(session, [0, 0, 0])

    assert compute_score(session) == 0
    assert compute_risk_band(session).id == "low"


def test_incomplete_session_refused(session):
    answer_all(session, [4, 5])
    with pytest.raises(IncompleteSessionError):
        compute_score(session)
    with pytest.raises(IncompleteSessionError):
        compute_risk_band(session)
    with pytest.raises(IncompleteSessionError):
        build_assessment_result(session)


def test_partial_score_on_request(session):
    answer_all(session, [4, 5])
    assert compute_score(session, allow_partial=True) == 9


class TestAssessmentResult:
    def test_urgent_result_requires_referral(self, session):
        answer_all(session, [1, 3, 3, 2, 1])
        result = build_assessment_result(session)

        assert result.catalog_id == "dog"
        assert result.score == 10
        assert result.max_score == 22
        assert result.band.id == "urgent"
        assert result.band.title == "Urgent - See Vet Today"
        assert len(result.band.recommendations) == 4
        assert result.requires_vet_referral is True
        assert "does not replace professional veterinary advice" in result.disclaimer

    def test_moderate_result_has_no_referral(self, session):
        answer_all(session, [3, 3, 1, 0, 0])
        result = build_assessment_result(session)
        assert result.band.id == "moderate"
        assert result.requires_vet_referral is False

    def test_responses_follow_catalog_order(self, session):
        answer_all(session, [0, 1, 0, 1, 0])
        responses = build_assessment_result(session).responses

        assert [r.category_id for r in responses] == [
            "eating",
            "energy",
            "breathing",
            "digestive",
            "pain",
        ]
        assert responses[1].category_label == "Energy Level"
        assert responses[1].option_label == "More tired than usual"
        assert responses[3].option_label == "Once or twice"

    def test_unanswered_categories_marked(self, session):
        answer_all(session, [1])
        responses = summarize_responses(session)
        assert responses[0].option_id == "reduced"
        assert responses[1].option_id is None
        assert responses[1].option_label == "Not answered"
