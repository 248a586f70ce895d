"""
Assessment session state machine tests.

Sessions here use a zero advance delay, so each answer moves the session
synchronously. Deferred advance is covered in test_deferred_advance.py.
"""

import pytest

from app.models.catalog import Category, Option, RiskBand, TriageCatalog
from app.models.triage import AssessmentPhase
from app.services.assessment_session import AssessmentSession
from app.utils.errors import InvalidOptionError, InvalidTransitionError
from triage_helpers import answer_all


@pytest.fixture
def session(dog_catalog) -> AssessmentSession:
    return AssessmentSession(dog_catalog)


class TestInitialState:
    def test_starts_asking_first_question(self, session):
        assert session.phase == AssessmentPhase.ASKING
        assert session.step_index == 0
        assert session.answers == {}
        assert session.current_category.id == "eating"

    def test_navigation_flags(self, session):
        assert not session.can_go_back
        assert not session.can_go_forward
        assert not session.has_pending_advance

    def test_progress_counts_current_question(self, session):
        assert session.progress_percent == 20

    @pytest.mark.parametrize("step,expected", [(0, 13), (1, 25), (2, 38), (7, 100)])
    def test_progress_rounds_halves_up(self, step, expected):
        catalog = TriageCatalog(
            id="eight",
            categories=tuple(
                Category(
                    id=f"c{i}",
                    label=f"C{i}",
                    options=(Option(id="ok", label="Fine", severity=0),),
                )
                for i in range(8)
            ),
            bands=(RiskBand(id="only"),),
            escalation_band_id="only",
        )
        session = AssessmentSession(catalog)
        session.step_index = step
        assert session.progress_percent == expected

    def test_session_ids_are_unique(self, dog_catalog):
        assert AssessmentSession(dog_catalog).session_id != AssessmentSession(
            dog_catalog
        ).session_id


class TestSelectAnswer:
    def test_records_answer_and_advances(self, session):
        answer = session.select_answer("eating", "reduced")
        assert answer.severity == 1
        assert session.answers["eating"].option_id == "reduced"
        assert session.step_index == 1
        assert session.current_category.id == "energy"

    def test_last_answer_completes(self, session):
        answer_all(session, [0, 0, 0, 0, 0])
        assert session.phase == AssessmentPhase.COMPLETED
        assert session.is_completed
        assert session.current_category is None
        assert session.progress_percent == 100

    def test_invalid_option(self, session):
        with pytest.raises(InvalidOptionError) as exc_info:
            session.select_answer("eating", "struggling")
        assert exc_info.value.category_id == "eating"
        assert session.answers == {}
        assert session.step_index == 0

    def test_out_of_order_category_rejected(self, session):
        with pytest.raises(InvalidTransitionError):
            session.select_answer("breathing", "normal")
        assert session.answers == {}

    def test_answer_after_completion_rejected(self, session):
        answer_all(session, [0, 0, 0, 0, 0])
        with pytest.raises(InvalidTransitionError):
            session.select_answer("pain", "severe")

    def test_answers_view_is_a_copy(self, session):
        session.select_answer("eating", "normal")
        session.answers.clear()
        assert "eating" in session.answers


class TestNavigation:
    def test_go_back_is_noop_on_first_question(self, session):
        session.go_back()
        assert session.step_index == 0
        assert session.phase == AssessmentPhase.ASKING

    def test_go_back_keeps_previous_answer(self, session):
        session.select_answer("eating", "not_eating")
        session.go_back()
        assert session.step_index == 0
        assert session.answers["eating"].option_id == "not_eating"
        assert session.can_go_forward

    def test_go_back_after_completion_rejected(self, session):
        answer_all(session, [0, 0, 0, 0, 0])
        with pytest.raises(InvalidTransitionError):
            session.go_back()

    def test_go_forward_requires_answer(self, session):
        with pytest.raises(InvalidTransitionError):
            session.go_forward()

    def test_go_forward_over_answered_question(self, session):
        session.select_answer("eating", "normal")
        session.select_answer("energy", "tired")
        session.go_back()
        session.go_back()
        session.go_forward()
        assert session.step_index == 1
        assert session.current_category.id == "energy"

    def test_second_answer_completes_two_step_catalog(self, two_step_catalog):
        session = AssessmentSession(two_step_catalog)
        session.select_answer("first", "ok")
        session.select_answer("second", "bad")
        assert session.is_completed


class TestOverwrite:
    def test_reanswer_replaces_previous_answer(self, session):
        session.select_answer("eating", "normal")
        session.select_answer("energy", "lethargic")
        session.go_back()
        session.select_answer("energy", "normal")

        assert len(session.answers) == 2
        assert session.answers["energy"].option_id == "normal"
        assert session.answers["energy"].severity == 0

    def test_completed_session_covers_every_category_once(self, session):
        session.select_answer("eating", "reduced")
        session.go_back()
        session.select_answer("eating", "not_drinking")
        session.select_answer("energy", "tired")
        session.go_back()
        session.go_back()
        session.select_answer("eating", "normal")
        session.select_answer("energy", "collapse")
        answer_all(session, [1, 2, 4])

        assert session.is_completed
        assert set(session.answers) == {c.id for c in session.catalog.categories}
        assert len(session.answers) == session.catalog.category_count()


class TestReset:
    def test_reset_from_middle(self, session):
        answer_all(session, [1, 3])
        session.reset()
        assert session.phase == AssessmentPhase.ASKING
        assert session.step_index == 0
        assert session.answers == {}

    def test_reset_from_completed(self, session):
        answer_all(session, [4, 5, 5, 4, 4])
        session.reset()
        assert session.phase == AssessmentPhase.ASKING
        assert session.step_index == 0
        assert session.answers == {}

    def test_reset_is_idempotent(self, session):
        session.reset()
        session.reset()
        assert session.step_index == 0
        assert session.answers == {}
        answer_all(session, [0, 0, 0, 0, 0])
        assert session.is_completed
