"""Assessment session state machine.

A session walks the catalog one category at a time. Selecting an answer
records it immediately but moves to the next question only after a short
delay, so the client can acknowledge the tap first. The delayed move is a
single cancellable task held on the session: any newer answer or navigation
cancels it before doing anything else, so a stale move can never fire.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional
from app.models.catalog import Category, TriageCatalog
from app.models.session import Answer
from app.models.triage import AssessmentPhase
from app.utils.errors import InvalidOptionError, InvalidTransitionError

logger = logging.getLogger(__name__)


class AssessmentSession:
    """Mutable, single-user run of a triage questionnaire."""

    def __init__(
        self,
        catalog: TriageCatalog,
        advance_delay: float = 0.0,
        session_id: Optional[str] = None,
    ):
        """
        Args:
            catalog: Rule set the session walks through
            advance_delay: Seconds between an answer and the move to the next
                step; 0 moves synchronously
            session_id: Identifier, generated when omitted
        """
        self.session_id = session_id or str(uuid.uuid4())
        self.catalog = catalog
        self.advance_delay = max(advance_delay, 0.0)
        self.created_at = datetime.now(timezone.utc)
        self.step_index = 0
        self.phase = AssessmentPhase.ASKING
        self._answers: Dict[str, Answer] = {}
        self._pending_advance: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def answers(self) -> Dict[str, Answer]:
        """Copy of the answers keyed by category id."""
        return dict(self._answers)

    @property
    def is_completed(self) -> bool:
        return self.phase == AssessmentPhase.COMPLETED

    @property
    def current_category(self) -> Optional[Category]:
        """Category on screen, or None once completed."""
        if self.is_completed:
            return None
        return self.catalog.category_at(self.step_index)

    @property
    def has_pending_advance(self) -> bool:
        return self._pending_advance is not None and not self._pending_advance.done()

    @property
    def can_go_back(self) -> bool:
        return not self.is_completed and self.step_index > 0

    @property
    def can_go_forward(self) -> bool:
        current = self.current_category
        return current is not None and current.id in self._answers

    @property
    def progress_percent(self) -> int:
        if self.is_completed:
            return 100
        # Halves round up
        count = self.catalog.category_count()
        return ((self.step_index + 1) * 200 + count) // (2 * count)

    def answer_for(self, category_id: str) -> Optional[Answer]:
        return self._answers.get(category_id)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def select_answer(self, category_id: str, option_id: str) -> Answer:
        """
        Record an answer for the displayed category and schedule the advance.

        Re-selecting before the advance fires replaces both the answer and
        the pending advance.

        Raises:
            InvalidTransitionError: Session completed, or category is not the
                one currently displayed
            InvalidOptionError: Option not offered by the category
        """
        if self.is_completed:
            raise InvalidTransitionError(
                f"Session {self.session_id} is completed; reset to answer again"
            )

        current = self.catalog.category_at(self.step_index)
        if category_id != current.id:
            raise InvalidTransitionError(
                f"Expected an answer for '{current.id}', got '{category_id}'"
            )

        option = current.get_option(option_id)
        if option is None:
            raise InvalidOptionError(category_id, option_id)

        if self.advance_delay > 0:
            # Deferred advance runs on the caller's loop; fail before mutating
            asyncio.get_running_loop()

        answer = Answer(
            category_id=current.id, option_id=option.id, severity=option.severity
        )
        self._answers[current.id] = answer
        logger.debug(
            f"Session {self.session_id}: {current.id}={option.id} "
            f"(severity {option.severity})"
        )

        self._cancel_pending_advance()
        self._schedule_advance()
        return answer

    def go_back(self) -> None:
        """Step back one question; a no-op on the first question."""
        if self.is_completed:
            raise InvalidTransitionError(
                f"Session {self.session_id} is completed; only reset is allowed"
            )
        self._cancel_pending_advance()
        if self.step_index > 0:
            self.step_index -= 1

    def go_forward(self) -> None:
        """Advance now, provided the displayed category is already answered."""
        if not self.can_go_forward:
            raise InvalidTransitionError(
                f"Session {self.session_id} cannot advance from step {self.step_index}"
            )
        self._cancel_pending_advance()
        self._advance()

    def reset(self) -> None:
        """Discard all answers and return to the first question."""
        self._cancel_pending_advance()
        self._answers.clear()
        self.step_index = 0
        self.phase = AssessmentPhase.ASKING
        logger.info(f"Session {self.session_id} reset")

    def close(self) -> None:
        """Cancel any pending advance before the session is discarded."""
        self._cancel_pending_advance()

    async def settle(self) -> None:
        """Wait for the pending advance, if any, to fire or be cancelled."""
        task = self._pending_advance
        if task is not None and not task.done():
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Deferred advance
    # ------------------------------------------------------------------
    def _schedule_advance(self) -> None:
        if self.advance_delay <= 0:
            self._advance()
            return
        loop = asyncio.get_running_loop()
        self._pending_advance = loop.create_task(
            self._deferred_advance(self.advance_delay)
        )

    async def _deferred_advance(self, delay: float) -> None:
        await asyncio.sleep(delay)
        # A newer answer or navigation owns the slot now
        if self._pending_advance is not asyncio.current_task():
            return
        self._pending_advance = None
        self._advance()

    def _cancel_pending_advance(self) -> None:
        task = self._pending_advance
        self._pending_advance = None
        if task is not None and not task.done():
            task.cancel()

    def _advance(self) -> None:
        if self.step_index < self.catalog.category_count() - 1:
            self.step_index += 1
            return
        self.phase = AssessmentPhase.COMPLETED
        logger.info(
            f"Session {self.session_id} completed "
            f"({len(self._answers)}/{self.catalog.category_count()} answered)"
        )
