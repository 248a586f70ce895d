"""Triage enums."""

from enum import Enum


class AssessmentPhase(str, Enum):
    """Lifecycle phase of an assessment session."""

    ASKING = "asking"  # Walking through the catalog questions
    COMPLETED = "completed"  # Every category answered, result available


class HandoffTarget(str, Enum):
    """Collaborators an assessment result can hand control to."""

    CHAT = "chat"
    VET_FINDER = "vet_finder"
