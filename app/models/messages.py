"""API request and response models."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from app.models.catalog import Category
from app.models.session import Answer, CategoryResponse
from app.models.triage import AssessmentPhase, HandoffTarget


class StartSessionRequest(BaseModel):
    """Request to start a new assessment."""

    catalog_id: Optional[str] = Field(
        None, description="Catalog to use; the service default when omitted"
    )


class AnswerRequest(BaseModel):
    """Selection of an option for the displayed category."""

    category_id: str = Field(..., min_length=1)
    option_id: str = Field(..., min_length=1)


class SessionStateResponse(BaseModel):
    """Snapshot of an assessment session."""

    session_id: str
    catalog_id: str
    created_at: datetime
    phase: AssessmentPhase
    step_index: int
    total_steps: int
    progress_percent: int
    current_category: Optional[Category] = None
    answers: List[Answer] = Field(default_factory=list)
    partial_score: int = 0
    pending_advance: bool = False
    can_go_back: bool = False
    can_go_forward: bool = False


class CatalogListResponse(BaseModel):
    """Registered catalog ids."""

    default_catalog_id: str
    catalogs: List[str]


class ResponsesSummary(BaseModel):
    """Answers in catalog order, for the review screen."""

    session_id: str
    responses: List[CategoryResponse]


class NavigationTarget(BaseModel):
    """Where the client should navigate next, with optional route state."""

    target: HandoffTarget
    route: str
    state: Optional[Dict[str, Any]] = None
