"""Assessment answer and result models."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from app.models.catalog import RiskBand


class Answer(BaseModel):
    """The option chosen for one category."""

    model_config = ConfigDict(frozen=True)

    category_id: str
    option_id: str
    severity: int = Field(..., ge=0)


class CategoryResponse(BaseModel):
    """Human-readable summary of one category's answer."""

    category_id: str
    category_label: str
    option_id: Optional[str] = None
    option_label: str = "Not answered"
    severity: int = 0


class AssessmentResult(BaseModel):
    """Outcome of a completed assessment."""

    catalog_id: str
    score: int
    max_score: int
    band: RiskBand
    responses: List[CategoryResponse] = Field(default_factory=list)
    requires_vet_referral: bool = False
    disclaimer: str = ""


class TriageChatContext(BaseModel):
    """Structured findings forwarded to the chat collaborator."""

    catalog_id: str
    score: int
    risk_level: str
    risk_title: str
    action: str
    responses: List[CategoryResponse] = Field(default_factory=list)
