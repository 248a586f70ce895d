"""Triage catalog: ordered categories, answer options and risk bands.

A catalog is an immutable configuration value. Category order defines the
question sequence; band order (strictly increasing ceilings, last band
unbounded) defines classification, first match wins.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Tuple
from app.utils.errors import (
    CatalogValidationError,
    OutOfRangeError,
)


class Option(BaseModel):
    """One selectable answer within a category."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    severity: int = Field(..., ge=0)


class Category(BaseModel):
    """One health dimension assessed by a single question."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str
    question: str = ""
    options: Tuple[Option, ...]

    def get_option(self, option_id: str) -> Optional[Option]:
        """Return the option with the given id, or None."""
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    @property
    def min_severity(self) -> int:
        return min(option.severity for option in self.options)

    @property
    def max_severity(self) -> int:
        return max(option.severity for option in self.options)


class RiskBand(BaseModel):
    """A named classification tier with an inclusive score ceiling.

    ``ceiling=None`` marks the unbounded final band.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    ceiling: Optional[int] = Field(default=None, ge=0)
    title: str = ""
    description: str = ""
    recommendations: Tuple[str, ...] = ()
    action: str = ""

    @property
    def is_unbounded(self) -> bool:
        return self.ceiling is None

    def contains(self, score: int) -> bool:
        """True if ``score`` is at or below this band's ceiling."""
        return self.ceiling is None or score <= self.ceiling


class TriageCatalog(BaseModel):
    """Immutable rule set driving an assessment session."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    label: str = ""
    categories: Tuple[Category, ...]
    bands: Tuple[RiskBand, ...]
    escalation_band_id: str
    disclaimer: str = ""

    @model_validator(mode="after")
    def _check_structure(self) -> "TriageCatalog":
        if not self.categories:
            raise CatalogValidationError(f"Catalog '{self.id}' has no categories")

        seen_categories = set()
        for category in self.categories:
            if category.id in seen_categories:
                raise CatalogValidationError(
                    f"Duplicate category id '{category.id}' in catalog '{self.id}'"
                )
            seen_categories.add(category.id)

            if not category.options:
                raise CatalogValidationError(
                    f"Category '{category.id}' has no options"
                )
            option_ids = [option.id for option in category.options]
            if len(option_ids) != len(set(option_ids)):
                raise CatalogValidationError(
                    f"Duplicate option id in category '{category.id}'"
                )

        if not self.bands:
            raise CatalogValidationError(f"Catalog '{self.id}' has no risk bands")

        band_ids = [band.id for band in self.bands]
        if len(band_ids) != len(set(band_ids)):
            raise CatalogValidationError(f"Duplicate band id in catalog '{self.id}'")

        *bounded, last = self.bands
        if not last.is_unbounded:
            raise CatalogValidationError(
                f"Final band '{last.id}' must be unbounded (ceiling=None)"
            )
        previous = None
        for band in bounded:
            if band.is_unbounded:
                raise CatalogValidationError(
                    f"Only the final band may be unbounded, got '{band.id}'"
                )
            if previous is not None and band.ceiling <= previous:
                raise CatalogValidationError(
                    f"Band ceilings must strictly increase: '{band.id}' "
                    f"({band.ceiling}) follows {previous}"
                )
            previous = band.ceiling

        if self.escalation_band_id not in band_ids:
            raise CatalogValidationError(
                f"Escalation band '{self.escalation_band_id}' is not defined"
            )
        return self

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def category_count(self) -> int:
        return len(self.categories)

    def category_at(self, index: int) -> Category:
        """Return the category at ``index``; raise OutOfRangeError outside bounds."""
        if not 0 <= index < len(self.categories):
            raise OutOfRangeError(index, len(self.categories))
        return self.categories[index]

    def get_category(self, category_id: str) -> Optional[Category]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def max_score(self) -> int:
        return sum(category.max_severity for category in self.categories)

    # ------------------------------------------------------------------
    # Bands
    # ------------------------------------------------------------------
    def classify(self, score: int) -> RiskBand:
        """
        Map a score to its risk band.

        Scans bands in ascending ceiling order and returns the first whose
        ceiling is >= score. A score equal to a ceiling stays in that band.
        The final band is unbounded, so every score classifies.
        """
        for band in self.bands:
            if band.contains(score):
                return band
        return self.bands[-1]

    def get_band(self, band_id: str) -> Optional[RiskBand]:
        for band in self.bands:
            if band.id == band_id:
                return band
        return None

    def band_rank(self, band: RiskBand) -> int:
        """Position of ``band`` in the ascending band table."""
        for rank, candidate in enumerate(self.bands):
            if candidate.id == band.id:
                return rank
        raise CatalogValidationError(
            f"Band '{band.id}' is not part of catalog '{self.id}'"
        )

    def is_at_or_above(self, band: RiskBand, band_id: str) -> bool:
        """True if ``band`` ranks at or above the band named ``band_id``."""
        threshold = self.get_band(band_id)
        if threshold is None:
            raise CatalogValidationError(
                f"Band '{band_id}' is not part of catalog '{self.id}'"
            )
        return self.band_rank(band) >= self.band_rank(threshold)

    def requires_escalation(self, band: RiskBand) -> bool:
        return self.is_at_or_above(band, self.escalation_band_id)
