"""Triage catalogs available to the service.

Severity weights and band ceilings are product-authored heuristics, not
clinical thresholds. Additional catalogs can be supplied as JSON through the
``CATALOG_FILE`` setting.
"""

from pathlib import Path
from pydantic import ValidationError
from typing import Dict, List, Optional
from app.config.settings import settings
from app.models.catalog import Category, Option, RiskBand, TriageCatalog
from app.utils.errors import CatalogNotFoundError, CatalogValidationError
import logging

logger = logging.getLogger(__name__)


DOG_DISCLAIMER = (
    "This assessment is for guidance only and does not replace professional "
    "veterinary advice. Always consult a vet if you're concerned about your "
    "pet's health."
)


def build_dog_catalog() -> TriageCatalog:
    """Reference five-question catalog for dogs."""
    categories = (
        Category(
            id="eating",
            label="Eating & Drinking",
            question="How is your dog eating and drinking?",
            options=(
                Option(id="normal", label="Normal appetite", severity=0),
                Option(id="reduced", label="Eating less than usual", severity=1),
                Option(id="not_eating", label="Refusing food (24+ hrs)", severity=3),
                Option(id="not_drinking", label="Not drinking water", severity=4),
            ),
        ),
        Category(
            id="energy",
            label="Energy Level",
            question="How active is your dog?",
            options=(
                Option(id="normal", label="Normal energy", severity=0),
                Option(id="tired", label="More tired than usual", severity=1),
                Option(id="lethargic", label="Very lethargic/weak", severity=3),
                Option(
                    id="collapse", label="Collapsed or unable to stand", severity=5
                ),
            ),
        ),
        Category(
            id="breathing",
            label="Breathing",
            question="How is your dog breathing?",
            options=(
                Option(id="normal", label="Breathing normally", severity=0),
                Option(id="panting", label="Panting more than usual", severity=1),
                Option(id="labored", label="Labored or rapid breathing", severity=3),
                Option(id="struggling", label="Struggling to breathe", severity=5),
            ),
        ),
        Category(
            id="digestive",
            label="Digestive",
            question="Any vomiting or diarrhea?",
            options=(
                Option(id="none", label="None", severity=0),
                Option(id="once", label="Once or twice", severity=1),
                Option(id="multiple", label="Multiple times today", severity=2),
                Option(id="blood", label="Contains blood", severity=4),
            ),
        ),
        Category(
            id="pain",
            label="Pain Signs",
            question="Is your dog showing signs of pain?",
            options=(
                Option(id="none", label="No signs of pain", severity=0),
                Option(id="mild", label="Whining or restless", severity=1),
                Option(
                    id="moderate", label="Limping or sensitive to touch", severity=2
                ),
                Option(
                    id="severe",
                    label="Crying out, aggressive when touched",
                    severity=4,
                ),
            ),
        ),
    )

    bands = (
        RiskBand(
            id="low",
            ceiling=3,
            title="Low Concern",
            description="Symptoms appear mild. Monitor at home.",
            recommendations=(
                "Continue monitoring your dog's behavior",
                "Ensure fresh water is always available",
                "Keep your dog comfortable and rested",
                "Note any changes in symptoms",
            ),
            action=(
                "Monitor at home. If symptoms persist beyond 24-48 hours or "
                "worsen, consult a vet."
            ),
        ),
        RiskBand(
            id="moderate",
            ceiling=7,
            title="Moderate Concern",
            description="Schedule a vet visit soon.",
            recommendations=(
                "Schedule a vet appointment within 24-48 hours",
                "Keep your dog calm and limit activity",
                "Monitor for worsening symptoms",
                "Take note of when symptoms started",
            ),
            action=(
                "Contact your vet for an appointment. Not immediately "
                "life-threatening but needs professional evaluation."
            ),
        ),
        RiskBand(
            id="urgent",
            ceiling=12,
            title="Urgent - See Vet Today",
            description="Your dog needs veterinary care soon.",
            recommendations=(
                "Call your vet immediately for same-day appointment",
                "If your regular vet is unavailable, find an urgent care clinic",
                "Keep your dog calm and still",
                "Do not give any medications without vet guidance",
            ),
            action=(
                "Seek veterinary care today. These symptoms require "
                "professional attention."
            ),
        ),
        RiskBand(
            id="emergency",
            ceiling=None,
            title="Emergency - Go Now",
            description="Seek emergency veterinary care immediately.",
            recommendations=(
                "Go to the nearest emergency vet clinic NOW",
                "Call ahead if possible so they can prepare",
                "Keep your dog as calm and still as possible",
                "If breathing issues, ensure airway is clear",
            ),
            action="This is a medical emergency. Go to an emergency vet immediately.",
        ),
    )

    return TriageCatalog(
        id="dog",
        label="Dog Symptom Checker",
        categories=categories,
        bands=bands,
        escalation_band_id="urgent",
        disclaimer=DOG_DISCLAIMER,
    )


def load_catalog_file(path: str) -> TriageCatalog:
    """Load and validate a catalog from a JSON file."""
    raw = Path(path).read_text(encoding="utf-8")
    try:
        catalog = TriageCatalog.model_validate_json(raw)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid catalog file {path}: {e}") from e
    logger.info(
        f"Loaded catalog '{catalog.id}' from {path} "
        f"({catalog.category_count()} categories, {len(catalog.bands)} bands)"
    )
    return catalog


class CatalogRegistry:
    """Catalogs keyed by id; several species can coexist."""

    def __init__(self, catalogs: Optional[List[TriageCatalog]] = None):
        self._catalogs: Dict[str, TriageCatalog] = {}
        for catalog in catalogs or []:
            self.register(catalog)

    def register(self, catalog: TriageCatalog) -> None:
        if catalog.id in self._catalogs:
            raise CatalogValidationError(f"Catalog '{catalog.id}' already registered")
        self._catalogs[catalog.id] = catalog

    def get(self, catalog_id: str) -> TriageCatalog:
        catalog = self._catalogs.get(catalog_id)
        if catalog is None:
            raise CatalogNotFoundError(catalog_id)
        return catalog

    def ids(self) -> List[str]:
        return list(self._catalogs)


# Global registry instance
_registry: Optional[CatalogRegistry] = None


def get_catalog_registry() -> CatalogRegistry:
    """Get or create the catalog registry."""
    global _registry
    if _registry is None:
        _registry = CatalogRegistry([build_dog_catalog()])
        if settings.catalog_file:
            _registry.register(load_catalog_file(settings.catalog_file))
    return _registry
