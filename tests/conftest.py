"""Shared fixtures for triage tests."""

import pytest

from app.config.catalogs import build_dog_catalog
from app.models.catalog import Category, Option, RiskBand, TriageCatalog


@pytest.fixture
def dog_catalog() -> TriageCatalog:
    """Reference dog catalog (5 categories, bands 3/7/12/unbounded)."""
    return build_dog_catalog()


@pytest.fixture
def two_step_catalog() -> TriageCatalog:
    """Minimal catalog for navigation tests."""
    return TriageCatalog(
        id="mini",
        categories=(
            Category(
                id="first",
                label="First",
                options=(
                    Option(id="ok", label="Fine", severity=0),
                    Option(id="bad", label="Bad", severity=3),
                ),
            ),
            Category(
                id="second",
                label="Second",
                options=(
                    Option(id="ok", label="Fine", severity=0),
                    Option(id="bad", label="Bad", severity=2),
                ),
            ),
        ),
        bands=(
            RiskBand(id="calm", ceiling=2),
            RiskBand(id="worried", ceiling=None),
        ),
        escalation_band_id="worried",
    )
