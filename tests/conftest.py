"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and provides
canonical requests used by the mapper and service tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from domain.models import CanonicalRequest, Preferences, Profile  # noqa: E402


@pytest.fixture
def loss_request() -> CanonicalRequest:
    """Adult weight-loss request with a full profile"""
    return CanonicalRequest(
        goal="loss",
        goal_notes="想在三個月內減五公斤",
        profile=Profile(age=30, height_cm=170, weight_kg=65, allergies=["乳"]),
        preferences=Preferences(cuisine="台式", calorie_preference="low", vegetarian=True),
    )


@pytest.fixture
def baby_request() -> CanonicalRequest:
    """Infant request (8 months) with an egg allergy"""
    return CanonicalRequest(goal="baby", profile=Profile(baby_months=8, allergies=["蛋"]))


@pytest.fixture
def empty_request() -> CanonicalRequest:
    return CanonicalRequest()
