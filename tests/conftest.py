# -*- coding: utf-8 -*-
"""Shared fixtures for the onboarding test suite."""

import os

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from models.onboarding import OnboardingData
from services.onboarding_progress_store import MemoryKeyValueStore, OnboardingProgressStore
from ui.wizards.onboarding import default_onboarding_steps


@pytest.fixture
def steps():
    """The default three-step onboarding flow."""
    return default_onboarding_steps()


@pytest.fixture
def personal_info():
    return {"firstName": "Ana", "lastName": "Silva"}


@pytest.fixture
def travel_preferences():
    return {
        "destinations": ["Lisbon, Portugal"],
        "interests": ["food"],
        "languages": ["English"],
    }


@pytest.fixture
def valid_data(personal_info, travel_preferences):
    """Data that satisfies both required steps."""
    return OnboardingData.from_dict({
        "personalInfo": personal_info,
        "travelPreferences": travel_preferences,
    })


@pytest.fixture
def memory_backend():
    return MemoryKeyValueStore()


@pytest.fixture
def progress_store(memory_backend):
    return OnboardingProgressStore(memory_backend)
