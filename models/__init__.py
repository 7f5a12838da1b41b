# -*- coding: utf-8 -*-
"""
WanderCrew Data Models
"""

from .onboarding import (
    OnboardingData,
    OnboardingState,
    OnboardingStep,
    PersonalInfo,
    ProfileSetup,
    TravelPreferences,
    ValidationError,
    ValidationErrorCode,
)

__all__ = [
    "OnboardingData",
    "OnboardingState",
    "OnboardingStep",
    "PersonalInfo",
    "ProfileSetup",
    "TravelPreferences",
    "ValidationError",
    "ValidationErrorCode",
]
