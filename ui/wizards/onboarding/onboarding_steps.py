# -*- coding: utf-8 -*-
"""
Onboarding step configuration.

The order here is the order of the wizard; validators come from
services.wizard.step_validator.
"""

from typing import List

from models.onboarding import OnboardingStep
from services.wizard.step_validator import (
    StepValidator,
    validate_personal_info,
    validate_profile_setup,
    validate_travel_preferences,
)


def default_onboarding_steps() -> List[OnboardingStep]:
    """The three WanderCrew onboarding steps; profile setup may be skipped."""
    return [
        OnboardingStep(
            id=StepValidator.STEP_PERSONAL_INFO,
            title="Personal Information",
            description="Tell us a bit about yourself",
            validator=validate_personal_info,
        ),
        OnboardingStep(
            id=StepValidator.STEP_TRAVEL_PREFERENCES,
            title="Travel Preferences",
            description="Help us understand your travel style",
            validator=validate_travel_preferences,
        ),
        OnboardingStep(
            id=StepValidator.STEP_PROFILE_SETUP,
            title="Profile Setup",
            description="Complete your profile and privacy settings",
            validator=validate_profile_setup,
            is_optional=True,
        ),
    ]
