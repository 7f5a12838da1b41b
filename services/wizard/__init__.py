# -*- coding: utf-8 -*-
"""Per-step validation for the onboarding wizard."""

from .step_validator import StepValidator, validate, validate_field

__all__ = ['StepValidator', 'validate', 'validate_field']
