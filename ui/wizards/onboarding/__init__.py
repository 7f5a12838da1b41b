# -*- coding: utf-8 -*-
"""Onboarding wizard: step configuration for the WanderCrew first-run flow."""

from .onboarding_steps import default_onboarding_steps

__all__ = ['default_onboarding_steps']
