# -*- coding: utf-8 -*-
"""
WanderCrew Application Core Module
"""

from .config import Config, OnboardingConfig

__all__ = ["Config", "OnboardingConfig"]
