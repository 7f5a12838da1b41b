# -*- coding: utf-8 -*-
"""
Wizard Framework - state transitions for multi-step wizards.

The reducer is pure; controllers own the live state and publish it.
"""

from .wizard_reducer import Action, ActionType, OnboardingReducer, reduce

__all__ = [
    'Action',
    'ActionType',
    'OnboardingReducer',
    'reduce',
]
