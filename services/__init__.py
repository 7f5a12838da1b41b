# -*- coding: utf-8 -*-
"""
WanderCrew Service Layer
"""

# Lazy imports so importing a model does not pull in Qt or requests
__all__ = [
    "OnboardingProgressStore",
    "AutoSaveScheduler",
    "ProfileSubmissionService",
]


def __getattr__(name):
    """Lazy import of the service classes."""
    if name == "OnboardingProgressStore":
        from .onboarding_progress_store import OnboardingProgressStore
        return OnboardingProgressStore
    elif name == "AutoSaveScheduler":
        from .auto_save_scheduler import AutoSaveScheduler
        return AutoSaveScheduler
    elif name == "ProfileSubmissionService":
        from .profile_submission_service import ProfileSubmissionService
        return ProfileSubmissionService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
