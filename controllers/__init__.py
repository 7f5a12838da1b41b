# -*- coding: utf-8 -*-
"""
WanderCrew Controllers
======================
Controller layer between the wizard pages and the services.

Controllers provide:
- Qt signals for UI updates
- Loading and error bookkeeping
- Ownership of mutable state (pages only render it)

Usage:
    from controllers import OnboardingController

    controller = OnboardingController(steps, submitter, progress_store)
    controller.state_changed.connect(page.render)
    controller.update_data({"personalInfo": {"firstName": "Ana"}})
    controller.next_step()
"""

from controllers.base_controller import BaseController

from controllers.onboarding_controller import (
    OnboardingController,
    SubmissionWorker,
)

__all__ = [
    'BaseController',
    'OnboardingController',
    'SubmissionWorker',
]
