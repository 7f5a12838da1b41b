# -*- coding: utf-8 -*-
"""
Onboarding Controller
=====================
Owns the live state of one onboarding flow.

The controller is the only mutable holder of OnboardingState. Step pages call
its operations (update_data, next_step, ...); each one runs the pure reducer,
stores the result and publishes it through ``state_changed``. Around that it
wires:

- auto-save of progress through a throttled timer
- rehydration of saved progress on start
- the final submission, run on a worker thread

Create one controller per active flow and hand it to the step pages.

Usage:
    controller = OnboardingController(
        steps=default_onboarding_steps(),
        submitter=ProfileSubmissionService(session=session),
        progress_store=OnboardingProgressStore(QSettingsKeyValueStore()),
    )
    controller.state_changed.connect(page.render)
"""

from functools import partial
from typing import Any, Callable, List, Mapping, Optional, Sequence, Set

from PyQt5.QtCore import QThread, pyqtSignal

from app.config import OnboardingConfig
from controllers.base_controller import BaseController
from models.onboarding import (
    OnboardingData, OnboardingState, OnboardingStep, ValidationError,
)
from services.auto_save_scheduler import AutoSaveScheduler
from services.exceptions import StorageException, WanderCrewError
from services.onboarding_progress_store import OnboardingProgressStore
from ui.wizards.framework.wizard_reducer import Action, OnboardingReducer
from utils.logger import get_logger

logger = get_logger(__name__)

Submitter = Callable[[OnboardingData], Any]

DEFAULT_SUBMISSION_ERROR = "Failed to complete onboarding"


class SubmissionWorker(QThread):
    """Background worker for the final submission."""

    succeeded = pyqtSignal(object)  # submitter result
    failed = pyqtSignal(str)  # error message

    def __init__(self, submitter: Submitter, data: OnboardingData):
        super().__init__()
        self.submitter = submitter
        self.data = data

    def run(self):
        """Run the submission in background."""
        try:
            result = self.submitter(self.data)
        except Exception as e:
            logger.error(f"Onboarding submission failed: {e}", exc_info=True)
            # WanderCrewError.message is user-facing; str() may carry a status prefix
            message = e.message if isinstance(e, WanderCrewError) else str(e)
            self.failed.emit(message or DEFAULT_SUBMISSION_ERROR)
            return
        self.succeeded.emit(result)


class OnboardingController(BaseController):
    """
    Controller for the onboarding wizard.

    Signals:
        state_changed: New OnboardingState after every effective transition
        step_changed: (old_index, new_index) when the current step moves
        validation_changed: Current step's errors after each data update
                            (real-time validation only)
        onboarding_completed: Submitted OnboardingData after a successful completion
        progress_saved: A progress snapshot was written
    """

    state_changed = pyqtSignal(object)
    step_changed = pyqtSignal(int, int)
    validation_changed = pyqtSignal(list)
    onboarding_completed = pyqtSignal(object)
    progress_saved = pyqtSignal()

    OPERATION_COMPLETE = "complete_onboarding"

    def __init__(self, steps: Sequence[OnboardingStep], submitter: Submitter,
                 progress_store: OnboardingProgressStore,
                 config: Optional[OnboardingConfig] = None, parent=None):
        super().__init__(parent)
        self.config = config or OnboardingConfig.from_config()
        self.reducer = OnboardingReducer(
            steps,
            allow_skip=self.config.allow_skip,
            strict=self.config.strict_validation,
        )
        self.steps = self.reducer.steps
        self.progress_store = progress_store
        self._submitter = submitter
        self._state = self.reducer.initial_state()

        # Completion bookkeeping
        self._completion_worker: Optional[SubmissionWorker] = None
        self._workers: Set[SubmissionWorker] = set()
        self._submission_generation = 0
        self._submitted = False
        self._shut_down = False

        self._auto_save: Optional[AutoSaveScheduler] = None
        if self.config.auto_save:
            self._auto_save = AutoSaveScheduler(
                self._auto_save_now, self.config.auto_save_interval_ms, self
            )

        if self.config.restore_on_start:
            self.restore_progress()

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def state(self) -> OnboardingState:
        return self._state

    @property
    def data(self) -> OnboardingData:
        return self._state.data

    @property
    def current_step_config(self) -> OnboardingStep:
        return self.steps[self._state.current_step]

    def can_go_next(self) -> bool:
        return not self._state.is_completed and not self._state.is_loading

    def can_go_previous(self) -> bool:
        return (not self._state.is_completed and not self._state.is_loading
                and self._state.current_step > 0)

    def can_skip(self) -> bool:
        return (self.can_go_next() and self.config.allow_skip
                and self.current_step_config.is_optional)

    def validate_current_step(self) -> List[ValidationError]:
        """Errors of the current step for the current data (no state change)."""
        return self.reducer.validate_step(self._state.current_step, self._state.data)

    # =========================================================================
    # Transitions
    # =========================================================================

    def dispatch(self, action: Action, persist: bool = True) -> OnboardingState:
        """
        Run an action through the reducer and publish the result.

        Args:
            action: Reducer action
            persist: Schedule an auto-save when data or step changed

        Returns:
            The (possibly unchanged) current state
        """
        old = self._state
        new = self.reducer.reduce(old, action)
        if new == old:
            return old

        self._state = new
        if old.current_step != new.current_step:
            logger.info(f"Onboarding step {old.current_step} → {new.current_step}")
            self.step_changed.emit(old.current_step, new.current_step)
        self._set_loading(new.is_loading)
        self.state_changed.emit(new)

        content_changed = old.data != new.data or old.current_step != new.current_step
        if persist and content_changed and not new.is_completed:
            self._schedule_save()
        return new

    def update_data(self, changes: Mapping[str, Any]):
        """Merge a partial update into the accumulated data."""
        if not isinstance(changes, Mapping):
            logger.error(f"update_data ignored: expected a mapping, got {type(changes).__name__}")
            return
        unknown = OnboardingData.unknown_sections(changes)
        if unknown:
            logger.warning(f"update_data ignoring unknown sections: {unknown}")
        if self._state.is_completed:
            logger.debug("update_data ignored: onboarding already completed")
            return

        self.dispatch(Action.update_data(changes))
        if self.config.real_time_validation:
            self.validation_changed.emit(self.validate_current_step())

    def next_step(self) -> bool:
        """
        Validate the current step and advance (or mark the flow completed).

        Returns:
            True if the step advanced or the flow was marked completed
        """
        before = self._state
        after = self.dispatch(Action.next_step())
        moved = after.current_step != before.current_step or (
            after.is_completed and not before.is_completed
        )
        if not moved and after.validation_errors:
            logger.info(
                f"Step {before.current_step} ({self.steps[before.current_step].id}) "
                f"validation failed: {[e.message for e in after.validation_errors]}"
            )
        return moved

    def previous_step(self) -> bool:
        before = self._state
        return self.dispatch(Action.previous_step()).current_step != before.current_step

    def skip_step(self) -> bool:
        """Skip the current step if it is optional and skipping is enabled."""
        before = self._state
        after = self.dispatch(Action.skip_step())
        if after is before:
            logger.debug(f"Skip rejected for step {before.current_step}")
            return False
        return True

    def go_to_step(self, index: int) -> bool:
        before = self._state
        return self.dispatch(Action.go_to_step(index)).current_step != before.current_step

    def clear_error(self):
        self.dispatch(Action.clear_error(), persist=False)

    def reset_onboarding(self):
        """Discard all progress and return to the first step."""
        logger.info("Resetting onboarding")
        # Results of a submission still in flight belong to the discarded flow
        self._submission_generation += 1
        self._completion_worker = None
        self._submitted = False
        if self._auto_save is not None:
            self._auto_save.cancel()
        self.dispatch(Action.reset(), persist=False)
        self.clear_progress()

    # =========================================================================
    # Completion
    # =========================================================================

    def complete_onboarding(self) -> Optional[SubmissionWorker]:
        """
        Submit the accumulated data.

        Requires the flow to be marked completed, or every required step to
        validate. While a submission is in flight, further calls return the
        running worker instead of submitting again; after a successful
        submission, calls are ignored until the flow is reset.

        Returns:
            The worker running the submission, or None if nothing was started
        """
        if self._shut_down:
            logger.debug("complete_onboarding ignored: controller shut down")
            return None
        if self._completion_worker is not None:
            logger.info("Onboarding submission already in flight; not resubmitting")
            return self._completion_worker
        if self._submitted and self._state.is_completed:
            logger.info("Onboarding already submitted; not resubmitting")
            return None

        if not self._state.is_completed:
            blocking = self.reducer.first_blocking_step(self._state.data)
            if blocking is not None:
                index, errors = blocking
                logger.info(f"Cannot complete onboarding: step {self.steps[index].id} is invalid")
                self.dispatch(Action.set_error(errors[0].message), persist=False)
                return None

        self._log_operation(self.OPERATION_COMPLETE, step=self._state.current_step)
        self.dispatch(Action.clear_error(), persist=False)
        self.dispatch(Action.set_loading(True), persist=False)
        self._emit_started(self.OPERATION_COMPLETE)

        generation = self._submission_generation
        worker = SubmissionWorker(self._submitter, self._state.data)
        worker.succeeded.connect(partial(self._on_submission_succeeded, generation))
        worker.failed.connect(partial(self._on_submission_failed, generation))
        worker.finished.connect(partial(self._on_worker_finished, worker))
        self._workers.add(worker)
        self._completion_worker = worker
        worker.start()
        return worker

    def _on_submission_succeeded(self, generation: int, result: Any):
        if generation != self._submission_generation or self._shut_down:
            logger.info("Discarding result of a superseded onboarding submission")
            return
        logger.info("Onboarding submitted successfully")
        self._completion_worker = None
        self._submitted = True
        if self._auto_save is not None:
            self._auto_save.cancel()
        self.clear_progress()
        self.dispatch(Action.complete(), persist=False)
        self._emit_completed(self.OPERATION_COMPLETE, True)
        self.onboarding_completed.emit(self._state.data)

    def _on_submission_failed(self, generation: int, message: str):
        if generation != self._submission_generation or self._shut_down:
            logger.info("Discarding failure of a superseded onboarding submission")
            return
        self._completion_worker = None
        message = message or DEFAULT_SUBMISSION_ERROR
        self.dispatch(Action.set_error(message), persist=False)
        self._emit_error(self.OPERATION_COMPLETE, message)

    def _on_worker_finished(self, worker: SubmissionWorker):
        self._workers.discard(worker)
        if self._completion_worker is worker:
            self._completion_worker = None
        worker.deleteLater()

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_progress(self) -> bool:
        """
        Write the current step and data to the progress store.

        Returns:
            True on success; failures are logged, never raised
        """
        try:
            self.progress_store.save(self._state)
        except StorageException as e:
            logger.warning(f"Failed to save onboarding progress: {e}")
            return False
        self.progress_saved.emit()
        return True

    def load_progress(self) -> Optional[OnboardingData]:
        """Return previously saved data, or None if there is none usable."""
        saved = self.progress_store.load()
        return saved.data if saved is not None else None

    def clear_progress(self) -> bool:
        try:
            self.progress_store.clear()
        except StorageException as e:
            logger.warning(f"Failed to clear onboarding progress: {e}")
            return False
        return True

    def restore_progress(self) -> bool:
        """
        Rehydrate state from saved progress.

        Returns:
            True if a snapshot was applied
        """
        if self._state.is_completed:
            return False
        saved = self.progress_store.load()
        if saved is None:
            return False
        self.dispatch(Action.restore_progress(saved.data, saved.current_step), persist=False)
        logger.info(f"Restored onboarding progress at step {self._state.current_step}")
        return True

    def _schedule_save(self):
        if self._auto_save is not None and not self._shut_down:
            self._auto_save.schedule()

    def _auto_save_now(self) -> bool:
        if self._state.is_completed:
            return True
        return self.save_progress()

    # =========================================================================
    # Teardown
    # =========================================================================

    def shutdown(self):
        """
        Flush pending progress and release the auto-save timer.

        A submission still in flight is left to finish; its result is ignored.
        """
        if self._shut_down:
            return
        if self._auto_save is not None:
            if self._auto_save.is_pending and not self._state.is_completed:
                self._auto_save.flush()
            self._auto_save.cancel()
        self._shut_down = True
        logger.info("Onboarding controller shut down")

    @property
    def is_shut_down(self) -> bool:
        return self._shut_down

    @property
    def active_submissions(self) -> int:
        """Submission threads still running, including superseded ones."""
        return len(self._workers)
