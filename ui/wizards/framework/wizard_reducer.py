# -*- coding: utf-8 -*-
"""
Wizard Reducer - Pure state transitions for the onboarding wizard.

Handles:
- Data updates (section-wise merge)
- Step progression (next/previous/skip/go-to) with validation gating
- Reset, loading and error flags
- Rehydration from saved progress

Every transition is a pure function of (state, action): nothing here logs,
persists or touches Qt. The controller owns the live state and feeds it
through the reducer.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from models.onboarding import (
    OnboardingData, OnboardingState, OnboardingStep,
    ValidationError, ValidationErrorCode,
)


class ActionType(str, Enum):
    UPDATE_DATA = "UPDATE_DATA"
    NEXT_STEP = "NEXT_STEP"
    PREVIOUS_STEP = "PREVIOUS_STEP"
    SKIP_STEP = "SKIP_STEP"
    GO_TO_STEP = "GO_TO_STEP"
    RESET = "RESET"
    SET_LOADING = "SET_LOADING"
    SET_ERROR = "SET_ERROR"
    CLEAR_ERROR = "CLEAR_ERROR"
    RESTORE_PROGRESS = "RESTORE_PROGRESS"
    COMPLETE = "COMPLETE"


# Transitions still accepted once the flow is completed
_ALLOWED_AFTER_COMPLETION = frozenset({
    ActionType.RESET,
    ActionType.SET_LOADING,
    ActionType.SET_ERROR,
    ActionType.CLEAR_ERROR,
    ActionType.COMPLETE,
})


@dataclass(frozen=True)
class Action:
    """A reducer action: a type plus an optional payload."""

    type: ActionType
    payload: Any = None

    @classmethod
    def update_data(cls, partial: Mapping[str, Any]) -> "Action":
        if not isinstance(partial, Mapping):
            raise TypeError("update_data expects a mapping of section -> fields")
        return cls(ActionType.UPDATE_DATA, partial)

    @classmethod
    def next_step(cls) -> "Action":
        return cls(ActionType.NEXT_STEP)

    @classmethod
    def previous_step(cls) -> "Action":
        return cls(ActionType.PREVIOUS_STEP)

    @classmethod
    def skip_step(cls) -> "Action":
        return cls(ActionType.SKIP_STEP)

    @classmethod
    def go_to_step(cls, index: int) -> "Action":
        return cls(ActionType.GO_TO_STEP, index)

    @classmethod
    def reset(cls) -> "Action":
        return cls(ActionType.RESET)

    @classmethod
    def set_loading(cls, loading: bool) -> "Action":
        return cls(ActionType.SET_LOADING, bool(loading))

    @classmethod
    def set_error(cls, message: Optional[str]) -> "Action":
        return cls(ActionType.SET_ERROR, message)

    @classmethod
    def clear_error(cls) -> "Action":
        return cls(ActionType.CLEAR_ERROR)

    @classmethod
    def restore_progress(cls, data: OnboardingData, current_step: int) -> "Action":
        return cls(ActionType.RESTORE_PROGRESS, (data, current_step))

    @classmethod
    def complete(cls) -> "Action":
        return cls(ActionType.COMPLETE)


class OnboardingReducer:
    """
    Pure transition function over OnboardingState.

    Args:
        steps: Ordered step configuration (fixed for the reducer's lifetime)
        allow_skip: Whether SKIP_STEP is honoured for optional steps
        strict: Strict validation mode; optional steps must validate too
    """

    def __init__(self, steps: Sequence[OnboardingStep], allow_skip: bool = False,
                 strict: bool = False):
        if not steps:
            raise ValueError("An onboarding flow needs at least one step")
        self.steps: Tuple[OnboardingStep, ...] = tuple(steps)
        self.allow_skip = allow_skip
        self.strict = strict

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def initial_state(self) -> OnboardingState:
        return OnboardingState.initial(self.total_steps)

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def validate_step(self, index: int, data: OnboardingData) -> List[ValidationError]:
        """Run a step's validator; a validator that raises counts as one error."""
        step = self.steps[index]
        if step.validator is None:
            return []
        try:
            return list(step.validator(data))
        except Exception as e:
            return [ValidationError(
                step.id, f"Validation failed: {e}", ValidationErrorCode.VALIDATOR_ERROR
            )]

    def first_blocking_step(self, data: OnboardingData,
                            upto: Optional[int] = None) -> Optional[Tuple[int, List[ValidationError]]]:
        """
        Find the first required step (before ``upto``) whose validation fails.

        Returns:
            (step index, errors) or None when every required step passes
        """
        end = self.total_steps if upto is None else min(upto, self.total_steps)
        for index in range(end):
            if self.steps[index].is_optional:
                continue
            errors = self.validate_step(index, data)
            if errors:
                return index, errors
        return None

    def _blocks(self, step: OnboardingStep, errors: List[ValidationError]) -> bool:
        if not errors:
            return False
        return not step.is_optional or self.strict

    # =========================================================================
    # Transitions
    # =========================================================================

    def reduce(self, state: OnboardingState, action: Action) -> OnboardingState:
        """Return the state that follows ``state`` under ``action``."""
        kind = action.type
        if state.is_completed and kind not in _ALLOWED_AFTER_COMPLETION:
            return state

        if kind == ActionType.UPDATE_DATA:
            if not isinstance(action.payload, Mapping):
                return state
            return replace(
                state,
                data=state.data.merge(action.payload),
                error=None,
                validation_errors=(),
            )

        elif kind == ActionType.NEXT_STEP:
            index = self._clamp(state.current_step)
            errors = self.validate_step(index, state.data)
            if self._blocks(self.steps[index], errors):
                return _with_errors(state, errors)
            return self._advance(state, passed=not errors)

        elif kind == ActionType.PREVIOUS_STEP:
            if state.current_step <= 0:
                return state
            return replace(
                state,
                current_step=self._clamp(state.current_step - 1),
                error=None,
                validation_errors=(),
            )

        elif kind == ActionType.SKIP_STEP:
            step = self.steps[self._clamp(state.current_step)]
            if not (self.allow_skip and step.is_optional):
                return state
            return self._advance(state, passed=False)

        elif kind == ActionType.GO_TO_STEP:
            return self._go_to(state, action.payload)

        elif kind == ActionType.RESET:
            return self.initial_state()

        elif kind == ActionType.SET_LOADING:
            return replace(state, is_loading=bool(action.payload))

        elif kind == ActionType.SET_ERROR:
            return replace(
                state,
                error=action.payload or None,
                is_loading=False,
                validation_errors=(),
            )

        elif kind == ActionType.CLEAR_ERROR:
            if state.error is None and not state.validation_errors:
                return state
            return replace(state, error=None, validation_errors=())

        elif kind == ActionType.RESTORE_PROGRESS:
            data, stored_step = action.payload
            return self._restore(state, data, stored_step)

        elif kind == ActionType.COMPLETE:
            return replace(
                state,
                current_step=self.total_steps - 1,
                is_completed=True,
                is_loading=False,
                error=None,
                validation_errors=(),
            )

        return state

    def _clamp(self, index: int) -> int:
        return max(0, min(index, self.total_steps - 1))

    def _advance(self, state: OnboardingState, passed: bool) -> OnboardingState:
        index = self._clamp(state.current_step)
        completed = state.completed_steps | {index} if passed else state.completed_steps
        if index >= self.total_steps - 1:
            return replace(
                state,
                current_step=self.total_steps - 1,
                is_completed=True,
                error=None,
                validation_errors=(),
                completed_steps=completed,
            )
        return replace(
            state,
            current_step=index + 1,
            error=None,
            validation_errors=(),
            completed_steps=completed,
        )

    def _go_to(self, state: OnboardingState, target: Any) -> OnboardingState:
        if isinstance(target, bool) or not isinstance(target, int):
            return state
        target = self._clamp(target)
        if target == state.current_step:
            return state
        if target > state.current_step:
            blocking = self.first_blocking_step(state.data, upto=target)
            if blocking is not None:
                return _with_errors(state, blocking[1])
        return replace(state, current_step=target, error=None, validation_errors=())

    def _restore(self, state: OnboardingState, data: OnboardingData,
                 stored_step: int) -> OnboardingState:
        step = self._clamp(stored_step if isinstance(stored_step, int) else 0)
        # Never resume past a required step the restored data no longer satisfies
        blocking = self.first_blocking_step(data, upto=step)
        if blocking is not None:
            step = blocking[0]
        completed = frozenset(
            index for index in range(step)
            if not self.validate_step(index, data)
        )
        return replace(
            state,
            current_step=step,
            data=data,
            error=None,
            validation_errors=(),
            completed_steps=completed,
        )


def _with_errors(state: OnboardingState, errors: List[ValidationError]) -> OnboardingState:
    """Keep the step, surface the first error as the scalar message."""
    return replace(
        state,
        error=errors[0].message,
        validation_errors=tuple(errors),
    )


def reduce(state: OnboardingState, action: Action, steps: Sequence[OnboardingStep],
           allow_skip: bool = False, strict: bool = False) -> OnboardingState:
    """Functional shortcut for a one-off transition."""
    return OnboardingReducer(steps, allow_skip=allow_skip, strict=strict).reduce(state, action)
