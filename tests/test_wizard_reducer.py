# -*- coding: utf-8 -*-
"""
Tests for the onboarding wizard reducer.

Tests cover:
- Reset and initial state
- Step bounds under any action sequence
- Validation gating of forward navigation
- Skipping, jumping and restoring progress
- Completion
"""

import itertools

import pytest

from models.onboarding import (
    OnboardingData, OnboardingStep, OnboardingState, ValidationError, ValidationErrorCode,
)
from ui.wizards.framework.wizard_reducer import Action, ActionType, OnboardingReducer, reduce


def _failing_validator(data):
    raise RuntimeError("boom")


@pytest.fixture
def reducer(steps):
    return OnboardingReducer(steps)


@pytest.fixture
def skipping_reducer(steps):
    return OnboardingReducer(steps, allow_skip=True)


def _run(reducer, state, *actions):
    for action in actions:
        state = reducer.reduce(state, action)
    return state


def _at_last_step(reducer, valid_data):
    state = reducer.reduce(reducer.initial_state(), Action.update_data(valid_data.to_dict()))
    return _run(reducer, state, Action.next_step(), Action.next_step())


class TestConstruction:
    """Reducer setup."""

    def test_requires_steps(self):
        with pytest.raises(ValueError):
            OnboardingReducer([])

    def test_initial_state(self, reducer):
        assert reducer.initial_state() == OnboardingState.initial(3)

    def test_update_data_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            Action.update_data(["firstName", "Ana"])


class TestReset:
    """RESET."""

    def test_reset_returns_initial_state(self, reducer, valid_data):
        state = _at_last_step(reducer, valid_data)
        assert reducer.reduce(state, Action.reset()) == reducer.initial_state()

    def test_reset_is_idempotent(self, reducer, valid_data):
        state = _at_last_step(reducer, valid_data)
        once = reducer.reduce(state, Action.reset())
        assert reducer.reduce(once, Action.reset()) == once

    def test_reset_after_completion(self, reducer, valid_data):
        state = reducer.reduce(_at_last_step(reducer, valid_data), Action.next_step())
        assert state.is_completed
        assert reducer.reduce(state, Action.reset()) == reducer.initial_state()


class TestStepBounds:
    """current_step always stays within [0, total_steps)."""

    def test_bounds_hold_for_every_short_sequence(self, skipping_reducer, valid_data):
        actions = [
            Action.next_step(),
            Action.previous_step(),
            Action.skip_step(),
            Action.go_to_step(99),
            Action.go_to_step(-5),
            Action.update_data(valid_data.to_dict()),
        ]
        for sequence in itertools.product(actions, repeat=4):
            state = skipping_reducer.initial_state()
            for action in sequence:
                state = skipping_reducer.reduce(state, action)
                assert 0 <= state.current_step < state.total_steps
                if state.is_completed:
                    assert state.current_step == state.total_steps - 1

    def test_previous_on_first_step_is_identity(self, reducer):
        state = reducer.initial_state()
        assert reducer.reduce(state, Action.previous_step()) is state

    def test_previous_clears_error(self, reducer, valid_data):
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data(valid_data.to_dict()), Action.next_step(),
            Action.set_error("Network down"),
        )
        state = reducer.reduce(state, Action.previous_step())
        assert state.current_step == 0
        assert state.error is None


class TestValidationGate:
    """NEXT_STEP only advances past a step whose data validates."""

    def test_missing_first_name_blocks(self, reducer):
        state = reducer.reduce(reducer.initial_state(), Action.next_step())
        assert state.current_step == 0
        assert state.error == "firstName is required"
        assert state.validation_errors[0].code == ValidationErrorCode.REQUIRED

    def test_valid_personal_info_advances(self, reducer, personal_info):
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data({"personalInfo": personal_info}),
            Action.next_step(),
        )
        assert state.current_step == 1
        assert state.error is None
        assert state.completed_steps == frozenset({0})

    def test_update_clears_error(self, reducer):
        state = reducer.reduce(reducer.initial_state(), Action.next_step())
        state = reducer.reduce(state, Action.update_data({"personalInfo": {"firstName": "Ana"}}))
        assert state.error is None
        assert state.validation_errors == ()

    def test_update_merges_sections(self, reducer, personal_info, travel_preferences):
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data({"personalInfo": personal_info}),
            Action.update_data({"travelPreferences": travel_preferences}),
            Action.update_data({"personalInfo": {"firstName": "Bea"}}),
        )
        assert state.data.personal_info.first_name == "Bea"
        assert state.data.personal_info.last_name == "Silva"
        assert state.data.travel_preferences.languages == ("English",)

    def test_region_timezone_reports_field_errors(self, reducer):
        """Test a tz region name yields field errors instead of a validator failure."""
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data({"personalInfo": {"firstName": "J", "location": {"timezone": "America"}}}),
            Action.next_step(),
        )
        assert state.current_step == 0
        assert [e.code for e in state.validation_errors] == [
            ValidationErrorCode.TOO_SHORT, ValidationErrorCode.INVALID_TIMEZONE,
        ]

    def test_raising_validator_blocks(self):
        reducer = OnboardingReducer([
            OnboardingStep(id="broken", title="Broken", validator=_failing_validator),
            OnboardingStep(id="done", title="Done"),
        ])
        state = reducer.reduce(reducer.initial_state(), Action.next_step())
        assert state.current_step == 0
        assert state.validation_errors[0].code == ValidationErrorCode.VALIDATOR_ERROR
        assert "boom" in state.error

    def test_optional_step_errors_do_not_block(self, reducer, valid_data):
        state = _at_last_step(reducer, valid_data)
        state = reducer.reduce(state, Action.update_data({"profileSetup": {"profilePictureUrl": "me.png"}}))
        state = reducer.reduce(state, Action.next_step())
        assert state.is_completed
        assert 2 not in state.completed_steps

    def test_strict_mode_blocks_optional_step(self, steps, valid_data):
        reducer = OnboardingReducer(steps, strict=True)
        state = _at_last_step(reducer, valid_data)
        state = reducer.reduce(state, Action.update_data({"profileSetup": {"profilePictureUrl": "me.png"}}))
        state = reducer.reduce(state, Action.next_step())
        assert not state.is_completed
        assert state.validation_errors[0].field == "profilePictureUrl"


class TestSkip:
    """SKIP_STEP."""

    def test_skip_non_optional_step_is_noop(self, skipping_reducer):
        state = skipping_reducer.initial_state()
        assert skipping_reducer.reduce(state, Action.skip_step()) is state

    def test_skip_disabled_is_noop(self, reducer, valid_data):
        state = _at_last_step(reducer, valid_data)
        assert reducer.reduce(state, Action.skip_step()) is state

    def test_skip_optional_last_step_completes(self, skipping_reducer, valid_data):
        state = _at_last_step(skipping_reducer, valid_data)
        assert state.current_step == 2
        state = skipping_reducer.reduce(state, Action.skip_step())
        assert state.is_completed
        assert state.current_step == 2
        assert state.completed_steps == frozenset({0, 1})


class TestGoToStep:
    """GO_TO_STEP."""

    def test_forward_jump_requires_valid_earlier_steps(self, reducer):
        state = reducer.reduce(reducer.initial_state(), Action.go_to_step(2))
        assert state.current_step == 0
        assert state.error == "firstName is required"

    def test_forward_jump_with_valid_data(self, reducer, valid_data):
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data(valid_data.to_dict()), Action.go_to_step(2),
        )
        assert state.current_step == 2

    def test_backward_jump_is_always_allowed(self, reducer, valid_data):
        state = reducer.reduce(_at_last_step(reducer, valid_data), Action.go_to_step(0))
        assert state.current_step == 0

    def test_target_is_clamped(self, reducer, valid_data):
        state = _run(
            reducer, reducer.initial_state(),
            Action.update_data(valid_data.to_dict()), Action.go_to_step(42),
        )
        assert state.current_step == 2

    def test_non_integer_target_is_ignored(self, reducer):
        state = reducer.initial_state()
        assert reducer.reduce(state, Action.go_to_step("2")) is state


class TestFlags:
    """SET_LOADING, SET_ERROR, CLEAR_ERROR."""

    def test_set_error_clears_loading(self, reducer):
        state = _run(reducer, reducer.initial_state(), Action.set_loading(True), Action.set_error("Server error"))
        assert state.error == "Server error"
        assert not state.is_loading

    def test_set_error_none(self, reducer):
        state = _run(reducer, reducer.initial_state(), Action.set_error("x"), Action.set_error(None))
        assert state.error is None

    def test_clear_error(self, reducer):
        state = _run(reducer, reducer.initial_state(), Action.next_step(), Action.clear_error())
        assert state.error is None
        assert state.validation_errors == ()

    def test_flags_leave_step_and_data(self, reducer, personal_info):
        state = reducer.reduce(reducer.initial_state(), Action.update_data({"personalInfo": personal_info}))
        after = reducer.reduce(state, Action.set_loading(True))
        assert after.data == state.data
        assert after.current_step == state.current_step


class TestCompletion:
    """Completed flows."""

    def test_next_on_last_step_completes(self, reducer, valid_data):
        state = reducer.reduce(_at_last_step(reducer, valid_data), Action.next_step())
        assert state.is_completed
        assert state.current_step == 2
        assert state.completed_steps == frozenset({0, 1, 2})

    def test_completed_flow_ignores_navigation_and_updates(self, reducer, valid_data):
        state = reducer.reduce(_at_last_step(reducer, valid_data), Action.next_step())
        for action in (Action.next_step(), Action.previous_step(), Action.go_to_step(0),
                       Action.update_data({"personalInfo": {"firstName": "Bea"}})):
            assert reducer.reduce(state, action) is state

    def test_complete_action(self, reducer):
        state = _run(reducer, reducer.initial_state(), Action.set_loading(True), Action.complete())
        assert state.is_completed
        assert state.current_step == 2
        assert not state.is_loading


class TestRestore:
    """RESTORE_PROGRESS."""

    def test_restore_valid_progress(self, reducer, valid_data):
        state = reducer.reduce(reducer.initial_state(), Action.restore_progress(valid_data, 2))
        assert state.current_step == 2
        assert state.data == valid_data
        assert state.completed_steps == frozenset({0, 1})

    def test_restore_clamps_step(self, reducer, valid_data):
        state = reducer.reduce(reducer.initial_state(), Action.restore_progress(valid_data, 17))
        assert state.current_step == 2

    def test_restore_rewinds_to_first_invalid_step(self, reducer, personal_info):
        data = OnboardingData.from_dict({"personalInfo": personal_info})
        state = reducer.reduce(reducer.initial_state(), Action.restore_progress(data, 2))
        assert state.current_step == 1


class TestFunctionalShortcut:
    """Module-level reduce()."""

    def test_reduce(self, steps):
        state = reduce(OnboardingState.initial(len(steps)), Action(ActionType.NEXT_STEP), steps)
        assert state.validation_errors == (
            ValidationError("firstName", "firstName is required", ValidationErrorCode.REQUIRED),
        )
