"""
Unit tests for the scale entry outcome state machine.
"""

import pytest

from eventscale.core.errors import AuthorizationFailure
from eventscale.services.scale_state import (
    Actor,
    Decision,
    ScaleState,
    decision_for,
    state_of,
    transition,
)


class TestStateOf:
    """Tests for reading a state from the stored flags."""

    @pytest.mark.parametrize('confirmed,declined,expected', [
        (False, False, ScaleState.PENDING),
        (True, False, ScaleState.CONFIRMED),
        (False, True, ScaleState.DECLINED),
    ])
    def test_flags_map_to_state(self, confirmed, declined, expected):
        assert state_of(confirmed, declined) is expected

    def test_both_flags_is_rejected(self):
        with pytest.raises(ValueError):
            state_of(True, True)

    def test_flags_never_both_true(self):
        for state in ScaleState:
            confirmed, declined = state.flags
            assert not (confirmed and declined)

    def test_only_pending_is_undecided(self):
        assert not ScaleState.PENDING.is_decided
        assert ScaleState.CONFIRMED.is_decided
        assert ScaleState.DECLINED.is_decided


class TestTransition:
    """Tests for the single transition function."""

    def test_accept_from_pending_confirms(self):
        assert transition(ScaleState.PENDING, Decision.CONFIRM, Actor.PUBLIC) is ScaleState.CONFIRMED

    def test_decline_from_pending_declines(self):
        assert transition(ScaleState.PENDING, Decision.DECLINE, Actor.PUBLIC) is ScaleState.DECLINED

    def test_repeat_is_noop(self):
        state = transition(ScaleState.PENDING, Decision.CONFIRM, Actor.PUBLIC)
        assert transition(state, Decision.CONFIRM, Actor.PUBLIC) is ScaleState.CONFIRMED

    def test_different_decision_flips_and_never_returns_to_pending(self):
        state = transition(ScaleState.PENDING, Decision.CONFIRM, Actor.PUBLIC)
        state = transition(state, Decision.DECLINE, Actor.PUBLIC)
        assert state is ScaleState.DECLINED
        state = transition(state, Decision.CONFIRM, Actor.PUBLIC)
        assert state is ScaleState.CONFIRMED

    def test_public_caller_cannot_reset(self):
        with pytest.raises(AuthorizationFailure):
            transition(ScaleState.CONFIRMED, Decision.RESET, Actor.PUBLIC)

    def test_operator_can_reset(self):
        assert transition(ScaleState.DECLINED, Decision.RESET, Actor.OPERATOR) is ScaleState.PENDING

    def test_decision_for_accept_flag(self):
        assert decision_for(True) is Decision.CONFIRM
        assert decision_for(False) is Decision.DECLINE
