"""Outcome state machine for scale entries.

Stored as two booleans, read and written only as one of three states:

    pending   (confirmed=False, declined=False)
    confirmed (confirmed=True,  declined=False)
    declined  (confirmed=False, declined=True)

``transition`` is the only place that decides the next state. The target
depends on the decision alone, so repeating a decision is a no-op and a
different decision flips the outcome.
"""

from __future__ import annotations

from enum import Enum

from eventscale.core.errors import AuthorizationFailure


class ScaleState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"

    @property
    def flags(self) -> tuple[bool, bool]:
        """(confirmed, declined) as stored."""
        return _FLAGS[self]

    @property
    def is_decided(self) -> bool:
        return self is not ScaleState.PENDING


_FLAGS = {
    ScaleState.PENDING: (False, False),
    ScaleState.CONFIRMED: (True, False),
    ScaleState.DECLINED: (False, True),
}


class Decision(str, Enum):
    CONFIRM = "confirm"
    DECLINE = "decline"
    RESET = "reset"


class Actor(str, Enum):
    PUBLIC = "public"
    OPERATOR = "operator"


_TARGETS = {
    Decision.CONFIRM: ScaleState.CONFIRMED,
    Decision.DECLINE: ScaleState.DECLINED,
    Decision.RESET: ScaleState.PENDING,
}

# The assignee may only answer; operators may also reopen an entry
ALLOWED_DECISIONS = {
    Actor.PUBLIC: frozenset({Decision.CONFIRM, Decision.DECLINE}),
    Actor.OPERATOR: frozenset({Decision.CONFIRM, Decision.DECLINE, Decision.RESET}),
}


def state_of(confirmed: bool, declined: bool) -> ScaleState:
    if confirmed and declined:
        raise ValueError("Scale entry is both confirmed and declined")
    if confirmed:
        return ScaleState.CONFIRMED
    if declined:
        return ScaleState.DECLINED
    return ScaleState.PENDING


def decision_for(accept: bool) -> Decision:
    return Decision.CONFIRM if accept else Decision.DECLINE


def transition(current: ScaleState, decision: Decision, actor: Actor) -> ScaleState:
    if decision not in ALLOWED_DECISIONS[actor]:
        raise AuthorizationFailure(f"{actor.value} callers cannot {decision.value} a scale entry")
    return _TARGETS[decision]
