from enum import Enum


class PublishState(str, Enum):
    UNVALIDATED = "unvalidated"
    VALIDATING = "validating"
    REJECTED = "rejected"
    VALIDATED = "validated"
    DISPATCHING = "dispatching"
    PUBLISHED = "published"
    DISPATCH_FAILED = "dispatch_failed"


TERMINAL_STATES = frozenset(
    {PublishState.REJECTED, PublishState.PUBLISHED, PublishState.DISPATCH_FAILED}
)

_ALLOWED: dict[PublishState, frozenset[PublishState]] = {
    # Skipping validation goes straight to dispatch
    PublishState.UNVALIDATED: frozenset({PublishState.VALIDATING, PublishState.DISPATCHING}),
    PublishState.VALIDATING: frozenset({PublishState.REJECTED, PublishState.VALIDATED}),
    PublishState.VALIDATED: frozenset({PublishState.DISPATCHING}),
    PublishState.DISPATCHING: frozenset(
        {PublishState.PUBLISHED, PublishState.DISPATCH_FAILED}
    ),
    PublishState.REJECTED: frozenset(),
    PublishState.PUBLISHED: frozenset(),
    PublishState.DISPATCH_FAILED: frozenset(),
}


class InvalidTransitionError(ValueError):
    """Raised when a dispatch attempt moves between states out of order."""

    def __init__(self, current: PublishState, new: PublishState) -> None:
        self.current = current
        self.new = new
        super().__init__(f"Invalid transition from {current.value} to {new.value}")


def can_transition(current: PublishState, new: PublishState) -> bool:
    """
    Determine if a dispatch state transition is allowed.
    """
    return new in _ALLOWED[current]


def transition(current: PublishState, new: PublishState) -> PublishState:
    """
    Return the new state.
    Raises InvalidTransitionError if the move is not allowed.
    """
    if not can_transition(current, new):
        raise InvalidTransitionError(current, new)
    return new
