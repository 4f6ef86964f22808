"""Application lifecycle state machine - statuses, actions and transition guards"""

import enum
from typing import Dict, FrozenSet, List

from advance_gateway.domain.exceptions import StateError, ValidationError


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DISBURSED = "DISBURSED"
    REPAID = "REPAID"
    CANCELLED = "CANCELLED"

    @classmethod
    def terminal_statuses(cls) -> FrozenSet["ApplicationStatus"]:
        """Statuses an application never leaves."""
        return frozenset({cls.REPAID, cls.CANCELLED, cls.REJECTED})

    @property
    def is_terminal(self) -> bool:
        return self in self.terminal_statuses()


class Action(str, enum.Enum):
    """Operations that are guarded by the current status"""

    UPDATE = "update"
    APPROVE = "approve"
    REJECT = "reject"
    DISBURSE = "disburse"
    REPAY = "repay"
    CANCEL = "cancel"


class TransactionType(str, enum.Enum):
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    ADJUSTMENT = "ADJUSTMENT"


class TransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# action -> (required current status, resulting status)
# UPDATE edits fields in place and keeps the status.
TRANSITIONS: Dict[Action, tuple] = {
    Action.UPDATE: (ApplicationStatus.PENDING, ApplicationStatus.PENDING),
    Action.APPROVE: (ApplicationStatus.PENDING, ApplicationStatus.APPROVED),
    Action.REJECT: (ApplicationStatus.PENDING, ApplicationStatus.REJECTED),
    Action.DISBURSE: (ApplicationStatus.APPROVED, ApplicationStatus.DISBURSED),
    Action.REPAY: (ApplicationStatus.DISBURSED, ApplicationStatus.REPAID),
    Action.CANCEL: (ApplicationStatus.PENDING, ApplicationStatus.CANCELLED),
}

GUARD_MESSAGES: Dict[Action, str] = {
    Action.UPDATE: "Application cannot be updated in its current status",
    Action.APPROVE: "Only pending applications can be approved",
    Action.REJECT: "Only pending applications can be rejected",
    Action.DISBURSE: "Application must be approved before disbursement",
    Action.REPAY: "Application must be disbursed before repayment",
    Action.CANCEL: "Only pending applications can be cancelled",
}


def required_status(action: Action) -> ApplicationStatus:
    """Status an application must be in for `action` to apply"""
    return TRANSITIONS[action][0]


def target_status(action: Action) -> ApplicationStatus:
    """Status an application ends up in after `action`"""
    return TRANSITIONS[action][1]


def guard_error(action: Action) -> Exception:
    """
    Build the error raised when `action` is attempted from the wrong status.

    Field edits on a non-pending application are a validation failure;
    everything else is a state failure. Both map to HTTP 400.
    """
    message = GUARD_MESSAGES[action]
    if action is Action.UPDATE:
        return ValidationError(message)
    return StateError(message)


def check_transition(current: ApplicationStatus, action: Action) -> ApplicationStatus:
    """
    Validate `action` against the current status.

    Returns:
        The status the application moves to.

    Raises:
        StateError / ValidationError: If the current status does not allow the action
    """
    if ApplicationStatus(current) is not required_status(action):
        raise guard_error(action)
    return target_status(action)


def allowed_actions(current: ApplicationStatus) -> FrozenSet[Action]:
    """Actions that are valid from `current`; none once the application is terminal"""
    current = ApplicationStatus(current)
    if current.is_terminal:
        return frozenset()
    return frozenset(action for action, (required, _) in TRANSITIONS.items() if required is current)


# Only an admin reviewer may take these
REVIEW_ACTIONS = frozenset({Action.APPROVE, Action.REJECT})


def customer_actions(current: ApplicationStatus) -> List[str]:
    """Action names the owner can take from `current`, sorted, for API clients"""
    return sorted(action.value for action in allowed_actions(current) - REVIEW_ACTIONS)
