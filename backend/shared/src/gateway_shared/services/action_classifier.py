"""Maps (action, stage) pairs to Razorpay operations and result families.

Every action owns a success/failure pair of event types. Keeping results
inside the action's family means a charge call can never answer with a
refund result, and every error path has a valid failure result to use.
"""

from dataclasses import dataclass

from gateway_shared.models.enums import (
    ProcessorOperation,
    SessionStage,
    TransactionAction,
    TransactionEventType,
)
from gateway_shared.models.errors import ErrorCode, PayloadValidationError

STAGE_OPERATIONS: dict[SessionStage, ProcessorOperation] = {
    SessionStage.INITIALIZE: ProcessorOperation.CREATE_ORDER,
    SessionStage.PROCESS: ProcessorOperation.CAPTURE_OR_FETCH,
    SessionStage.CHARGE_REQUESTED: ProcessorOperation.CAPTURE_OR_FETCH,
    SessionStage.REFUND_REQUESTED: ProcessorOperation.REFUND,
    SessionStage.CANCEL_REQUESTED: ProcessorOperation.CANCEL,
}

# Actions a stage may service
STAGE_ACTIONS: dict[SessionStage, frozenset[TransactionAction]] = {
    SessionStage.INITIALIZE: frozenset({TransactionAction.CHARGE, TransactionAction.AUTHORIZATION}),
    SessionStage.PROCESS: frozenset({TransactionAction.CHARGE, TransactionAction.AUTHORIZATION}),
    SessionStage.CHARGE_REQUESTED: frozenset({TransactionAction.CHARGE}),
    SessionStage.REFUND_REQUESTED: frozenset({TransactionAction.REFUND}),
    SessionStage.CANCEL_REQUESTED: frozenset({TransactionAction.CANCEL}),
}

# Action used when the payload does not (or cannot) name one
DEFAULT_STAGE_ACTION: dict[SessionStage, TransactionAction] = {
    SessionStage.INITIALIZE: TransactionAction.CHARGE,
    SessionStage.PROCESS: TransactionAction.CHARGE,
    SessionStage.CHARGE_REQUESTED: TransactionAction.CHARGE,
    SessionStage.REFUND_REQUESTED: TransactionAction.REFUND,
    SessionStage.CANCEL_REQUESTED: TransactionAction.CANCEL,
}

SUCCESS_RESULTS: dict[TransactionAction, TransactionEventType] = {
    TransactionAction.CHARGE: TransactionEventType.CHARGE_SUCCESS,
    TransactionAction.AUTHORIZATION: TransactionEventType.AUTHORIZATION_SUCCESS,
    TransactionAction.REFUND: TransactionEventType.REFUND_SUCCESS,
    TransactionAction.CANCEL: TransactionEventType.CANCEL_SUCCESS,
}

FAILURE_RESULTS: dict[TransactionAction, TransactionEventType] = {
    TransactionAction.CHARGE: TransactionEventType.CHARGE_FAILURE,
    TransactionAction.AUTHORIZATION: TransactionEventType.AUTHORIZATION_FAILURE,
    TransactionAction.REFUND: TransactionEventType.REFUND_FAILURE,
    TransactionAction.CANCEL: TransactionEventType.CANCEL_FAILURE,
}


@dataclass(frozen=True)
class ActionClassification:
    """Operation and result family selected for one webhook call."""

    action: TransactionAction
    stage: SessionStage
    operation: ProcessorOperation
    success_result: TransactionEventType
    failure_result: TransactionEventType


def failure_result_for(action: TransactionAction) -> TransactionEventType:
    """Failure event type paired with an action."""
    return FAILURE_RESULTS[action]


def results_for(action: TransactionAction) -> frozenset[TransactionEventType]:
    """Both event types an action may report."""
    return frozenset({SUCCESS_RESULTS[action], FAILURE_RESULTS[action]})


def default_action_for(stage: SessionStage) -> TransactionAction:
    return DEFAULT_STAGE_ACTION[stage]


def classify(action: TransactionAction, stage: SessionStage) -> ActionClassification:
    """Select the Razorpay operation family for an action at a stage.

    Args:
        action: Requested transaction action.
        stage: Webhook stage being serviced.

    Returns:
        The classification with operation and result family.

    Raises:
        PayloadValidationError: If the stage does not service the action.
    """
    if action not in STAGE_ACTIONS[stage]:
        raise PayloadValidationError(
            f"Action {action.value} is not allowed for stage {stage.value}",
            field="action",
            code=ErrorCode.ACTION_NOT_ALLOWED,
        )

    return ActionClassification(
        action=action,
        stage=stage,
        operation=STAGE_OPERATIONS[stage],
        success_result=SUCCESS_RESULTS[action],
        failure_result=FAILURE_RESULTS[action],
    )
