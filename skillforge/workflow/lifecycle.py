from skillforge.errors import InvalidTransitionError
from skillforge.workflow.states import INTERNAL_EVENTS, WorkflowEvent, WorkflowState

TRANSITIONS: dict[WorkflowState, dict[WorkflowEvent, WorkflowState]] = {
    WorkflowState.IDLE: {
        WorkflowEvent.START_CAPTURE: WorkflowState.RECORDING,
        WorkflowEvent.UPLOAD: WorkflowState.PREVIEW,
        WorkflowEvent.SELECT_FROM_HISTORY: WorkflowState.SUCCESS,
    },
    WorkflowState.RECORDING: {
        WorkflowEvent.STOP_CAPTURE: WorkflowState.PREVIEW,
        WorkflowEvent.CAPTURE_ABORTED: WorkflowState.IDLE,
    },
    WorkflowState.PREVIEW: {
        WorkflowEvent.DISCARD: WorkflowState.IDLE,
        WorkflowEvent.ANALYZE: WorkflowState.ANALYZING,
        WorkflowEvent.UPLOAD: WorkflowState.PREVIEW,
    },
    WorkflowState.ANALYZING: {
        WorkflowEvent.ANALYSIS_SUCCEEDED: WorkflowState.SUCCESS,
        WorkflowEvent.ANALYSIS_FAILED: WorkflowState.ERROR,
    },
    WorkflowState.ERROR: {
        WorkflowEvent.DISMISS: WorkflowState.PREVIEW,
    },
    WorkflowState.SUCCESS: {
        WorkflowEvent.SELECT_FROM_HISTORY: WorkflowState.SUCCESS,
        WorkflowEvent.START_NEW: WorkflowState.IDLE,
    },
}


class WorkflowLifecycle:
    """
    Pure state machine.
    No IO. No side effects.
    """

    @staticmethod
    def transition(state: WorkflowState, event: WorkflowEvent) -> WorkflowState:
        target = TRANSITIONS[state].get(event)
        if target is None:
            raise InvalidTransitionError(state.value, event.value)
        return target

    @staticmethod
    def allows(state: WorkflowState, event: WorkflowEvent) -> bool:
        return event in TRANSITIONS[state]

    @staticmethod
    def available_events(state: WorkflowState) -> frozenset[WorkflowEvent]:
        return frozenset(
            event for event in TRANSITIONS[state] if event not in INTERNAL_EVENTS
        )
