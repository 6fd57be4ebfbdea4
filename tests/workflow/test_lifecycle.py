import pytest

from skillforge.errors import InvalidTransitionError
from skillforge.workflow.lifecycle import TRANSITIONS, WorkflowLifecycle
from skillforge.workflow.states import WorkflowEvent, WorkflowState

State = WorkflowState
Event = WorkflowEvent


@pytest.mark.parametrize(
    "state,event,target",
    [
        (State.IDLE, Event.START_CAPTURE, State.RECORDING),
        (State.IDLE, Event.UPLOAD, State.PREVIEW),
        (State.IDLE, Event.SELECT_FROM_HISTORY, State.SUCCESS),
        (State.RECORDING, Event.STOP_CAPTURE, State.PREVIEW),
        (State.RECORDING, Event.CAPTURE_ABORTED, State.IDLE),
        (State.PREVIEW, Event.DISCARD, State.IDLE),
        (State.PREVIEW, Event.ANALYZE, State.ANALYZING),
        (State.PREVIEW, Event.UPLOAD, State.PREVIEW),
        (State.ANALYZING, Event.ANALYSIS_SUCCEEDED, State.SUCCESS),
        (State.ANALYZING, Event.ANALYSIS_FAILED, State.ERROR),
        (State.ERROR, Event.DISMISS, State.PREVIEW),
        (State.SUCCESS, Event.SELECT_FROM_HISTORY, State.SUCCESS),
        (State.SUCCESS, Event.START_NEW, State.IDLE),
    ],
)
def test_allowed_transitions(state, event, target) -> None:
    assert WorkflowLifecycle.transition(state, event) == target


def test_every_state_has_a_row() -> None:
    assert set(TRANSITIONS) == set(WorkflowState)


@pytest.mark.parametrize("event", [Event.START_CAPTURE, Event.UPLOAD, Event.DISCARD])
def test_analyzing_rejects_user_events(event) -> None:
    with pytest.raises(InvalidTransitionError, match="while analyzing"):
        WorkflowLifecycle.transition(State.ANALYZING, event)


def test_analyzing_offers_no_user_events() -> None:
    assert WorkflowLifecycle.available_events(State.ANALYZING) == frozenset()


def test_available_events_hide_internal_ones() -> None:
    assert WorkflowLifecycle.available_events(State.RECORDING) == {Event.STOP_CAPTURE}
    assert WorkflowLifecycle.available_events(State.IDLE) == {
        Event.START_CAPTURE,
        Event.UPLOAD,
        Event.SELECT_FROM_HISTORY,
    }


def test_error_only_allows_dismiss() -> None:
    assert not WorkflowLifecycle.allows(State.ERROR, Event.ANALYZE)
    assert WorkflowLifecycle.allows(State.ERROR, Event.DISMISS)
