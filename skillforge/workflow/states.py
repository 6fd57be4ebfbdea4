from enum import Enum


class WorkflowState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PREVIEW = "preview"
    ANALYZING = "analyzing"
    SUCCESS = "success"
    ERROR = "error"


class WorkflowEvent(str, Enum):
    START_CAPTURE = "start_capture"
    STOP_CAPTURE = "stop_capture"
    CAPTURE_ABORTED = "capture_aborted"
    UPLOAD = "upload"
    DISCARD = "discard"
    ANALYZE = "analyze"
    ANALYSIS_SUCCEEDED = "analysis_succeeded"
    ANALYSIS_FAILED = "analysis_failed"
    DISMISS = "dismiss"
    SELECT_FROM_HISTORY = "select_from_history"
    START_NEW = "start_new"


# Raised by the controller itself, never offered to the user.
INTERNAL_EVENTS = frozenset(
    {
        WorkflowEvent.CAPTURE_ABORTED,
        WorkflowEvent.ANALYSIS_SUCCEEDED,
        WorkflowEvent.ANALYSIS_FAILED,
    }
)
