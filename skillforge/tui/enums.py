from enum import Enum

from skillforge.skills.models import ResourceType
from skillforge.workflow.states import WorkflowState


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


WORKFLOW_STATE_STYLE = {
    WorkflowState.IDLE: UIStyle.DIM.value,
    WorkflowState.RECORDING: UIStyle.RED.value,
    WorkflowState.PREVIEW: UIStyle.CYAN.value,
    WorkflowState.ANALYZING: UIStyle.YELLOW.value,
    WorkflowState.SUCCESS: UIStyle.GREEN.value,
    WorkflowState.ERROR: UIStyle.RED.value,
}

RESOURCE_TYPE_STYLE = {
    ResourceType.SCRIPT: UIStyle.GREEN.value,
    ResourceType.REFERENCE: UIStyle.CYAN.value,
    ResourceType.ASSET: UIStyle.MAGENTA.value,
}
