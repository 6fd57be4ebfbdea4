from skillforge.workflow.controller import WorkflowController
from skillforge.workflow.editor import PackageEditor
from skillforge.workflow.lifecycle import WorkflowLifecycle
from skillforge.workflow.states import WorkflowEvent, WorkflowState

__all__ = [
    "PackageEditor",
    "WorkflowController",
    "WorkflowEvent",
    "WorkflowLifecycle",
    "WorkflowState",
]
