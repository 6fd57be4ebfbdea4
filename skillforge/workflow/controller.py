"""Capture -> review -> submit -> result workflow."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from dataclasses import replace
from typing import Callable

from skillforge.analysis.gateway import IAnalysisGateway
from skillforge.errors import (
    AnalysisError,
    CaptureError,
    CapturePermissionDenied,
    InvalidTransitionError,
    SkillForgeError,
)
from skillforge.history.store import HistoryStore
from skillforge.media.capture import CaptureSession, CaptureSourceFactory
from skillforge.media.models import MediaArtifact, check_artifact
from skillforge.skills.models import GeneratedSkill, SkillPackage
from skillforge.skills.schema import validate_package
from skillforge.utils import now_millis
from skillforge.workflow.lifecycle import WorkflowLifecycle
from skillforge.workflow.states import WorkflowEvent, WorkflowState

logger = logging.getLogger(__name__)

DisplayListener = Callable[[GeneratedSkill | None], None]


def _new_skill_id() -> str:
    return uuid.uuid4().hex


class WorkflowController:
    """Owns the current media artifact and the displayed skill.

    Every entry point is checked against ``WorkflowLifecycle``; calls that
    the current state does not allow raise ``InvalidTransitionError``.
    """

    def __init__(
        self,
        gateway: IAnalysisGateway,
        history: HistoryStore,
        capture_factory: CaptureSourceFactory | None = None,
        max_inline_bytes: int | None = None,
        id_factory: Callable[[], str] = _new_skill_id,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._gateway = gateway
        self._history = history
        self._capture_factory = capture_factory
        self._max_inline_bytes = max_inline_bytes
        self._id_factory = id_factory
        self._clock = clock

        self._state = WorkflowState.IDLE
        self._artifact: MediaArtifact | None = None
        self._notes = ""
        self._current: GeneratedSkill | None = None
        self._last_error: AnalysisError | None = None
        self._capture: CaptureSession | None = None
        self._capture_task: asyncio.Task[MediaArtifact] | None = None
        self._listeners: list[DisplayListener] = []

    async def __aenter__(self) -> "WorkflowController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def artifact(self) -> MediaArtifact | None:
        return self._artifact

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def current(self) -> GeneratedSkill | None:
        return self._current

    @property
    def last_error(self) -> AnalysisError | None:
        return self._last_error

    @property
    def max_inline_bytes(self) -> int | None:
        return self._max_inline_bytes

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def capture_task(self) -> asyncio.Task[MediaArtifact] | None:
        return self._capture_task

    def available_events(self) -> frozenset[WorkflowEvent]:
        return WorkflowLifecycle.available_events(self._state)

    def add_display_listener(self, listener: DisplayListener) -> None:
        self._listeners.append(listener)

    def remove_display_listener(self, listener: DisplayListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _require(self, event: WorkflowEvent) -> None:
        if not WorkflowLifecycle.allows(self._state, event):
            raise InvalidTransitionError(self._state.value, event.value)

    def _apply(self, event: WorkflowEvent) -> None:
        target = WorkflowLifecycle.transition(self._state, event)
        logger.debug(
            "[workflow] %s --%s--> %s", self._state.value, event.value, target.value
        )
        self._state = target

    def _display(self, skill: GeneratedSkill | None) -> None:
        previous_id = self._current.id if self._current is not None else None
        self._current = skill
        current_id = skill.id if skill is not None else None
        if previous_id != current_id:
            for listener in list(self._listeners):
                listener(skill)

    def _set_artifact(self, artifact: MediaArtifact | None) -> None:
        self._artifact = artifact
        self._notes = ""
        self._last_error = None

    # capture

    async def start_capture(self) -> bool:
        """Start recording. Returns False when the user declined capture."""
        self._require(WorkflowEvent.START_CAPTURE)
        if self._capture_factory is None:
            raise CaptureError("No capture source configured")

        source = self._capture_factory()
        try:
            await source.open()
        except CapturePermissionDenied as exc:
            logger.info("[workflow] capture not started: %s", exc)
            await source.release()
            return False
        except CaptureError as exc:
            logger.error("[workflow] capture failed to start: %s", exc)
            await source.release()
            raise

        if not WorkflowLifecycle.allows(self._state, WorkflowEvent.START_CAPTURE):
            await source.release()
            raise InvalidTransitionError(
                self._state.value, WorkflowEvent.START_CAPTURE.value
            )

        self._set_artifact(None)
        session = CaptureSession(source)
        self._capture = session
        self._apply(WorkflowEvent.START_CAPTURE)
        self._capture_task = asyncio.create_task(self._run_capture(session))
        return True

    async def _run_capture(self, session: CaptureSession) -> MediaArtifact:
        try:
            artifact = await session.run()
            if self._max_inline_bytes is not None:
                check_artifact(artifact, self._max_inline_bytes)
        except asyncio.CancelledError:
            logger.info("[workflow] capture cancelled")
            self._capture = None
            self._apply(WorkflowEvent.CAPTURE_ABORTED)
            raise
        except Exception as exc:
            logger.error("[workflow] capture aborted: %s", exc)
            self._capture = None
            self._apply(WorkflowEvent.CAPTURE_ABORTED)
            raise

        self._capture = None
        self._set_artifact(artifact)
        if session.ended_externally:
            logger.info("[workflow] capture ended by the source")
        self._apply(WorkflowEvent.STOP_CAPTURE)
        return artifact

    async def stop_capture(self) -> MediaArtifact:
        self._require(WorkflowEvent.STOP_CAPTURE)
        session, task = self._capture, self._capture_task
        if session is None or task is None:
            raise CaptureError("No capture in progress")
        session.request_stop()
        return await asyncio.shield(task)

    async def wait_capture(self) -> MediaArtifact:
        """Wait for the running capture to end without asking it to stop."""
        if self._capture_task is None:
            raise CaptureError("No capture in progress")
        return await asyncio.shield(self._capture_task)

    # review

    def upload(self, artifact: MediaArtifact) -> None:
        self._require(WorkflowEvent.UPLOAD)
        check_artifact(artifact, self._max_inline_bytes)
        self._set_artifact(artifact)
        self._apply(WorkflowEvent.UPLOAD)

    def set_notes(self, notes: str) -> None:
        if self._state not in (WorkflowState.PREVIEW, WorkflowState.ERROR):
            raise InvalidTransitionError(self._state.value, "set notes")
        self._notes = notes

    def discard(self) -> None:
        self._require(WorkflowEvent.DISCARD)
        self._set_artifact(None)
        self._apply(WorkflowEvent.DISCARD)

    # submission

    async def analyze(self, notes: str | None = None) -> GeneratedSkill | None:
        """Submit the current artifact. Returns None when analysis failed."""
        self._require(WorkflowEvent.ANALYZE)
        artifact = self._artifact
        if artifact is None:
            raise InvalidTransitionError(self._state.value, "analyze without media")
        if notes is not None:
            self._notes = notes

        self._last_error = None
        self._apply(WorkflowEvent.ANALYZE)
        try:
            result = await self._gateway.generate(
                artifact.data, artifact.mime_type, self._notes
            )
        except AnalysisError as exc:
            self._last_error = exc
            logger.warning("[workflow] analysis failed (%s): %s", exc.kind, exc)
            self._apply(WorkflowEvent.ANALYSIS_FAILED)
            return None
        except BaseException:
            self._apply(WorkflowEvent.ANALYSIS_FAILED)
            raise

        skill = GeneratedSkill(
            id=self._id_factory(),
            created_at=self._clock(),
            package=result.package,
            raw_response=result.raw_response,
        )
        try:
            self._history.prepend(skill)
        except BaseException:
            self._apply(WorkflowEvent.ANALYSIS_FAILED)
            raise
        self._artifact = None
        self._display(skill)
        self._apply(WorkflowEvent.ANALYSIS_SUCCEEDED)
        logger.info("[workflow] generated %s (%s)", skill.package.slug, skill.id)
        return skill

    def dismiss(self) -> None:
        self._require(WorkflowEvent.DISMISS)
        self._apply(WorkflowEvent.DISMISS)

    # results

    def select_from_history(self, skill_id: str) -> GeneratedSkill:
        self._require(WorkflowEvent.SELECT_FROM_HISTORY)
        skill = self._history.get(skill_id)
        self._display(skill)
        self._apply(WorkflowEvent.SELECT_FROM_HISTORY)
        return skill

    def start_new(self) -> None:
        self._require(WorkflowEvent.START_NEW)
        self._display(None)
        self._apply(WorkflowEvent.START_NEW)

    def delete_from_history(self, skill_id: str) -> bool:
        if self._state == WorkflowState.ANALYZING:
            raise InvalidTransitionError(self._state.value, "delete from history")
        removed = self._history.remove(skill_id)
        if removed and self._current is not None and self._current.id == skill_id:
            self._display(None)
            if self._state == WorkflowState.SUCCESS:
                self._apply(WorkflowEvent.START_NEW)
        return removed

    def commit_edit(self, skill_id: str, package: SkillPackage) -> GeneratedSkill:
        validate_package(package)
        existing = self._history.get(skill_id)
        updated = replace(existing, package=package)
        self._history.replace(updated)
        if self._current is not None and self._current.id == skill_id:
            self._current = updated
        logger.debug("[workflow] committed edits to %s", skill_id)
        return updated

    async def aclose(self) -> None:
        task = self._capture_task
        if task is not None and not task.done():
            task.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError, SkillForgeError):
                await task
        self._capture_task = None
        # a task cancelled before its first step never reached the session
        session, self._capture = self._capture, None
        if session is not None:
            await session.source.release()
        if self._state == WorkflowState.RECORDING:
            self._apply(WorkflowEvent.CAPTURE_ABORTED)
