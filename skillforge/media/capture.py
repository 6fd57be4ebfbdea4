"""Screen capture sources.

A capture is one task: it starts when the source is opened and produces a
single ``MediaArtifact`` once the user stops it or the source ends by itself.
The source is released on every exit path.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Callable, Sequence

from skillforge.constants import DEFAULT_CAPTURE_COMMAND, DEFAULT_CAPTURE_MIME_TYPE
from skillforge.errors import CaptureError, CapturePermissionDenied
from skillforge.media.models import MediaArtifact

logger = logging.getLogger(__name__)


class ICaptureSource(ABC):
    @abstractmethod
    async def open(self) -> None:
        """Acquire the device and start recording."""

    @abstractmethod
    async def wait_ended(self) -> None:
        """Resolve when the source stops on its own (e.g. sharing ended)."""

    @abstractmethod
    async def finish(self) -> MediaArtifact:
        """Stop recording and return everything captured so far."""

    @abstractmethod
    async def release(self) -> None:
        """Free the underlying streams. Safe to call more than once."""


CaptureSourceFactory = Callable[[], ICaptureSource]


class CaptureSession:
    def __init__(self, source: ICaptureSource) -> None:
        self._source = source
        self._stop_requested = asyncio.Event()
        self.ended_externally = False

    @property
    def source(self) -> ICaptureSource:
        return self._source

    def request_stop(self) -> None:
        self._stop_requested.set()

    async def run(self) -> MediaArtifact:
        stop_task = asyncio.ensure_future(self._stop_requested.wait())
        end_task = asyncio.ensure_future(self._source.wait_ended())
        try:
            done, _ = await asyncio.wait(
                {stop_task, end_task}, return_when=asyncio.FIRST_COMPLETED
            )
            self.ended_externally = stop_task not in done
            if end_task in done and end_task.exception() is not None:
                logger.debug(
                    "[capture] source end signal raised: %s", end_task.exception()
                )
            return await self._source.finish()
        finally:
            for task in (stop_task, end_task):
                if not task.done():
                    task.cancel()
            await self._source.release()


class FfmpegScreenCapture(ICaptureSource):
    """Records the screen with an external recorder process (ffmpeg by default).

    ``command`` is an argv list; the ``{output}`` placeholder is replaced by
    the path of a temporary output file. Sending ``q`` on stdin stops ffmpeg
    cleanly; the process exiting on its own is treated as the end signal.
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_CAPTURE_COMMAND,
        mime_type: str = DEFAULT_CAPTURE_MIME_TYPE,
        startup_grace: float = 0.5,
        stop_timeout: float = 10.0,
    ) -> None:
        self._command = tuple(command)
        self._mime_type = mime_type
        self._startup_grace = startup_grace
        self._stop_timeout = stop_timeout
        self._process: asyncio.subprocess.Process | None = None
        self._workdir: Path | None = None
        self._output: Path | None = None
        self._stderr: IO[bytes] | None = None

    @property
    def output_path(self) -> Path | None:
        return self._output

    def _argv(self, output: Path) -> list[str]:
        return [part.replace("{output}", str(output)) for part in self._command]

    def _stderr_text(self) -> str:
        if self._workdir is None:
            return ""
        path = self._workdir / "recorder.log"
        if not path.exists():
            return ""
        return path.read_text(encoding="utf-8", errors="replace").strip()[-500:]

    async def open(self) -> None:
        if self._process is not None:
            raise CaptureError("Capture already started")

        self._workdir = Path(tempfile.mkdtemp(prefix="skillforge-capture-"))
        suffix = "." + self._mime_type.split("/", 1)[-1].split(";", 1)[0]
        self._output = self._workdir / f"capture{suffix}"
        self._stderr = (self._workdir / "recorder.log").open("wb")
        argv = self._argv(self._output)

        try:
            self._process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=self._stderr,
            )
        except PermissionError as exc:
            await self.release()
            raise CapturePermissionDenied(f"Not permitted to run {argv[0]}") from exc
        except OSError as exc:
            await self.release()
            raise CaptureError(f"Cannot start recorder {argv[0]}: {exc}") from exc

        try:
            await asyncio.wait_for(self._process.wait(), timeout=self._startup_grace)
        except asyncio.TimeoutError:
            logger.debug("[capture] recorder running: %s", " ".join(argv))
            return

        code = self._process.returncode
        detail = self._stderr_text()
        await self.release()
        raise CaptureError(f"Recorder exited with code {code}: {detail or 'no output'}")

    async def wait_ended(self) -> None:
        if self._process is None:
            return
        await self._process.wait()

    async def finish(self) -> MediaArtifact:
        process = self._process
        if process is None or self._output is None:
            raise CaptureError("Capture was not started")

        if process.returncode is None:
            try:
                if process.stdin is not None:
                    process.stdin.write(b"q")
                    await process.stdin.drain()
            except (BrokenPipeError, ConnectionResetError):
                pass
            try:
                await asyncio.wait_for(process.wait(), timeout=self._stop_timeout)
            except asyncio.TimeoutError:
                logger.warning("[capture] recorder ignored stop request, terminating")
                process.terminate()
                await process.wait()

        if not self._output.exists() or self._output.stat().st_size == 0:
            raise CaptureError(
                f"Recorder produced no output: {self._stderr_text() or 'no details'}"
            )
        return MediaArtifact(
            data=self._output.read_bytes(),
            mime_type=self._mime_type,
            source_name=self._output.name,
        )

    async def release(self) -> None:
        process, self._process = self._process, None
        if process is not None and process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        if self._stderr is not None:
            self._stderr.close()
            self._stderr = None
        if self._workdir is not None:
            shutil.rmtree(self._workdir, ignore_errors=True)
            self._workdir = None
            self._output = None
