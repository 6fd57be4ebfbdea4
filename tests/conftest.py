import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from skillforge.analysis.gateway import AnalysisResult, IAnalysisGateway  # noqa: E402
from skillforge.media.capture import ICaptureSource  # noqa: E402
from skillforge.media.models import MediaArtifact  # noqa: E402
from skillforge.skills.models import (  # noqa: E402
    GeneratedSkill,
    ResourceType,
    SkillFile,
    SkillFrontmatter,
    SkillPackage,
)

_SKILLFORGE_ENV = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "SKILLFORGE_HOME",
    "SKILLFORGE_HISTORY",
    "SKILLFORGE_MODEL",
    "SKILLFORGE_MAX_INLINE_BYTES",
)

INVOICE_PAYLOAD: dict[str, Any] = {
    "slug": "invoice-sorter",
    "frontmatter": {
        "name": "Invoice Sorter",
        "description": "Use when sorting PDF invoices by vendor",
    },
    "body": "# Invoice Sorter\n\n1. Open the inbox.\n2. Run scripts/sort.py.\n",
    "resources": [
        {"filename": "sort.py", "type": "script", "content": "print('x')"},
    ],
}


class FakeGateway(IAnalysisGateway):
    """Returns queued outcomes; exceptions in the queue are raised."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[bytes, str, str]] = []
        self.gate: asyncio.Event | None = None

    async def generate(self, data: bytes, mime_type: str, notes: str) -> AnalysisResult:
        self.calls.append((data, mime_type, notes))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeCaptureSource(ICaptureSource):
    def __init__(
        self,
        artifact: MediaArtifact | None = None,
        open_error: Exception | None = None,
        finish_error: Exception | None = None,
    ) -> None:
        self.artifact = artifact or MediaArtifact(b"frames", "video/webm")
        self.open_error = open_error
        self.finish_error = finish_error
        self.ended = asyncio.Event()
        self.opened = False
        self.finished = False
        self.release_count = 0

    async def open(self) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    async def wait_ended(self) -> None:
        await self.ended.wait()

    async def finish(self) -> MediaArtifact:
        self.finished = True
        if self.finish_error is not None:
            raise self.finish_error
        return self.artifact

    async def release(self) -> None:
        self.release_count += 1


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in _SKILLFORGE_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def skillforge_home(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "skillforge"


@pytest.fixture
def invoice_payload() -> dict[str, Any]:
    return json.loads(json.dumps(INVOICE_PAYLOAD))


@pytest.fixture
def invoice_package() -> SkillPackage:
    return SkillPackage.from_dict(INVOICE_PAYLOAD)


@pytest.fixture
def make_package():
    def _make(
        slug: str = "demo-skill",
        name: str = "Demo Skill",
        description: str = "Use when demonstrating",
        body: str = "# Demo\n",
        resources: tuple[SkillFile, ...] = (),
    ) -> SkillPackage:
        return SkillPackage(
            slug=slug,
            frontmatter=SkillFrontmatter(name=name, description=description),
            body=body,
            resources=resources,
        )

    return _make


@pytest.fixture
def rich_package(make_package) -> SkillPackage:
    return make_package(
        slug="report-builder",
        name="Report Builder",
        description="Use when building the weekly report",
        body="# Report Builder\n\nSee references/layout.md.\n",
        resources=(
            SkillFile("layout.md", "# Layout\n", ResourceType.REFERENCE, "markdown"),
            SkillFile("build.py", "print('build')\n", ResourceType.SCRIPT, "python"),
            SkillFile("logo.svg", "<svg/>", ResourceType.ASSET),
            SkillFile("check.sh", "echo ok\n", ResourceType.SCRIPT, "bash"),
        ),
    )


@pytest.fixture
def make_skill(make_package):
    def _make(skill_id: str, slug: str | None = None, created_at: int = 0) -> GeneratedSkill:
        return GeneratedSkill(
            id=skill_id,
            created_at=created_at,
            package=make_package(slug=slug or f"skill-{skill_id}"),
            raw_response=None,
        )

    return _make


@pytest.fixture
def webm_artifact() -> MediaArtifact:
    return MediaArtifact(data=b"\x1a\x45\xdf\xa3webm", mime_type="video/webm")


@pytest.fixture
def fake_gateway():
    return FakeGateway


@pytest.fixture
def fake_capture_source():
    return FakeCaptureSource


@pytest.fixture
def analysis_result():
    def _result(package: SkillPackage) -> AnalysisResult:
        return AnalysisResult(package=package, raw_response=json.dumps(package.to_dict()))

    return _result


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
