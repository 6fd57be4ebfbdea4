import asyncio
import sys
from pathlib import Path
from typing import Dict, Optional

import click
from rich.console import Console

from skillforge.analysis import GeminiAnalysisGateway, IAnalysisGateway
from skillforge.archive import write_archive
from skillforge.config import Settings, load_settings
from skillforge.errors import SkillForgeError
from skillforge.history import HistoryStore, JsonFileHistoryBackend
from skillforge.logs import configure_logging
from skillforge.media import CaptureSourceFactory, FfmpegScreenCapture, load_media_file
from skillforge.skills.models import GeneratedSkill
from skillforge.tui import SkillForgeConsoleUI
from skillforge.workflow import PackageEditor, WorkflowController, WorkflowState


def _load_settings() -> Settings:
    try:
        return load_settings()
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))


def _open_history(settings: Settings) -> HistoryStore:
    try:
        return HistoryStore(JsonFileHistoryBackend(settings.history_path))
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))


def _create_gateway(settings: Settings) -> IAnalysisGateway:
    return GeminiAnalysisGateway.create_default(settings)


def _create_capture_factory(settings: Settings) -> CaptureSourceFactory:
    return lambda: FfmpegScreenCapture(command=settings.capture_command)


def _require_api_key(settings: Settings) -> None:
    if not settings.api_key:
        raise click.ClickException(
            "GEMINI_API_KEY is not set. Export it or add api_key to "
            f"{settings.config_path}."
        )


def _controller(obj: Dict[str, Settings]) -> WorkflowController:
    settings = obj["settings"]
    return WorkflowController(
        gateway=_create_gateway(settings),
        history=_open_history(settings),
        capture_factory=_create_capture_factory(settings),
        max_inline_bytes=settings.max_inline_bytes,
    )


def _resolve(controller: WorkflowController, key: str) -> GeneratedSkill:
    try:
        return controller.history.resolve(key)
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))


def _open_editor(controller: WorkflowController, key: str) -> PackageEditor:
    skill = _resolve(controller, key)
    controller.select_from_history(skill.id)
    return PackageEditor(controller)


async def _analyze(
    controller: WorkflowController, ui: SkillForgeConsoleUI, notes: str
) -> Optional[GeneratedSkill]:
    artifact = controller.artifact
    if artifact is not None:
        ui.render_artifact(artifact)
    with ui.console.status("Analyzing media..."):
        skill = await controller.analyze(notes)
    if skill is None:
        ui.render_analysis_error(controller.last_error)
        return None
    ui.render_skill(skill)
    return skill


async def _export(skill: GeneratedSkill, directory: Path, ui: SkillForgeConsoleUI) -> None:
    path = await asyncio.to_thread(write_archive, skill.package, directory)
    ui.render_exported(path)


async def _generate_from_file(
    controller: WorkflowController,
    ui: SkillForgeConsoleUI,
    path: Path,
    mime_type: Optional[str],
    notes: str,
    export_dir: Optional[Path],
) -> Optional[GeneratedSkill]:
    async with controller:
        artifact = load_media_file(
            path, mime_type=mime_type, max_bytes=controller.max_inline_bytes
        )
        controller.upload(artifact)
        skill = await _analyze(controller, ui, notes)
        if skill is not None and export_dir is not None:
            await _export(skill, export_dir, ui)
        return skill


async def _wait_for_enter() -> None:
    await asyncio.to_thread(sys.stdin.readline)


async def _record(
    controller: WorkflowController,
    ui: SkillForgeConsoleUI,
    notes: str,
    export_dir: Optional[Path],
) -> Optional[GeneratedSkill]:
    async with controller:
        if not await controller.start_capture():
            ui.render_state(controller.state, "Screen capture was cancelled.")
            return None
        ui.render_state(controller.state, "Press Enter to stop recording.")

        capture = controller.capture_task
        assert capture is not None
        enter = asyncio.ensure_future(_wait_for_enter())
        await asyncio.wait({enter, capture}, return_when=asyncio.FIRST_COMPLETED)
        if not enter.done():
            ui.render_state(controller.state, "Recorder stopped. Press Enter to continue.")
            await enter

        if controller.state == WorkflowState.RECORDING:
            await controller.stop_capture()
        else:
            await controller.wait_capture()

        ui.render_state(controller.state, "Recording finished.")
        skill = await _analyze(controller, ui, notes)
        if skill is not None and export_dir is not None:
            await _export(skill, export_dir, ui)
        return skill


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Turn screen recordings and documents into agent skill packages."""
    configure_logging(verbose)
    ctx.obj = {"settings": _load_settings()}


@cli.command(help="Generate a skill package from a video, image or PDF.")
@click.argument(
    "path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--notes", default="", help="Extra context sent with the media.")
@click.option("--mime-type", default=None, help="Override the detected media type.")
@click.option(
    "--export",
    "export_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write the archive to this directory.",
)
@click.pass_obj
def generate(
    obj: Dict[str, Settings],
    path: Path,
    notes: str,
    mime_type: Optional[str],
    export_dir: Optional[Path],
) -> None:
    ui = SkillForgeConsoleUI(Console())
    settings = obj["settings"]
    _require_api_key(settings)
    controller = _controller(obj)

    try:
        skill = asyncio.run(
            _generate_from_file(controller, ui, path, mime_type, notes, export_dir)
        )
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))

    if skill is None:
        raise click.exceptions.Exit(1)


@cli.command(help="Record the screen until Enter is pressed, then generate.")
@click.option("--notes", default="", help="Extra context sent with the recording.")
@click.option(
    "--export",
    "export_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Also write the archive to this directory.",
)
@click.pass_obj
def record(obj: Dict[str, Settings], notes: str, export_dir: Optional[Path]) -> None:
    ui = SkillForgeConsoleUI(Console())
    settings = obj["settings"]
    _require_api_key(settings)
    controller = _controller(obj)

    try:
        skill = asyncio.run(_record(controller, ui, notes, export_dir))
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))

    if skill is None and controller.state == WorkflowState.ERROR:
        raise click.exceptions.Exit(1)


@cli.group(help="List, inspect and remove generated skills.")
def history() -> None:
    pass


@history.command("list", help="List generated skills, newest first.")
@click.pass_obj
def history_list(obj: Dict[str, Settings]) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    ui.render_history(list(controller.history))


@history.command("show", help="Show one generated skill.")
@click.argument("skill_id")
@click.pass_obj
def history_show(obj: Dict[str, Settings], skill_id: str) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    ui.render_skill(_resolve(controller, skill_id))


@history.command("remove", help="Delete a generated skill from history.")
@click.argument("skill_id")
@click.pass_obj
def history_remove(obj: Dict[str, Settings], skill_id: str) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    skill = _resolve(controller, skill_id)
    controller.delete_from_history(skill.id)
    ui.render_removed(skill)


@cli.command(help="List the files of a skill package, or print one of them.")
@click.argument("skill_id")
@click.argument("name", required=False)
@click.pass_obj
def files(obj: Dict[str, Settings], skill_id: str, name: Optional[str]) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    editor = _open_editor(controller, skill_id)
    if name is None:
        ui.render_files(editor.package)
        return
    try:
        path = editor.resolve(name)
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))
    language = None
    for item in editor.package.resources:
        if item.path == path:
            language = item.language
    ui.render_file(path, editor.rendered(path), language)


@cli.command(help="Edit one file of a skill package and save it to history.")
@click.argument("skill_id")
@click.argument("name")
@click.option(
    "--from-file",
    "source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Replace the file content with this file instead of opening $EDITOR.",
)
@click.pass_obj
def edit(
    obj: Dict[str, Settings], skill_id: str, name: str, source: Optional[Path]
) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    editor = _open_editor(controller, skill_id)
    try:
        path = editor.resolve(name)
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))

    if source is not None:
        text: Optional[str] = source.read_text(encoding="utf-8")
    else:
        text = click.edit(
            editor.content_of(path), extension=Path(path).suffix or ".txt"
        )
    if text is None:
        ui.render_unchanged(path)
        return

    editor.edit_content(path, text)
    if not editor.is_dirty:
        ui.render_unchanged(path)
        return
    try:
        updated = editor.commit()
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))
    ui.render_committed(updated, path)


@cli.command(help="Write a skill package as <slug>.zip.")
@click.argument("skill_id")
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the archive.",
)
@click.pass_obj
def export(obj: Dict[str, Settings], skill_id: str, output_dir: Path) -> None:
    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    skill = _resolve(controller, skill_id)
    try:
        asyncio.run(_export(skill, output_dir, ui))
    except SkillForgeError as exc:
        raise click.ClickException(str(exc))


@cli.command(help="Browse and edit a skill package interactively.")
@click.argument("skill_id")
@click.pass_obj
def browse(obj: Dict[str, Settings], skill_id: str) -> None:
    from skillforge.tui.package_browser import PackageBrowserApp

    ui = SkillForgeConsoleUI(Console())
    controller = _controller(obj)
    editor = _open_editor(controller, skill_id)
    saved = PackageBrowserApp(editor).run()
    if saved and controller.current is not None:
        ui.render_skill(controller.current)


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    # without standalone mode click hands back the code of a raised Exit
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
