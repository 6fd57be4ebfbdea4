from pathlib import Path

from rich.console import Console
from rich.markup import escape

from skillforge.constants import SKILL_FILENAME
from skillforge.errors import AnalysisError
from skillforge.media.models import MediaArtifact
from skillforge.skills.models import GeneratedSkill, SkillPackage
from skillforge.tui.enums import WORKFLOW_STATE_STYLE, UIStyle
from skillforge.tui.sections import UISection
from skillforge.tui.tables import HistoryTable, MediaTable, SkillTable
from skillforge.utils import compact_home_path
from skillforge.workflow.states import WorkflowState


class SkillForgeConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_state(self, state: WorkflowState, detail: str) -> None:
        style = WORKFLOW_STATE_STYLE.get(state, UIStyle.WHITE.value)
        self.console.print(f"[{style}]{state.value}[/{style}] {escape(detail)}")

    def render_artifact(self, artifact: MediaArtifact) -> None:
        self.console.print(
            UISection.wrap(
                "media", MediaTable.artifact_block(artifact), style=UIStyle.CYAN.value
            )
        )

    def render_skill(self, skill: GeneratedSkill) -> None:
        self.console.print(
            UISection.wrap(
                "skill",
                SkillTable.summary_block(skill),
                style=UIStyle.GREEN.value,
            )
        )
        self.render_files(skill.package)

    def render_files(self, package: SkillPackage, active: str | None = None) -> None:
        self.console.print(
            UISection.wrap(
                f"{package.slug} files",
                SkillTable.files_table(package, active=active),
                style=UIStyle.BLUE.value,
            )
        )

    def render_file(self, path: str, text: str, language: str | None = None) -> None:
        if language is None and path == SKILL_FILENAME:
            language = "markdown"
        self.console.print(UISection.code(path, text, language))

    def render_history(self, items: list[GeneratedSkill]) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "history", "No skills generated yet.", style=UIStyle.YELLOW.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "history", HistoryTable.history_table(items), style=UIStyle.BLUE.value
            )
        )

    def render_analysis_error(self, error: AnalysisError | None) -> None:
        detail = escape(str(error)) if error is not None else "unknown failure"
        self.console.print(
            UISection.note(
                "analysis failed",
                "Could not generate a skill from this media.\n"
                f"{detail}\n"
                "Try a shorter recording or add notes, then run again.",
                style=UIStyle.RED.value,
            )
        )

    def render_exported(self, path: Path) -> None:
        self.console.print(
            UISection.note(
                "export",
                f"Archive written: [bold]{escape(compact_home_path(path))}[/bold]",
                style=UIStyle.GREEN.value,
            )
        )

    def render_committed(self, skill: GeneratedSkill, path: str) -> None:
        self.console.print(
            UISection.note(
                "saved",
                f"Updated {escape(path)} in [bold]{escape(skill.package.slug)}[/bold]",
                style=UIStyle.GREEN.value,
            )
        )

    def render_removed(self, skill: GeneratedSkill) -> None:
        self.console.print(
            UISection.note(
                "history",
                f"Removed: [bold]{escape(skill.package.slug)}[/bold] ({skill.id[:8]})",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_unchanged(self, path: str) -> None:
        self.console.print(
            UISection.note(
                "edit", f"No changes to {escape(path)}.", style=UIStyle.DIM.value
            )
        )
