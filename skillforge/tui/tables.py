from rich.markup import escape
from rich.table import Column, Table

from skillforge.constants import SKILL_FILENAME
from skillforge.media.models import MediaArtifact
from skillforge.skills.models import GeneratedSkill, SkillPackage
from skillforge.tui.enums import RESOURCE_TYPE_STYLE, UIStyle
from skillforge.utils import format_millis, human_size


def _marked(path: str, active: str | None) -> str:
    text = escape(path)
    return f"[bold]> {text}[/bold]" if path == active else text


class SkillTable:
    @staticmethod
    def summary_block(skill: GeneratedSkill):
        package = skill.package
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Name", escape(package.frontmatter.name))
        table.add_row("Slug", escape(package.slug))
        table.add_row("Description", escape(package.frontmatter.description))
        table.add_row("Files", str(package.file_count))
        table.add_row("Id", skill.id)
        table.add_row("Created", format_millis(skill.created_at))
        return table

    @staticmethod
    def files_table(package: SkillPackage, active: str | None = None) -> Table:
        table = Table(
            Column(header="File", overflow="fold"),
            Column(header="Type", width=10),
            Column(header="Language", width=12),
            Column(header="Size", width=10, justify="right"),
            expand=True,
            header_style="bold",
        )
        table.add_row(
            _marked(SKILL_FILENAME, active),
            "document",
            "markdown",
            human_size(len(package.body.encode("utf-8"))),
        )
        for item in package.resources:
            style = RESOURCE_TYPE_STYLE.get(item.type, UIStyle.WHITE.value)
            table.add_row(
                _marked(item.path, active),
                f"[{style}]{item.type.value}[/{style}]",
                escape(item.language or ""),
                human_size(len(item.content.encode("utf-8"))),
            )
        return table


class HistoryTable:
    @staticmethod
    def history_table(items: list[GeneratedSkill]) -> Table:
        table = Table(
            Column(header="Id", width=10),
            Column(header="Created", width=17),
            Column(header="Slug", overflow="ellipsis", max_width=32),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Files", width=6, justify="right"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            table.add_row(
                item.id[:8],
                format_millis(item.created_at),
                escape(item.package.slug),
                escape(item.package.frontmatter.name),
                str(item.package.file_count),
            )
        return table


class MediaTable:
    @staticmethod
    def artifact_block(artifact: MediaArtifact):
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Source", escape(artifact.source_name or "capture"))
        table.add_row("Type", artifact.mime_type)
        table.add_row("Size", human_size(artifact.size))
        return table
