from typing import Optional

from rich.panel import Panel
from rich.syntax import Syntax

from skillforge.tui.enums import UIStyle


class UISection:
    @staticmethod
    def wrap(title: str, body, style: str = UIStyle.BLUE.value, subtitle: Optional[str] = None) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, body: str, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def code(title: str, text: str, language: Optional[str] = None) -> Panel:
        syntax = Syntax(text, language or "text", word_wrap=True, line_numbers=False)
        return Panel(syntax, title=title, border_style=UIStyle.DIM.value, padding=(0, 1))
