from skillforge.tui.renderers import SkillForgeConsoleUI

__all__ = ["SkillForgeConsoleUI"]
