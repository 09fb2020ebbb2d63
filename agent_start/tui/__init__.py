from agent_start.tui.renderers import StartConsoleUI

__all__ = ["StartConsoleUI"]
