from .renderer import ConsoleRenderer
from .shell import Shell

__all__ = ["ConsoleRenderer", "Shell"]
