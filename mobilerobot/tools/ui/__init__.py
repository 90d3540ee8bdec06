"""UI state extraction."""

from mobilerobot.tools.ui.provider import AndroidElementProvider, ElementProvider

__all__ = ["ElementProvider", "AndroidElementProvider"]
