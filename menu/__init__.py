"""Interactive option editor and archive menu."""
from __future__ import annotations

from .console import Console, MenuCancelled
from .main_menu import run_menu
from .session import EditorSession

__all__ = ["Console", "EditorSession", "MenuCancelled", "run_menu"]
