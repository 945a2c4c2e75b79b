"""
Drone Editor front-ends

Usage:
    from drone_editor.ui import FrontEndSelector

    selector = FrontEndSelector(context, fusion_factory=..., console_factory=...)
    final_state = selector.run()
"""

from .base import MAIN_ACTIONS, PROJECT_FILE_FILTER, VIDEO_FILE_FILTER, FrontEnd
from .console import ConsoleUI
from .fusion_ui import FusionUI
from .selector import FrontEndSelector, FrontEndState
from .standard_ui import StandardUI

__all__ = [
    "ConsoleUI",
    "FrontEnd",
    "FrontEndSelector",
    "FrontEndState",
    "FusionUI",
    "MAIN_ACTIONS",
    "PROJECT_FILE_FILTER",
    "StandardUI",
    "VIDEO_FILE_FILTER",
]
