"""
Drone Editor Core Module

Process-level helpers shared by the AI bridge:
- run_command: subprocess wrapper with logging and CommandError
"""

from .cmd_runner import CommandError, executable_available, run_command

__all__ = [
    "CommandError",
    "executable_available",
    "run_command",
]
