"""
Console front-end: an interactive Python REPL inside the host.

The REPL namespace exposes the host objects and one helper per workflow
(``import_media``, ``auto_edit``, ``save_project`` ...). Alerts and progress
are rendered with rich; confirmations and paths are asked with click.
"""

import code
from typing import Any, Callable, Dict, List, Optional

import click

from .. import color_grading, media_pool, timeline, workflows
from ..logger import logger
from ..resolve.connection import get_feature_support_info
from .base import FrontEnd, ProgressTask

BANNER = "Drone Editor initialized in console mode\nType 'help()' for available commands"

LEVEL_STYLES = {"info": "bold green", "warning": "bold yellow", "error": "bold red"}

HELP_LINES = (
    ("import_media(file_paths)", "Import media files"),
    ("get_clips()", "Get all clips from media pool"),
    ("create_timeline(clips, name)", "Create a timeline from clips"),
    ("apply_transitions(timeline)", "Apply transitions between clips"),
    ("apply_lut(lut_path)", "Apply a LUT to the current timeline"),
    ("detect_scenes()", "Split media pool clips into scenes"),
    ("highlights()", "Build a timeline from the best highlights"),
    ("enhance_audio()", "Enhance audio on the current timeline"),
    ("auto_edit()", "Perform automatic edit with all clips"),
    ("save_project(filepath)", "Save the current project to a file"),
    ("load_project(filepath)", "Load a project from a file"),
    ("feature_support()", "Show which host features are available"),
)


def _default_console():
    from rich.console import Console
    return Console()


class ConsoleUI(FrontEnd):
    """Text front-end; the last resort of the front-end chain."""

    name = "console"

    def __init__(
        self,
        context: Any,
        console: Any = None,
        interact: Callable[..., Any] = code.interact,
    ):
        super().__init__(context)
        self.console = console or _default_console()
        self.interact = interact

    def show_alert(self, title: str, message: str, level: str = "info") -> None:
        style = LEVEL_STYLES.get(level, LEVEL_STYLES["info"])
        self.console.print(f"[{style}]{title}[/]: {message}")

    def show_confirm(self, title: str, message: str) -> bool:
        return click.confirm(f"{title}: {message}", default=False)

    def show_progress(self, title: str, message: str, task: ProgressTask) -> Any:
        from rich.progress import BarColumn, Progress, TextColumn

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            transient=True,
            console=self.console,
        ) as progress:
            bar = progress.add_task(description=f"{title}: {message}", total=100)

            def report(percent: int) -> None:
                progress.update(bar, completed=max(0, min(100, int(percent))))

            return task(report)

    def ask_open_paths(self, title, directory=None, file_filter=None, multi=True) -> Optional[List[str]]:
        hint = " (separate multiple paths with ';')" if multi else ""
        answer = click.prompt(f"{title}{hint}", default="", show_default=False)
        paths = [p.strip() for p in answer.split(";") if p.strip()]
        if not paths:
            return None
        return paths if multi else paths[:1]

    def ask_save_path(self, title, directory=None, file_filter=None, default_name=None) -> Optional[str]:
        default = default_name or ""
        if directory and default_name:
            default = f"{directory}/{default_name}"
        answer = click.prompt(title, default=default).strip()
        return answer or None

    # -------------------------------------------------------------------------
    # REPL
    # -------------------------------------------------------------------------

    def print_help(self) -> None:
        self.console.print("Available functions:")
        for signature, description in HELP_LINES:
            self.console.print(f"  {signature} - {description}")

    def namespace(self) -> Dict[str, Any]:
        """Globals for the REPL session."""
        ctx = self.context

        def get_clips():
            return media_pool.list_clips(ctx.media_pool) if ctx.media_pool is not None else []

        def auto_edit():
            clips = get_clips()
            if not clips:
                self.console.print("No clips available")
                return False
            new_timeline = workflows.run_auto_edit(ctx, clips, lambda percent: None)
            if new_timeline is None:
                self.console.print("Failed to create timeline")
                return False
            self.console.print("Auto-edit completed successfully")
            return True

        return {
            "resolve": ctx.resolve,
            "project": ctx.project,
            "media_pool": ctx.media_pool,
            "context": ctx,
            "import_media": lambda file_paths: media_pool.import_media(ctx.media_pool, file_paths),
            "get_clips": get_clips,
            "create_timeline": lambda clips, name=timeline.DEFAULT_TIMELINE_NAME: timeline.create_from_clips(
                ctx.project, ctx.media_pool, clips, name
            ),
            "apply_transitions": lambda timeline_obj: timeline.apply_transitions(timeline_obj),
            "apply_lut": lambda lut_path: color_grading.apply_lut(ctx.project, lut_path),
            "detect_scenes": lambda: workflows.detect_scenes(ctx, self),
            "highlights": lambda: workflows.smart_highlights(ctx, self),
            "enhance_audio": lambda: workflows.enhance_audio(ctx, self),
            "auto_edit": auto_edit,
            "save_project": lambda filepath=None: workflows.save_project(ctx, self, filepath),
            "load_project": lambda filepath=None: workflows.load_project(ctx, self, filepath),
            "feature_support": lambda: get_feature_support_info(ctx.project, ctx.capabilities),
            "help": self.print_help,
        }

    def run(self) -> bool:
        logger.info("Drone Editor running in console mode")
        self.interact(banner=BANNER, local=self.namespace())
        return True
