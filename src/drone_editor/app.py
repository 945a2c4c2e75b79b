"""
Drone Editor application entry point.

Startup order: logging, saved options, Resolve connection, feature report,
AI strategy, then the front-end chain (Fusion UI -> standard UI -> console).

Usage:
    from drone_editor.app import main

    sys.exit(main(console=True))
"""

import sys
from dataclasses import dataclass, replace
from typing import Any, Optional

from .ai import AIProvider, get_ai_provider
from .config import EditorOptions, Settings, get_settings, load_options
from .exceptions import ConnectionExhausted, HostUnavailable
from .logger import configure_logging, logger, set_level
from .project import ProjectStore
from .resolve.capabilities import CapabilityTable, has_capability, invoke_if_present
from .resolve.connection import HostSession, connect, find_script_module, log_feature_support
from .ui import ConsoleUI, FrontEndSelector, FrontEndState, FusionUI, StandardUI


@dataclass
class EditorContext:
    """
    Everything a workflow needs, passed explicitly.

    Host handles are read through the session on every access.
    """

    settings: Settings
    options: EditorOptions
    ai: AIProvider
    store: ProjectStore
    session: Optional[HostSession] = None
    last_save_path: Optional[str] = None

    @property
    def resolve(self) -> Any:
        return self.session.resolve if self.session else None

    @property
    def fusion(self) -> Any:
        return self.session.fusion if self.session else None

    @property
    def capabilities(self) -> CapabilityTable:
        return self.session.capabilities if self.session else CapabilityTable()

    @property
    def project(self) -> Any:
        return self.session.project if self.session else None

    @property
    def media_pool(self) -> Any:
        return self.session.media_pool if self.session else None

    @property
    def current_timeline(self) -> Any:
        timeline, _ = invoke_if_present(self.project, "GetCurrentTimeline")
        return timeline or None


def build_context(
    settings: Settings,
    options: EditorOptions,
    session: Optional[HostSession] = None,
) -> EditorContext:
    return EditorContext(
        settings=settings,
        options=options,
        ai=get_ai_provider(settings.ai),
        store=ProjectStore(autosave_dir=settings.paths.autosave_dir),
        session=session,
    )


# =============================================================================
# Front-end factories
# =============================================================================

def build_fusion_ui(context: EditorContext) -> Optional[FusionUI]:
    fusion = context.fusion
    ui_manager = getattr(fusion, "UIManager", None) if fusion is not None else None
    if ui_manager is None:
        return None

    script_module = find_script_module()
    if not has_capability(script_module, "UIDispatcher"):
        return None
    return FusionUI(context, ui_manager, script_module.UIDispatcher(ui_manager))


def build_standard_ui(context: EditorContext) -> Optional[StandardUI]:
    for holder in (sys.modules.get("__main__"), find_script_module()):
        ui_module = getattr(holder, "ui", None)
        if ui_module is not None and hasattr(ui_module, "MessageBox"):
            return StandardUI(context, ui_module)
    return None


def build_console_ui(context: EditorContext) -> ConsoleUI:
    return ConsoleUI(context)


# =============================================================================
# Main
# =============================================================================

def main(
    console: Optional[bool] = None,
    ai_bridge: Optional[bool] = None,
    attempts: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> int:
    """
    Run Drone Editor inside the current Resolve instance.

    Returns:
        Process exit status (0 on success)
    """
    settings = get_settings()
    if ai_bridge is not None:
        settings = replace(settings, ai=replace(settings.ai, use_bridge=ai_bridge))

    log_file = configure_logging(settings.paths.log_file)
    logger.info(f"Drone Editor starting (log file: {log_file or 'console only'})")

    options = load_options(settings.paths.options_file)
    set_level(options.log_level)
    console_requested = settings.ui.console_mode if console is None else console

    session = None
    try:
        session = connect(
            max_attempts=attempts or settings.connection.max_attempts,
            retry_delay=settings.connection.retry_delay if retry_delay is None else retry_delay,
        )
    except HostUnavailable:
        if not console_requested:
            return 1
        logger.warning("Continuing in console mode without a Resolve session")
    except ConnectionExhausted:
        return 1

    if session is not None:
        log_feature_support(session.project, session.capabilities)

    context = build_context(settings, options, session)
    selector = FrontEndSelector(
        context,
        console_requested=console_requested,
        fusion_factory=build_fusion_ui,
        standard_factory=build_standard_ui,
        console_factory=build_console_ui,
    )
    state = selector.run()
    logger.info(f"Drone Editor finished ({state.value})")
    return 1 if state == FrontEndState.FAILED else 0
