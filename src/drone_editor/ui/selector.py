"""
Front-End Selector

Picks the richest front-end the environment supports and falls back along
Fusion UI -> standard UI -> console:

    PROBING --console requested--> CONSOLE
    PROBING --Fusion UI builds--> FUSION_UI
    PROBING --standard ui builds--> FALLBACK_UI
    PROBING --nothing builds--> CONSOLE
    FUSION_UI / FALLBACK_UI --run() raises--> CONSOLE
    CONSOLE --console raises--> FAILED

Factories take the EditorContext and return a FrontEnd, or None when their
toolkit is not available.
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from ..logger import logger
from .base import FrontEnd

FrontEndFactory = Callable[[Any], Optional[FrontEnd]]


class FrontEndState(str, Enum):
    PROBING = "probing"
    FUSION_UI = "fusion_ui"
    FALLBACK_UI = "fallback_ui"
    CONSOLE = "console"
    FAILED = "failed"


class FrontEndSelector:
    """Owns the front-end state; the only place that reacts to UI failures."""

    def __init__(
        self,
        context: Any,
        console_requested: bool = False,
        fusion_factory: Optional[FrontEndFactory] = None,
        standard_factory: Optional[FrontEndFactory] = None,
        console_factory: Optional[FrontEndFactory] = None,
    ):
        self.context = context
        self.console_requested = console_requested
        self.fusion_factory = fusion_factory
        self.standard_factory = standard_factory
        self.console_factory = console_factory
        self.state = FrontEndState.PROBING
        self.history: List[FrontEndState] = [FrontEndState.PROBING]
        self.front_end: Optional[FrontEnd] = None

    def _transition(self, state: FrontEndState) -> None:
        logger.debug(f"Front-end state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _build(self, factory: Optional[FrontEndFactory], label: str) -> Optional[FrontEnd]:
        if factory is None:
            return None
        try:
            front_end = factory(self.context)
        except Exception as e:
            logger.warning(f"{label} initialization failed: {e}")
            return None
        if front_end is None:
            logger.info(f"{label} not available")
        return front_end

    def _enter_console(self) -> Optional[FrontEnd]:
        self._transition(FrontEndState.CONSOLE)
        if self.console_factory is None:
            logger.error("No console front-end configured")
            self._transition(FrontEndState.FAILED)
            return None
        try:
            self.front_end = self.console_factory(self.context)
        except Exception as e:
            logger.error(f"Console front-end error: {e}")
            self._transition(FrontEndState.FAILED)
            return None
        return self.front_end

    def select(self) -> Optional[FrontEnd]:
        """Probe the front-ends in order and return the first that builds."""
        if self.console_requested:
            logger.info("Console mode requested")
            return self._enter_console()

        front_end = self._build(self.fusion_factory, "Fusion UI")
        if front_end is not None:
            logger.info("Fusion UI initialized successfully")
            self._transition(FrontEndState.FUSION_UI)
            self.front_end = front_end
            return front_end

        front_end = self._build(self.standard_factory, "Standard UI")
        if front_end is not None:
            logger.info("Standard UI available")
            self._transition(FrontEndState.FALLBACK_UI)
            self.front_end = front_end
            return front_end

        logger.info("No UI available, using console mode")
        return self._enter_console()

    def run(self) -> FrontEndState:
        """Select a front-end and run it, falling back to the console on errors."""
        front_end = self.select()

        if self.state in (FrontEndState.FUSION_UI, FrontEndState.FALLBACK_UI):
            try:
                front_end.run()
                return self.state
            except Exception as e:
                logger.error(f"{front_end.name} UI error: {e}")
                logger.info("Falling back to console mode due to UI error")
                front_end = self._enter_console()

        if front_end is None:
            return self.state

        try:
            front_end.run()
        except Exception as e:
            logger.error(f"Console mode failed: {e}")
            self._transition(FrontEndState.FAILED)
        return self.state
