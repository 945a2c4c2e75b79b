"""
Drone Editor AI Strategies

Usage:
    from drone_editor.ai import get_ai_provider

    ai = get_ai_provider(settings.ai)   # chosen once per session
    segments = ai.detect_scenes(clips)
"""

import random
from typing import Optional

from ..config import AIConfig
from ..logger import logger
from .base import AIProvider, Highlight, ProgressCallback, Segment, report_progress
from .bridge import BridgeAI
from .simulation import SimulatedAI


def get_ai_provider(config: Optional[AIConfig] = None, rng: Optional[random.Random] = None) -> AIProvider:
    """
    Build the session's AI strategy from configuration.

    The bridge is used when ``config.use_bridge`` is set and its credentials
    file loads; otherwise the simulation.
    """
    config = config or AIConfig()
    simulation = SimulatedAI(rng=rng, simulate_latency=config.simulate_latency)

    if not config.use_bridge:
        logger.info("Using simulated AI processing")
        return simulation

    bridge = BridgeAI(config, fallback=simulation)
    if not bridge.load_credentials(config.credentials_path):
        logger.warning("AI bridge could not be initialized, using simulated AI processing")
        return simulation

    logger.info("Using AI bridge for scene detection, color grading and audio")
    return bridge


__all__ = [
    "AIProvider",
    "BridgeAI",
    "Highlight",
    "ProgressCallback",
    "Segment",
    "SimulatedAI",
    "get_ai_provider",
    "report_progress",
]
