"""
Fusion Effects Automation

Titles, transitions, named visual effects and text generators built
through the Fusion page. Every function probes the host method it needs
first; an unsupported Resolve build means "skip", logged at WARNING.

Usage:
    from drone_editor import fusion

    fusion.run_automation(project)
"""

from typing import Any, Dict, Optional, Tuple

from .logger import logger
from .resolve.capabilities import has_capability, invoke_if_present
from .resolve.connection import get_current_page, switch_page
from .timeline import DEFAULT_TRANSITION, DEFAULT_TRANSITION_FRAMES, get_video_items

DEFAULT_TITLE_FRAMES = 90
DEFAULT_TITLE_TEXT = "Drone Footage"
DEFAULT_CLOSING_TEXT = "Thanks for watching!"

# Effect name -> tool inputs set after AddTool
EFFECT_PRESETS: Dict[str, Dict[str, float]] = {
    "Glow": {"Blend": 0.5, "Glow": 0.4},
    "ColorCorrector": {"SaturationGain": 1.2, "ContrastGain": 1.1},
    "Blur": {"XBlurSize": 3.0, "YBlurSize": 3.0},
}

TEXT_POSITIONS: Dict[str, Tuple[float, float]] = {
    "Lower Third": (0.5, 0.8),
    "Center": (0.5, 0.5),
    "Top": (0.5, 0.2),
}


def init(resolve: Any) -> Optional[Any]:
    """Fusion object from the Resolve session, or None."""
    if resolve is None:
        logger.error("Cannot initialize Fusion: No Resolve object provided")
        return None

    logger.info("Initializing Fusion")
    fusion_obj, found = invoke_if_present(resolve, "GetFusion")
    if not found or not fusion_obj:
        logger.error("Failed to initialize Fusion")
        return None

    logger.info("Successfully initialized Fusion")
    return fusion_obj


def get_item_composition(item: Any) -> Optional[Any]:
    """First Fusion composition of a timeline item, creating one if it has none."""
    comp, found = invoke_if_present(item, "GetFusionCompByIndex", 1)
    if found and comp:
        return comp
    comp, found = invoke_if_present(item, "AddFusionComp")
    return comp if found and comp else None


def create_composition(project: Any, timeline_obj: Any, clip_index: Optional[int] = None, resolve: Any = None) -> Optional[Any]:
    """
    Fusion composition for a clip on video track 1.

    Args:
        clip_index: 1-based item index; the current video item when omitted
            or out of range
    """
    if project is None or timeline_obj is None:
        logger.error("Cannot create composition: Missing required parameters")
        return None

    video_items = get_video_items(timeline_obj)
    if not video_items:
        logger.warning("No video items in timeline")
        return None

    if clip_index is not None and 1 <= clip_index <= len(video_items):
        clip = video_items[clip_index - 1]
    else:
        clip, _ = invoke_if_present(timeline_obj, "GetCurrentVideoItem")

    if not clip:
        logger.warning("No clip selected for Fusion composition")
        return None

    previous_page = get_current_page(project, resolve)
    switch_page(project, "Fusion", resolve)
    try:
        comp = get_item_composition(clip)
    finally:
        switch_page(project, previous_page, resolve)

    if comp is None:
        logger.error("Failed to create Fusion composition")
        return None

    logger.info("Successfully created Fusion composition")
    return comp


def _set_duration(item: Any, duration: int, what: str) -> None:
    if item is None:
        return
    result, found = invoke_if_present(item, "SetProperty", "Duration", duration)
    if not found or not result:
        logger.warning(f"Failed to set {what} duration")


def add_title(
    project: Any,
    timeline_obj: Any,
    title_text: str,
    title_style: str = "Simple",
    duration: int = DEFAULT_TITLE_FRAMES,
) -> bool:
    """Insert a Fusion title at the playhead."""
    if project is None or timeline_obj is None or not title_text:
        logger.error("Cannot add title: Missing required parameters")
        return False

    if not has_capability(timeline_obj, "InsertFusionTitleIntoTimeline"):
        logger.warning("InsertFusionTitleIntoTimeline method not available in this API version")
        return False

    logger.info(f"Adding {title_style} title: '{title_text}'")
    result, found = invoke_if_present(timeline_obj, "InsertFusionTitleIntoTimeline", title_text)
    if not found or not result:
        logger.error("Failed to add title")
        return False

    logger.info("Successfully added title")
    title_item, _ = invoke_if_present(timeline_obj, "GetCurrentVideoItem")
    _set_duration(title_item, duration, "title")
    return True


def add_transition_effect(
    project: Any,
    timeline_obj: Any,
    clip1: Any,
    clip2: Any,
    effect_name: str = DEFAULT_TRANSITION,
    duration: int = DEFAULT_TRANSITION_FRAMES,
) -> bool:
    """Add one transition between two adjacent timeline items."""
    if project is None or timeline_obj is None or clip1 is None or clip2 is None:
        logger.error("Cannot add transition effect: Missing required parameters")
        return False

    if not has_capability(timeline_obj, "AddTransition"):
        logger.warning("AddTransition method not available in this API version")
        return False

    logger.info(f"Adding {effect_name} transition between clips")
    result, found = invoke_if_present(timeline_obj, "AddTransition", effect_name, clip1, clip2, duration)
    if not found or not result:
        logger.error("Failed to add transition effect")
        return False

    logger.info("Successfully added transition effect")
    return True


def _add_tool(comp: Any, effect_name: str) -> bool:
    tool, found = invoke_if_present(comp, "AddTool", effect_name)
    if not found or tool is None:
        return False
    for input_name, value in EFFECT_PRESETS.get(effect_name, {}).items():
        invoke_if_present(tool, "SetInput", input_name, value)
    return True


def add_visual_effect(project: Any, timeline_obj: Any, clip: Any, effect_name: str, resolve: Any = None) -> bool:
    """
    Add a Fusion tool to a clip's composition and save it.

    Glow, ColorCorrector and Blur get preset inputs; any other name is
    added as a bare tool.
    """
    if project is None or timeline_obj is None or clip is None or not effect_name:
        logger.error("Cannot add visual effect: Missing required parameters")
        return False

    previous_page = get_current_page(project, resolve)
    switch_page(project, "Fusion", resolve)
    try:
        invoke_if_present(timeline_obj, "SetCurrentVideoItem", clip)
        comp = get_item_composition(clip)
        if comp is None:
            logger.error("Failed to get Fusion composition")
            return False

        logger.info("Got Fusion composition")
        effect_added = _add_tool(comp, effect_name)
        if effect_added:
            saved, found = invoke_if_present(comp, "Save")
            if not found or not saved:
                logger.warning("Failed to save Fusion composition")
    finally:
        switch_page(project, previous_page, resolve)

    if not effect_added:
        logger.error(f"Failed to add {effect_name} effect")
        return False

    logger.info(f"Successfully added {effect_name} effect")
    return True


def create_text_generator(
    project: Any,
    timeline_obj: Any,
    text: str,
    position: str = "Lower Third",
    duration: int = DEFAULT_TITLE_FRAMES,
    resolve: Any = None,
) -> bool:
    """Insert a Text+ generator and set its text and position."""
    if project is None or timeline_obj is None or not text:
        logger.error("Cannot create text generator: Missing required parameters")
        return False

    if not has_capability(timeline_obj, "InsertFusionGeneratorIntoTimeline"):
        logger.warning("InsertFusionGeneratorIntoTimeline method not available in this API version")
        return False

    logger.info(f"Creating text generator: '{text}'")
    result, found = invoke_if_present(timeline_obj, "InsertFusionGeneratorIntoTimeline", "Text+")
    if not found or not result:
        logger.error("Failed to create text generator")
        return False

    logger.info("Successfully created text generator")

    text_clip, _ = invoke_if_present(timeline_obj, "GetCurrentVideoItem")
    if not text_clip:
        logger.warning("Failed to get the text generator clip")
        return True

    previous_page = get_current_page(project, resolve)
    switch_page(project, "Fusion", resolve)
    try:
        _configure_text(text_clip, text, position)
        _set_duration(text_clip, duration, "text generator")
    finally:
        switch_page(project, previous_page, resolve)

    return True


def _configure_text(text_clip: Any, text: str, position: str) -> None:
    comp = get_item_composition(text_clip)
    if comp is None:
        logger.warning("Failed to get Fusion composition")
        return

    text_tool, found = invoke_if_present(comp, "FindTool", "Text1")
    if not found or not text_tool:
        logger.warning("Failed to find the text tool")
        return

    invoke_if_present(text_tool, "SetInput", "StyledText", text)
    center = TEXT_POSITIONS.get(position)
    if center:
        invoke_if_present(text_tool, "SetInput", "Center", list(center))
    invoke_if_present(comp, "Save")


def run_automation(project: Any, resolve: Any = None) -> bool:
    """
    Full Fusion pass over the current timeline.

    Transitions between all clips, an opening title, Blur on every second
    clip (Glow on every fourth) and a closing text generator.

    Returns:
        True if any step succeeded
    """
    if project is None:
        logger.error("Cannot run Fusion automation: No project provided")
        return False

    timeline_obj, _ = invoke_if_present(project, "GetCurrentTimeline")
    if not timeline_obj:
        logger.warning("No current timeline found")
        return False

    video_items = get_video_items(timeline_obj)
    if not video_items:
        logger.warning("No video items in timeline")
        return False

    transitions_applied = sum(
        1 for left, right in zip(video_items, video_items[1:])
        if add_transition_effect(project, timeline_obj, left, right)
    )
    logger.info(f"Applied {transitions_applied} transitions")

    title_added = add_title(project, timeline_obj, DEFAULT_TITLE_TEXT, "Simple")

    effects_applied = 0
    for index, clip in enumerate(video_items, start=1):
        if index % 2:
            continue
        effect_name = "Glow" if index % 4 == 0 else "Blur"
        if add_visual_effect(project, timeline_obj, clip, effect_name, resolve):
            effects_applied += 1
    logger.info(f"Applied {effects_applied} visual effects")

    text_added = create_text_generator(project, timeline_obj, DEFAULT_CLOSING_TEXT, "Center", resolve=resolve)

    return transitions_applied > 0 or title_added or effects_applied > 0 or text_added
