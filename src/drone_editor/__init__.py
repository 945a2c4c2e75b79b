"""
Drone Editor - DaVinci Resolve automation for drone footage

Host:
    from drone_editor.resolve import connect

    session = connect(max_attempts=3)
    project = session.project

Editing:
    from drone_editor import timeline, color_grading

    new_timeline = timeline.create_from_clips(project, media_pool, clips, "Flight 1")
    timeline.apply_transitions(new_timeline)
    color_grading.apply_preset(project, "Cinematic")

Application:
    from drone_editor.app import main

    main(console=True)
"""

from ._version import __version__

__all__ = ["__version__"]
