"""
Drone Editor - Entry point for python -m drone_editor
"""

if __name__ == "__main__":
    from drone_editor.cli import cli
    cli()
