import click
import sys
from typing import Optional

# Lazy load rich to improve startup time inside the Resolve script menu
_console = None


def get_console():
    global _console
    if _console is None:
        from rich.console import Console
        _console = Console()
    return _console


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Drone Editor - DaVinci Resolve automation for drone footage"""
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--console/--no-console", "console_mode", default=None, help="Skip the windowed UIs and open the Python console")
@click.option("--ai-bridge/--no-ai-bridge", default=None, help="Use external AI tools instead of the simulation")
@click.option("--attempts", type=click.IntRange(min=1), default=None, help="Resolve connection attempts")
@click.option("--retry-delay", type=click.FloatRange(min=0), default=None, help="Seconds between connection attempts")
def run(console_mode: Optional[bool], ai_bridge: Optional[bool], attempts: Optional[int], retry_delay: Optional[float]):
    """Start Drone Editor inside DaVinci Resolve."""
    from .app import main

    sys.exit(main(console=console_mode, ai_bridge=ai_bridge, attempts=attempts, retry_delay=retry_delay))


@cli.command()
@click.option("--attempts", type=click.IntRange(min=1), default=1, help="Resolve connection attempts")
def info(attempts: int):
    """Show host, version and API feature support."""
    console = get_console()
    from rich.table import Table

    from .exceptions import HostError
    from .resolve.connection import connect, get_feature_support_info, get_os_info

    console.print(f"Operating system: [bold cyan]{get_os_info()}[/]")
    try:
        session = connect(max_attempts=attempts, retry_delay=0)
    except HostError as e:
        console.print(f"[bold red]{e.user_message}[/]")
        if e.suggestion:
            console.print(f"[yellow]{e.suggestion}[/]")
        sys.exit(1)

    console.print(f"DaVinci Resolve: [bold green]{session.version}[/]")

    table = Table(title="API Features")
    table.add_column("Feature", style="cyan", no_wrap=True)
    table.add_column("Status", style="magenta")
    for feature, supported in get_feature_support_info(session.project, session.capabilities).items():
        table.add_row(feature, "Available" if supported else "Not Available")
    console.print(table)


@cli.command()
def luts():
    """List available LUT files."""
    console = get_console()
    from rich.table import Table

    from .color_grading import list_available_luts

    names = list_available_luts()
    if not names:
        console.print("[yellow]No LUT files found[/]")
        return

    table = Table(title="Available LUTs")
    table.add_column("LUT", style="cyan", no_wrap=True)
    for name in names:
        table.add_row(name)
    console.print(table)


if __name__ == "__main__":
    cli()
