"""Kudos CLI — run the board and inspect its directory and content rules."""

import click
from rich.console import Console
from rich.table import Table

from kudos import __version__

console = Console()

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML settings file",
)


def _load_settings(config_path):
    from kudos.config import Settings

    try:
        return Settings.load(config_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config")


@click.group()
@click.version_option(version=__version__)
def main():
    """Kudos — send recognition to colleagues, moderated by an admin."""


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=3000, show_default=True, type=int)
@_config_option
def serve(host: str, port: int, config_path):
    """Run the kudos API under uvicorn."""
    settings = _load_settings(config_path)

    import uvicorn

    from web.backend.app.main import create_app

    console.print(f"\n[bold blue]Kudos[/] — listening on http://{host}:{port}\n")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


# ── Users ────────────────────────────────────────────────────────────


@main.command()
@_config_option
def users(config_path):
    """Show the user directory."""
    settings = _load_settings(config_path)
    directory = settings.build_directory()

    table = Table(title=f"Directory ({len(directory)} users)")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Role", style="green")

    for user in directory.list_users():
        role = "admin" if directory.is_admin(user.id) else ""
        table.add_row(user.id, user.name, user.title, role)

    console.print(table)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("message")
@_config_option
def check(message: str, config_path):
    """Run the submission checks on MESSAGE without storing anything."""
    from kudos.board.errors import KudosError

    settings = _load_settings(config_path)
    service = settings.build_service()

    try:
        escaped = service.check_message(message)
    except KudosError as e:
        console.print(f"  [red]x[/] {e.message}", highlight=False)
        raise SystemExit(1)

    console.print("  [green]v[/] Message accepted")
    console.print(f"  Stored as: {escaped}", markup=False, highlight=False)


if __name__ == "__main__":
    main()
