"""Root Typer application: ``serve`` plus the ``db`` and ``index`` command groups."""

import typer

from geotarget_api.core.config import get_settings
from geotarget_api.core.logging import setup_logging

app = typer.Typer(name="geotarget-api", help="Geo-targeting address index and API CLI", no_args_is_help=True)


@app.callback()
def _configure_logging() -> None:
    """Geo-targeting address index and API CLI."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
    workers: int = typer.Option(1, "--workers", min=1, help="Worker processes (ignored with --reload)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API with uvicorn.

    Rate limit counters are per worker process.
    """
    import uvicorn

    uvicorn.run(
        "geotarget_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        workers=None if reload else workers,
        reload=reload,
    )


def _register_subcommands() -> None:
    from geotarget_api.cli.db_cmd import db_app
    from geotarget_api.cli.index_cmd import index_app

    app.add_typer(db_app, name="db", help="Address index schema migrations")
    app.add_typer(index_app, name="index", help="Load, inspect, and validate against the address index")


_register_subcommands()
