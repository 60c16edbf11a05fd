"""Address index CLI commands: import mapping files, show statistics, classify address files."""

import asyncio
from pathlib import Path

import typer

index_app = typer.Typer()


@index_app.command("import")
def import_index(
    file: Path = typer.Argument(..., help="Path to address index CSV file", exists=True),  # noqa: B008
    batch_size: int = typer.Option(1000, "--batch-size", help="Rows per batch", min=1),  # noqa: B008
) -> None:
    """Load zip code / city / county / state mappings from a CSV file."""
    asyncio.run(_import_index(file, batch_size))


async def _import_index(file_path: Path, batch_size: int) -> None:
    """Async implementation of index import."""
    from geotarget_api.core.config import get_settings
    from geotarget_api.core.database import standalone_session
    from geotarget_api.services.index_import_service import import_index_file

    settings = get_settings()
    typer.echo(f"Importing {file_path}...")
    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        try:
            summary = await import_index_file(session, file_path, batch_size=batch_size)
        except ValueError as e:
            typer.echo(f"Import failed: {e}", err=True)
            raise typer.Exit(code=1) from e

    typer.echo("\nImport completed:")
    typer.echo(f"  Total rows:  {summary.total}")
    typer.echo(f"  Inserted:    {summary.inserted}")
    typer.echo(f"  Updated:     {summary.updated}")
    typer.echo(f"  Skipped:     {summary.skipped}")


@index_app.command("stats")
def index_stats() -> None:
    """Show mapping counts per state."""
    asyncio.run(_index_stats())


async def _index_stats() -> None:
    from geotarget_api.core.config import get_settings
    from geotarget_api.core.database import standalone_session
    from geotarget_api.services.address_index import AddressIndex

    settings = get_settings()
    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        counts = await AddressIndex(session).count_by_state()

    if not counts:
        typer.echo("Address index is empty")
        return
    for state, count in counts.items():
        typer.echo(f"  {state}: {count}")
    typer.echo(f"Total: {sum(counts.values())} mappings in {len(counts)} states")


@index_app.command("validate")
def validate_addresses(
    file: Path = typer.Argument(..., help="CSV with zip_code, city, county columns", exists=True),  # noqa: B008
    states: list[str] = typer.Option(..., "--state", "-s", help="Whitelisted state code (repeatable)"),  # noqa: B008
    output: Path | None = typer.Option(  # noqa: B008
        None, "--output", "-o", help="Write per-record results to this CSV"
    ),
) -> None:
    """Classify every address in a CSV file against the given states."""
    from geotarget_api.lib.jurisdictions import InvalidRegionCodesError, StateWhitelist

    store: dict[str, object] = {}
    try:
        whitelist = StateWhitelist(store).replace(states)
    except InvalidRegionCodesError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    asyncio.run(_validate_addresses(file, whitelist, output))


async def _validate_addresses(file_path: Path, whitelist: frozenset[str], output: Path | None) -> None:
    import pandas as pd

    from geotarget_api.core.config import get_settings
    from geotarget_api.core.database import standalone_session
    from geotarget_api.lib.coverage import ClassificationSummary
    from geotarget_api.lib.index_loader import parse_address_csv
    from geotarget_api.services.address_index import AddressIndex
    from geotarget_api.services.address_validator import AddressValidator

    records = parse_address_csv(file_path)

    settings = get_settings()
    async with standalone_session(settings.database_url, schema=settings.database_schema) as session:
        results = await AddressValidator(whitelist, AddressIndex(session)).validate_batch(records)

    summary = ClassificationSummary.from_results(results)
    typer.echo(f"Validated {summary.total} addresses against {', '.join(sorted(whitelist))}:")
    for classification, count in summary.to_dict().items():
        typer.echo(f"  {classification}: {count}")

    if output is not None:
        frame = pd.DataFrame(
            [
                {
                    "zip_code": r.address_record.zip_code,
                    "city": r.address_record.city,
                    "county": r.address_record.county,
                    "classification": str(r.classification),
                    "state": r.state,
                    "error": r.error,
                }
                for r in results
            ]
        )
        frame.to_csv(output, index=False)
        typer.echo(f"Results written to {output}")
