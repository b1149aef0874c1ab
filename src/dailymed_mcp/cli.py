"""
Command-line interface for the DailyMed MCP server.

Commands:
- serve: Run the MCP server over stdio
- stats: Show mapping file statistics
- rxnorm: Look up RxNorm mappings by drug name, SET ID or RxCUI
- label: Fetch one label and print its sections
"""

import asyncio

import click
from rich.console import Console
from rich.table import Table

from dailymed_mcp.errors import DailyMedError
from dailymed_mcp.logging import configure_logging

# stdout belongs to the MCP transport when serving
console = Console(stderr=True)


def _load_service():
    from dailymed_mcp.service import DailyMedService

    try:
        return DailyMedService.from_settings()
    except DailyMedError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1) from e


@click.group()
@click.version_option()
def main() -> None:
    """DailyMed MCP - FDA drug labeling tools."""
    configure_logging()


@main.command()
def serve() -> None:
    """Run the MCP server over stdio."""
    from dailymed_mcp.server import run_stdio

    run_stdio(_load_service())


@main.command()
def stats() -> None:
    """Show mapping file statistics."""
    service = _load_service()
    statistics = service.get_mapping_statistics()
    skipped = statistics.pop("skippedLines")

    table = Table(title="Mapping statistics")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for name, value in statistics.items():
        table.add_row(name, str(value))
    for name, value in skipped.items():
        table.add_row(f"skipped {name} lines", str(value))

    console.print(table)


@main.command()
@click.option("--name", default=None, help="Substring of the RxNorm drug string")
@click.option("--set-id", default=None, help="SPL SET ID")
@click.option("--rxcui", default=None, help="RxNorm concept id")
@click.option("--limit", default=20, help="Maximum rows to print")
def rxnorm(name: str | None, set_id: str | None, rxcui: str | None, limit: int) -> None:
    """Look up RxNorm mappings in the local mapping file."""
    if not (name or set_id or rxcui):
        console.print("[red]Give one of --name, --set-id or --rxcui[/red]")
        return

    index = _load_service().index
    if name:
        mappings = index.search_rxnorm_mappings_by_name(name)
    elif set_id:
        mappings = index.get_rxnorm_mappings(set_id)
    else:
        mappings = index.get_mappings_by_rxcui(rxcui)

    if not mappings:
        console.print("[yellow]No mappings found.[/yellow]")
        return

    table = Table(title=f"{len(mappings)} RxNorm mappings")
    table.add_column("SET ID")
    table.add_column("RxCUI")
    table.add_column("TTY")
    table.add_column("RxNorm string")
    for mapping in mappings[:limit]:
        table.add_row(mapping.set_id, mapping.rxcui, mapping.rxtty, mapping.rxstring)
    console.print(table)


@main.command()
@click.argument("set_id")
@click.option("--preview", default=300, help="Characters of section content to print")
def label(set_id: str, preview: int) -> None:
    """Fetch one label from DailyMed and print its sections."""
    from dailymed_mcp.api.spls import get_spl

    async def fetch():
        async with _load_service() as service:
            return await get_spl(service.client, service.index, set_id)

    try:
        document = asyncio.run(fetch())
    except DailyMedError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1) from e

    console.print(f"[bold]{document.title}[/bold]")
    console.print(f"[blue]Version:[/blue] {document.version_number}  "
                  f"[blue]Effective:[/blue] {document.effective_time}")
    for mapping in document.rxnorm_mappings or []:
        console.print(f"[blue]RxNorm:[/blue] {mapping.rxcui} {mapping.rxtty} {mapping.rxstring}")
    for mapping in document.pharmacologic_class_mappings or []:
        console.print(f"[blue]Pharmacologic class:[/blue] {mapping.pharma_set_id}")

    console.print(f"\n[green]{len(document.sections)} sections[/green]\n")
    for section in document.sections:
        content = section.content
        if len(content) > preview:
            content = content[:preview] + "..."
        console.print(f"[bold]--- {section.title} ---[/bold]")
        console.print(content, markup=False)
        console.print()


if __name__ == "__main__":
    main()
