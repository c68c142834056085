"""CLI interface for citekit."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from citekit.config import get_settings
from citekit.exceptions import CitekitError
from citekit.logging import setup_logging
from citekit.models.document import Manuscript

app = typer.Typer(
    name="citekit",
    help="Citation formatting for manuscripts: styles, in-text citations and bibliographies",
)
console = Console()


def _load_manuscript(path: str) -> Manuscript:
    """Read a document JSON file, exiting with an error message on failure."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Error: cannot read {escape(path)}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {escape(path)} is not valid JSON: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print("[red]Error: document must be a JSON object[/red]")
        raise typer.Exit(1)
    return Manuscript.from_dict(data)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log line format: standard or json"
    ),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """Citation formatting for manuscripts."""
    settings = get_settings()
    setup_logging(
        level=log_level or settings.log_level,
        log_file=log_file or settings.log_file,
        format_style=log_format or settings.log_format,
    )


@app.command()
def styles():
    """List the bundled citation styles."""
    from citekit.styles.registry import get_available_styles

    table = Table(title="Citation Styles")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Sort", style="magenta")
    table.add_column("Template")

    for style in get_available_styles():
        table.add_row(style.id, style.display_name, style.sort.mode.value, escape(style.template))

    console.print(table)


@app.command(name="show-style")
def show_style(
    style_id: str = typer.Argument(..., help="Style identifier (e.g. nature, vancouver)"),
):
    """
    Show a citation style definition as JSON.

    Unknown ids resolve to the fallback style, as they do when rendering.
    """
    from citekit.styles.registry import StyleRegistry

    registry = StyleRegistry()
    if not registry.is_system_style(style_id):
        console.print(
            f"[yellow]'{escape(style_id)}' is not a known style; "
            f"showing fallback '{escape(registry.fallback_style_id)}'[/yellow]"
        )
    style = registry.load_style(style_id)
    console.print_json(json.dumps(style.to_dict()))


@app.command(name="import-style")
def import_style(
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Style JSON file"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="URL serving a style JSON"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output file for the validated style (JSON)"
    ),
):
    """
    Validate and import a citation style.

    The style must define id, name, displayName, sort mode, authorRules and a
    template containing {authors}, {journal} and {year}.
    """
    from citekit.styles.importer import StyleImporter

    if bool(file) == bool(url):
        console.print("[red]Error: pass exactly one of --file or --url[/red]")
        raise typer.Exit(1)

    importer = StyleImporter()
    try:
        if file:
            try:
                text = Path(file).read_text(encoding="utf-8")
            except OSError as e:
                console.print(f"[red]Error: cannot read {escape(file)}: {escape(str(e))}[/red]")
                raise typer.Exit(1)
            style = importer.import_from_json(text)
        else:
            style = importer.import_from_url(url)
    except CitekitError as e:
        console.print(f"[red]Import failed: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold]{escape(style.display_name)}[/bold] ({escape(style.id)})\n"
            f"Sort: {style.sort.mode.value}\n"
            f"Template: {escape(style.template)}",
            title="Style Imported",
        )
    )

    data = style.to_dict()
    if output:
        with open(output, "w") as f:
            json.dump(data, f, indent=2)
        console.print(f"\n[green]Style saved to:[/green] {escape(output)}")
    else:
        console.print_json(json.dumps(data))


@app.command()
def render(
    document: str = typer.Argument(..., help="Document JSON (title, paragraphs, citations)"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Citation style id"),
    order: Optional[str] = typer.Option(
        None, "--order", help="Numbering order: appearance or alphabetical"
    ),
    output_format: Optional[str] = typer.Option(
        None, "--format", help="Reference markup: markdown, html, latex or plain"
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output markdown file"),
):
    """
    Render a manuscript with in-text citations and a reference list.

    Field codes in paragraph text are replaced by their rendered citations and
    a References section is appended.
    """
    from citekit.references.manager import ReferenceManager

    manuscript = _load_manuscript(document)
    manager = ReferenceManager(style=style, order=order, output_format=output_format)
    content = manager.generate_document_content(manuscript)

    if not output:
        console.print(content, markup=False, highlight=False, soft_wrap=True)
        return

    with open(output, "w") as f:
        f.write(content)

    numbering = manager.number_citations(manuscript)
    summary_table = Table(title="Render Summary")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="magenta")
    summary_table.add_row("Style", manager.style.id)
    summary_table.add_row("Order", f"{numbering.order.value} ({numbering.strategy})")
    summary_table.add_row("Paragraphs", str(len(manuscript.paragraphs)))
    summary_table.add_row("Citations", str(len(manuscript.citations)))
    summary_table.add_row("References", str(len(numbering.entries)))
    console.print(summary_table)
    console.print(f"\n[dim]Manuscript saved to {escape(output)}[/dim]")


@app.command()
def validate(
    document: str = typer.Argument(..., help="Document JSON (title, paragraphs, citations)"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Citation style id"),
):
    """
    Check a manuscript for orphan field codes and citations without papers.

    Exits with code 1 when problems are found.
    """
    from citekit.references.manager import ReferenceManager

    manuscript = _load_manuscript(document)
    result = ReferenceManager(style=style).validate(manuscript)

    summary_table = Table(title="Citation Check")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="magenta")
    summary_table.add_row("Citations", str(result.citation_count))
    summary_table.add_row("Unique papers", str(result.unique_paper_count))
    summary_table.add_row("Orphan field codes", str(len(result.orphan_codes)))
    summary_table.add_row("Citations without paper", str(len(result.citations_without_paper)))
    summary_table.add_row("Unused citations", str(len(result.unused_citations)))
    console.print(summary_table)

    for code in result.orphan_codes:
        console.print(f"[yellow]Orphan:[/yellow] {escape(code.full_match)}")
    for citation_id in result.citations_without_paper:
        console.print(f"[yellow]No paper:[/yellow] {escape(citation_id)}")

    if result.valid:
        console.print("\n[bold green]All citations resolve.[/bold green]")
    else:
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    from citekit import __version__

    console.print(f"citekit v{__version__}")


if __name__ == "__main__":
    app()
