"""Command-line interface for tuneprep."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import PROFILES
from .extraction import TEXT_EXTENSIONS, extract_text
from .io_utils import default_output_name, expand_paths, load_drafts, save_records
from .pipeline import ConversionError, create_pipeline
from .records import drafts_to_records
from .schema_validation import DEFAULT_MIN_LINES, validate_jsonl_file
from .types import FormatType

app = typer.Typer(help="tuneprep - Turn documents into validated fine-tuning JSONL")
console = Console()

DOCUMENT_PATTERNS = [f"*{ext}" for ext in sorted(TEXT_EXTENSIONS)]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


@app.command()
def chunk(
    files: List[Path] = typer.Argument(..., help="Text or markdown documents to chunk"),
    chunk_size: int = typer.Option(1000, "--chunk-size", help="Maximum characters per chunk"),
    overlap: int = typer.Option(200, "--overlap", help="Overlap characters between chunks"),
    preview: int = typer.Option(60, "--preview", help="Characters of each chunk to show")
):
    """Show how documents would be chunked."""
    table = Table(title="Chunks")
    table.add_column("File", style="cyan")
    table.add_column("#", style="blue")
    table.add_column("Offsets", style="yellow")
    table.add_column("Preview", style="white")

    try:
        pipeline = create_pipeline(overrides={"chunk_size": chunk_size, "chunk_overlap": overlap})
    except (ValueError, PydanticValidationError) as e:
        console.print(f"[red]Invalid chunk settings: {e}[/red]")
        raise typer.Exit(1)

    for file_path in expand_paths(files, DOCUMENT_PATTERNS):
        try:
            text = extract_text(file_path)
        except (ValueError, OSError) as e:
            table.add_row(str(file_path), "-", "", f"[red]{e}[/red]")
            continue

        for i, segment in enumerate(pipeline.chunker.segments(text)):
            shown = segment.text[:preview].replace("\n", " ")
            if len(segment.text) > preview:
                shown += "..."
            table.add_row(str(file_path), str(i), f"{segment.start}-{segment.end}", shown)

    console.print(table)


@app.command()
def convert(
    files: List[Path] = typer.Argument(..., help="Text or markdown documents (or directories)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSONL file"),
    profile: str = typer.Option("default", "--profile", "-p", help=f"Settings profile ({', '.join(PROFILES)})"),
    format_type: Optional[FormatType] = typer.Option(None, "--format", "-f", help="Record format"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Maximum characters per chunk"),
    overlap: Optional[int] = typer.Option(None, "--overlap", help="Overlap characters between chunks"),
    system: Optional[str] = typer.Option(None, "--system", "-s", help="System instructions for every record")
):
    """Convert documents into a fine-tuning JSONL file."""
    try:
        pipeline = create_pipeline(
            profile=profile,
            overrides={
                "format_type": format_type,
                "chunk_size": chunk_size,
                "chunk_overlap": overlap,
                "system_instructions": system,
            }
        )
    except (ValueError, PydanticValidationError) as e:
        console.print(f"[red]Invalid settings: {e}[/red]")
        raise typer.Exit(1)

    paths = expand_paths(files, DOCUMENT_PATTERNS)
    if not paths:
        console.print("[red]No files provided[/red]")
        raise typer.Exit(1)

    error_message = None
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        task = progress.add_task("Converting files...", total=len(paths))
        try:
            results, records = pipeline.convert_files(paths)
        except ConversionError as e:
            error_message = str(e)
        progress.update(task, completed=len(paths))

    if error_message:
        console.print(f"[red]{error_message}[/red]")
        raise typer.Exit(1)

    table = Table(title="Conversion Results")
    table.add_column("File", style="cyan")
    table.add_column("Converted", style="green")
    table.add_column("Chunks", style="blue")
    table.add_column("Records", style="yellow")
    table.add_column("Error", style="red")

    for result in results:
        table.add_row(
            result.file_path,
            "✅" if result.success else "❌",
            str(result.chunks_created),
            str(result.records_created),
            result.error_message or ""
        )
    console.print(table)

    output_path = pipeline.write_jsonl(records, output or Path(default_output_name()))
    stats = pipeline.get_stats(results)
    console.print(f"\n[green]Summary:[/green]")
    console.print(f"Files converted: {stats['files_converted']}/{stats['files_processed']}")
    console.print(f"Records written: {len(records)} ({len(records) - stats['records_created']} placeholders)")
    console.print(f"Format: {stats['format_type']}")
    console.print(f"Output: {output_path}")


@app.command()
def validate(
    files: List[Path] = typer.Argument(..., help="JSONL files to validate"),
    min_lines: int = typer.Option(DEFAULT_MIN_LINES, "--min-lines", help="Minimum number of records")
):
    """Validate JSONL training files."""
    table = Table(title="Validation Results")
    table.add_column("File", style="cyan")
    table.add_column("Valid", style="green")
    table.add_column("Lines", style="blue")
    table.add_column("Errors", style="red")

    all_valid = True

    for file_path in files:
        if not file_path.exists():
            table.add_row(str(file_path), "❌", "0", "File not found")
            all_valid = False
            continue

        result = validate_jsonl_file(file_path, min_lines)

        if result.valid:
            table.add_row(str(file_path), "✅", str(result.line_count), "Valid")
        else:
            errors = "\n".join(f"line {e.line}: {e.error}" for e in result.errors)
            table.add_row(str(file_path), "❌", str(result.line_count), errors)
            all_valid = False

    console.print(table)

    if not all_valid:
        raise typer.Exit(1)


@app.command("export-drafts")
def export_drafts(
    drafts_file: Path = typer.Argument(..., help="JSON array or JSONL file of {prompt, ideal_answer} drafts"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSONL file"),
    system: str = typer.Option("", "--system", "-s", help="System instructions for every record")
):
    """Export hand-written training drafts as JSONL."""
    if not drafts_file.exists():
        console.print(f"[red]File not found: {drafts_file}[/red]")
        raise typer.Exit(1)

    try:
        drafts = load_drafts(drafts_file)
        records = drafts_to_records(drafts, system)
    except (ValueError, PydanticValidationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    output_path = save_records(records, output or Path(default_output_name("training-drafts")))
    console.print(f"[green]Exported {len(records)} drafts to {output_path}[/green]")


@app.command()
def profiles():
    """List settings profiles."""
    table = Table(title="Profiles")
    table.add_column("Profile", style="cyan")
    table.add_column("Chunk Size", style="green")
    table.add_column("Overlap", style="blue")

    for name, config in PROFILES.items():
        table.add_row(name, str(config["chunk_size"]), str(config["chunk_overlap"]))

    console.print(table)


if __name__ == "__main__":
    app()
