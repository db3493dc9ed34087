#!/usr/bin/env python3
"""
Command line interface for html2md using Typer and Rich.

Markdown is written to stdout (or to ``--output``); diagnostics, summaries
and errors go to stderr so the output can be piped.
"""

import sys
import time
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from html2md.core.config import (
    Html2MdSettings,
    ListBullet,
    ListDelimiter,
    get_settings,
)
from html2md.core.converter import Converter
from html2md.core.errors import Html2MdError, config_validation_error
from html2md.core.logging import (
    configure_structured_logging,
    correlation_context,
    log_context,
)

app = typer.Typer(
    name="html2md",
    help="Convert HTML documents to Markdown",
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console(stderr=True)

STDIN_MARKER = "-"


def read_input(source: str) -> bytes:
    """read raw HTML from a file path, or from stdin for '-'"""
    if source == STDIN_MARKER:
        return typer.get_binary_stream("stdin").read()

    path = Path(source)
    if not path.is_file():
        console.print(f"❌ Input file not found: {escape(source)}", style="bold red")
        raise typer.Exit(1)
    return path.read_bytes()


def build_settings(
    config_file: Optional[Path], overrides: Dict[str, Any]
) -> Html2MdSettings:
    """settings from an optional JSON file, updated with command line values"""
    try:
        settings = (
            Html2MdSettings.load_from_file(config_file)
            if config_file
            else get_settings()
        )
    except FileNotFoundError as e:
        console.print(f"❌ {escape(str(e))}", style="bold red")
        raise typer.Exit(1) from e
    except Html2MdError as e:
        console.print(f"❌ {escape(str(e))}", style="bold red")
        raise typer.Exit(1) from e

    values = settings.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        values[key] = value
        try:
            settings = Html2MdSettings(**values)
        except ValidationError as e:
            error = config_validation_error(key, value, e.errors()[0]["msg"])
            console.print(f"❌ {escape(str(error))}", style="bold red")
            raise typer.Exit(1) from e

    return settings


def create_summary_table(title: str, rows: Dict[str, Any]) -> Table:
    """create a two column table of conversion statistics"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for key, value in rows.items():
        table.add_row(key, str(value))

    return table


@app.command("convert")
def convert_document(
    source: Annotated[
        str, typer.Argument(help="📄 HTML file to convert ('-' reads stdin)")
    ],
    output: Annotated[
        Optional[Path], typer.Option("-o", "--output", help="📁 Output file path")
    ] = None,
    bullet: Annotated[
        Optional[ListBullet],
        typer.Option("--bullet", help="• Marker for unordered list items"),
    ] = None,
    delimiter: Annotated[
        Optional[ListDelimiter],
        typer.Option("--delimiter", help="🔢 Delimiter after ordered list numbers"),
    ] = None,
    include_title: Annotated[
        Optional[bool],
        typer.Option("--title/--no-title", help="🏷️ Render <title> as a heading"),
    ] = None,
    max_blank_lines: Annotated[
        Optional[int],
        typer.Option("--max-blank-lines", help="📏 Longest run of blank lines kept"),
    ] = None,
    config_file: Annotated[
        Optional[Path], typer.Option("--config", help="⚙️ JSON settings file")
    ] = None,
    header: Annotated[
        Optional[str], typer.Option("--header", help="⬆️ Text placed before the output")
    ] = None,
    footer: Annotated[
        Optional[str], typer.Option("--footer", help="⬇️ Text placed after the output")
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="🚨 Fail when the HTML is not well formed"),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="🔍 Print a conversion summary")
    ] = False,
):
    """
    📝 Convert one HTML document to Markdown.
    """
    settings = build_settings(
        config_file,
        {
            "unordered_list_bullet": bullet,
            "ordered_list_delimiter": delimiter,
            "include_title": include_title,
            "max_blank_lines": max_blank_lines,
        },
    )
    html = read_input(source)

    start_time = time.perf_counter()
    with correlation_context(), log_context(source=source):
        converter = Converter(html, settings)
        if header:
            converter.append_to_md(header).append_to_md("\n\n")

        markdown = converter.convert()
        if footer:
            markdown = converter.append_to_md("\n").append_to_md(footer + "\n").convert()
        well_formed = converter.ok()
        truncated = converter.truncated()
    duration = time.perf_counter() - start_time

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markdown, encoding="utf-8")
        console.print(f"✅ Markdown written to {output}", style="bold green")
    else:
        typer.echo(markdown, nl=False)

    if verbose:
        console.print(
            create_summary_table(
                "📊 Conversion Summary",
                {
                    "Input": source,
                    "HTML Size": f"{len(html)} bytes",
                    "Markdown Size": f"{len(markdown)} chars",
                    "Well Formed": "✅" if well_formed else "❌",
                    "Truncated": "yes" if truncated else "no",
                    "Duration": f"{duration * 1000:.2f} ms",
                },
            )
        )

    if strict and not well_formed:
        console.print(f"❌ {escape(source)} is not well formed HTML", style="bold red")
        raise typer.Exit(1)


@app.command("check")
def check_documents(
    sources: Annotated[
        List[Path], typer.Argument(help="📄 HTML files to check")
    ],
):
    """
    🩺 Report whether HTML files are well formed.
    """
    table = Table(title="🩺 Well-formedness", show_header=True, header_style="bold magenta")
    table.add_column("File", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Verdict")

    failures = 0
    for path in sources:
        if not path.is_file():
            table.add_row(str(path), "-", "missing")
            failures += 1
            continue

        html = path.read_bytes()
        with correlation_context(), log_context(source=str(path)):
            well_formed = Converter(html).ok()
        if not well_formed:
            failures += 1
        table.add_row(
            str(path), str(len(html)), "ok" if well_formed else "malformed"
        )

    console.print(table)

    if failures:
        console.print(
            f"❌ {failures} of {len(sources)} files failed the check", style="bold red"
        )
        raise typer.Exit(1)

    console.print(f"✅ All {len(sources)} files are well formed", style="bold green")


def show_version(value: bool) -> None:
    """print the version and stop before any command runs"""
    if value:
        import html2md

        typer.echo(f"html2md v{html2md.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", help="Show version", callback=show_version, is_eager=True
        ),
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="🔇 Quiet mode")] = False,
):
    """
    📝 html2md - convert HTML documents to Markdown.
    """
    console.quiet = quiet
    configure_structured_logging()


def cli_main():
    """entry point for the CLI application"""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n❌ Operation cancelled by user", style="bold red")
        sys.exit(1)
    except Html2MdError as e:
        console.print(f"\n❌ {escape(str(e))}", style="bold red")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
