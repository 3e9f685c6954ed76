#!/usr/bin/env python3
"""
Command-line interface for url_lab using Typer and Rich.

Every command is a thin wrapper over the exported function table, so the
CLI behaves exactly like the functions a scripting host would register.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from url_lab.core.config import (
    UrlLabSettings,
    get_config_profile,
    get_settings,
    use_settings,
)
from url_lab.core.errors import UrlLabError
from url_lab.core.logging import set_correlation_id, setup_logging_and_telemetry
from url_lab.module import FUNCTIONS

app = typer.Typer(
    name="url-lab",
    help="URL parsing, building and query-string encoding",
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"❌ {message}", style="bold red", markup=False, soft_wrap=True)
    raise typer.Exit(1)


def create_record_table(url: str, record: dict) -> Table:
    """create a table with one row per record field"""
    table = Table(title=f"🔗 {url}", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    for key, value in record.items():
        if value is None:
            cell = Text("nil", style="dim")
        elif key == "query":
            cell = Text(json.dumps(value, ensure_ascii=False))
        else:
            cell = Text(str(value))
        table.add_row(key, cell)

    return table


@app.command("parse")
def parse_url(
    url: Annotated[str, typer.Argument(help="🌐 URL to parse")],
    as_json: Annotated[
        bool, typer.Option("--json", help="📋 Print the record as JSON")
    ] = False,
):
    """
    🔍 Parse a URL into its components.
    """
    record, error = FUNCTIONS["parse"](url)
    if error:
        _fail(error)

    if as_json:
        console.print_json(json.dumps(record, ensure_ascii=False))
    else:
        console.print(create_record_table(url, record))


@app.command("build")
def build_url(
    scheme: Annotated[Optional[str], typer.Option(help="Scheme, e.g. https")] = None,
    username: Annotated[Optional[str], typer.Option(help="User name")] = None,
    password: Annotated[Optional[str], typer.Option(help="Password")] = None,
    host: Annotated[Optional[str], typer.Option(help="Host, optionally with :port")] = None,
    path: Annotated[Optional[str], typer.Option(help="Unescaped path")] = None,
    query: Annotated[
        Optional[str], typer.Option("--query", help="Raw (already encoded) query")
    ] = None,
    fragment: Annotated[Optional[str], typer.Option(help="Unescaped fragment")] = None,
):
    """
    🧱 Build a URL from components.
    """
    options = {
        "scheme": scheme,
        "username": username,
        "password": password,
        "host": host,
        "path": path,
        "rawquery": query,
        "fragment": fragment,
    }
    console.print(FUNCTIONS["build"](options), soft_wrap=True, highlight=False, markup=False)


@app.command("query")
def encode_query(
    data: Annotated[
        str, typer.Argument(help="📦 JSON object to encode, or - to read stdin")
    ],
):
    """
    🧮 Encode a JSON object as a bracketed query string.
    """
    raw = sys.stdin.read() if data == "-" else data
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON: {e}")

    try:
        encoded = FUNCTIONS["build_query_string"](payload)
    except UrlLabError as e:
        _fail(e.message)

    console.print(encoded, soft_wrap=True, highlight=False, markup=False)


@app.command("resolve")
def resolve_url(
    base: Annotated[str, typer.Argument(help="🌐 Base URL")],
    reference: Annotated[str, typer.Argument(help="🔗 Reference to resolve")],
):
    """
    🧭 Resolve a relative reference against a base URL.
    """
    url, error = FUNCTIONS["resolve"](base, reference)
    if error:
        _fail(error)
    console.print(url, soft_wrap=True, highlight=False, markup=False)


@app.command("type")
def classify_value(value: Annotated[str, typer.Argument(help="Value to classify")]):
    """
    🏷️ Classify a string as ip, domain, host, url or unknown.
    """
    console.print(FUNCTIONS["type"](value), highlight=False, markup=False)


@app.command("encode")
def encode_value(value: Annotated[str, typer.Argument(help="String to escape")]):
    """
    🔒 Percent-encode a string as a query component.
    """
    console.print(FUNCTIONS["urlencode"](value), soft_wrap=True, highlight=False, markup=False)


@app.command("decode")
def decode_value(value: Annotated[str, typer.Argument(help="String to unescape")]):
    """
    🔓 Decode a query component (malformed input is echoed back unchanged).
    """
    console.print(FUNCTIONS["urldecode"](value), soft_wrap=True, highlight=False, markup=False)


@app.command("functions")
def list_functions():
    """
    📚 List the functions exported to scripting hosts.
    """
    table = Table(title="📚 Exported Functions", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description", style="green")

    for name, func in FUNCTIONS.items():
        summary = (func.__doc__ or "").strip().splitlines()
        table.add_row(name, summary[0] if summary else "")

    console.print(table)


@app.command("status")
def show_status(
    save: Annotated[
        Optional[Path],
        typer.Option("--save", help="💾 Also write the active settings to a JSON file"),
    ] = None,
):
    """
    📊 Show version and configuration.
    """
    import platform

    import url_lab

    settings = get_settings()

    table = Table(title="⚙️ URL Lab", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Python", platform.python_version())
    table.add_row("URL Lab", url_lab.__version__)
    table.add_row(
        "Max Query Depth",
        str(settings.max_query_depth) if settings.max_query_depth else "unlimited",
    )
    for key, value in settings.get_logging_config().items():
        label = key.replace("_", " ").title()
        if isinstance(value, bool):
            table.add_row(label, "✅" if value else "❌")
        else:
            table.add_row(label, Text(value if value is not None else "-"))

    console.print(table)

    if save is not None:
        settings.save_to_file(save)
        console.print(f"💾 Settings written to {save}", markup=False, highlight=False)


def _version_callback(value: bool):
    if value:
        import url_lab

        console.print(f"URL Lab v{url_lab.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", help="Show version", callback=_version_callback, is_eager=True
        ),
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="🔇 Quiet mode")] = False,
    profile: Annotated[
        Optional[str],
        typer.Option(
            "--profile", help="⚙️ Settings profile: development, production or default"
        ),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="📄 JSON settings file (overrides --profile)"),
    ] = None,
):
    """
    🔗 URL Lab - URL parsing, building and bracketed query-string encoding.
    """
    console.quiet = quiet

    try:
        if config_file is not None:
            settings = use_settings(UrlLabSettings.load_from_file(config_file))
        elif profile is not None:
            settings = use_settings(get_config_profile(profile))
        else:
            settings = get_settings()
    except (OSError, ValueError, UrlLabError) as e:
        _fail(f"Cannot load settings: {e}")

    setup_logging_and_telemetry(settings)
    set_correlation_id()


def cli_main():
    """entry point for the CLI application"""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n❌ Operation cancelled by user", style="bold red")
        sys.exit(1)
    except Exception as e:
        logging.getLogger("url_lab").debug("Unhandled CLI error", exc_info=True)
        err_console.print(f"\n❌ Unexpected error: {e}", style="bold red")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
