"""Command-line interface for wlscanner code generation."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from wlscanner import __version__
from wlscanner.generator import golang, python
from wlscanner.generator.compiler import compile_protocol
from wlscanner.generator.emitter import DestinationExistsError, EmissionError, Emitter
from wlscanner.generator.names import (
    DEFAULT_PREFIX,
    MalformedReferenceError,
    UnresolvedNameError,
    build_registry,
)
from wlscanner.generator.parser import SchemaError, parse
from wlscanner.generator.source import DEVEL_SOURCE_URL, FETCH_TIMEOUT, read_source

if TYPE_CHECKING:
    from wlscanner.generator.names import NameRegistry
    from wlscanner.generator.types import Protocol

LANGUAGES = ("go", "python")

logger = logging.getLogger("wlscanner")


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    logger.error(message)
    sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="wlscanner")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages")
def cli(verbose: bool) -> None:
    """Wayland protocol binding generator."""
    _configure_logging(verbose)


@cli.command()
@click.option("--source", "-s", default=None, help="Protocol XML file or http(s) URL")
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--language", "-l", default="go", show_default=True, help="Target language (go, python)"
)
@click.option(
    "--package", default=golang.DEFAULT_PACKAGE, show_default=True, help="Go package name"
)
@click.option(
    "--runtime-import",
    "runtime_import",
    default=python.DEFAULT_RUNTIME_IMPORT,
    show_default=True,
    help="Module the Python bindings import the transport from",
)
@click.option(
    "--core-import",
    "core_import",
    default=python.DEFAULT_CORE_IMPORT,
    show_default=True,
    help="Module extension protocols import the core protocol bindings from",
)
@click.option(
    "--prefix",
    default=DEFAULT_PREFIX,
    show_default=True,
    help="Namespace prefix stripped from schema names",
)
@click.option("--overwrite", is_flag=True, default=False, help="Overwrite an existing output file")
@click.option(
    "--dev",
    is_flag=True,
    default=False,
    help="Use the development wayland.xml from the upstream repository",
)
@click.option(
    "--format/--no-format",
    "run_formatter",
    default=True,
    help="Run gofmt / ruff format on the output",
)
def gen(
    source: str | None,
    output_file: str,
    language: str,
    package: str,
    runtime_import: str,
    core_import: str,
    prefix: str,
    overwrite: bool,
    dev: bool,
    run_formatter: bool,
) -> None:
    """Generate protocol bindings from a protocol XML file."""
    if language not in LANGUAGES:
        _fail(f"Unknown language: {language}")

    if source is None and dev:
        source = DEVEL_SOURCE_URL
    if not source:
        _fail("Must specify a --source (or --dev)")

    try:
        protocol = parse(read_source(source, FETCH_TIMEOUT))
        registry = build_registry(protocol, prefix)
        interfaces = compile_protocol(protocol, registry)
    except (SchemaError, UnresolvedNameError, MalformedReferenceError) as exc:
        _fail(str(exc))

    logger.info("Compiled %d interfaces from %s", len(interfaces), source)

    if language == "go":
        chunks = golang.render(interfaces, source, package=package)
        formatter = golang.FORMATTER
    else:
        chunks = python.render(
            interfaces,
            protocol.name,
            source,
            runtime_import=runtime_import,
            core_import=core_import,
        )
        formatter = python.FORMATTER

    emitter = Emitter(output_file, overwrite=overwrite)
    emitter.extend(chunks)

    try:
        emitter.write()
    except DestinationExistsError as exc:
        logger.warning(str(exc))
        return
    except EmissionError as exc:
        _fail(str(exc))

    if run_formatter:
        emitter.format(formatter)


@cli.command()
@click.option("--source", "-s", required=True, help="Protocol XML file or http(s) URL")
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True, help="Namespace prefix")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(source: str, prefix: str, output_json: bool) -> None:
    """Display the interfaces a protocol defines."""
    try:
        protocol = parse(read_source(source, FETCH_TIMEOUT))
        registry = build_registry(protocol, prefix)
    except SchemaError as exc:
        _fail(str(exc))

    if output_json:
        print(protocol.to_json(indent=2))
    else:
        _output_plain(protocol, registry)


def _output_plain(protocol: Protocol, registry: NameRegistry) -> None:
    """Output protocol info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]Protocol[/bold cyan] {protocol.name}")
    console.print()

    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Interface", style="white")
    table.add_column("Generated", style="green")
    table.add_column("Version", style="yellow", justify="right")
    table.add_column("Requests", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("Enums", justify="right")

    for iface in protocol.interfaces:
        table.add_row(
            iface.name,
            registry.resolve(iface.name),
            str(iface.version),
            str(len(iface.requests)),
            str(len(iface.events)),
            str(len(iface.enums)),
        )

    console.print(table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
