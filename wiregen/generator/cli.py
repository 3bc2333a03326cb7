"""Command-line interface for wiregen code generation."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from wiregen.generator import python
from wiregen.generator.naming import module_name
from wiregen.generator.parser import SchemaError, check_compat, load
from wiregen.generator.summary import ProtocolInfo, summarize

if TYPE_CHECKING:
    from wiregen.generator.summary import MessageInfo

log = logging.getLogger(__name__)

err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> NoReturn:
    err_console.print(
        f"[bold red]error:[/bold red] {escape(str(error))}", highlight=False, soft_wrap=True
    )
    sys.exit(1)


def _write(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` without ever leaving a partial file behind."""
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


def _package_init(modules: list[str]) -> str:
    lines = ["# Auto-generated file. Do not edit."]
    lines.extend(f"from .{m} import *  # noqa: F401,F403" for m in modules)
    return "\n".join(lines) + "\n"


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress to stderr")
def cli(verbose: bool) -> None:
    """wiregen protocol code generator."""
    _configure_logging(verbose)


@cli.command()
@click.option(
    "--input", "-i", "input_files", required=True, multiple=True, help="Input protocol file"
)
@click.option(
    "--output",
    "-o",
    "output_path",
    required=True,
    help="Output file (.py, single input) or directory",
)
@click.option(
    "--runtime-import",
    "runtime_import",
    default=python.DEFAULT_RUNTIME_IMPORT,
    show_default=True,
    help="Module generated code imports its runtime from",
)
@click.option("--strict", is_flag=True, default=False, help="Reject duplicate names and values")
def gen(input_files: tuple[str, ...], output_path: str, runtime_import: str, strict: bool) -> None:
    """Generate Python code from protocol definition files.

    Every protocol is rendered before anything is written, so a failure
    leaves the output untouched.
    """
    rendered: dict[str, str] = {}
    try:
        for input_file in input_files:
            proto = load(input_file, strict=strict)
            name = module_name(proto.name)
            if name in rendered:
                _fail(ValueError(f"{input_file}: protocol {proto.name} is already generated"))
            rendered[name] = python.render(proto, runtime_import=runtime_import)
    except SchemaError as e:
        _fail(e)

    output = Path(output_path)
    try:
        if output.suffix == ".py":
            if len(rendered) != 1:
                _fail(ValueError("an output file needs exactly one input; pass a directory"))
            (content,) = rendered.values()
            _write(output, content)
            log.info("wrote %s", output)
            return

        output.mkdir(parents=True, exist_ok=True)
        for name, content in rendered.items():
            _write(output / f"{name}.py", content)
            log.info("wrote %s", output / f"{name}.py")
        _write(output / "__init__.py", _package_init(list(rendered)))
    except OSError as e:
        _fail(e)

    print(f"Generated {len(rendered)} protocol module(s) in {output}")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Protocol file to check")
@click.option(
    "--baseline", "-b", "baseline_file", required=True, help="Previous version of the protocol"
)
def check(input_file: str, baseline_file: str) -> None:
    """Check that a protocol only appends to its previous version."""
    try:
        new = load(input_file, strict=True)
        old = load(baseline_file)
        check_compat(old, new)
    except SchemaError as e:
        _fail(e)

    print(f"{new.name} is wire compatible with {baseline_file}")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input protocol file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display protocol interfaces and opcodes."""
    try:
        proto = load(input_file)
    except SchemaError as e:
        _fail(e)

    protocol_info = summarize(proto)

    if output_json:
        _output_json(protocol_info)
    else:
        _output_plain(protocol_info)


def _message_json(message: MessageInfo) -> dict:
    return {
        "name": message.name,
        "opcode": message.opcode,
        "since": message.since,
        "signature": message.signature,
    }


def _output_json(protocol_info: ProtocolInfo) -> None:
    """Output protocol info as JSON."""
    data: dict = {"protocol": protocol_info.name, "interfaces": {}}

    for interface in protocol_info.interfaces:
        data["interfaces"][interface.name] = {
            "class": interface.class_name,
            "version": interface.version,
            "requests": [
                _message_json(r) | {"destructor": r.destructor} for r in interface.requests
            ],
            "events": [_message_json(e) for e in interface.events],
            "enums": interface.enums,
        }

    print(json.dumps(data, indent=2))


def _format_since(since: int | None) -> str:
    return "" if since is None else str(since)


def _output_plain(protocol_info: ProtocolInfo) -> None:
    """Output protocol info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]Protocol[/bold cyan] {protocol_info.name}")
    summary_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    summary_table.add_column("Interface", style="white", no_wrap=True)
    summary_table.add_column("Class", style="dim")
    summary_table.add_column("Version", style="green", justify="right")
    summary_table.add_column("Requests", style="yellow", justify="right")
    summary_table.add_column("Events", style="yellow", justify="right")
    summary_table.add_column("Enums", style="dim")

    for interface in protocol_info.interfaces:
        summary_table.add_row(
            interface.name,
            interface.class_name,
            str(interface.version),
            str(len(interface.requests)),
            str(len(interface.events)),
            ", ".join(interface.enums),
        )

    console.print(summary_table)
    console.print()

    for interface in protocol_info.interfaces:
        if not interface.requests and not interface.events:
            continue
        console.print(f"[bold cyan]{interface.name}[/bold cyan] v{interface.version}")
        opcode_table = Table(show_header=True, box=None, padding=(0, 2, 0, 2))
        opcode_table.add_column("Kind", style="dim")
        opcode_table.add_column("Opcode", style="green", justify="right")
        opcode_table.add_column("Name", style="white", no_wrap=True)
        opcode_table.add_column("Since", style="dim", justify="right")
        opcode_table.add_column("Arguments", style="yellow")

        for request in interface.requests:
            name = f"{request.name} (destructor)" if request.destructor else request.name
            opcode_table.add_row(
                "request",
                str(request.opcode),
                name,
                _format_since(request.since),
                request.signature,
            )
        for event in interface.events:
            opcode_table.add_row(
                "event", str(event.opcode), event.name, _format_since(event.since), event.signature
            )

        console.print(opcode_table)
        console.print()

    console.print(
        f"{len(protocol_info.interfaces)} interface(s), "
        f"{protocol_info.request_count} request(s), {protocol_info.event_count} event(s)"
    )


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
