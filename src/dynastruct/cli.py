# src/dynastruct/cli.py
"""dynastruct command line interface.

Every command reads one schema document (YAML, see dynastruct.core.config)
and works on the structs it describes:

    dynastruct check    -s schema.yaml
    dynastruct explain  -s schema.yaml --struct Demo --field a
    dynastruct generate -s schema.yaml -o generated.py

Generated source goes to stdout unless --output is given; logs and error
panels go to stderr.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from dynastruct import __version__
from dynastruct.contracts.errors import GenerationError, RenderError, SchemaError
from dynastruct.core.config import SchemaDocument, load_schema
from dynastruct.core.generator import GenerationResult, generate_document
from dynastruct.core.logging import configure_logging, get_logger

__all__ = [
    "app",
]

logger = get_logger(__name__)

app = typer.Typer(
    name="dynastruct",
    help="dynastruct: push-based reactive property generator.",
    no_args_is_help=True,
)


def _schema_option() -> Any:
    return typer.Option(..., "--schema", "-s", help="Path to schema YAML file.")


def _fail(title: str, message: str, *, details: Sequence[str] = (), hint: str | None = None) -> NoReturn:
    """Print an error panel to stderr and exit with status 1."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    body = Text(message, style="white")
    if details:
        body.append("\n\n" + "\n".join(f"  • {line}" for line in details), style="dim")
    if hint:
        body.append("\n\nHint: ", style="yellow bold")
        body.append(hint, style="yellow")

    Console(stderr=True).print(Panel(body, title=f"[red bold]{title}[/]", border_style="red", padding=(0, 1)))
    raise typer.Exit(1)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"dynastruct version {__version__}")
        raise typer.Exit()


def _load_environment(env_file: Path | None, *, skip: bool) -> None:
    """Read a .env file into the process environment.

    Schema documents see it through ${VAR} references and DYNASTRUCT_*
    overrides. Variables that are already set keep their value.
    """
    from dotenv import load_dotenv

    if skip:
        if env_file is not None:
            typer.secho("Warning: --env-file ignored because --no-dotenv is set.", fg=typer.colors.YELLOW, err=True)
        return
    if env_file is None:
        load_dotenv(override=False)
    elif env_file.exists():
        load_dotenv(env_file, override=False)
    else:
        _fail("Environment File Not Found", f".env file does not exist: {env_file}")


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each generation step (graph built, validated, functions emitted).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write logs to stderr as JSON lines.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Variables for ${VAR} references and DYNASTRUCT_* overrides (default: search for .env).",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Do not read any .env file.",
    ),
) -> None:
    """dynastruct: push-based reactive property generator."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")
    _load_environment(env_file, skip=no_dotenv)


def _read_document(schema: Path) -> SchemaDocument:
    """Load and validate a schema document, or exit with an error panel."""
    schema_path = schema.expanduser()
    try:
        return load_schema(schema_path)
    except FileNotFoundError:
        _fail("File Not Found", f"Schema file does not exist: {schema}", hint="Check the path passed to --schema.")
    except (YamlParserError, YamlScannerError) as e:
        _fail(
            "YAML Syntax Error",
            f"Failed to parse {schema_path.name}",
            details=[str(e.problem)] if getattr(e, "problem", None) else (),
            hint="Check indentation and brackets in the struct and field lists.",
        )
    except ValidationError as e:
        _fail(
            "Schema Validation Failed",
            f"Invalid schema in {schema_path.name}",
            details=[f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()],
            hint="Check field names, dependency lists, and compute method names.",
        )


def _generate(document: SchemaDocument, structs: Sequence[str] | None) -> list[GenerationResult]:
    """Generate the selected structs, or exit with the diagnostics of the first failure."""
    try:
        return generate_document(document, only=structs)
    except GenerationError as e:
        _fail(
            "Generation Failed",
            f"Struct '{e.struct_name}' cannot be generated",
            details=[d.message for d in e.diagnostics],
            hint="Fix dependency lists, remove cycles, or adjust naming overrides.",
        )
    except SchemaError as e:
        _fail("Schema Error", str(e))
    except KeyError as e:
        _fail("Unknown Struct", str(e.args[0]) if e.args else str(e))


@app.command()
def generate(
    schema: Path = _schema_option(),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write generated module here (default: stdout).",
    ),
    struct: list[str] | None = typer.Option(
        None,
        "--struct",
        help="Only generate the named struct (repeatable).",
    ),
) -> None:
    """Generate propagation methods as a Python module."""
    from dynastruct.core.render import render_module

    document = _read_document(schema)
    results = _generate(document, struct)

    try:
        source = render_module(results)
    except RenderError as e:
        _fail("Render Error", str(e), hint="Naming overrides and field names must produce valid Python identifiers.")

    if output is None:
        typer.echo(source, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    logger.info("module_written", path=str(output), structs=[r.spec.name for r in results])
    typer.echo(f"Wrote {len(results)} struct(s) to {output}", err=True)


@app.command()
def check(
    schema: Path = _schema_option(),
) -> None:
    """Validate a schema without writing any output."""
    document = _read_document(schema)
    results = _generate(document, None)

    typer.echo("✅ Schema valid!")
    typer.echo(f"  Propagation: {document.generator.propagation.value}")
    for result in results:
        typer.echo(
            f"  {result.spec.name}: {len(result.spec)} fields, "
            f"{result.graph.edge_count} edges, {len(result)} functions "
            f"(fingerprint {result.fingerprint[:16]})"
        )


@app.command()
def explain(
    schema: Path = _schema_option(),
    struct: str = typer.Option(
        ...,
        "--struct",
        help="Struct to explain.",
    ),
    field: str = typer.Option(
        ...,
        "--field",
        "-f",
        help="Field whose setter/update function to trace.",
    ),
) -> None:
    """Show the propagation chain triggered by changing one field."""
    from rich.console import Console

    from dynastruct.cli_formatters import build_propagation_tree, count_compute_calls

    document = _read_document(schema)
    [result] = _generate(document, [struct])

    if not result.spec.has_field(field):
        _fail(
            "Unknown Field",
            f"Struct '{struct}' has no field '{field}'",
            details=[f"Available fields: {', '.join(result.spec.field_names)}"],
        )

    console = Console()
    console.print(build_propagation_tree(result, field))
    counts = count_compute_calls(result, field)
    if counts:
        console.print("")
        console.print(f"Compute calls ({result.mode.value} mode):")
        for method, count in counts.items():
            console.print(f"  {method}: {count}")
    else:
        console.print("No compute methods run.")


if __name__ == "__main__":
    app()
