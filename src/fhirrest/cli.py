"""Command-line interface for the FHIR REST reconciliation engine."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from . import __version__
from .config import FhirRestConfig, ServerConfig, load_config
from .core.fingerprint import file_sha256
from .core.identifier import parse_identifier
from .execution.engine import ReconciliationEngine
from .execution.handlers import FhirResourceHandler
from .fhir.transport import RemoteTransport, TransportConfig
from .models.results import Diagnostic, ResourceState
from .observability import configure_logging
from .utils.exceptions import FhirRestError

app = typer.Typer(
    name="fhirrest",
    help="FHIR REST reconciliation - create, read, update and delete FHIR resources",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="YAML configuration file")
BASE_URL_OPTION = typer.Option(
    None, "--base-url", help="FHIR base URL, overrides the configured one for this call"
)
LOG_LEVEL_OPTION = typer.Option(
    None, "--log-level", help="Log verbosity: TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR"
)
JSON_LOGS_OPTION = typer.Option(False, "--json-logs", help="Emit logs as JSON")


def _load(config_file: Path | None, base_url: str | None) -> FhirRestConfig:
    """Load configuration, falling back to --base-url when no server is configured."""
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(
            f"[red]ERROR: Invalid configuration:[/red] {escape(str(e))}", soft_wrap=True
        )
        raise typer.Exit(code=2) from e

    if config.server is None:
        if not base_url:
            console.print(
                "[red]ERROR: No FHIR base URL configured.[/red] "
                "Use --config, FHIR_BASE_URL or --base-url."
            )
            raise typer.Exit(code=2)
        config.server = ServerConfig(base_url=base_url)
    return config


@contextmanager
def _handler(
    config_file: Path | None, base_url: str | None, log_level: str | None, json_logs: bool
) -> Iterator[FhirResourceHandler]:
    """Build a handler for one command and turn engine errors into exit code 1."""
    config = _load(config_file, base_url)
    configure_logging(
        level=log_level or config.logging.level,
        json_logs=json_logs or config.logging.format == "json",
        log_file=config.logging.file,
    )

    transport = RemoteTransport(TransportConfig.from_server_config(config.server))
    try:
        yield FhirResourceHandler(ReconciliationEngine(transport))
    except FhirRestError as e:
        _print_diagnostic(e.to_diagnostic())
        raise typer.Exit(code=1) from e
    finally:
        logger.debug("Request metrics", **transport.collector.get_summary())
        transport.close()


def _print_diagnostic(diagnostic: Diagnostic) -> None:
    console.print(
        f"[red]ERROR:[/red] {escape(diagnostic.summary)}", highlight=False, soft_wrap=True
    )
    if diagnostic.detail:
        console.print(diagnostic.detail, markup=False, highlight=False, soft_wrap=True)


def _emit_state(state: ResourceState) -> None:
    typer.echo(json.dumps(state.to_dict(), indent=2))


@app.command()
def create(
    file_path: Path = typer.Argument(..., help="JSON document declaring the resource"),
    file_sha256_value: str | None = typer.Option(
        None, "--file-sha256", help="Declared hash of the document, stored as-is"
    ),
    config_file: Path | None = CONFIG_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """
    Create a resource from a JSON document.

    Examples:
        fhirrest create patient.json --base-url https://fhir.example.com/fhir
    """
    plan = ResourceState(
        file_path=str(file_path), file_sha256=file_sha256_value, fhir_base_url=base_url
    )
    with _handler(config_file, base_url, log_level, json_logs) as handler:
        state = handler.create(plan)
    _emit_state(state)


@app.command()
def read(
    resource_id: str = typer.Argument(..., help="Composite identifier, e.g. Patient/123"),
    config_file: Path | None = CONFIG_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """Read a resource and print its identifier and response fingerprint."""
    prior = ResourceState(resource_id=resource_id, fhir_base_url=base_url)
    with _handler(config_file, base_url, log_level, json_logs) as handler:
        state = handler.read(prior)
    _emit_state(state)


@app.command()
def update(
    file_path: Path = typer.Argument(..., help="JSON document declaring the resource"),
    resource_id: str = typer.Argument(..., help="Composite identifier, e.g. Patient/123"),
    file_sha256_value: str | None = typer.Option(
        None, "--file-sha256", help="Declared hash of the document, stored as-is"
    ),
    config_file: Path | None = CONFIG_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """
    Replace an existing resource with the content of a JSON document.

    Examples:
        fhirrest update patient.json Patient/08146022-932a-4001-9fe4-928382855ddf
    """
    prior = ResourceState(resource_id=resource_id, fhir_base_url=base_url)
    plan = ResourceState(
        file_path=str(file_path), file_sha256=file_sha256_value, fhir_base_url=base_url
    )
    with _handler(config_file, base_url, log_level, json_logs) as handler:
        state = handler.update(prior, plan)
    _emit_state(state)


@app.command()
def delete(
    resource_id: str = typer.Argument(..., help="Composite identifier, e.g. Patient/123"),
    config_file: Path | None = CONFIG_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """Delete a resource."""
    with _handler(config_file, base_url, log_level, json_logs) as handler:
        handler.delete(ResourceState(resource_id=resource_id, fhir_base_url=base_url))
    typer.echo(f"Deleted {resource_id}")


@app.command()
def get(
    resource_id: str = typer.Argument(..., help="Composite identifier, e.g. Patient/123"),
    config_file: Path | None = CONFIG_OPTION,
    base_url: str | None = BASE_URL_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
    json_logs: bool = JSON_LOGS_OPTION,
) -> None:
    """Print the raw JSON of a resource as returned by the server."""
    with _handler(config_file, base_url, log_level, json_logs) as handler:
        body = handler.engine.fetch(resource_id, base_url=base_url)
    typer.echo(body)


@app.command("import")
def import_resource(
    resource_id: str = typer.Argument(..., help="Composite identifier, e.g. Patient/123"),
) -> None:
    """Adopt an existing resource by identifier without contacting the server."""
    try:
        parse_identifier(resource_id)
    except FhirRestError as e:
        _print_diagnostic(e.to_diagnostic())
        raise typer.Exit(code=1) from e
    _emit_state(ResourceState(resource_id=resource_id))


@app.command("hash-file")
def hash_file(
    file_path: Path = typer.Argument(..., help="File to hash"),
) -> None:
    """Print the SHA-256 of a document, for use as --file-sha256."""
    try:
        typer.echo(file_sha256(file_path))
    except FhirRestError as e:
        _print_diagnostic(e.to_diagnostic())
        raise typer.Exit(code=1) from e


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel.fit(
            "[bold]FHIR REST Reconciliation[/bold]\n\n"
            f"Version: [cyan]{__version__}[/cyan]\n"
            "Python: 3.11+\n\n"
            "[bold]Operations:[/bold]\n"
            "- create: POST /{resourceType}\n"
            "- read: GET /{type}/{id}\n"
            "- update: PUT /{type}/{id}\n"
            "- delete: DELETE /{type}/{id}\n\n"
            "[dim]Fingerprints are SHA-256 of the raw response bytes[/dim]",
            title="About",
            border_style="blue",
        )
    )
