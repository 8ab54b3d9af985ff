"""agentic-readiness CLI — lint, classify and tag OpenAPI specs in API Hub."""

from __future__ import annotations

import json

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentic_readiness import __version__
from agentic_readiness.config import HANDOFF_FILE, Settings, read_handoff, write_handoff
from agentic_readiness.errors import ConfigError, ReadinessError
from agentic_readiness.logger import console, error, setup_logging, success, warning

SEVERITY_STYLES = {"ERROR": "red", "WARNING": "yellow", "INFO": "blue", "HINT": "dim"}


@click.group()
@click.version_option(version=__version__)
@click.option("--env-file", default=".env", help="Dotenv file with PROJECT_ID, API_HUB_REGION, ...")
@click.option("--log-level", default="INFO", help="Logging level (LOG_LEVEL wins if set)")
@click.option("--log-file", default=None, help="Also write logs to this file")
@click.pass_context
def main(ctx: click.Context, env_file: str, log_level: str, log_file: str | None):
    """Agentic Readiness — grade OpenAPI specs for AI agent consumption.

    Lints a spec with Spectral, classifies it as Low (Passive), Medium
    (Proactive) or High (Autonomous), and records the level as the
    'agentic-readiness' attribute on the API version in API Hub.
    """
    try:
        setup_logging(level=log_level, log_file=log_file)
    except ConfigError as e:
        raise click.BadParameter(str(e), param_hint="'--log-level' / LOG_LEVEL")
    ctx.obj = Settings.from_env(env_file)


def _client(settings: Settings):
    from agentic_readiness.hub.auth import token_provider
    from agentic_readiness.hub.client import ApiHubClient

    settings.require("project_id", "location")
    return ApiHubClient(
        project=settings.project_id,
        location=settings.location,
        token_provider=token_provider(settings.access_token),
        endpoint=settings.endpoint,
        timeout=settings.timeout,
    )


def _fail(message: str) -> None:
    error(message)
    raise SystemExit(1)


def _print_findings(findings) -> None:
    if not findings:
        return
    table = Table(title=f"Findings ({len(findings)})")
    table.add_column("Severity")
    table.add_column("Rule", style="cyan")
    table.add_column("Path", style="dim")
    table.add_column("Message")
    for f in sorted(findings, key=lambda f: f.severity):
        style = SEVERITY_STYLES.get(f.severity.name, "")
        table.add_row(
            f"[{style}]{f.severity.name}[/]", escape(f.code), escape(f.path[:50]), escape(f.message[:80])
        )
    console.print(table)


# ── Classify ─────────────────────────────────────────────────────────


@main.command()
@click.argument("findings_json")
@click.option("--env-out", default=HANDOFF_FILE, help="File to write READINESS_LEVEL=<id> to")
def classify(findings_json: str, env_out: str):
    """Classify a saved Spectral JSON report.

    Writes READINESS_LEVEL to a dotenv file so a later 'assign' step
    (e.g. the next Cloud Build step) can pick it up.
    """
    from agentic_readiness.lint.classifier import summarize
    from agentic_readiness.lint.findings import load_findings

    try:
        summary = summarize(load_findings(findings_json))
    except ReadinessError as e:
        _fail(str(e))

    console.print(f"Spectral results: {summary.errors} error(s), {summary.warnings} warning(s)")
    write_handoff(summary.level.id, env_out)
    success(f"Classification: {summary.level.display_name} [dim]({escape(env_out)})[/]")


# ── Lint ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("spec_path")
@click.option("--ruleset", "-r", default=None, help="Spectral ruleset file")
@click.pass_obj
def lint(settings: Settings, spec_path: str, ruleset: str | None):
    """Run Spectral on SPEC_PATH and show the readiness level it earns."""
    from agentic_readiness.lint.classifier import summarize
    from agentic_readiness.lint.spectral import SpectralRunner

    console.print(f"\n[bold blue]Agentic Readiness[/] — Linting: {escape(spec_path)}\n")

    runner = SpectralRunner(binary=settings.spectral_bin, ruleset=ruleset or settings.spectral_ruleset)
    try:
        findings = runner.lint(spec_path)
        summary = summarize(findings)
    except ReadinessError as e:
        _fail(str(e))

    _print_findings(findings)
    console.print(Panel(summary.summary(), title="Readiness"))


# ── Attribute ────────────────────────────────────────────────────────


@main.command(name="ensure-attribute")
@click.pass_obj
def ensure_attribute(settings: Settings):
    """Create the 'agentic-readiness' attribute if it does not exist."""
    from agentic_readiness.hub.models import READINESS_ATTRIBUTE, EnsureOutcome

    try:
        with _client(settings) as client:
            outcome = client.ensure_attribute(READINESS_ATTRIBUTE)
    except ReadinessError as e:
        _fail(str(e))

    if outcome == EnsureOutcome.CREATED:
        success(f"Attribute {escape(READINESS_ATTRIBUTE.attribute_id)} created.")
    else:
        success(f"Attribute {escape(READINESS_ATTRIBUTE.attribute_id)} already exists.")


@main.command(name="attribute-schema")
def attribute_schema():
    """Print the request body used to create the readiness attribute."""
    from agentic_readiness.hub.models import READINESS_ATTRIBUTE

    console.print_json(json.dumps(READINESS_ATTRIBUTE.to_payload()))


@main.command()
@click.argument("api_id", required=False)
@click.argument("version", required=False)
@click.argument("level", required=False)
@click.option("--env-in", default=HANDOFF_FILE, help="Dotenv file to read READINESS_LEVEL from")
@click.pass_obj
def assign(settings: Settings, api_id: str | None, version: str | None, level: str | None, env_in: str):
    """Assign a readiness LEVEL id to API_ID/VERSION.

    Missing arguments fall back to API_ID / VERSION from the environment
    and READINESS_LEVEL from the hand-off file written by 'classify'.
    """
    from agentic_readiness.hub.models import READINESS_ATTRIBUTE_ID
    from agentic_readiness.lint.classifier import ReadinessLevel

    api_id = api_id or settings.api_id
    version = version or settings.version_id
    level = level or read_handoff(env_in)
    if not (api_id and version and level):
        _fail(f"Missing required values: API_ID={api_id!r} VERSION={version!r} LEVEL={level!r}")

    try:
        readiness = ReadinessLevel.from_id(level)
        with _client(settings) as client:
            result = client.assign_attribute(api_id, version, READINESS_ATTRIBUTE_ID, readiness.id)
    except ReadinessError as e:
        _fail(str(e))

    success(f"Assigned {readiness.display_name} to {escape(result.api_id)}/{escape(result.version_id)}.")


@main.command()
@click.argument("api_id")
@click.argument("version")
@click.pass_obj
def show(settings: Settings, api_id: str, version: str):
    """Show the readiness value currently assigned to API_ID/VERSION."""
    from agentic_readiness.hub.models import READINESS_ATTRIBUTE_ID

    try:
        with _client(settings) as client:
            values = client.get_assigned_values(api_id, version, READINESS_ATTRIBUTE_ID)
    except ReadinessError as e:
        _fail(str(e))

    if not values:
        warning(f"No readiness level assigned to {api_id}/{version}.")
        return
    console.print(f"{escape(api_id)}/{escape(version)}: [bold]{escape(', '.join(values))}[/]")


# ── Run ──────────────────────────────────────────────────────────────


@main.command()
@click.argument("spec_path")
@click.option("--api-id", default=None, help="API id (default: API_ID or slug of info.title)")
@click.option("--version", "version_id", default=None, help="Version id (default: VERSION or info.version)")
@click.option("--display-name", default="", help="API display name (default: info.title)")
@click.option("--ruleset", "-r", default=None, help="Spectral ruleset file")
@click.option("--upload-spec/--no-upload-spec", default=False, help="Also upload the spec document")
@click.pass_obj
def run(
    settings: Settings,
    spec_path: str,
    api_id: str | None,
    version_id: str | None,
    display_name: str,
    ruleset: str | None,
    upload_spec: bool,
):
    """Run the full pipeline for SPEC_PATH and record its readiness level.

    Exits 0 when the level was assigned, 1 when any stage failed.
    """
    from agentic_readiness.hub.registration import ApiRegistrar, RegistrationTarget
    from agentic_readiness.lint.spectral import SpectralRunner
    from agentic_readiness.pipeline import ReadinessPipeline

    console.print(f"\n[bold blue]Agentic Readiness[/] — Pipeline: {escape(spec_path)}\n")

    try:
        target = RegistrationTarget.from_openapi(
            spec_path,
            api_id=api_id or settings.api_id,
            version_id=version_id or settings.version_id,
            display_name=display_name,
            owner_email=settings.owner_email,
            upload_spec=upload_spec,
        )
        client = _client(settings)
    except ReadinessError as e:
        _fail(str(e))

    with client:
        pipeline = ReadinessPipeline(
            store=client,
            finding_source=SpectralRunner(
                binary=settings.spectral_bin,
                ruleset=ruleset or settings.spectral_ruleset,
            ),
            registrar=ApiRegistrar(client),
        )
        result = pipeline.run(spec_path, target)

    if not result.ok:
        _fail(result.describe())

    console.print(Panel(escape(result.describe()), title="Readiness Assigned"))


if __name__ == "__main__":
    main()
