"""
Command-line interface for openmcf.

Commands validate manifests, preview the resource graph a module builds
(against the in-memory recording engine), lint manifest schemas and show the
provider catalog.
"""

import json
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import CliConfig, ConfigError, ConfigLoader, LogFormat
from .exceptions import (
    BadStackInput,
    OpenMCFError,
    ProviderSetupFailed,
    ValidationFailed,
    error_chain,
)
from .iac.engine import OutputRef, RecordingContext
from .iac.modules import ModuleRegistry
from .iac.outputs import OutputRegistry
from .iac.runner import run_module
from .lint import lint_all_kinds
from .logging_config import configure_logging
from .manifest import KindRegistry, collect_references, load_manifest, manifest_to_dict
from .provider import (
    all_providers,
    credential_environment,
    find_provider_info,
    get_provider_info,
    invalid_provider_config_guidance,
    kind_detection_error_guidance,
    missing_provider_config_guidance,
)

console = Console()
err_console = Console(stderr=True)

logger = structlog.get_logger(__name__)


def _message(error: BaseException) -> str:
    if isinstance(error, OpenMCFError):
        return error.message
    return str(error)


def format_error_chain(error: BaseException) -> str:
    """'outer: inner: root' for a wrapped error."""
    return ": ".join(_message(e) for e in error_chain(error))


def innermost_error(error: OpenMCFError) -> OpenMCFError:
    """The deepest OpenMCFError in the chain; library errors below it are detail."""
    return [e for e in error_chain(error) if isinstance(e, OpenMCFError)][-1]


def report_failure(error: OpenMCFError, kind: Optional[str] = None) -> None:
    """Print a failure with the guidance that matches its root cause, then exit 1."""
    err_console.print(f"[red]Error:[/red] {format_error_chain(error)}", highlight=False, soft_wrap=True)
    cause = innermost_error(error)

    if isinstance(cause, ProviderSetupFailed):
        info = find_provider_info(cause.provider)
        if info is not None:
            click.echo("", err=True)
            click.echo(missing_provider_config_guidance(kind or "target", info), err=True)
    elif isinstance(cause, ValidationFailed):
        if cause.field.startswith("providerConfig") and kind:
            info = find_provider_info(KindRegistry.get(kind).PROVIDER)
            if info is not None:
                click.echo("", err=True)
                click.echo(invalid_provider_config_guidance(info, cause), err=True)
        elif cause.field in ("apiVersion", "kind"):
            click.echo("", err=True)
            click.echo(kind_detection_error_guidance(), err=True)
        for item in cause.errors[1:]:
            err_console.print(f"  - {item['field']}: {item['reason']}", highlight=False, soft_wrap=True)

    logger.debug("Command failed", error=error.to_dict())
    sys.exit(1)


def read_yaml_mapping(path: Path, what: str) -> Dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BadStackInput(f"{what} {path} is not valid YAML", cause=e) from e
    except OSError as e:
        raise BadStackInput(f"cannot read {what} {path}", cause=e) from e
    if not isinstance(data, dict):
        raise BadStackInput(f"{what} {path} must contain a mapping")
    return data


def resolve_provider_config(
    config: CliConfig, kind: str, explicit: Optional[Path]
) -> Optional[Dict[str, Any]]:
    """Provider config given with -p, else '<dir>/<provider>-provider-config.yaml' when present."""
    if explicit is not None:
        return read_yaml_mapping(explicit, "provider config")
    if config.provider_config_dir is None:
        return None
    info = get_provider_info(KindRegistry.get(kind).PROVIDER)
    candidate = config.provider_config_dir.expanduser() / info.config_file_name
    if candidate.is_file():
        logger.info("Using provider config", path=str(candidate))
        return read_yaml_mapping(candidate, "provider config")
    return None


def render_value(value: Any) -> Any:
    if isinstance(value, OutputRef):
        return str(value)
    if isinstance(value, dict):
        return {k: render_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [render_value(v) for v in value]
    return value


@click.group()
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option(
    "--log-format",
    type=click.Choice([f.value for f in LogFormat]),
    default=None,
    help="Render log lines for humans or as JSON",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CLI config file (default: ~/.config/openmcf/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_format: Optional[str], config_path: Optional[Path]) -> None:
    """openmcf - single-resource infrastructure modules with a uniform manifest contract."""
    load_dotenv()
    loader = ConfigLoader(config_path)
    try:
        config = loader.merge_cli_args(
            loader.load(), {"log_level": log_level, "log_format": log_format}
        )
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}", highlight=False, soft_wrap=True)
        sys.exit(1)

    json_output = config.log_format == LogFormat.JSON
    handler = None if json_output else RichHandler(console=err_console, show_path=False)
    configure_logging(config.log_level, json_output=json_output, handler=handler)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.option(
    "-f",
    "--manifest",
    "manifest_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Manifest YAML file",
)
@click.option(
    "--strict-references/--no-strict-references",
    default=None,
    help="Reject references to kinds that register no outputs",
)
@click.pass_context
def validate(ctx: click.Context, manifest_path: Path, strict_references: Optional[bool]) -> None:
    """Validate a manifest and the references it makes to other resources."""
    config: CliConfig = ctx.obj["config"]
    strict = config.strict_references if strict_references is None else strict_references
    try:
        manifest = load_manifest(manifest_path)
        references = collect_references(manifest)
        for path, ref in references:
            OutputRegistry.validate_reference(ref.value_from, path, strict=strict)
    except OpenMCFError as e:
        report_failure(e)
        return

    console.print(f"[green]✓[/green] {manifest.KIND} '{manifest.metadata.name}' is valid")
    if references:
        table = Table(title="References resolved at deploy time")
        table.add_column("Field", style="cyan")
        table.add_column("Kind")
        table.add_column("Name")
        table.add_column("Output key", style="green")
        for path, ref in references:
            table.add_row(path, ref.value_from.kind, ref.value_from.name, ref.value_from.output_key)
        console.print(table)


@cli.command()
@click.option(
    "-f",
    "--manifest",
    "manifest_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Manifest YAML file; references must already be resolved",
)
@click.option(
    "-p",
    "--provider-config",
    "provider_config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Provider credentials YAML file",
)
@click.option("--show-props", is_flag=True, help="Print every resource's properties")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def preview(
    ctx: click.Context,
    manifest_path: Path,
    provider_config_path: Optional[Path],
    show_props: bool,
    output_json: bool,
) -> None:
    """Run a manifest's module against the recording engine and show what it builds.

    Nothing is provisioned. Values only known after provisioning are shown
    as ${resource.property} placeholders.

    Examples:
        openmcf preview -f vpc.yaml -p digitalocean-provider-config.yaml
        openmcf preview -f record.yaml --json
    """
    config: CliConfig = ctx.obj["config"]
    kind = None
    try:
        manifest = load_manifest(manifest_path)
        kind = manifest.KIND
        module = ModuleRegistry.get_module(kind)
        if module is None:
            raise OpenMCFError(f"no module handles kind {kind}", error_code="UNKNOWN_KIND")

        stack_input: Dict[str, Any] = {"target": manifest_to_dict(manifest)}
        provider_config = resolve_provider_config(config, kind, provider_config_path)
        if provider_config is not None:
            stack_input["providerConfig"] = provider_config

        engine = RecordingContext(stack_input)
        outputs = run_module(engine, module)
    except OpenMCFError as e:
        report_failure(e, kind)
        return

    if output_json:
        click.echo(
            json.dumps(
                {
                    "providers": [
                        {"package": p.package, "name": p.name} for p in engine.providers
                    ],
                    "resources": [
                        {
                            "type": r.type_token,
                            "name": r.name,
                            "dependsOn": r.depends_on,
                            "props": render_value(r.props),
                        }
                        for r in engine.resources
                    ],
                    "outputs": render_value(outputs),
                },
                indent=2,
            )
        )
        return

    table = Table(title=f"{kind} '{manifest.metadata.name}'")
    table.add_column("#", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Depends on", style="dim")
    for i, resource in enumerate(engine.resources, 1):
        table.add_row(str(i), resource.type_token, resource.name, ", ".join(resource.depends_on))
    console.print(table)

    if show_props:
        for resource in engine.resources:
            console.print(f"\n[cyan]{resource.type_token}[/cyan] [green]{resource.name}[/green]")
            console.print_json(json.dumps(render_value(resource.props)))

    exports = Table(title="Outputs")
    exports.add_column("Key", style="cyan")
    exports.add_column("Value")
    for key, value in outputs.items():
        exports.add_row(key, json.dumps(render_value(value)))
    console.print(exports)


@cli.command()
def lint() -> None:
    """Check every manifest schema against the lint rules."""
    violations = lint_all_kinds()
    if not violations:
        console.print(f"[green]✓[/green] {len(KindRegistry.all_kinds())} kinds pass all lint rules")
        return
    table = Table(title="Schema lint violations")
    table.add_column("Rule", style="red")
    table.add_column("Location", style="cyan")
    table.add_column("Detail")
    for violation in violations:
        table.add_row(violation.rule, violation.location, violation.message)
    console.print(table)
    sys.exit(1)


@cli.command()
@click.argument("name", required=False)
def providers(name: Optional[str]) -> None:
    """List providers, or show how to supply credentials for one."""
    if name:
        info = find_provider_info(name)
        if info is None:
            err_console.print(f"[red]Error:[/red] unknown provider '{name}'", highlight=False, soft_wrap=True)
            sys.exit(1)
        console.print(f"[bold]{info.display_name}[/bold] ({info.provider.value})\n")
        console.print("[cyan]Environment variables[/cyan]")
        click.echo(info.environment_variables_help)
        console.print(f"\n[cyan]Provider config file[/cyan] ({info.config_file_name})")
        click.echo(info.config_file_example)
        if info.docs_url:
            click.echo(f"\nDocs: {info.docs_url}")
        return

    table = Table(title="Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Name")
    table.add_column("Config file", style="dim")
    table.add_column("Environment variables")
    for info in all_providers():
        table.add_row(
            info.provider.value,
            info.display_name,
            info.config_file_name,
            ", ".join(info.environment_variables),
        )
    console.print(table)


@cli.command()
@click.option(
    "-p",
    "--provider-config",
    "provider_config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Provider credentials YAML file",
)
@click.option("--provider", "provider_name", required=True, help="Provider the file belongs to")
@click.option(
    "--workdir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for credential files (kubeconfig); a temporary directory by default",
)
def env(provider_config_path: Path, provider_name: str, workdir: Optional[Path]) -> None:
    """Print shell exports carrying a provider config's credentials.

    Example:
        eval "$(openmcf env -p gcp-provider-config.yaml --provider gcp)"
    """
    info = find_provider_info(provider_name)
    if info is None:
        err_console.print(f"[red]Error:[/red] unknown provider '{provider_name}'", highlight=False, soft_wrap=True)
        sys.exit(1)
    try:
        raw = read_yaml_mapping(provider_config_path, "provider config")
        try:
            record = info.credential_model.model_validate(raw)
        except ValidationError as e:
            err_console.print("[red]Error:[/red] invalid provider config", highlight=False, soft_wrap=True)
            click.echo(invalid_provider_config_guidance(info, e), err=True)
            sys.exit(1)
        if workdir is not None:
            workdir.mkdir(parents=True, exist_ok=True)
        variables = credential_environment(record, workdir)
    except OpenMCFError as e:
        report_failure(e)
        return
    for key in sorted(variables):
        click.echo(f"export {key}={shlex.quote(variables[key])}")


@cli.command()
def kinds() -> None:
    """List resource kinds with their apiVersion and exported outputs."""
    table = Table(title="Resource kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("apiVersion")
    table.add_column("Provider")
    table.add_column("Outputs", style="green")
    for model in KindRegistry.all_models():
        keys: List[str] = sorted(OutputRegistry.keys_for(model.KIND) or [])
        table.add_row(model.KIND, model.API_VERSION, model.PROVIDER.value, ", ".join(keys) or "-")
    console.print(table)


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
