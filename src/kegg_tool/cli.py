"""Command-line interface for the KEGG tool."""

import json
import sys
from pathlib import Path

import click

from .cli_utils import echo, parse_arguments, set_quiet_mode
from .config import Config, create_example_config, get_default_config_path
from .logging_config import setup_logging
from .service import KEGGService


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file path')
@click.option('--base-url', help='KEGG REST base URL')
@click.option('--timeout', type=float, help='Timeout in seconds for each KEGG call')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress all output except results and errors')
@click.option('--no-colors', is_flag=True, help='Disable colored log output')
@click.pass_context
def cli(ctx, config_file, base_url, timeout, verbose, quiet, no_colors):
    """KEGG REST API tools.

    Examples:
        kegg-tool call search_pathways --arg query=glycolysis --arg max_results=5
        kegg-tool read kegg://compound/C00031
    """
    if quiet and verbose:
        click.echo("Error: Cannot use both --quiet and --verbose", err=True)
        ctx.exit(1)

    set_quiet_mode(quiet)

    config_path = Path(config_file) if config_file else get_default_config_path()
    cfg = Config.from_file(config_path)
    cfg.merge_env_vars()
    cfg.merge_cli_args(base_url=base_url, timeout=timeout, verbose=verbose, no_colors=no_colors)

    setup_logging(
        level=cfg.logging.level,
        log_dir=cfg.logging.log_dir,
        max_bytes=cfg.logging.max_bytes,
        backup_count=cfg.logging.backup_count,
        console=cfg.logging.console,
        colors=cfg.logging.colors,
        quiet=quiet
    )

    ctx.obj = KEGGService(cfg.gateway_config())


@cli.command()
@click.pass_obj
def tools(service):
    """List the available operations and their argument schemas."""
    click.echo(json.dumps(service.list_tools(), indent=2))


@cli.command()
@click.pass_obj
def templates(service):
    """List the resource URI templates."""
    click.echo(json.dumps(service.list_resource_templates(), indent=2))


@cli.command()
@click.argument('name')
@click.option('--args', 'args_json', help='Arguments as a JSON object')
@click.option('--arg', 'pairs', multiple=True, metavar='KEY=VALUE', help='Single argument (repeatable)')
@click.pass_obj
def call(service, name, args_json, pairs):
    """Invoke operation NAME and print its JSON result."""
    arguments = parse_arguments(args_json, pairs, service.text_arguments(name))
    response = service.call_tool(name, arguments)
    click.echo(response.to_json())
    if response.is_error:
        sys.exit(1)


@cli.command()
@click.argument('uri')
@click.pass_obj
def read(service, uri):
    """Resolve a kegg:// resource URI and print its JSON content."""
    response = service.read_resource(uri)
    click.echo(response.to_json())
    if response.is_error:
        sys.exit(1)


@cli.command('generate-config')
@click.argument('path', type=click.Path(), required=False)
def generate_config(path):
    """Write an example configuration file."""
    config_path = create_example_config(Path(path) if path else None)
    echo(f"Generated example configuration file: {config_path}")


if __name__ == '__main__':
    cli()
