# renderkit/cli/interface.py
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
import structlog

from renderkit import __version__ as app_version
from renderkit.cli.console_output import build_name_tree, print_template_table
from renderkit.config.loader import load_options
from renderkit.config.settings import Delims, HTMLOptions, Options
from renderkit.core.walker import compile_templates
from renderkit.core.writer import ResponseRecorder
from renderkit.exceptions import ConfigError, RenderKitError
from renderkit.logging_setup import configure_logging
from renderkit.render import Render

log = structlog.get_logger(__name__)

def _build_options(cli_params: Dict[str, Any]) -> Options:
    # config file values first, then anything given on the command line.
    overrides: Dict[str, Any] = {}
    if cli_params.get("directory"): overrides["directory"] = cli_params["directory"]
    if cli_params.get("extensions"): overrides["extensions"] = list(cli_params["extensions"])
    if cli_params.get("delims"):
        left, right = cli_params["delims"]
        overrides["delims"] = Delims(left=left, right=right)
    if cli_params.get("no_autoescape"): overrides["autoescape"] = False
    return load_options(cli_params.get("config_dir"), **overrides)

def _parse_binding(data_json: Optional[str], user_vars: Tuple[str, ...]) -> Any:
    binding: Any = None
    if data_json is not None:
        source = sys.stdin.read() if data_json == "-" else data_json
        try:
            binding = json.loads(source)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="--data")
    if user_vars:
        if binding is None: binding = {}
        if not isinstance(binding, dict):
            raise click.BadParameter("--var can only be combined with a JSON object", param_hint="--var")
        for item in user_vars:
            if "=" not in item:
                raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--var")
            key, value = item.split("=", 1)
            binding[key.strip()] = value
    return binding


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@optgroup.group("Template Source Options", help="Where templates are compiled from.")
@optgroup.option("-d", "--directory", "directory", default=None, help="Template root directory. Default: 'templates'.")
@optgroup.option("-e", "--extension", "extensions", multiple=True, help="Extension to compile, repeatable. Default: .tmpl.")
@optgroup.option("--delims", "delims", nargs=2, metavar="LEFT RIGHT", default=None, help="Expression delimiters. Default: {{ }}.")
@optgroup.option("--no-autoescape", "no_autoescape", is_flag=True, default=False, help="Disable HTML autoescaping.")
@optgroup.group("Application Behavior", help="Configuration and logging.")
@optgroup.option("--config-dir", "config_dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None, help="Directory searched for renderkit.toml / pyproject.toml. Default: cwd.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="renderkit", prog_name="renderkit", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, **cli_params: Any):
    """renderkit: compile a template directory and render templates from it."""
    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs", False))

    log.debug("cli_command_invoked", params=cli_params)
    ctx.obj = cli_params


@main_cli_group.command("list")
@click.option("--tree", "as_tree", is_flag=True, default=False, help="Show names as a directory tree.")
@click.pass_obj
def list_command(cli_params: Dict[str, Any], as_tree: bool):
    """Compile the template directory and list every template name."""
    try:
        options = _build_options(cli_params).prepared()
        template_set = compile_templates(options)
    except (ConfigError, RenderKitError) as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    names = template_set.names()
    if as_tree:
        click.echo(build_name_tree(names, options.directory))
    else:
        print_template_table(names, options.directory, RichConsole())


@main_cli_group.command("render")
@click.argument("name")
@click.option("--layout", "layout", default=None, help="Layout template wrapping NAME.")
@click.option("--data", "data_json", default=None, metavar="JSON", help="Binding as JSON ('-' reads stdin).")
@click.option("--var", "user_vars", multiple=True, metavar="KEY=VALUE", help="Add a string field to the binding.")
@click.pass_obj
def render_command(cli_params: Dict[str, Any], name: str, layout: Optional[str], data_json: Optional[str], user_vars: Tuple[str, ...]):
    """Render template NAME to stdout."""
    binding = _parse_binding(data_json, user_vars)
    try:
        renderer = Render(_build_options(cli_params))
    except (ConfigError, RenderKitError) as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if renderer.template_lookup(name) is None:
        click.secho(f"Error: no template named '{name}' in {renderer.opt.directory}", fg="red", err=True)
        sys.exit(1)

    recorder = ResponseRecorder()
    err = renderer.html(recorder, 200, name, binding, HTMLOptions(layout=layout))
    if err is not None:
        click.secho(f"Error: {err}", fg="red", err=True)
        sys.exit(1)
    click.echo(recorder.text, nl=False)
