# tmplt/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from click_option_group import optgroup
import structlog

from tmplt import __version__ as app_version
from tmplt.config.loader import (
    config_to_render_options, load_and_merge_configs, parse_set_assignments
)
from tmplt.config.settings import DEFAULT_ENCODING, DEFAULT_LOG_LEVEL, RenderConfig
from tmplt.core.output import write_to_file, write_to_stdout
from tmplt.core.pipeline import RenderPipeline
from tmplt.exceptions import FileAccessError, TmpltError
from tmplt.logging_setup import configure_logging

log = structlog.get_logger(__name__)

LOG_LEVEL_CHOICES = ["debug", "info", "warning", "error", "critical"]

# cli parameter name -> RenderConfig attribute
CLI_PARAM_TO_RENDERCONFIG_ATTR: Dict[str, str] = {
    "base_dir": "base_dir",
    "values_files": "values_files",
    "output_file": "output_file",
    "encoding": "encoding",
    "contain_paths": "contain_paths",
}

def _from_command_line(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) == click.core.ParameterSource.COMMANDLINE

def _build_render_config(ctx: click.Context, cli_params: Dict[str, Any], toml_data: Dict[str, Any]) -> RenderConfig:
    # config file settings first, command line wins.
    effective_options = config_to_render_options(toml_data)
    for param_name, attr in CLI_PARAM_TO_RENDERCONFIG_ATTR.items():
        if _from_command_line(ctx, param_name) or attr not in effective_options:
            value = cli_params[param_name]
            if param_name == "values_files":
                value = list(value)
            if value is not None:
                effective_options[attr] = value

    set_values = dict(effective_options.get("set_values", {}))
    set_values.update(parse_set_assignments(list(cli_params["set_assignments"])))
    effective_options["set_values"] = set_values

    template_path: Optional[Path] = cli_params["template"]
    if template_path is not None and str(template_path) == "-":
        template_path = None
    return RenderConfig(template_path=template_path, **effective_options)

def _run_render_flow(config: RenderConfig, template_source: Optional[str]):
    log.info("render_orchestration_started", base_dir=str(config.base_dir))
    pipeline = RenderPipeline(config)
    rendered = pipeline.generate(template_source)

    if config.output_file:
        write_to_file(config.output_file, rendered)
        click.echo(f"Info: Output written to: {config.output_file}", err=True)
    else:
        log.info("writing_final_output_to_stdout")
        write_to_stdout(rendered)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("template", type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path))
@optgroup.group("Input Options", help="Where files, values and settings come from.")
@optgroup.option("-d", "--dir", "base_dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None, help="Base directory for file lookups. Default: current directory.")
@optgroup.option("-f", "--values", "values_files", multiple=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML values file(s), merged in order.")
@optgroup.option("--set", "set_assignments", multiple=True, metavar="KEY=VALUE", help="Set a value, e.g. --set image.tag=1.2 (applied after values files).")
@optgroup.option("--contain/--allow-escape", "contain_paths", default=True, help="Reject (default) or allow file lookups outside the base directory.")
@optgroup.group("Output Options", help="Where the rendered text goes.")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write output to a file instead of stdout.")
@optgroup.option("--encoding", "encoding", default=DEFAULT_ENCODING, show_default=True, help="Text encoding used to decode files read by templates.")
@optgroup.group("Application Behavior", help="Logging and diagnostics.")
@optgroup.option("-v", "--verbose", "verbose", is_flag=True, default=False, help="Enable info-level logging.")
@optgroup.option("--log-level", "log_level", type=click.Choice(LOG_LEVEL_CHOICES), default=None, help=f"Set the log level explicitly. Default: {DEFAULT_LOG_LEVEL}.")
@optgroup.option("--json-logs", "json_logs", is_flag=True, default=False, help="Emit log records as JSON lines on stderr.")
@click.version_option(app_version, "--version", prog_name="tmplt")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """Render a Handlebars TEMPLATE with file access and YAML/JSON/TOML helpers.

    Use '-' as TEMPLATE to read the template from stdin.
    """
    log_level = cli_params["log_level"] or ("info" if cli_params["verbose"] else DEFAULT_LOG_LEVEL)
    configure_logging(log_level, json_logs=cli_params["json_logs"])

    try:
        toml_data = load_and_merge_configs()
        if toml_data.get("log_level") and not cli_params["log_level"] and not cli_params["verbose"]:
            configure_logging(str(toml_data["log_level"]), json_logs=cli_params["json_logs"])

        config = _build_render_config(ctx, cli_params, toml_data)
        template_source = None
        if config.template_path is None:
            template_source = click.get_text_stream("stdin").read()
        _run_render_flow(config, template_source)

    except FileAccessError as e:
        # a referenced file is missing or unreadable: abort without partial output.
        log.error("fatal_file_access_error", path=e.path, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except TmpltError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
