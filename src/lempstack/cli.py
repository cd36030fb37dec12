import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_PROJECT_DIR
from .core import BootstrapError, LempBootstrapper
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--project-dir",
    required=False,
    type=click.Path(file_okay=False),
    help=f"Directory holding the generated stack (default: ./{DEFAULT_PROJECT_DIR}).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .lempstack.yml if present.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--keep-volumes",
    is_flag=True,
    default=None,
    help="Do not remove volumes during the initial teardown.",
)
@click.option(
    "--readiness-attempts",
    required=False,
    type=int,
    default=None,
    help="Maximum readiness checks per service (default: 10).",
)
@click.option(
    "--readiness-initial-delay",
    required=False,
    type=float,
    default=None,
    help="First backoff delay in seconds between readiness checks (default: 1.0).",
)
@click.option(
    "--readiness-max-delay",
    required=False,
    type=float,
    default=None,
    help="Upper bound in seconds for the backoff delay (default: 15.0).",
)
@click.option(
    "--command-timeout",
    required=False,
    type=float,
    default=None,
    help="Timeout in seconds for each external command (default: none).",
)
@click.option(
    "--log-tail",
    required=False,
    type=int,
    default=None,
    help="Number of log lines shown per service in the status report (default: 50).",
)
@click.option("--skip-status", is_flag=True, default=None, help="Skip the final status report.")
@click.option(
    "--report-file",
    required=False,
    type=click.Path(),
    help="Path of the JSON run report (default: <project-dir>/lempstack-run.json).",
)
def main(
    project_dir,
    config,
    verbose,
    log_file,
    keep_volumes,
    readiness_attempts,
    readiness_initial_delay,
    readiness_max_delay,
    command_timeout,
    log_tail,
    skip_status,
    report_file,
):
    """Bootstrap a local nginx + PHP-FPM + MariaDB stack with a fresh Laravel app."""
    logger = logging.getLogger("lempstack")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".lempstack.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    project_dir = _resolve_option(project_dir, config_values, "project_dir", default=DEFAULT_PROJECT_DIR)
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")
    keep_volumes = bool(_resolve_option(keep_volumes, config_values, "keep_volumes", default=False))
    readiness_attempts = int(
        _resolve_option(readiness_attempts, config_values, "readiness_attempts", default=10)
    )
    readiness_initial_delay = float(
        _resolve_option(
            readiness_initial_delay,
            config_values,
            "readiness_initial_delay",
            default=1.0,
        )
    )
    readiness_max_delay = float(
        _resolve_option(readiness_max_delay, config_values, "readiness_max_delay", default=15.0)
    )
    command_timeout = _resolve_option(command_timeout, config_values, "command_timeout")
    if command_timeout is not None:
        command_timeout = float(command_timeout)
    log_tail = int(_resolve_option(log_tail, config_values, "log_tail", default=50))
    skip_status = bool(_resolve_option(skip_status, config_values, "skip_status", default=False))
    report_file = _resolve_option(report_file, config_values, "report_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        bootstrapper = LempBootstrapper(
            project_dir=str(project_dir),
            keep_volumes=keep_volumes,
            readiness_attempts=readiness_attempts,
            readiness_initial_delay=readiness_initial_delay,
            readiness_max_delay=readiness_max_delay,
            command_timeout=command_timeout,
            log_tail=log_tail,
            skip_status=skip_status,
            report_file=report_file,
        )
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(bootstrapper.run())


if __name__ == "__main__":
    main()
