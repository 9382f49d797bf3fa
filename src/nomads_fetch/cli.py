"""Command-line interface for NOMADS grib fetches."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import rich_click as click
import yaml

from nomads_fetch.config.schema import FetchConfig
from nomads_fetch.exceptions import NomadsFetchError
from nomads_fetch.reconcile import FetchMode
from nomads_fetch.runner import fetch_run
from nomads_fetch.utils.logging import configure_logger, get_log_file_path, logger
from nomads_fetch.utils.time import format_duration, parse_datetime, parse_duration


class CLIError(click.ClickException):
    """CLI error with formatted message."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        """Return the error message without 'Error:' prefix."""
        return self.message


def _raise_cli_error(message: str, exit_code: int = 1) -> None:
    """Raise a CLIError with the given message."""
    raise CLIError(message, exit_code)


def _load_config(config: Path | None) -> FetchConfig:
    try:
        cfg = FetchConfig.from_yaml(config) if config else FetchConfig()
    except (OSError, ValueError, yaml.YAMLError) as e:
        _raise_cli_error(str(e))
    errors = cfg.validate()
    if errors:
        _raise_cli_error("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))
    return cfg


@click.group()
@click.version_option(package_name="nomads-fetch")
def cli() -> None:
    """Fetch NOAA NOMADS model runs as one grib file per zone."""


@cli.command()
@click.argument("region")
@click.option("--previous", is_flag=True, help="Fetch the run before the latest complete one.")
@click.option("--partial", is_flag=True, help="Fetch the latest run even if it is in progress.")
@click.option("--merge", is_flag=True, help="Fetch only forecasts missing from the run directory.")
@click.option("--refetch", is_flag=True, help="Discard the run directory and fetch everything.")
@click.option("--keep", is_flag=True, help="Keep per-forecast files after assembly.")
@click.option(
    "--threads",
    type=click.IntRange(min=1),
    default=None,
    help="Number of concurrent downloads (default 4).",
)
@click.option("--horizon", type=str, default=None, help="Last forecast to fetch, e.g. 96h.")
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Download tree root (default ~/Downloads/gribs).",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file.",
)
@click.option(
    "--backend",
    type=click.Choice(["tiny_retriever", "curl"]),
    default=None,
    help="Download transport.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every attempt and file.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write a DEBUG log to this file.",
)
@click.option(
    "--report",
    "report_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a JSON summary of the fetch to this file.",
)
@click.option("--now", type=str, default=None, hidden=True, help="Override the current time.")
def fetch(
    region: str,
    previous: bool,
    partial: bool,
    merge: bool,
    refetch: bool,
    keep: bool,
    threads: int | None,
    horizon: str | None,
    base_dir: Path | None,
    config: Path | None,
    backend: str | None,
    verbose: bool,
    log_file: Path | None,
    report_file: Path | None,
    now: str | None,
) -> None:
    """Fetch the latest complete model run for a region.

    REGION is a zone identifier, see ``nomads-fetch zones``.
    """
    if merge and refetch:
        _raise_cli_error("--merge and --refetch are mutually exclusive")

    cfg = _load_config(config)
    if base_dir is not None:
        cfg = replace(cfg, base_dir=base_dir)
    if backend is not None:
        cfg = replace(cfg, backend=backend)

    configure_logger(level="DEBUG" if verbose else cfg.log_level, file=log_file or cfg.log_file)
    if get_log_file_path() is not None:
        logger.info("Logging to %s", get_log_file_path())

    try:
        horizon_td = parse_duration(horizon) if horizon else None
        now_dt = parse_datetime(now) if now else None
    except ValueError as e:
        _raise_cli_error(str(e))

    mode = FetchMode.MERGE if merge else FetchMode.REFETCH if refetch else FetchMode.NORMAL
    try:
        report = fetch_run(
            region,
            config=cfg,
            now=now_dt,
            previous=previous,
            partial=partial,
            mode=mode,
            keep=keep or None,
            horizon=horizon_td,
            workers=threads,
        )
    except NomadsFetchError as e:
        _raise_cli_error(str(e), e.exit_code)
    except ValueError as e:
        _raise_cli_error(str(e))

    if report_file is not None:
        report.save(report_file)
        logger.info("Report saved to %s", report_file)
    if report.success:
        logger.info(f"Run {report.label} complete.")


@cli.command()
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file with extra zones.",
)
def zones(config: Path | None) -> None:
    """List available regions."""
    catalog = _load_config(config).build_catalog()
    width = max(len(name) for name in catalog.zones)
    for name in sorted(catalog.zones):
        zone = catalog.zones[name]
        click.echo(f"  {name:<{width}}  {zone.description} [{zone.model}]")


@cli.command()
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file with extra models.",
)
def models(config: Path | None) -> None:
    """List available models and their publication schedule."""
    catalog = _load_config(config).build_catalog()
    width = max(len(name) for name in catalog.models)
    for name in sorted(catalog.models):
        model = catalog.models[name]
        click.echo(
            f"  {name:<{width}}  every {format_duration(model.run_cadence)}, "
            f"step {format_duration(model.forecast_cadence)}, "
            f"horizon {format_duration(model.horizon)}, "
            f"available +{format_duration(model.start_lag)}..+{format_duration(model.end_lag)}"
        )


def main() -> None:
    """Run the main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
