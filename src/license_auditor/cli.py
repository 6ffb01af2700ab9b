from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from .compliance import evaluate_compliance
from .dependency_scanner import enumerate_packages
from .errors import LicenseAuditorError
from .license_resolver import resolve_licenses
from .policy import load_policy
from .reporting import (
    EXIT_OK,
    exit_status,
    render_counts,
    render_violations,
    write_github_check,
    write_report,
)
from .types import AuditSettings, ComplianceReport, DeepMode, DependencyMode, ShallowMode

EXIT_INPUT_ERROR = 2
LOG_FORMAT = "[%(levelname)s] %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=level)
    else:
        root.setLevel(level)


def _select_mode(deep: bool, only_prod: bool) -> DependencyMode:
    if deep:
        if only_prod:
            logger.warning("--only-prod has no effect together with --deep")
        return DeepMode()
    return ShallowMode(include_dev=not only_prod)


def run_audit(settings: AuditSettings) -> ComplianceReport:
    """Load the policy, enumerate and resolve packages, and evaluate them."""

    policy = load_policy(settings.config_path)
    packages = enumerate_packages(settings.project_dir, settings.mode)
    resolved = resolve_licenses(
        settings.project_dir,
        packages,
        max_workers=settings.max_workers,
        read_timeout=settings.read_timeout,
    )
    return evaluate_compliance(resolved, policy)


@click.command()
@click.option("--deep", is_flag=True, help="Audit every installed package, not only declared ones.")
@click.option(
    "--only-prod",
    is_flag=True,
    help="Audit production dependencies only (ignored with --deep).",
)
@click.option(
    "--count",
    "count_only",
    is_flag=True,
    help="Only print license counts; never fail on violations.",
)
@click.option(
    "--config",
    type=str,
    help="Policy file (must end in .json; defaults to allowed-licenses.json).",
)
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    default=".",
    show_default=True,
    help="Project root holding package.json and node_modules.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    help="Maximum concurrent manifest reads; defaults to LICENSE_AUDITOR_WORKERS or 16.",
)
@click.option(
    "--read-timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds to wait for each manifest read; defaults to LICENSE_AUDITOR_READ_TIMEOUT or 10.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Also write the full report to this file.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "markdown", "md", "html"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Format of the report written with --output.",
)
@click.option(
    "--github-check-output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write a GitHub Check-style JSON summary for PR gating.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostics written to stderr.",
)
def main(
    deep: bool,
    only_prod: bool,
    count_only: bool,
    config: Optional[str],
    project_dir: str,
    workers: Optional[int],
    read_timeout: Optional[float],
    output: Optional[str],
    fmt: str,
    github_check_output: Optional[str],
    log_level: str,
) -> None:
    """Check dependency licenses against an allow-list."""
    _configure_logging(log_level)

    settings = AuditSettings.build(
        project_dir=Path(project_dir),
        mode=_select_mode(deep, only_prod),
        config=config,
        count_only=count_only,
        max_workers=workers,
        read_timeout=read_timeout,
    )

    try:
        report = run_audit(settings)
    except LicenseAuditorError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(EXIT_INPUT_ERROR)

    click.echo(render_counts(report))

    if output:
        write_report(report, fmt, Path(output))
    if github_check_output:
        write_github_check(Path(github_check_output), report, count_only=settings.count_only)

    status = exit_status(report, settings.count_only)
    if status != EXIT_OK:
        click.echo(render_violations(report))
        click.echo("Some dependencies use licenses that are not allowed.", err=True)
        raise SystemExit(status)


if __name__ == "__main__":
    main()
