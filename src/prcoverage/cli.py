"""prcoverage CLI: top-level command group."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path

import click
import yaml
from rich.logging import RichHandler

from prcoverage import __version__
from prcoverage.adapters.coverage.clover import CloverParseError
from prcoverage.config import CoverageOptions, load_config, validate_config
from prcoverage.orchestrator import ReportContext, report_coverage
from prcoverage.reporters.github_comment import create_reporter_from_env
from prcoverage.reporters.terminal import console, reporter
from prcoverage.utils.ci_context import detect_ci_context
from prcoverage.utils.git import (
    ChangedFiles,
    GitHubAPIError,
    GitOperationError,
    get_changed_files,
    get_head_sha,
)

logger = logging.getLogger(__name__)

_DEFAULT_BASE_REF = "origin/main"


def _configure_logging(*, verbose: bool) -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(RichHandler(console=console, show_path=False))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_options(path: str) -> CoverageOptions:
    options = load_config(path)
    errors = validate_config(options)
    if errors:
        reporter.print_error(f"Found {len(errors)} configuration error(s):")
        for idx, error in enumerate(errors, start=1):
            console.print(f"  {idx}. [red]{error}[/red]")
        raise click.Abort
    return options


def _resolve_changes(
    root: Path,
    base: str | None,
    created: tuple[str, ...],
    modified: tuple[str, ...],
) -> ChangedFiles:
    """Use explicit paths when given, otherwise diff against the base ref."""
    if created or modified:
        return ChangedFiles(created=list(created), modified=list(modified))

    base_ref = base or detect_ci_context().base_ref or _DEFAULT_BASE_REF
    return get_changed_files(root, base_ref)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="prcoverage")
def cli(*, verbose: bool) -> None:
    """prcoverage: Clover coverage reports for pull requests."""
    _configure_logging(verbose=verbose)


@cli.command("report")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option("--report-path", default=None, help="Clover report path relative to the root.")
@click.option(
    "--base",
    default=None,
    help="Base ref to diff against (default: the PR base branch, else origin/main).",
)
@click.option("--created", multiple=True, help="Created file (repeatable). Skips git diff.")
@click.option("--modified", multiple=True, help="Modified file (repeatable). Skips git diff.")
@click.option("--sha", default=None, help="Commit SHA used for file links.")
@click.option(
    "--show-all-files/--changed-files-only",
    default=None,
    help="Report every file in the report, or only changed ones.",
)
@click.option("--max-rows", type=int, default=None, help="Rows shown before collapsing.")
@click.option("--summary", is_flag=True, help="Also print a terminal summary table.")
@click.option("--post", is_flag=True, help="Upsert the report as a GitHub PR comment.")
def report_command(
    path: str,
    report_path: str | None,
    base: str | None,
    created: tuple[str, ...],
    modified: tuple[str, ...],
    sha: str | None,
    max_rows: int | None,
    *,
    show_all_files: bool | None,
    summary: bool,
    post: bool,
) -> None:
    """Render the coverage report for the files changed in this branch.

    Example:
      prcoverage report --base origin/main
      prcoverage report --created src/new.js --modified src/old.js
    """
    root = Path(path)
    options = _load_options(path).with_overrides(
        report_path=report_path,
        show_all_files=show_all_files,
        max_rows=max_rows,
    )

    try:
        changes = _resolve_changes(root, base, created, modified)
    except GitOperationError as exc:
        reporter.print_error(str(exc))
        raise click.Abort from exc

    commit_sha = sha or detect_ci_context().commit_sha or get_head_sha(root)

    if post:
        github = create_reporter_from_env()
        if github is None:
            reporter.print_error(
                "--post requires a GitHub Actions pull_request run and GITHUB_TOKEN"
            )
            raise click.Abort
        comment_reporter, pr_info = github

        def markdown_sink(markdown: str) -> None:
            result = comment_reporter.post_report(pr_info, markdown)
            reporter.print_success(f"Posted coverage report: {result['comment_url']}")

    else:
        markdown_sink = click.echo

    context = ReportContext(
        markdown=markdown_sink,
        warn=reporter.print_warning,
        created_files=changes.created,
        modified_files=changes.modified,
        commit_sha=commit_sha,
        root=root,
    )

    try:
        run = asyncio.run(report_coverage(context, options))
    except CloverParseError as exc:
        reporter.print_error(str(exc))
        raise click.Abort from exc
    except GitHubAPIError as exc:
        reporter.print_error(f"Failed to post coverage report: {exc}")
        raise click.Abort from exc

    if run is None:
        reporter.print_info("No coverage report posted.")
        return

    if summary:
        reporter.print_coverage_summary(run.files, options.threshold, root)


@cli.group("config")
def config_group() -> None:
    """Inspect `.prcoverage.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option("--json-output", "as_json", is_flag=True, help="Output as JSON instead of YAML.")
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration, defaults included."""
    config_dict = asdict(load_config(path))
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_validate(path: str) -> None:
    """Validate `.prcoverage.yml`."""
    _load_options(path)
    reporter.print_success("Configuration is valid!")
