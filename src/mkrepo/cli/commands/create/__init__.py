from __future__ import annotations

import typer

from mkrepo.config import ConfigError, resolve_config
from mkrepo.executor import ExecutorError, build_executor
from mkrepo.logging import configure_logging
from mkrepo.plan import PlanError, build_plan
from mkrepo.templates import TemplateStore


def create_command(
    repository: str,
    *,
    author: str | None,
    service: str | None,
    message: str | None,
    dry_run: bool,
    project: str | None,
    verbose: bool = False,
) -> None:
    configure_logging(verbose=verbose)

    try:
        config = resolve_config()
        plan = build_plan(
            config,
            author,
            service,
            repository_name=repository,
            first_commit_message=message,
            project_name=project,
        )
    except (ConfigError, PlanError) as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc

    executor = build_executor(
        dry_run, templates=TemplateStore(config.template_dir)
    )
    try:
        executor.execute(plan)
    except ExecutorError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc

    if not dry_run:
        typer.echo(f"Created repository at {plan[0].path}")
