from __future__ import annotations

from typing import Optional

import typer

from mkrepo.cli.commands import create_command

app = typer.Typer(help="Make a ghq style repository directory.")


@app.command()
def create_entry(
    repository: str = typer.Argument(..., help="Repository name."),
    author: Optional[str] = typer.Option(
        None, "--author", "-a", help="Author segment of the path."
    ),
    service: Optional[str] = typer.Option(
        None, "--service", "-s", help="Service segment of the path, e.g. github.com."
    ),
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="First commit message."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Show what would change without writing."
    ),
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Project template to expand."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    create_command(
        repository,
        author=author,
        service=service,
        message=message,
        dry_run=dry_run,
        project=project,
        verbose=verbose,
    )


def main() -> None:
    app()
