from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Sequence

import structlog
import typer

from mkrepo.git import GitClient, has_existing_repository
from mkrepo.plan import Command, CreateDirectory, ExpandProjectTemplate, InitializeGit
from mkrepo.templates import TemplateError, TemplateStore

logger = structlog.get_logger(__name__)


class ExecutorError(RuntimeError):
    def __init__(self, command: Command, message: str) -> None:
        super().__init__(message)
        self.command = command


class CreateDirectoryError(ExecutorError):
    pass


class GitInitializeError(ExecutorError):
    pass


class AlreadyExist(GitInitializeError):
    def __init__(self, command: InitializeGit) -> None:
        super().__init__(command, f"{command.path}: git repository already exists.")


class TemplateExpansionError(ExecutorError):
    pass


class Executor(Protocol):
    def execute(self, plan: Sequence[Command]) -> None: ...


class DryRunExecutor:
    """Prints each step of a plan without applying anything."""

    def __init__(self, echo: Callable[[str], None] = typer.echo) -> None:
        self.echo = echo

    def execute(self, plan: Sequence[Command]) -> None:
        self.echo("Dry run: no changes will be written.")
        for command in plan:
            self.echo(f"- {command.describe()}")


class DefaultExecutor:
    """Applies a plan in order and stops at the first failing step.

    Steps that already succeeded are left in place.
    """

    def __init__(
        self,
        git: GitClient | None = None,
        templates: TemplateStore | None = None,
    ) -> None:
        self.git = git or GitClient()
        self.templates = templates or TemplateStore()

    def execute(self, plan: Sequence[Command]) -> None:
        for command in plan:
            if isinstance(command, CreateDirectory):
                self._create_directory(command)
            elif isinstance(command, InitializeGit):
                self._initialize_git(command)
            elif isinstance(command, ExpandProjectTemplate):
                self._expand_project_template(command)
            else:
                raise TypeError(f"Unknown command: {command!r}")
            logger.info("applied step", step=type(command).__name__, path=command.path)

    def _create_directory(self, command: CreateDirectory) -> None:
        try:
            Path(command.path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CreateDirectoryError(
                command, f"Failed to create {command.path}: {exc}"
            ) from exc

    def _initialize_git(self, command: InitializeGit) -> None:
        path = Path(command.path)
        if has_existing_repository(path, self.git):
            raise AlreadyExist(command)
        result = self.git.init(path)
        if not result.ok:
            raise GitInitializeError(
                command, f"{command.path}: git init failed: {result.detail}"
            )
        result = self.git.commit(path, command.first_commit_message, allow_empty=True)
        if not result.ok:
            raise GitInitializeError(
                command, f"{command.path}: git commit failed: {result.detail}"
            )

    def _expand_project_template(self, command: ExpandProjectTemplate) -> None:
        try:
            self.templates.extract(command.template_name, Path(command.path))
        except TemplateError as exc:
            raise TemplateExpansionError(command, str(exc)) from exc


def build_executor(
    dry_run: bool,
    *,
    git: GitClient | None = None,
    templates: TemplateStore | None = None,
) -> Executor:
    if dry_run:
        return DryRunExecutor()
    return DefaultExecutor(git=git, templates=templates)
