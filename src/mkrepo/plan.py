from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Union

from mkrepo.config import Config
from mkrepo.paths import normalize

DEFAULT_FIRST_COMMIT_MESSAGE = "Initial commit"


class PlanError(RuntimeError):
    pass


class MissingRoot(PlanError):
    def __init__(self) -> None:
        super().__init__(
            "Missing repository root. Set 'ghq.root' in git config or GHQ_ROOT."
        )


class MissingAuthor(PlanError):
    def __init__(self) -> None:
        super().__init__(
            "Missing author. Pass --author or set 'mkrepo.username' or 'user.name'."
        )


class InvalidPathSegment(PlanError):
    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: must be a single path segment.")
        self.field = field
        self.value = value


@dataclass(frozen=True)
class CreateDirectory:
    path: str

    def describe(self) -> str:
        return f"Create directory {self.path}"


@dataclass(frozen=True)
class InitializeGit:
    path: str
    first_commit_message: str

    def describe(self) -> str:
        return (
            f"Initialize git repository in {self.path}"
            f" with first commit {self.first_commit_message!r}"
        )


@dataclass(frozen=True)
class ExpandProjectTemplate:
    path: str
    template_name: str

    def describe(self) -> str:
        return f"Expand project template {self.template_name!r} into {self.path}"


Command = Union[CreateDirectory, InitializeGit, ExpandProjectTemplate]


def build_plan(
    config: Config,
    author: str | None,
    service_name: str | None,
    repository_name: str,
    first_commit_message: str | None = None,
    project_name: str | None = None,
) -> tuple[Command, ...]:
    """Turn configuration and per-invocation overrides into an ordered plan.

    Never touches the filesystem or git. Identical inputs always yield an
    identical plan.
    """
    if config.root_path is None:
        raise MissingRoot()
    resolved_author = author or config.default_author_alias or config.user_name
    if not resolved_author:
        raise MissingAuthor()
    service = service_name or config.default_service
    message = first_commit_message or DEFAULT_FIRST_COMMIT_MESSAGE

    _require_segment("service", service)
    _require_segment("author", resolved_author)
    _require_segment("repository name", repository_name)
    repository_path = normalize(
        os.path.join(str(config.root_path), service, resolved_author, repository_name)
    )
    commands: list[Command] = [
        CreateDirectory(path=repository_path),
        InitializeGit(path=repository_path, first_commit_message=message),
    ]
    if project_name:
        commands.append(
            ExpandProjectTemplate(path=repository_path, template_name=project_name)
        )
    return tuple(commands)


def _require_segment(field: str, value: str) -> None:
    # Each of service, author and repository must stay one directory level.
    separators = {os.sep, os.altsep} - {None}
    if (
        not value
        or value in {".", ".."}
        or os.path.isabs(value)
        or any(separator in value for separator in separators)
    ):
        raise InvalidPathSegment(field, value)
