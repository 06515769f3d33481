from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import structlog

logger = structlog.get_logger(__name__)

# `git config --get` exits with 1 when the key is not set.
CONFIG_KEY_MISSING = 1


@dataclass(frozen=True)
class GitResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def detail(self) -> str:
        return self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"


class GitClient:
    """Thin wrapper around the git executable.

    Every call blocks until git exits. Failures are reported through the
    return value, never raised, so callers decide how to classify them.
    """

    def __init__(self, git_binary: str = "git") -> None:
        self.git_binary = git_binary

    def toplevel(self, path: Path) -> Path | None:
        """Root of the work tree containing ``path``, or None outside one."""
        result = self._run(["rev-parse", "--show-toplevel"], cwd=path)
        value = result.stdout.strip()
        if not result.ok or not value:
            return None
        return Path(value)

    def init(self, path: Path) -> GitResult:
        return self._run(["init"], cwd=path)

    def commit(self, path: Path, message: str, allow_empty: bool = True) -> GitResult:
        args = ["commit", "-m", message]
        if allow_empty:
            args.insert(1, "--allow-empty")
        return self._run(args, cwd=path)

    def config_get(self, key: str) -> GitResult:
        return self._run(["config", "--get", key])

    def _run(self, args: Sequence[str], cwd: Path | None = None) -> GitResult:
        command = [self.git_binary, *args]
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.debug("git could not be started", command=command, error=str(exc))
            return GitResult(returncode=-1, stdout="", stderr=str(exc))
        if result.returncode != 0:
            logger.debug(
                "git exited with an error",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
        return GitResult(
            returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )


def has_existing_repository(path: Path, git: GitClient) -> bool:
    if not path.is_dir():
        return False
    # A parent work tree (a dotfiles repo above the root) does not count.
    top = git.toplevel(path)
    return top is not None and top.resolve() == path.resolve()
