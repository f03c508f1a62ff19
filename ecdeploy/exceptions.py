"""Custom exceptions for ec-ova-deploy."""

from __future__ import annotations

from typing import Iterable, List, Sequence


class DeployError(RuntimeError):
    """Raised on unrecoverable configuration or runtime errors."""


class PreconditionError(DeployError):
    """One or more preconditions failed before any external side effect."""

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems: List[str] = list(problems)
        super().__init__("; ".join(self.problems))


class CommandError(DeployError):
    """An external tool exited non-zero."""

    def __init__(self, cmd: Sequence[str], returncode: int) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        super().__init__(f"{self.cmd[0]} exited with status {returncode}")
