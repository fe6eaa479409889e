from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Sequence

from .cli_shared import CliLog

AWS_PROGRAM = "aws"


@dataclass(frozen=True)
class InvocationContext:
    region: str | None = None
    profile: str | None = None


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    stderr: str
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        # Exit status is deliberately not consulted.
        return self.stderr == ""


def build_invocation(tokens: Sequence[str], context: InvocationContext) -> tuple[str, ...]:
    prefix: list[str] = []
    if context.region:
        prefix += ["--region", context.region]
    if context.profile:
        prefix += ["--profile", context.profile]
    return tuple(prefix) + tuple(str(t) for t in tokens)


class CommandRunner:
    """Runs ``aws`` synchronously and reports a stderr-based verdict.

    There is no timeout and no dry-run: whatever the command does to the
    target environment happens.
    """

    def __init__(
        self,
        context: InvocationContext,
        *,
        log: CliLog | None = None,
        program: str = AWS_PROGRAM,
    ) -> None:
        self.context = context
        self.log = log
        self.program = program

    def run(self, tokens: Sequence[str]) -> CommandResult:
        invocation = build_invocation(tokens, self.context)
        try:
            proc = subprocess.run(
                [self.program, *invocation],
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            result = CommandResult(stdout="", stderr=f"failed to start {self.program!r}: {e}")
        else:
            result = CommandResult(
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
                returncode=proc.returncode,
            )
        # stderr is reported by the caller once the verdict is known.
        if self.log is not None and result.stdout:
            self.log.detail(result.stdout.rstrip("\n"))
        return result
