from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from .aws_runner import CommandResult


class WebAppOpsError(Exception):
    pass


class UsageError(WebAppOpsError):
    pass


class OpError(WebAppOpsError):
    pass


class ResolutionFailed(OpError):
    def __init__(self, stack: str, reason: str) -> None:
        super().__init__(f"cloudformation describe-stacks failed for stack {stack!r}: {reason}")
        self.stack = stack
        self.reason = reason


class OutputNotFound(OpError):
    def __init__(self, key: str, stack: str) -> None:
        super().__init__(f"Could not find output {key} on stack {stack}")
        self.key = key
        self.stack = stack


class CommandFailed(OpError):
    def __init__(self, message: str, result: CommandResult | None = None) -> None:
        super().__init__(message)
        self.result = result


class DistributionNotMatched(OpError):
    def __init__(self, domain: str | None) -> None:
        shown = domain if domain else "Not Found"
        super().__init__(f"Could not find distribution with domain {shown}")
        self.domain = domain


WEBAPP_STAGE = "WEBAPP_STAGE"
WEBAPP_SERVICE = "WEBAPP_SERVICE"
WEBAPP_STACK = "WEBAPP_STACK"
WEBAPP_S3_LOCAL_PATH = "WEBAPP_S3_LOCAL_PATH"

DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


@dataclass(frozen=True)
class GlobalOpts:
    stage: str
    region: str
    stack: str
    profile: str | None = None
    quiet: bool = False


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def _require_str(val: str | None, name: str, *, hint: str) -> str:
    v = (val or "").strip()
    if not v:
        raise UsageError(f"missing {name} ({hint})")
    return v


class CliLog:
    """Human-readable progress lines on stderr.

    ``log`` always prints; ``detail`` is dropped in quiet mode and carries
    echoed command output.
    """

    def __init__(self, console: Console | None = None, *, quiet: bool = False) -> None:
        self.console = console or Console(stderr=True, highlight=False, soft_wrap=True)
        self.quiet = quiet

    def log(self, msg: str) -> None:
        self.console.print(escape(msg))

    def detail(self, msg: str) -> None:
        if not self.quiet:
            self.console.print(escape(msg))

    def error(self, msg: str) -> None:
        self.console.print(f"[bold red]error:[/bold red] {escape(msg)}")
