from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

from . import operations
from .cli_shared import UsageError
from .operations import OperationContext, OperationResult

Handler = Callable[[OperationContext], OperationResult]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    usage: str
    lifecycle_events: tuple[str, ...]
    handler: Handler


COMMANDS: Mapping[str, CommandSpec] = MappingProxyType(
    {
        spec.name: spec
        for spec in (
            CommandSpec(
                name="syncToS3",
                usage="Deploys the `s3LocalPath` directory to your bucket",
                lifecycle_events=("sync",),
                handler=operations.sync_directory,
            ),
            CommandSpec(
                name="emptyBucket",
                usage="Empties the deployed bucket",
                lifecycle_events=("empty",),
                handler=operations.empty_bucket,
            ),
            CommandSpec(
                name="bucketInfo",
                usage="Fetches and prints out the deployed CloudFront bucket names",
                lifecycle_events=("bucketInfo",),
                handler=operations.bucket_info,
            ),
            CommandSpec(
                name="domainInfo",
                usage="Fetches and prints out the deployed CloudFront domain names",
                lifecycle_events=("domainInfo",),
                handler=operations.domain_info,
            ),
            CommandSpec(
                name="invalidateCloudFrontCache",
                usage="Invalidates CloudFront cache",
                lifecycle_events=("invalidateCache",),
                handler=operations.invalidate_cache,
            ),
        )
    }
)

HOOKS: Mapping[str, str] = MappingProxyType(
    {
        "syncToS3:sync": "syncToS3",
        "before:remove:remove": "emptyBucket",
        "emptyBucket:empty": "emptyBucket",
        "domainInfo:domainInfo": "domainInfo",
        "bucketInfo:bucketInfo": "bucketInfo",
        "invalidateCloudFrontCache:invalidateCache": "invalidateCloudFrontCache",
    }
)


def get_command(name: str) -> CommandSpec:
    spec = COMMANDS.get((name or "").strip())
    if spec is None:
        known = ", ".join(COMMANDS)
        raise UsageError(f"unknown command {name!r} (known: {known})")
    return spec


def command_for_hook(event: str) -> CommandSpec:
    name = HOOKS.get((event or "").strip())
    if name is None:
        known = ", ".join(HOOKS)
        raise UsageError(f"unknown lifecycle event {event!r} (known: {known})")
    return COMMANDS[name]


def run_operation(name: str, ctx: OperationContext) -> OperationResult:
    return get_command(name).handler(ctx)


def run_hook(event: str, ctx: OperationContext) -> OperationResult:
    return command_for_hook(event).handler(ctx)
