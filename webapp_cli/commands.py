from __future__ import annotations

import argparse
import sys

from . import registry
from .aws_runner import CommandRunner, InvocationContext
from .cli_shared import (
    WEBAPP_S3_LOCAL_PATH,
    CliLog,
    GlobalOpts,
    OutputNotFound,
    ResolutionFailed,
    _env_or_none,
    _require_str,
)
from .operations import OperationContext, OperationResult
from .outputs import OutputResolver
from .provider import AwsProvider, account_session


def build_operation_context(g: GlobalOpts, *, local_path: str | None = None) -> OperationContext:
    log = CliLog(quiet=g.quiet)
    provider = AwsProvider(account_session(profile=g.profile, region=g.region))
    return OperationContext(
        resolver=OutputResolver(provider, stack=g.stack),
        runner=CommandRunner(InvocationContext(region=g.region, profile=g.profile), log=log),
        log=log,
        distributions=provider,
        local_path=local_path,
    )


def _resolve_local_path(args: argparse.Namespace) -> str:
    return _require_str(
        getattr(args, "local_path", None) or _env_or_none(WEBAPP_S3_LOCAL_PATH),
        "s3LocalPath",
        hint=f"pass --local-path or set {WEBAPP_S3_LOCAL_PATH}",
    )


def _exit_code(result: OperationResult) -> int:
    # aws command failures are logged and tolerated; failed lookups are not.
    if isinstance(result.error, (ResolutionFailed, OutputNotFound)):
        return 1
    return 0


def _run(name: str, g: GlobalOpts, *, local_path: str | None = None) -> int:
    ctx = build_operation_context(g, local_path=local_path)
    return _exit_code(registry.run_operation(name, ctx))


def cmd_sync_to_s3(args: argparse.Namespace, g: GlobalOpts) -> int:
    return _run("syncToS3", g, local_path=_resolve_local_path(args))


def cmd_empty_bucket(args: argparse.Namespace, g: GlobalOpts) -> int:
    return _run("emptyBucket", g)


def cmd_bucket_info(args: argparse.Namespace, g: GlobalOpts) -> int:
    return _run("bucketInfo", g)


def cmd_domain_info(args: argparse.Namespace, g: GlobalOpts) -> int:
    return _run("domainInfo", g)


def cmd_invalidate_cache(args: argparse.Namespace, g: GlobalOpts) -> int:
    return _run("invalidateCloudFrontCache", g)


def cmd_hook(args: argparse.Namespace, g: GlobalOpts) -> int:
    spec = registry.command_for_hook(args.event)
    local_path = _resolve_local_path(args) if spec.name == "syncToS3" else None
    ctx = build_operation_context(g, local_path=local_path)
    return _exit_code(registry.run_hook(args.event, ctx))


def cmd_list_commands(args: argparse.Namespace) -> int:
    del args
    hooks_by_command: dict[str, list[str]] = {}
    for event, name in registry.HOOKS.items():
        hooks_by_command.setdefault(name, []).append(event)
    for name, spec in registry.COMMANDS.items():
        sys.stdout.write(f"{name}: {spec.usage}\n")
        for event in hooks_by_command.get(name, []):
            sys.stdout.write(f"  hook {event}\n")
    return 0
