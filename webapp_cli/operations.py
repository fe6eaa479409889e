"""Composed operations over the deployed web-app stack.

Each operation is a short fixed pipeline: resolve a stack output, build an
``aws`` invocation from it, run it, and report. ``sync_directory``,
``empty_bucket``, ``bucket_info`` and ``domain_info`` do not raise
operational errors; they log and return an :class:`OperationResult`.
``invalidate_cache`` raises, so a deploy pipeline can fail on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from .aws_runner import CommandResult
from .cli_shared import (
    CliLog,
    CommandFailed,
    DistributionNotMatched,
    OpError,
    OutputNotFound,
    UsageError,
)
from .outputs import (
    BUCKET_OUTPUT_KEY,
    DOMAIN_OUTPUT_KEY,
    NOT_FOUND,
    OutputResolver,
    OutputValue,
    display_value,
)
from .provider import Distribution

INVALIDATION_PATHS = "/*"


class Runner(Protocol):
    def run(self, tokens: Sequence[str]) -> CommandResult: ...


class DistributionLister(Protocol):
    def list_distributions(self) -> list[Distribution]: ...


@dataclass(frozen=True)
class OperationContext:
    resolver: OutputResolver
    runner: Runner
    log: CliLog
    distributions: DistributionLister | None = None
    local_path: str | None = None


@dataclass(frozen=True)
class OperationResult:
    operation: str
    ok: bool
    value: Any = None
    error: OpError | None = None


def _bucket_uri(bucket: str) -> str:
    return f"s3://{bucket}/"


def _require_bucket(ctx: OperationContext) -> str:
    bucket = ctx.resolver.resolve(BUCKET_OUTPUT_KEY)
    if bucket is NOT_FOUND or not bucket:
        raise OutputNotFound(BUCKET_OUTPUT_KEY, ctx.resolver.stack)
    return str(bucket)


def _report_failure(ctx: OperationContext, operation: str, err: OpError) -> OperationResult:
    ctx.log.error(str(err))
    return OperationResult(operation=operation, ok=False, error=err)


def sync_directory(ctx: OperationContext) -> OperationResult:
    operation = "syncToS3"
    try:
        if not ctx.local_path:
            raise OpError("no local directory to sync")
        bucket = _require_bucket(ctx)
        tokens = ["s3", "sync", ctx.local_path, _bucket_uri(bucket)]
        ctx.log.detail(" ".join(tokens))
        result = ctx.runner.run(tokens)
        if not result.ok:
            raise CommandFailed(result.stderr.strip() or "s3 sync failed", result)
    except OpError as e:
        return _report_failure(ctx, operation, e)
    ctx.log.log("Successfully synced to the S3 bucket")
    return OperationResult(operation=operation, ok=True, value=bucket)


def empty_bucket(ctx: OperationContext) -> OperationResult:
    operation = "emptyBucket"
    try:
        bucket = _require_bucket(ctx)
        result = ctx.runner.run(["s3", "rm", _bucket_uri(bucket), "--recursive"])
        if not result.ok:
            raise CommandFailed(result.stderr.strip() or "s3 rm failed", result)
    except OpError as e:
        return _report_failure(ctx, operation, e)
    ctx.log.log("Successfully emptied the S3 bucket")
    return OperationResult(operation=operation, ok=True, value=bucket)


def bucket_info(ctx: OperationContext) -> OperationResult:
    operation = "bucketInfo"
    try:
        value = ctx.resolver.resolve(BUCKET_OUTPUT_KEY)
    except OpError as e:
        return _report_failure(ctx, operation, e)
    ctx.log.log(f"Web App Bucket: {display_value(value)}")
    return OperationResult(operation=operation, ok=True, value=value)


def _domain(ctx: OperationContext) -> OutputValue:
    value = ctx.resolver.resolve(DOMAIN_OUTPUT_KEY)
    ctx.log.log(f"Web App Domain: {display_value(value)}")
    return value


def domain_info(ctx: OperationContext) -> OperationResult:
    operation = "domainInfo"
    try:
        value = _domain(ctx)
    except OpError as e:
        return _report_failure(ctx, operation, e)
    return OperationResult(operation=operation, ok=True, value=value)


def match_distribution(distributions: Sequence[Distribution], domain: str) -> Distribution | None:
    for d in distributions:
        if d.domain_name == domain:
            return d
    return None


def invalidate_cache(ctx: OperationContext) -> OperationResult:
    if ctx.distributions is None:
        raise UsageError("no CloudFront provider configured for cache invalidation")
    domain = _domain(ctx)
    if domain is NOT_FOUND or not domain:
        raise DistributionNotMatched(None)

    distribution = match_distribution(ctx.distributions.list_distributions(), str(domain))
    if distribution is None:
        raise DistributionNotMatched(str(domain))

    ctx.log.log(f"Invalidating CloudFront distribution with id: {distribution.id}")
    result = ctx.runner.run(
        [
            "cloudfront",
            "create-invalidation",
            "--distribution-id",
            distribution.id,
            "--paths",
            INVALIDATION_PATHS,
        ]
    )
    if not result.ok:
        ctx.log.error(result.stderr.strip())
        raise CommandFailed("Failed invalidating CloudFront cache", result)
    ctx.log.log("Successfully invalidated CloudFront cache")
    return OperationResult(operation="invalidateCloudFrontCache", ok=True, value=distribution.id)
