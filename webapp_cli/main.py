from __future__ import annotations

import argparse
import sys
from typing import Any

import click
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from . import __version__
from .cli_shared import (
    DEFAULT_REGION,
    DEFAULT_STAGE,
    WEBAPP_SERVICE,
    WEBAPP_STACK,
    WEBAPP_STAGE,
    GlobalOpts,
    OpError,
    UsageError,
    _eprint,
    _env_or_none,
)
from .commands import (
    cmd_bucket_info,
    cmd_domain_info,
    cmd_empty_bucket,
    cmd_hook,
    cmd_invalidate_cache,
    cmd_list_commands,
    cmd_sync_to_s3,
)
from .provider import stack_name

_ERROR_CONSOLE = Console(stderr=True, soft_wrap=True)


def _rich_error(msg: str) -> None:
    _ERROR_CONSOLE.print(f"[bold red]error:[/bold red] {escape(msg)}")


def _render_usage_error_with_help(*, message: str, ctx: click.Context | None = None) -> None:
    _rich_error(message)
    if isinstance(ctx, click.Context):
        help_text = str(ctx.get_help() or "").strip()
        if help_text:
            _eprint("")
            _eprint(help_text)


def _namespace(**kwargs: Any) -> argparse.Namespace:
    return argparse.Namespace(**kwargs)


def _bootstrap_env() -> None:
    # Discover and load .env without overriding exported environment values.
    load_dotenv()


def _apply_global_env(args: argparse.Namespace) -> GlobalOpts:
    stage = (getattr(args, "stage", None) or _env_or_none(WEBAPP_STAGE) or DEFAULT_STAGE).strip()
    region = (getattr(args, "region", None) or _env_or_none("AWS_REGION") or DEFAULT_REGION).strip()
    profile = (getattr(args, "profile", None) or _env_or_none("AWS_PROFILE") or "").strip() or None
    stack = stack_name(
        service=getattr(args, "service", None) or _env_or_none(WEBAPP_SERVICE),
        stage=stage,
        override=getattr(args, "stack", None) or _env_or_none(WEBAPP_STACK),
    )
    return GlobalOpts(
        stage=stage,
        region=region,
        stack=stack,
        profile=profile,
        quiet=bool(getattr(args, "quiet", False)),
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"webapp {__version__}")
        raise typer.Exit(code=0)


app = typer.Typer(
    name="webapp",
    help="Deploy and inspect the web-app bucket and CloudFront distribution of a deployed stack.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def app_callback(
    ctx: typer.Context,
    stage: str | None = typer.Option(None, "--stage", help=f"Deployment stage (env: {WEBAPP_STAGE}, default: {DEFAULT_STAGE})"),
    region: str | None = typer.Option(None, "--region", help=f"AWS region (env: AWS_REGION, default: {DEFAULT_REGION})"),
    profile: str | None = typer.Option(None, "--profile", help="AWS CLI profile name (env: AWS_PROFILE)"),
    service: str | None = typer.Option(None, "--service", help=f"Service name; stack is <service>-<stage> (env: {WEBAPP_SERVICE})"),
    stack: str | None = typer.Option(None, "--stack", help=f"CloudFormation stack name override (env: {WEBAPP_STACK})"),
    quiet: bool = typer.Option(False, "--quiet", help="Do not echo aws command output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    del version
    ctx.obj = {
        "ns": _namespace(
            stage=stage,
            region=region,
            profile=profile,
            service=service,
            stack=stack,
            quiet=quiet,
        )
    }


def _ctx_global(ctx: typer.Context) -> GlobalOpts:
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    if isinstance(obj.get("g"), GlobalOpts):
        return obj["g"]
    try:
        g = _apply_global_env(obj.get("ns") or _namespace())
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    obj["g"] = g
    ctx.obj = obj
    return g


def _invoke(ctx: typer.Context, func: Any, **kwargs: Any) -> None:
    g = _ctx_global(ctx)
    args = _namespace(**kwargs)
    try:
        code = int(func(args, g))
    except UsageError as e:
        _render_usage_error_with_help(message=str(e), ctx=ctx)
        raise typer.Exit(code=2)
    except OpError as e:
        _rich_error(str(e))
        raise typer.Exit(code=1)

    if code:
        raise typer.Exit(code=code)


@app.command("syncToS3", help="Deploys the `s3LocalPath` directory to your bucket.")
def sync_to_s3(
    ctx: typer.Context,
    local_path: str | None = typer.Option(
        None,
        "--local-path",
        help="Local directory to sync (env: WEBAPP_S3_LOCAL_PATH)",
    ),
) -> None:
    _invoke(ctx, cmd_sync_to_s3, local_path=local_path)


@app.command("emptyBucket", help="Empties the deployed bucket.")
def empty_bucket(ctx: typer.Context) -> None:
    _invoke(ctx, cmd_empty_bucket)


@app.command("bucketInfo", help="Fetches and prints out the deployed bucket name.")
def bucket_info(ctx: typer.Context) -> None:
    _invoke(ctx, cmd_bucket_info)


@app.command("domainInfo", help="Fetches and prints out the deployed CloudFront domain name.")
def domain_info(ctx: typer.Context) -> None:
    _invoke(ctx, cmd_domain_info)


@app.command("invalidateCloudFrontCache", help="Invalidates the CloudFront cache for the deployed domain.")
def invalidate_cloudfront_cache(ctx: typer.Context) -> None:
    _invoke(ctx, cmd_invalidate_cache)


@app.command("hook", help="Run the operation bound to a lifecycle event, e.g. before:remove:remove.")
def hook(
    ctx: typer.Context,
    event: str = typer.Argument(..., help="Lifecycle event name"),
    local_path: str | None = typer.Option(
        None,
        "--local-path",
        help="Local directory to sync for syncToS3:sync (env: WEBAPP_S3_LOCAL_PATH)",
    ),
) -> None:
    _invoke(ctx, cmd_hook, event=event, local_path=local_path)


@app.command("commands", help="List registered operations and the lifecycle events bound to them.")
def list_commands() -> None:
    cmd_list_commands(_namespace())


def _run_cli(*, argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    _bootstrap_env()
    try:
        result = app(args=argv, prog_name="webapp", standalone_mode=False)
        if result is None:
            return 0
        return int(result)
    except typer.Exit as e:
        return int(e.exit_code)
    except click.ClickException as e:
        if isinstance(e, click.UsageError):
            _render_usage_error_with_help(message=e.format_message(), ctx=getattr(e, "ctx", None))
            return int(e.exit_code)
        _rich_error(e.format_message())
        return int(e.exit_code)
    except click.exceptions.Abort:
        _rich_error("aborted")
        return 1
    except UsageError as e:
        _rich_error(str(e))
        return 2
    except OpError as e:
        _rich_error(str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    return _run_cli(argv=argv)


if __name__ == "__main__":
    raise SystemExit(main())
