from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .cli_shared import OpError, ResolutionFailed, UsageError


@dataclass(frozen=True)
class StackOutput:
    key: str
    value: str


@dataclass(frozen=True)
class Distribution:
    id: str
    domain_name: str


def stack_name(*, service: str | None, stage: str, override: str | None = None) -> str:
    if override and override.strip():
        return override.strip()
    svc = (service or "").strip()
    if not svc:
        raise UsageError("missing service (pass --service or set WEBAPP_SERVICE, or pass --stack)")
    st = (stage or "").strip()
    if not st:
        raise UsageError("missing stage (pass --stage or set WEBAPP_STAGE)")
    return f"{svc}-{st}"


def account_session(*, profile: str | None, region: str) -> Any:
    return boto3.session.Session(profile_name=profile or None, region_name=region)


class AwsProvider:
    """boto3-backed reads against the deployed stack.

    Every call goes to AWS; nothing is cached between calls.
    """

    def __init__(self, session: Any) -> None:
        self.session = session

    def describe_stack(self, name: str) -> list[StackOutput]:
        cf = self.session.client("cloudformation")
        try:
            resp = cf.describe_stacks(StackName=name)
        except (ClientError, BotoCoreError) as e:
            raise ResolutionFailed(name, str(e)) from e
        stacks = resp.get("Stacks") or []
        if not stacks:
            raise ResolutionFailed(name, "stack not found")
        outputs = stacks[0].get("Outputs") or []
        return [
            StackOutput(key=str(o.get("OutputKey", "")), value=str(o.get("OutputValue", "")))
            for o in outputs
            if isinstance(o, dict)
        ]

    def list_distributions(self) -> list[Distribution]:
        cloudfront = self.session.client("cloudfront")
        out: list[Distribution] = []
        try:
            for page in cloudfront.get_paginator("list_distributions").paginate():
                items = (page.get("DistributionList") or {}).get("Items") or []
                for item in items:
                    out.append(Distribution(id=str(item.get("Id", "")), domain_name=str(item.get("DomainName", ""))))
        except (ClientError, BotoCoreError) as e:
            raise OpError(f"cloudfront list-distributions failed: {e}") from e
        return out
