from __future__ import annotations

import pytest
from botocore.exceptions import ClientError

from webapp_cli.cli_shared import OpError, ResolutionFailed, UsageError
from webapp_cli.provider import AwsProvider, Distribution, StackOutput, stack_name


def _client_error(op: str) -> ClientError:
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, op)


class FakeCloudFormation:
    def __init__(self, resp=None, error=None):
        self.resp = resp
        self.error = error
        self.calls: list[dict] = []

    def describe_stacks(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.resp


class FakePaginator:
    def __init__(self, pages):
        self.pages = pages

    def paginate(self, **kwargs):
        return iter(self.pages)


class FakeCloudFront:
    def __init__(self, pages=None, error=None):
        self.pages = pages or []
        self.error = error

    def get_paginator(self, name):
        assert name == "list_distributions"
        if self.error is not None:
            raise self.error
        return FakePaginator(self.pages)


class FakeSession:
    def __init__(self, **clients):
        self.clients = clients

    def client(self, name):
        return self.clients[name]


def test_stack_name_uses_service_and_stage():
    assert stack_name(service="site", stage="prod") == "site-prod"


def test_stack_name_override_wins():
    assert stack_name(service=None, stage="prod", override=" custom-stack ") == "custom-stack"


def test_stack_name_requires_service():
    with pytest.raises(UsageError):
        stack_name(service="", stage="prod")


def test_describe_stack_returns_outputs_in_order():
    cf = FakeCloudFormation(
        {
            "Stacks": [
                {
                    "Outputs": [
                        {"OutputKey": "B", "OutputValue": "2"},
                        {"OutputKey": "A", "OutputValue": "1"},
                    ]
                }
            ]
        }
    )
    provider = AwsProvider(FakeSession(cloudformation=cf))

    assert provider.describe_stack("site-prod") == [
        StackOutput(key="B", value="2"),
        StackOutput(key="A", value="1"),
    ]
    assert cf.calls == [{"StackName": "site-prod"}]


def test_describe_stack_without_outputs_is_empty():
    cf = FakeCloudFormation({"Stacks": [{"StackName": "site-prod"}]})
    assert AwsProvider(FakeSession(cloudformation=cf)).describe_stack("site-prod") == []


def test_describe_stack_client_error_is_resolution_failure():
    cf = FakeCloudFormation(error=_client_error("DescribeStacks"))
    with pytest.raises(ResolutionFailed) as exc:
        AwsProvider(FakeSession(cloudformation=cf)).describe_stack("site-prod")
    assert exc.value.stack == "site-prod"
    assert "AccessDenied" in str(exc.value)


def test_describe_stack_missing_stack_is_resolution_failure():
    cf = FakeCloudFormation({"Stacks": []})
    with pytest.raises(ResolutionFailed):
        AwsProvider(FakeSession(cloudformation=cf)).describe_stack("site-prod")


def test_list_distributions_walks_all_pages():
    cloudfront = FakeCloudFront(
        [
            {"DistributionList": {"Items": [{"Id": "E1", "DomainName": "a.cloudfront.net"}]}},
            {"DistributionList": {"Quantity": 0}},
            {"DistributionList": {"Items": [{"Id": "E2", "DomainName": "b.cloudfront.net"}]}},
        ]
    )
    provider = AwsProvider(FakeSession(cloudfront=cloudfront))
    assert provider.list_distributions() == [
        Distribution(id="E1", domain_name="a.cloudfront.net"),
        Distribution(id="E2", domain_name="b.cloudfront.net"),
    ]


def test_list_distributions_error_is_op_error():
    cloudfront = FakeCloudFront(error=_client_error("ListDistributions"))
    with pytest.raises(OpError) as exc:
        AwsProvider(FakeSession(cloudfront=cloudfront)).list_distributions()
    assert not isinstance(exc.value, ResolutionFailed)
    assert "list-distributions" in str(exc.value)
