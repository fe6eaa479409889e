from __future__ import annotations

from typing import Protocol, Union

from .provider import StackOutput

BUCKET_OUTPUT_KEY = "WebAppS3BucketOutput"
DOMAIN_OUTPUT_KEY = "WebAppCloudFrontDistributionOutput"


class _NotFound:
    _instance: "_NotFound | None" = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


# Returned for an absent output key. Distinct from an empty OutputValue.
NOT_FOUND = _NotFound()

OutputValue = Union[str, _NotFound]


class StackDescriber(Protocol):
    def describe_stack(self, name: str) -> list[StackOutput]: ...


def display_value(value: OutputValue) -> str:
    if value is NOT_FOUND or not value:
        return "Not Found"
    return str(value)


class OutputResolver:
    def __init__(self, provider: StackDescriber, *, stack: str) -> None:
        self.provider = provider
        self.stack = stack

    def resolve(self, output_key: str) -> OutputValue:
        # ResolutionFailed from the provider propagates untouched.
        for output in self.provider.describe_stack(self.stack):
            if output.key == output_key:
                return output.value
        return NOT_FOUND
