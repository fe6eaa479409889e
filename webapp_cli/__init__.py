"""Operational CLI for a deployed web-app stack.

Commands resolve CloudFormation outputs with boto3 and drive the ``aws`` CLI
for S3 sync/empty and CloudFront invalidation. The command surface is
implemented with Typer and Rich.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
