from __future__ import annotations

import pytest

from webapp_cli import operations, registry
from webapp_cli.cli_shared import UsageError


def test_registry_exposes_the_five_operations():
    assert list(registry.COMMANDS) == [
        "syncToS3",
        "emptyBucket",
        "bucketInfo",
        "domainInfo",
        "invalidateCloudFrontCache",
    ]
    for name, spec in registry.COMMANDS.items():
        assert spec.name == name
        assert spec.usage.strip()
        assert spec.lifecycle_events


def test_tables_are_immutable():
    with pytest.raises(TypeError):
        registry.COMMANDS["other"] = registry.COMMANDS["bucketInfo"]  # type: ignore[index]
    with pytest.raises(TypeError):
        registry.HOOKS["other:event"] = "bucketInfo"  # type: ignore[index]


def test_hooks_point_at_registered_commands():
    for event, name in registry.HOOKS.items():
        assert name in registry.COMMANDS, event


def test_every_command_lifecycle_event_has_a_hook():
    for name, spec in registry.COMMANDS.items():
        for lifecycle in spec.lifecycle_events:
            assert registry.HOOKS[f"{name}:{lifecycle}"] == name


def test_remove_hook_empties_bucket_first():
    assert registry.command_for_hook("before:remove:remove").handler is operations.empty_bucket


def test_unknown_names_are_usage_errors():
    with pytest.raises(UsageError):
        registry.get_command("deployEverything")
    with pytest.raises(UsageError):
        registry.command_for_hook("after:deploy:deploy")


def test_run_operation_dispatches_to_handler(monkeypatch):
    seen = []

    def handler(ctx):
        seen.append(ctx)
        return operations.OperationResult(operation="bucketInfo", ok=True)

    spec = registry.COMMANDS["bucketInfo"]
    monkeypatch.setattr(registry, "COMMANDS", {"bucketInfo": registry.CommandSpec(
        name=spec.name,
        usage=spec.usage,
        lifecycle_events=spec.lifecycle_events,
        handler=handler,
    )})

    result = registry.run_operation("bucketInfo", "ctx-sentinel")  # type: ignore[arg-type]
    assert result.ok is True
    assert seen == ["ctx-sentinel"]


def test_run_hook_dispatches_through_hook_table(monkeypatch):
    seen = []

    def handler(ctx):
        seen.append(ctx)
        return operations.OperationResult(operation="emptyBucket", ok=True)

    spec = registry.COMMANDS["emptyBucket"]
    monkeypatch.setattr(registry, "COMMANDS", {"emptyBucket": registry.CommandSpec(
        name=spec.name,
        usage=spec.usage,
        lifecycle_events=spec.lifecycle_events,
        handler=handler,
    )})

    registry.run_hook("before:remove:remove", "ctx-sentinel")  # type: ignore[arg-type]
    assert seen == ["ctx-sentinel"]
