"""Combine the global and local configuration layers; local wins."""

from dataclasses import fields, replace
from typing import TypeVar

from agent_start.models import Config, Context, Settings

T = TypeVar("T")


def merge(global_config: Config, local_config: Config) -> Config:
    contexts, context_order = _merge_contexts(
        global_config.contexts,
        global_config.context_order,
        local_config.contexts,
        local_config.context_order,
    )
    return Config(
        settings=merge_settings(global_config.settings, local_config.settings),
        agents=_merge_entities(global_config.agents, local_config.agents),
        roles=_merge_entities(global_config.roles, local_config.roles),
        contexts=contexts,
        context_order=context_order,
        tasks=_merge_entities(global_config.tasks, local_config.tasks),
    )


def merge_settings(global_settings: Settings, local_settings: Settings) -> Settings:
    overrides = {}
    for item in fields(Settings):
        value = getattr(local_settings, item.name)
        if value is None or value == "" or (value == 0 and not isinstance(value, bool)):
            continue
        overrides[item.name] = value
    return replace(global_settings, **overrides)


def _merge_entities(
    global_items: dict[str, T], local_items: dict[str, T]
) -> dict[str, T]:
    result = dict(global_items)
    result.update(local_items)
    return result


def _merge_contexts(
    global_contexts: dict[str, Context],
    global_order: list[str],
    local_contexts: dict[str, Context],
    local_order: list[str],
) -> tuple[dict[str, Context], list[str]]:
    result: dict[str, Context] = {}
    order: list[str] = []

    # Contexts missing from an order list follow in mapping order.
    for name in [*global_order, *global_contexts]:
        if name not in global_contexts or name in result:
            continue
        result[name] = local_contexts.get(name, global_contexts[name])
        order.append(name)

    for name in [*local_order, *local_contexts]:
        if name in result or name not in local_contexts:
            continue
        result[name] = local_contexts[name]
        order.append(name)

    return result, order
