"""Static registration of every playground action."""

from __future__ import annotations

from appwrite_playground.domains.playground.actions import (
    account,
    databases,
    functions,
    locale,
    realtime,
    storage,
    teams,
    utilities,
)
from appwrite_playground.domains.playground.actions.context import ActionContext
from appwrite_playground.domains.playground.registry import ActionRegistry
from appwrite_playground.utils.logger import get_logger

logger = get_logger()

# Display order of the UI sections.
SECTIONS = (account, databases, storage, functions, teams, locale, realtime, utilities)


def build_registry(ctx: ActionContext) -> ActionRegistry:
    """Register every section's actions, then freeze the registry."""
    registry = ActionRegistry()
    for module in SECTIONS:
        module.register(registry, ctx)
    registry.freeze()
    logger.info("Registered %d actions in %d sections", len(registry), len(SECTIONS))
    return registry
