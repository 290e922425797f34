"""
Concurrent discovery of the function and rule inventories.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List

from .config import Settings
from .errors import InventoryFetchError
from .inventory import FunctionInventory, RuleInventory
from .models import FunctionRecord, RuleRecord

logger = logging.getLogger(__name__)


@dataclass
class Inventory:
    """Result of a discovery run."""
    functions: List[FunctionRecord] = field(default_factory=list)
    rules: List[RuleRecord] = field(default_factory=list)


def _fetch_or_empty(label: str, fetch) -> list:
    try:
        return fetch()
    except InventoryFetchError as e:
        logger.error(f"Error fetching {label}: {e}")
        return []


def discover(settings: Settings, lambda_client, events_client) -> Inventory:
    """
    Fetch functions and rules at the same time.

    Either side failing to list entirely is logged and yields an empty
    collection; the other side is unaffected.

    Args:
        settings: Resolved settings (bus names, worker pool size)
        lambda_client: boto3 ``lambda`` client
        events_client: boto3 ``events`` client

    Returns:
        Inventory holding both collections
    """
    functions = FunctionInventory(lambda_client, max_workers=settings.max_workers)
    rules = RuleInventory(events_client, bus_names=settings.bus_names,
                          max_workers=settings.max_workers)

    with ThreadPoolExecutor(max_workers=2) as pool:
        functions_future = pool.submit(_fetch_or_empty, "functions", functions.fetch_all)
        rules_future = pool.submit(_fetch_or_empty, "rules", rules.fetch_all)
        inventory = Inventory(functions=functions_future.result(), rules=rules_future.result())

    logger.info(f"Found {len(inventory.rules)} rules and {len(inventory.functions)} functions")
    return inventory
