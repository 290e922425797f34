"""
Lambda function inventory: list every function and enrich it with its
configuration, tags and log group.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..config import DEFAULT_MAX_WORKERS
from ..errors import InventoryFetchError, UpstreamListError
from ..gather import fan_out
from ..models import FunctionRecord
from ..paginate import collect_pages

logger = logging.getLogger(__name__)

LATEST_QUALIFIER = ":$LATEST"


def normalize_identifier(identifier: str) -> str:
    """Strip a trailing ``:$LATEST`` qualifier so lookups hit the unversioned function."""
    if identifier.endswith(LATEST_QUALIFIER):
        return identifier[: -len(LATEST_QUALIFIER)]
    return identifier


class FunctionInventory:
    """Lists Lambda functions and enriches each one concurrently."""

    def __init__(self, client, max_workers: int = DEFAULT_MAX_WORKERS):
        self.client = client
        self.max_workers = max_workers

    def _list_page(self, marker: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        kwargs = {"FunctionVersion": "ALL"}
        if marker:
            kwargs["Marker"] = marker
        response = self.client.list_functions(**kwargs)
        return response.get("Functions", []), response.get("NextMarker")

    def list_functions(self) -> List[Dict[str, Any]]:
        """
        List every function, including all published versions.

        Raises:
            InventoryFetchError: If the listing fails
        """
        logger.info("Begin fetching functions")
        try:
            return collect_pages(self._list_page, resource="functions")
        except UpstreamListError as e:
            raise InventoryFetchError(f"Function list failed: {e}") from e

    def enrich(self, function: Dict[str, Any]) -> FunctionRecord:
        """
        Fetch the detail record for one listed function.

        Args:
            function: Entry from ListFunctions

        Returns:
            Fully populated FunctionRecord

        Raises:
            botocore.exceptions.ClientError: If the lookup fails
            KeyError: If the detail record lacks a required field
        """
        identifier = normalize_identifier(function["FunctionArn"])
        detail = self.client.get_function(FunctionName=identifier)
        configuration = detail["Configuration"]

        return FunctionRecord(
            name=function["FunctionName"],
            identifier=identifier,
            last_modified=configuration["LastModified"],
            tags=dict(detail.get("Tags") or {}),
            log_group=configuration["LoggingConfig"]["LogGroup"],
        )

    def fetch_all(self) -> List[FunctionRecord]:
        """
        List and enrich all functions.

        Functions whose details cannot be fetched are logged and left out.

        Returns:
            Enriched functions, in completion order

        Raises:
            InventoryFetchError: If the function listing itself fails
        """
        functions = self.list_functions()
        logger.info(f"Fetched {len(functions)} functions, fetching details")

        records = fan_out(
            functions,
            self.enrich,
            max_workers=self.max_workers,
            describe=lambda f: f"function {f.get('FunctionName', '?')}",
        )
        logger.info(f"Function details fetched for {len(records)}/{len(functions)} functions")
        return records
