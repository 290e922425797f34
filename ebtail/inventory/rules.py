"""
EventBridge rule inventory: list rules on the configured buses and resolve
each rule's detail-type and first target.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_BUS_NAMES, DEFAULT_MAX_WORKERS
from ..errors import NoTargetsError, PatternParseError, UpstreamListError
from ..gather import fan_out
from ..models import RuleRecord
from ..paginate import collect_pages

logger = logging.getLogger(__name__)


def parse_detail_type(pattern: Optional[str]) -> str:
    """
    Extract the canonical detail-type from a rule's event pattern.

    The pattern must decode to an object whose ``detail-type`` is a
    non-empty list of strings; the first entry is returned. Any further
    entries are ignored.

    Args:
        pattern: JSON-encoded event pattern

    Returns:
        First detail-type

    Raises:
        PatternParseError: If the pattern is missing, malformed or has no detail-type
    """
    if not pattern:
        raise PatternParseError("rule has no event pattern")

    try:
        decoded = json.loads(pattern)
    except (TypeError, ValueError) as e:
        raise PatternParseError(f"invalid event pattern: {e}") from e

    if not isinstance(decoded, dict):
        raise PatternParseError("event pattern is not an object")

    detail_types = decoded.get("detail-type")
    if not isinstance(detail_types, list) or not detail_types:
        raise PatternParseError("no detail-type for rule")
    if not isinstance(detail_types[0], str):
        raise PatternParseError(f"detail-type entry is not a string: {detail_types[0]!r}")
    return detail_types[0]


def build_rule_record(rule: Dict[str, Any], targets: Sequence[Dict[str, Any]]) -> RuleRecord:
    """
    Reduce a rule and its target list to a RuleRecord.

    Only the first target is kept.

    Raises:
        PatternParseError: If the event pattern has no usable detail-type
        NoTargetsError: If the rule has no targets
    """
    detail_type = parse_detail_type(rule.get("EventPattern"))
    if not targets:
        raise NoTargetsError(f"rule {rule.get('Name')} has no targets")

    return RuleRecord(
        bus_name=rule["EventBusName"],
        detail_type=detail_type,
        target_identifier=targets[0]["Arn"],
        rule_name=rule.get("Name", ""),
    )


class RuleInventory:
    """Lists EventBridge rules per bus and resolves their targets concurrently."""

    def __init__(self, client, bus_names: Sequence[str] = DEFAULT_BUS_NAMES,
                 max_workers: int = DEFAULT_MAX_WORKERS):
        self.client = client
        self.bus_names = tuple(bus_names)
        self.max_workers = max_workers

    def list_rules(self, bus_name: str) -> List[Dict[str, Any]]:
        """
        List every rule on one bus.

        Raises:
            UpstreamListError: If any page of the listing fails
        """
        def fetch_page(token: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
            kwargs = {"EventBusName": bus_name}
            if token:
                kwargs["NextToken"] = token
            response = self.client.list_rules(**kwargs)
            return response.get("Rules", []), response.get("NextToken")

        rules = collect_pages(fetch_page, resource=f"rules on {bus_name}")
        # ListRules does not always echo the bus back on each rule
        return [{**rule, "EventBusName": rule.get("EventBusName") or bus_name} for rule in rules]

    def list_all_rules(self) -> List[Dict[str, Any]]:
        """List rules across all configured buses; a failing bus contributes none."""
        all_rules: List[Dict[str, Any]] = []
        for bus_name in self.bus_names:
            try:
                all_rules.extend(self.list_rules(bus_name))
            except UpstreamListError as e:
                logger.error(f"Failed getting rules for bus {bus_name}: {e}")
        return all_rules

    def resolve(self, rule: Dict[str, Any]) -> RuleRecord:
        """Fetch one rule's targets and build its RuleRecord."""
        response = self.client.list_targets_by_rule(
            Rule=rule["Name"],
            EventBusName=rule["EventBusName"],
        )
        return build_rule_record(rule, response.get("Targets", []))

    def fetch_all(self) -> List[RuleRecord]:
        """
        List rules on every configured bus and resolve their targets.

        Rules whose targets cannot be fetched, whose pattern has no
        detail-type, or that have no targets are logged and left out.

        Returns:
            Resolved rules, in completion order
        """
        logger.info("Begin fetching rules")
        rules = self.list_all_rules()
        logger.info(f"Fetched {len(rules)} rules, fetching targets")

        records = fan_out(
            rules,
            self.resolve,
            max_workers=self.max_workers,
            describe=lambda r: f"rule {r.get('Name', '?')} on bus {r.get('EventBusName', '?')}",
        )
        logger.info(f"Rules and targets built for {len(records)}/{len(rules)} rules")
        return records
