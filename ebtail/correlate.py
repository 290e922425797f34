"""
Join of rules to the functions they target.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from .errors import EventNotFoundError
from .models import CorrelatedEvent, FunctionRecord, RuleRecord


def correlate(functions: Iterable[FunctionRecord], rules: Iterable[RuleRecord]) -> List[CorrelatedEvent]:
    """
    Emit one CorrelatedEvent per (rule, function) pair whose identifiers match.

    Every matching pair is emitted; several rules may map to the same
    function, and nothing is de-duplicated. Output follows rule order.
    """
    by_identifier: Dict[str, List[FunctionRecord]] = defaultdict(list)
    for function in functions:
        by_identifier[function.identifier].append(function)

    events = []
    for rule in rules:
        for function in by_identifier.get(rule.target_identifier, []):
            events.append(CorrelatedEvent(
                event_name=rule.detail_type,
                bus_name=rule.bus_name,
                function_name=function.name,
                function_identifier=function.identifier,
                log_group=function.log_group,
            ))
    return events


def find_log_group(events: Iterable[CorrelatedEvent], event_name: str) -> str:
    """Return the log group of the first event named ``event_name``."""
    for event in events:
        if event.event_name == event_name and event.log_group:
            return event.log_group
    raise EventNotFoundError(f"Failed to find log group for event {event_name!r}")
