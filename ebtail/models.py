"""
Data models for discovered functions, rules and their correlation.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class FunctionRecord:
    """A Lambda function enriched with its configuration details."""
    name: str
    identifier: str  # ARN used for lookup, ":$LATEST" already stripped
    last_modified: str
    tags: Dict[str, str] = field(default_factory=dict)
    log_group: str = ""


@dataclass(frozen=True)
class RuleRecord:
    """An EventBridge rule reduced to its first detail-type and first target."""
    bus_name: str
    detail_type: str
    target_identifier: str
    rule_name: str = ""


@dataclass(frozen=True)
class CorrelatedEvent:
    """An event name mapped to the function it invokes and that function's log group."""
    event_name: str
    bus_name: str
    function_name: str
    function_identifier: str
    log_group: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
