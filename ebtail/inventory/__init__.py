"""
Inventories of Lambda functions and EventBridge rules.
"""

from .functions import FunctionInventory, normalize_identifier
from .rules import RuleInventory, build_rule_record, parse_detail_type

__all__ = [
    "FunctionInventory",
    "normalize_identifier",
    "RuleInventory",
    "build_rule_record",
    "parse_detail_type",
]
