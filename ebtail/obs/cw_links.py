"""
AWS console link and CLI command builders for correlated events.
"""

import urllib.parse
from typing import Dict

from ..models import CorrelatedEvent


class CloudWatchLinkBuilder:
    """Builds AWS console URLs for log groups, functions and rules."""

    def __init__(self, region: str):
        self.region = region

    def build_log_group_url(self, log_group: str) -> str:
        """Build CloudWatch log group console URL."""
        encoded_group = urllib.parse.quote(log_group, safe='')
        return f"https://console.aws.amazon.com/cloudwatch/home?region={self.region}#logsV2:log-groups/log-group/{encoded_group}"

    def build_live_tail_url(self, log_group: str) -> str:
        """Build CloudWatch Live Tail console URL for one log group."""
        encoded_group = urllib.parse.quote(log_group, safe='')
        return f"https://console.aws.amazon.com/cloudwatch/home?region={self.region}#logsV2:live-tail$3FlogGroupNames$3D~(~'{encoded_group})"

    def build_function_url(self, function_name: str) -> str:
        """Build Lambda function console URL."""
        return f"https://console.aws.amazon.com/lambda/home?region={self.region}#/functions/{function_name}"

    def build_bus_url(self, bus_name: str) -> str:
        """Build EventBridge bus console URL."""
        return f"https://console.aws.amazon.com/events/home?region={self.region}#/eventbus/{bus_name}"

    def build_event_links(self, event: CorrelatedEvent) -> Dict[str, str]:
        """Build all links for a correlated event."""
        return {
            "log_group": self.build_log_group_url(event.log_group),
            "live_tail": self.build_live_tail_url(event.log_group),
            "function": self.build_function_url(event.function_name),
            "bus": self.build_bus_url(event.bus_name),
        }

    def build_tail_command(self, log_group: str) -> str:
        """Build AWS CLI command to tail logs."""
        return f"aws logs tail {log_group} --region {self.region} --follow"
