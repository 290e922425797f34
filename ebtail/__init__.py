"""
ebtail - Live log tailing for EventBridge-driven Lambda functions.

This package discovers Lambda functions and the EventBridge rules that
invoke them, maps event names to CloudWatch log groups, and attaches to a
CloudWatch Logs Live Tail session for a selected event.
"""

__version__ = "0.1.0"
